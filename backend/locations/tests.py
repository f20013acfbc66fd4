import math
import unittest

from django.contrib.auth import get_user_model
from django.http import QueryDict
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from .models import PlaceLike
from .services import GeoService

User = get_user_model()


class HaversineTests(unittest.TestCase):

    def test_san_francisco_to_new_york(self):
        """SF to NYC is about 4129 km."""
        distance = GeoService.haversine_km(37.7749, -122.4194, 40.7128, -74.0060)
        self.assertAlmostEqual(distance, 4129, delta=5)

    def test_symmetry(self):
        pairs = [
            ((41.0082, 28.9784), (39.9334, 32.8597)),
            ((-33.8688, 151.2093), (51.5074, -0.1278)),
            ((0.0, 0.0), (10.5, -20.25)),
        ]
        for (lat1, lon1), (lat2, lon2) in pairs:
            self.assertEqual(
                GeoService.haversine_km(lat1, lon1, lat2, lon2),
                GeoService.haversine_km(lat2, lon2, lat1, lon1),
            )

    def test_identical_points_are_zero(self):
        distance = GeoService.haversine_km(41.0082, 28.9784, 41.0082, 28.9784)
        self.assertEqual(distance, 0.0)
        self.assertIsNotNone(distance)

    def test_antipodal_points(self):
        """Half the Earth's circumference, no math domain error."""
        distance = GeoService.haversine_km(0, 0, 0, 180)
        self.assertAlmostEqual(distance, 20015.1, delta=0.1)
        self.assertAlmostEqual(GeoService.haversine_km(90, 0, -90, 0), 20015.1, delta=0.1)

    def test_rounded_to_one_decimal(self):
        distance = GeoService.haversine_km(41.0, 29.0, 41.01, 29.0)
        self.assertEqual(distance, round(distance, 1))

    def test_bad_input_returns_none(self):
        bad_values = [None, 'abc', '41.0', True, math.nan, math.inf, -math.inf, [1], {}]
        for bad in bad_values:
            with self.subTest(value=bad):
                self.assertIsNone(GeoService.haversine_km(bad, 0, 0, 0))
                self.assertIsNone(GeoService.haversine_km(0, bad, 0, 0))
                self.assertIsNone(GeoService.haversine_km(0, 0, bad, 0))
                self.assertIsNone(GeoService.haversine_km(0, 0, 0, bad))

    def test_integers_are_accepted(self):
        self.assertEqual(GeoService.haversine_km(0, 0, 0, 0), 0.0)


class LocationHelperTests(unittest.TestCase):

    def test_is_location_valid(self):
        self.assertTrue(GeoService.is_location_valid(90, 180))
        self.assertTrue(GeoService.is_location_valid(-90, -180))
        self.assertFalse(GeoService.is_location_valid(90.1, 0))
        self.assertFalse(GeoService.is_location_valid(0, -180.5))

    def test_normalize_flat_location(self):
        location = GeoService.normalize_location(
            {'lat': 41.0082, 'lng': 28.9784, 'formatted_address': 'Istanbul'}
        )
        self.assertEqual(location, {'lat': 41.0082, 'lng': 28.9784, 'formatted_address': 'Istanbul'})

    def test_normalize_nested_location(self):
        location = GeoService.normalize_location({
            'coordinates': {'lat': '48.8566', 'lng': '2.3522'},
            'formatted_address': 'Paris, France',
            'city': 'Paris',
            'country': 'France',
        })
        self.assertEqual(location['lat'], 48.8566)
        self.assertEqual(location['lng'], 2.3522)
        self.assertEqual(location['city'], 'Paris')
        self.assertEqual(location['country'], 'France')

    def test_normalize_rejects_unusable_values(self):
        for raw in ['Paris', None, {'lat': 10}, {'lat': 'x', 'lng': 1}, {'lat': 95, 'lng': 0},
                    {'coordinates': {'lat': math.nan, 'lng': 0}}]:
            with self.subTest(raw=raw):
                self.assertIsNone(GeoService.normalize_location(raw))

    def test_parse_origin(self):
        self.assertEqual(GeoService.parse_origin(QueryDict('userLat=41.5&userLng=29')), (41.5, 29.0))
        self.assertIsNone(GeoService.parse_origin(QueryDict('userLat=41.5')))
        self.assertIsNone(GeoService.parse_origin(QueryDict('userLat=abc&userLng=29')))
        self.assertIsNone(GeoService.parse_origin(QueryDict('')))

    def test_distance_to(self):
        location = {'lat': 40.7128, 'lng': -74.0060, 'formatted_address': 'NYC'}
        self.assertAlmostEqual(GeoService.distance_to((37.7749, -122.4194), location), 4129, delta=5)
        self.assertIsNone(GeoService.distance_to(None, location))
        self.assertIsNone(GeoService.distance_to((37.7749, -122.4194), None))
        self.assertIsNone(GeoService.distance_to((37.7749, -122.4194), {'lat': 'x', 'lng': 1}))


class PlaceLikeAPITests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='saver', password='password123')
        self.other = User.objects.create_user(username='other', password='password123')
        self.list_url = reverse('locations:place-like-list')
        self.client.force_authenticate(user=self.user)

    def test_save_place(self):
        """Test saving a place with its display fields."""
        response = self.client.post(self.list_url, {
            'placeId': 'ChIJ123',
            'placeName': 'Hagia Sophia',
            'placeType': 'museum',
            'rating': 4.8,
            'priceLevel': 1,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['placeId'], 'ChIJ123')
        self.assertEqual(PlaceLike.objects.filter(user=self.user).count(), 1)

    def test_missing_fields(self):
        response = self.client.post(self.list_url, {'placeName': 'Nowhere'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        self.assertIn('placeId', response.data['details'])

    def test_duplicate_save_rejected(self):
        PlaceLike.objects.create(user=self.user, place_id='ChIJ123', place_name='Hagia Sophia')
        response = self.client.post(self.list_url, {
            'placeId': 'ChIJ123', 'placeName': 'Hagia Sophia'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Place already liked')
        self.assertEqual(PlaceLike.objects.filter(user=self.user).count(), 1)

    def test_list_only_own_places(self):
        PlaceLike.objects.create(user=self.user, place_id='a', place_name='A')
        PlaceLike.objects.create(user=self.other, place_id='b', place_name='B')
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['placeId'] for p in response.data], ['a'])

    def test_remove_place(self):
        PlaceLike.objects.create(user=self.user, place_id='ChIJ123', place_name='Hagia Sophia')
        url = reverse('locations:place-like-detail', args=['ChIJ123'])
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PlaceLike.objects.filter(user=self.user).exists())

        # removing again is still a success
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

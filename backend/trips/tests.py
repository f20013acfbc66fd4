from datetime import date

from django.test import TestCase
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APITestCase
from rest_framework import status

from .models import Trip, TripPlace

User = get_user_model()


class TripModelTest(TestCase):
    """Test cases for Trip model"""

    def setUp(self):
        """Set up test data"""
        self.user = User.objects.create_user(username='testuser', password='testpass')

    def test_trip_creation(self):
        """Test creating a trip"""
        trip = Trip.objects.create(owner=self.user, name='Paris Trip')
        self.assertEqual(trip.name, 'Paris Trip')
        self.assertFalse(trip.is_public)

    def test_next_order(self):
        """New places go after the last ordered one"""
        trip = Trip.objects.create(owner=self.user, name='Rome')
        self.assertEqual(trip.next_order(), 0)
        TripPlace.objects.create(trip=trip, place_id='a', place_name='Colosseum', order=3)
        self.assertEqual(trip.next_order(), 4)

    def test_places_ordering(self):
        """Places are listed by order, unordered ones last"""
        trip = Trip.objects.create(owner=self.user, name='Rome')
        loose = TripPlace.objects.create(trip=trip, place_id='x', place_name='Loose')
        second = TripPlace.objects.create(trip=trip, place_id='b', place_name='B', order=1)
        first = TripPlace.objects.create(trip=trip, place_id='a', place_name='A', order=0)
        self.assertEqual(list(trip.places.all()), [first, second, loose])


class TripAPITest(APITestCase):
    """Test cases for Trip API endpoints"""

    def setUp(self):
        """Set up test data"""
        self.user = User.objects.create_user(username='testuser', password='testpass')
        self.other_user = User.objects.create_user(username='otheruser', password='otherpass')
        self.client.force_authenticate(user=self.user)

        self.trip = Trip.objects.create(
            owner=self.user,
            name='Test Trip',
            description='Long weekend',
            start_date=date(2026, 5, 1),
            end_date=date(2026, 5, 4),
        )
        self.list_url = reverse('trips:trip-list')
        self.detail_url = reverse('trips:trip-detail', args=[self.trip.pk])

    def test_list_own_trips(self):
        """Test listing only the user's trips"""
        Trip.objects.create(owner=self.other_user, name='Not mine', is_public=True)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['name'] for t in response.data], ['Test Trip'])

    def test_create_trip(self):
        """Test creating a trip via API"""
        response = self.client.post(self.list_url, {
            'name': 'Tokyo',
            'startDate': '2026-10-01',
            'endDate': '2026-10-10',
            'locationName': 'Tokyo, Japan',
            'locationLat': 35.6762,
            'locationLng': 139.6503,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['username'], 'testuser')
        self.assertFalse(response.data['isPublic'])
        self.assertEqual(Trip.objects.get(name='Tokyo').owner, self.user)

    def test_create_requires_name(self):
        response = self.client.post(self.list_url, {'description': 'nameless'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_end_before_start(self):
        response = self.client.post(self.list_url, {
            'name': 'Backwards', 'startDate': '2026-10-10', 'endDate': '2026-10-01'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_partial_update_keeps_other_fields(self):
        """PATCH and PUT only change the fields they send"""
        response = self.client.patch(self.detail_url, {'isPublic': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.put(self.detail_url, {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.trip.refresh_from_db()
        self.assertTrue(self.trip.is_public)
        self.assertEqual(self.trip.name, 'Renamed')
        self.assertEqual(self.trip.description, 'Long weekend')
        self.assertEqual(self.trip.start_date, date(2026, 5, 1))

    def test_other_users_forbidden(self):
        """Test that other users cannot read, update or delete a trip"""
        self.client.force_authenticate(user=self.other_user)
        self.assertEqual(self.client.get(self.detail_url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            self.client.patch(self.detail_url, {'name': 'Hacked'}, format='json').status_code,
            status.HTTP_403_FORBIDDEN
        )
        self.assertEqual(self.client.delete(self.detail_url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Trip.objects.filter(pk=self.trip.pk).exists())

    def test_delete_trip(self):
        response = self.client.delete(self.detail_url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Trip.objects.filter(pk=self.trip.pk).exists())

    def test_public_trips(self):
        """Public trips are listed for anonymous users with place counts"""
        public = Trip.objects.create(owner=self.other_user, name='Open Road', is_public=True)
        TripPlace.objects.create(trip=public, place_id='a', place_name='A', order=0)
        TripPlace.objects.create(trip=public, place_id='b', place_name='B', order=1)
        self.client.force_authenticate(user=None)

        response = self.client.get(reverse('trips:trip-public'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['username'], 'otheruser')
        self.assertEqual(response.data[0]['placesCount'], 2)

    def test_shared_trip(self):
        """Shared links only open public trips"""
        self.client.force_authenticate(user=None)
        url = reverse('trips:trip-shared', args=[self.trip.pk])
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)

        self.trip.is_public = True
        self.trip.save()
        TripPlace.objects.create(trip=self.trip, place_id='a', place_name='A', order=0)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['places']), 1)

        self.assertEqual(
            self.client.get(reverse('trips:trip-shared', args=[9999])).status_code,
            status.HTTP_404_NOT_FOUND
        )

    def test_add_places(self):
        """Places without an order are appended"""
        url = reverse('trips:trip-places', args=[self.trip.pk])
        first = self.client.post(url, {'placeId': 'a', 'placeName': 'Museum'}, format='json')
        second = self.client.post(url, {'placeId': 'b', 'placeName': 'Cafe', 'notes': 'Lunch'}, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data['order'], 0)
        self.assertEqual(second.data['order'], 1)

        response = self.client.get(url)
        self.assertEqual([p['placeId'] for p in response.data], ['a', 'b'])

    def test_add_place_validation(self):
        url = reverse('trips:trip-places', args=[self.trip.pk])
        response = self.client.post(url, {'placeName': 'No id'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_places_owner_only(self):
        self.client.force_authenticate(user=self.other_user)
        url = reverse('trips:trip-places', args=[self.trip.pk])
        response = self.client.post(url, {'placeId': 'a', 'placeName': 'A'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_remove_place(self):
        place = TripPlace.objects.create(trip=self.trip, place_id='a', place_name='A', order=0)
        url = reverse('trips:trip-place-detail', args=[self.trip.pk, place.pk])
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(TripPlace.objects.filter(pk=place.pk).exists())

    def test_reorder(self):
        """Test reordering the places of a trip"""
        a = TripPlace.objects.create(trip=self.trip, place_id='a', place_name='A', order=0)
        b = TripPlace.objects.create(trip=self.trip, place_id='b', place_name='B', order=1)
        c = TripPlace.objects.create(trip=self.trip, place_id='c', place_name='C', order=2)

        url = reverse('trips:trip-reorder', args=[self.trip.pk])
        response = self.client.post(url, {'order': [
            {'id': c.pk, 'order': 0},
            {'id': a.pk, 'order': 1},
            {'id': b.pk, 'order': 2},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['placeId'] for p in response.data], ['c', 'a', 'b'])
        self.assertEqual(
            list(TripPlace.objects.filter(trip=self.trip).values_list('place_id', flat=True)),
            ['c', 'a', 'b']
        )

    def test_reorder_swap_reports_new_order(self):
        a = TripPlace.objects.create(trip=self.trip, place_id='a', place_name='A', order=0)
        b = TripPlace.objects.create(trip=self.trip, place_id='b', place_name='B', order=1)

        url = reverse('trips:trip-reorder', args=[self.trip.pk])
        response = self.client.post(url, {'order': [
            {'id': b.pk, 'order': 0},
            {'id': a.pk, 'order': 1},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['placeId'] for p in response.data], ['b', 'a'])
        self.assertEqual([p['order'] for p in response.data], [0, 1])

    def test_reorder_unknown_place(self):
        a = TripPlace.objects.create(trip=self.trip, place_id='a', place_name='A', order=0)
        other_trip = Trip.objects.create(owner=self.user, name='Other')
        stranger = TripPlace.objects.create(trip=other_trip, place_id='z', place_name='Z', order=0)

        url = reverse('trips:trip-reorder', args=[self.trip.pk])
        response = self.client.post(url, {'order': [
            {'id': a.pk, 'order': 1},
            {'id': stranger.pk, 'order': 0},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        a.refresh_from_db()
        self.assertEqual(a.order, 0)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_401_UNAUTHORIZED)

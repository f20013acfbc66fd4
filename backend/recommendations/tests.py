from django.test import TestCase
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from locations.models import PlaceLike
from .scoring_service import ScoringService

User = get_user_model()


def save(user, place_id, place_type, rating=None, price_level=None, name=None):
    return PlaceLike.objects.create(
        user=user,
        place_id=place_id,
        place_name=name or place_id,
        place_type=place_type,
        rating=rating,
        price_level=price_level,
    )


class ScoringServiceTest(TestCase):
    """Test cases for the ScoringService algorithm"""

    def setUp(self):
        self.service = ScoringService()
        self.user = User.objects.create_user(username='viewer', password='password123')
        self.other = User.objects.create_user(username='other', password='password123')

    def test_compute_score(self):
        """weight * 2 + rating * 10, plus 20 on a price match"""
        self.assertEqual(self.service.compute_score(3, 4.5, 2, None), 51)
        self.assertEqual(self.service.compute_score(3, 4.5, 2, 2), 71)
        self.assertEqual(self.service.compute_score(1, None, None, 2), 2)

    def test_reason(self):
        self.assertEqual(
            ScoringService.reason_for('Tourist_Attraction'),
            'Based on your interest in tourist attraction places'
        )

    def test_no_saved_places(self):
        save(self.other, 'p1', 'museum', rating=5)
        self.assertEqual(self.service.generate_recommendations(self.user), [])

    def test_excludes_own_saved_places(self):
        save(self.user, 'mine', 'museum', rating=4)
        save(self.other, 'mine', 'museum', rating=5)
        save(self.other, 'new', 'museum', rating=3)

        results = self.service.generate_recommendations(self.user)
        self.assertEqual([r.place_id for r in results], ['new'])

    def test_top_three_types(self):
        for i in range(4):
            save(self.user, f'm{i}', 'museum')
        for i in range(3):
            save(self.user, f'c{i}', 'cafe')
        for i in range(2):
            save(self.user, f'p{i}', 'park')
        save(self.user, 'b0', 'bar')

        for place_type in ('museum', 'cafe', 'park', 'bar'):
            save(self.other, f'other-{place_type}', place_type, rating=4)

        results = self.service.generate_recommendations(self.user)
        self.assertEqual({r.place_type for r in results}, {'museum', 'cafe', 'park'})
        self.assertEqual(results[0].place_id, 'other-museum')
        self.assertEqual(results[0].score, 4 * 2 + 4 * 10)

    def test_price_preference(self):
        profile = self.user.profile
        profile.preferences = {'preferredPriceLevel': 2}
        profile.save()

        save(self.user, 'mine', 'restaurant')
        save(self.other, 'cheap', 'restaurant', rating=4.0, price_level=1)
        save(self.other, 'match', 'restaurant', rating=3.0, price_level=2)

        results = self.service.generate_recommendations(self.user)
        self.assertEqual([r.place_id for r in results], ['match', 'cheap'])
        self.assertEqual(results[0].score, 1 * 2 + 30 + 20)

    def test_at_most_five_per_type_and_ten_total(self):
        for place_type in ('museum', 'cafe', 'park'):
            save(self.user, f'mine-{place_type}', place_type)
            for i in range(7):
                save(self.other, f'{place_type}-{i}', place_type, rating=i % 5)

        results = self.service.generate_recommendations(self.user)
        self.assertEqual(len(results), 10)
        for place_type in ('museum', 'cafe', 'park'):
            self.assertLessEqual(len([r for r in results if r.place_type == place_type]), 5)

    def test_deduplicates_places(self):
        third = User.objects.create_user(username='third', password='password123')
        save(self.user, 'mine', 'museum')
        save(self.other, 'louvre', 'museum', rating=4)
        save(third, 'louvre', 'museum', rating=5)

        results = self.service.generate_recommendations(self.user)
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].rating, 5)


class RecommendationAPITest(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='viewer', password='password123')
        self.other = User.objects.create_user(username='other', password='password123')
        self.url = reverse('recommendations:recommendation-list')

    def test_recommendations(self):
        save(self.user, 'mine', 'museum')
        save(self.other, 'louvre', 'museum', rating=5, name='Louvre')
        self.client.force_authenticate(user=self.user)

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['placeId'], 'louvre')
        self.assertEqual(response.data[0]['placeName'], 'Louvre')
        self.assertEqual(response.data[0]['reason'], 'Based on your interest in museum places')

    def test_requires_authentication(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

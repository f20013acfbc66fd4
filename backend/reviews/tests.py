from datetime import timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from groups.services import GroupService
from .models import Review, ReviewLike
from .services import FeedService, has_liked

User = get_user_model()

NYC = {'lat': 40.7128, 'lng': -74.0060, 'formatted_address': 'New York, NY'}


def make_review(author, minutes_ago=0, **fields):
    fields.setdefault('place_id', 'place-1')
    fields.setdefault('place_name', 'Central Park')
    fields.setdefault('rating', 4)
    review = Review.objects.create(author=author, **fields)
    Review.objects.filter(pk=review.pk).update(created_at=timezone.now() - timedelta(minutes=minutes_ago))
    return review


class FeedServiceTests(TestCase):
    def setUp(self):
        self.alice = User.objects.create_user(username='alice', password='password123')
        self.bob = User.objects.create_user(username='bob', password='password123')
        self.carol = User.objects.create_user(username='carol', password='password123')

    def test_community_only_public_newest_first(self):
        old = make_review(self.bob, minutes_ago=10)
        new = make_review(self.carol, minutes_ago=1)
        make_review(self.bob, minutes_ago=5, is_public=False)

        reviews = list(FeedService(viewer=self.alice).community())
        self.assertEqual([r.pk for r in reviews], [new.pk, old.pk])

    def test_ties_broken_by_id(self):
        first = Review.objects.create(author=self.bob, place_id='p', rating=3)
        second = Review.objects.create(author=self.bob, place_id='p', rating=3)
        same_time = timezone.now()
        Review.objects.update(created_at=same_time)

        reviews = list(FeedService().community())
        self.assertEqual([r.pk for r in reviews], [first.pk, second.pk])

    def test_following_scope(self):
        self.alice.profile.follow(self.bob.profile)
        followed = make_review(self.bob)
        make_review(self.bob, is_public=False)
        make_review(self.carol)

        reviews = list(FeedService(viewer=self.alice).following())
        self.assertEqual([r.pk for r in reviews], [followed.pk])

    def test_group_scope_ignores_visibility(self):
        group = GroupService.create_group(self.bob, name='Trips')
        private = make_review(self.bob, is_public=False, group=group)
        make_review(self.bob)

        reviews = list(FeedService(viewer=self.bob).group(group))
        self.assertEqual([r.pk for r in reviews], [private.pk])

    def test_place_scope(self):
        match = make_review(self.bob, place_id='louvre')
        make_review(self.bob, place_id='other')
        reviews = list(FeedService().place('louvre'))
        self.assertEqual([r.pk for r in reviews], [match.pk])

    def test_enrichment(self):
        review = make_review(self.bob, location=NYC)
        ReviewLike.objects.create(review=review, user=self.alice)
        ReviewLike.objects.create(review=review, user=self.carol)

        feed = FeedService(viewer=self.alice, origin=(37.7749, -122.4194))
        enriched = feed.enrich(feed.community())[0]
        self.assertEqual(enriched.likes_count, 2)
        self.assertTrue(enriched.is_liked)
        self.assertAlmostEqual(enriched.distance, 4129, delta=5)

        anonymous = FeedService().enrich(FeedService().community())[0]
        self.assertEqual(anonymous.likes_count, 2)
        self.assertFalse(anonymous.is_liked)
        self.assertIsNone(anonymous.distance)

    def test_has_liked(self):
        review = make_review(self.bob)
        self.assertFalse(has_liked(review.pk, self.alice.pk))
        ReviewLike.objects.create(review=review, user=self.alice)
        self.assertTrue(has_liked(review.pk, self.alice.pk))
        self.assertFalse(has_liked(review.pk, None))

    def test_like_race_maps_to_duplicate(self):
        review = make_review(self.bob)
        with mock.patch.object(ReviewLike.objects, 'get_or_create', side_effect=IntegrityError):
            self.assertFalse(FeedService.like(review, self.alice))

    def test_counts_use_constant_queries(self):
        for i in range(5):
            review = make_review(self.bob, place_id=f'p{i}')
            ReviewLike.objects.create(review=review, user=self.alice)

        feed = FeedService(viewer=self.alice)
        with self.assertNumQueries(1):
            reviews = feed.enrich(feed.community())
        self.assertTrue(all(r.is_liked and r.likes_count == 1 for r in reviews))


class ReviewAPITests(APITestCase):
    def setUp(self):
        self.alice = User.objects.create_user(username='alice', password='password123')
        self.bob = User.objects.create_user(username='bob', password='password123')
        self.list_url = reverse('reviews:review-list')
        self.community_url = reverse('reviews:review-community')
        self.following_url = reverse('reviews:review-following')
        self.client.force_authenticate(user=self.alice)

    def test_create_then_appears_in_feed(self):
        """A new public review shows up first in the community feed with no likes."""
        make_review(self.bob, minutes_ago=30)
        response = self.client.post(self.list_url, {
            'placeId': 'ChIJ-louvre',
            'placeName': 'Louvre',
            'rating': 5,
            'comment': 'Stunning',
            'location': {
                'coordinates': {'lat': 48.8606, 'lng': 2.3376},
                'formatted_address': 'Rue de Rivoli, Paris',
                'city': 'Paris',
                'country': 'France',
            },
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['likes'], 0)
        self.assertFalse(response.data['isLiked'])
        self.assertTrue(response.data['isPublic'])
        self.assertEqual(response.data['location']['city'], 'Paris')

        feed = self.client.get(self.community_url)
        self.assertEqual(feed.status_code, status.HTTP_200_OK)
        self.assertEqual(feed.data[0]['id'], response.data['id'])
        self.assertEqual(feed.data[0]['username'], 'alice')
        self.assertEqual(feed.data[0]['likes'], 0)
        self.assertNotIn('distance', feed.data[0])

    def test_create_validation(self):
        cases = [
            {'placeName': 'No id', 'rating': 3},
            {'placeId': 'p', 'rating': 0},
            {'placeId': 'p', 'rating': 6},
            {'placeId': 'p', 'rating': 4.5},
            {'placeId': 'p'},
            {'placeId': 'p', 'rating': 3, 'location': {'lat': 'north', 'lng': 2}},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                response = self.client.post(self.list_url, payload, format='json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn('error', response.data)
        self.assertEqual(Review.objects.count(), 0)

    def test_create_in_group(self):
        group = GroupService.create_group(self.bob, name='Paris crew')
        payload = {'placeId': 'p', 'rating': 4, 'groupId': group.pk, 'isPublic': False}

        response = self.client.post(self.list_url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Not a member of this group')

        GroupService.join(group, self.alice)
        response = self.client.post(self.list_url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['groupName'], 'Paris crew')

        payload['groupId'] = 9999
        response = self.client.post(self.list_url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(self.list_url, {'placeId': 'p', 'rating': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_own_reviews_include_private(self):
        make_review(self.alice, is_public=False)
        make_review(self.alice)
        make_review(self.bob)
        response = self.client.get(self.list_url)
        self.assertEqual(len(response.data), 2)

    def test_community_feed_anonymous(self):
        review = make_review(self.bob)
        ReviewLike.objects.create(review=review, user=self.alice)
        self.client.force_authenticate(user=None)

        response = self.client.get(self.community_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['likes'], 1)
        self.assertFalse(response.data[0]['isLiked'])

    def test_community_feed_hides_private(self):
        make_review(self.bob, is_public=False)
        response = self.client.get(self.community_url)
        self.assertEqual(response.data, [])

    def test_distance_annotation(self):
        make_review(self.bob, minutes_ago=2, location=NYC)
        make_review(self.bob, minutes_ago=1)

        response = self.client.get(self.community_url, {'userLat': 37.7749, 'userLng': -122.4194})
        no_location, with_location = response.data
        self.assertNotIn('distance', no_location)
        self.assertAlmostEqual(with_location['distance'], 4129, delta=5)

    def test_zero_distance_is_kept(self):
        make_review(self.bob, location=NYC)
        response = self.client.get(self.community_url, {'userLat': NYC['lat'], 'userLng': NYC['lng']})
        self.assertEqual(response.data[0]['distance'], 0.0)

    def test_bad_origin_is_ignored(self):
        make_review(self.bob, location=NYC)
        response = self.client.get(self.community_url, {'userLat': 'abc', 'userLng': '10'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn('distance', response.data[0])

    def test_limit_and_offset(self):
        reviews = [make_review(self.bob, minutes_ago=m) for m in (1, 2, 3, 4)]
        response = self.client.get(self.community_url, {'limit': 2, 'offset': 1})
        self.assertEqual([r['id'] for r in response.data], [reviews[1].pk, reviews[2].pk])

        response = self.client.get(self.community_url, {'limit': -1})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_following_feed(self):
        self.alice.profile.follow(self.bob.profile)
        carol = User.objects.create_user(username='carol', password='password123')
        visible = make_review(self.bob)
        make_review(self.bob, is_public=False)
        make_review(carol)

        response = self.client.get(self.following_url)
        self.assertEqual([r['id'] for r in response.data], [visible.pk])

    def test_following_feed_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get(self.following_url).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_place_feed_open_to_anonymous(self):
        make_review(self.bob, place_id='ChIJ.eiffel')
        make_review(self.bob, place_id='other')
        self.client.force_authenticate(user=None)

        response = self.client.get(reverse('reviews:review-place', args=['ChIJ.eiffel']))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['placeId'] for r in response.data], ['ChIJ.eiffel'])

    def test_like_unlike_round_trip(self):
        review = make_review(self.bob)
        like_url = reverse('reviews:review-like', args=[review.pk])

        response = self.client.post(like_url)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        entry = self.client.get(self.community_url).data[0]
        self.assertEqual(entry['likes'], 1)
        self.assertTrue(entry['isLiked'])

        response = self.client.delete(like_url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        entry = self.client.get(self.community_url).data[0]
        self.assertEqual(entry['likes'], 0)
        self.assertFalse(entry['isLiked'])

        # unliking again is a no-op
        self.assertEqual(self.client.delete(like_url).status_code, status.HTTP_204_NO_CONTENT)

    def test_duplicate_like(self):
        review = make_review(self.bob)
        like_url = reverse('reviews:review-like', args=[review.pk])
        self.client.post(like_url)

        response = self.client.post(like_url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Already liked this review')
        self.assertEqual(ReviewLike.objects.filter(review=review).count(), 1)

    def test_like_unknown_review(self):
        response = self.client.post(reverse('reviews:review-like', args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_by_author(self):
        review = make_review(self.alice, rating=2, location=NYC)
        url = reverse('reviews:review-detail', args=[review.pk])
        response = self.client.patch(url, {'rating': 5, 'comment': 'Better now', 'placeId': 'moved'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        review.refresh_from_db()
        self.assertEqual(review.rating, 5)
        self.assertEqual(review.comment, 'Better now')
        self.assertEqual(review.place_id, 'place-1')
        self.assertEqual(review.location, NYC)

    def test_update_and_delete_forbidden_for_others(self):
        review = make_review(self.bob)
        url = reverse('reviews:review-detail', args=[review.pk])
        self.assertEqual(self.client.patch(url, {'rating': 1}, format='json').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Review.objects.filter(pk=review.pk).exists())

    def test_delete_cascades_likes(self):
        review = make_review(self.alice)
        ReviewLike.objects.create(review=review, user=self.bob)
        response = self.client.delete(reverse('reviews:review-detail', args=[review.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ReviewLike.objects.exists())

    def test_unknown_review_update(self):
        response = self.client.patch(reverse('reviews:review-detail', args=[9999]), {'rating': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

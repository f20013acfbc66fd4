import json

from django.test import TestCase
from django.urls import reverse
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from locations.models import PlaceLike
from reviews.models import Review
from trips.models import Trip
from .models import UserProfile, FollowRelation

User = get_user_model()


class UserProfileTests(TestCase):
    def setUp(self):
        self.user1 = User.objects.create_user(username='user1', password='password123')
        self.user2 = User.objects.create_user(username='user2', password='password123')

        # Profiles are created by the post_save signal
        self.profile1 = self.user1.profile
        self.profile2 = self.user2.profile

    def test_profile_created_automatically(self):
        self.assertEqual(UserProfile.objects.count(), 2)
        self.assertEqual(self.profile1.role, UserProfile.Role.CASUAL)

    def test_follow_success(self):
        """Test that one user can successfully follow another."""
        self.assertTrue(self.profile1.follow(self.profile2))

        self.assertEqual(self.profile1.following_count(), 1)
        self.assertEqual(self.profile2.followers_count(), 1)
        self.assertTrue(self.profile1.is_following(self.profile2))
        self.assertFalse(self.profile2.is_following(self.profile1))

    def test_follow_twice(self):
        self.profile1.follow(self.profile2)
        self.assertFalse(self.profile1.follow(self.profile2))
        self.assertEqual(FollowRelation.objects.count(), 1)

    def test_unfollow_success(self):
        """Test that one user can successfully unfollow another."""
        self.profile1.follow(self.profile2)
        self.assertTrue(self.profile1.unfollow(self.profile2))

        self.assertEqual(self.profile1.following_count(), 0)
        self.assertEqual(self.profile2.followers_count(), 0)
        self.assertFalse(self.profile1.is_following(self.profile2))

    def test_cannot_follow_self(self):
        """Test that a user cannot follow themselves."""
        self.assertFalse(self.profile1.follow(self.profile1))
        self.assertEqual(self.profile1.following_count(), 0)


class AuthAPITests(APITestCase):

    def test_register_logs_in(self):
        response = self.client.post(reverse('register'), {
            'username': 'newbie', 'password': 'secret123', 'role': 'business',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['username'], 'newbie')
        self.assertEqual(response.data['role'], 'business')

        me = self.client.get(reverse('me'))
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data['username'], 'newbie')

    def test_register_missing_fields(self):
        response = self.client.post(reverse('register'), {'username': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data['details'])

    def test_register_duplicate_username(self):
        User.objects.create_user(username='taken', password='password123')
        response = self.client.post(reverse('register'), {
            'username': 'taken', 'password': 'secret123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(User.objects.filter(username='taken').count(), 1)

    def test_register_reserved_username(self):
        for name in ('search', 'Me', 'login'):
            with self.subTest(username=name):
                response = self.client.post(reverse('register'), {
                    'username': name, 'password': 'secret123'
                }, format='json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn('username', response.data['details'])
        self.assertFalse(User.objects.filter(username__iexact='me').exists())

    def test_login_and_logout(self):
        User.objects.create_user(username='walker', password='password123')

        response = self.client.post(reverse('login'), {
            'username': 'walker', 'password': 'password123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'walker')

        response = self.client.post(reverse('logout'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(reverse('me')).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_bad_credentials(self):
        User.objects.create_user(username='walker', password='password123')
        response = self.client.post(reverse('login'), {
            'username': 'walker', 'password': 'wrong'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'error': 'Invalid credentials'})

    def test_login_missing_fields(self):
        response = self.client.post(reverse('login'), {'username': 'walker'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_requires_authentication(self):
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)


class UserAPITests(APITestCase):
    def setUp(self):
        self.user1 = User.objects.create_user(username='api_user1', password='password123')
        self.profile1 = self.user1.profile

        self.user2 = User.objects.create_user(username='api_user2', password='password123')
        self.profile2 = self.user2.profile

        # Authenticate as user1 for these tests
        self.client.force_authenticate(user=self.user1)

    def test_get_me(self):
        """Test retrieving the current user's profile via API."""
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], self.user1.username)

    def test_update_me(self):
        response = self.client.patch(reverse('me'), {
            'displayName': 'Api One',
            'bio': 'Always travelling',
            'preferences': {'preferredPriceLevel': 2},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.profile1.refresh_from_db()
        self.assertEqual(self.profile1.display_name, 'Api One')
        self.assertEqual(self.profile1.bio, 'Always travelling')
        self.assertEqual(self.profile1.preferences, {'preferredPriceLevel': 2})

    def test_follow_endpoint(self):
        """Test the follow API endpoint."""
        url = reverse('follow', args=[self.profile2.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(self.profile1.is_following(self.profile2))

    def test_follow_twice_is_conflict(self):
        self.profile1.follow(self.profile2)
        response = self.client.post(reverse('follow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Already following this user')
        self.assertEqual(FollowRelation.objects.count(), 1)

    def test_follow_self(self):
        response = self.client.post(reverse('follow', args=[self.profile1.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot follow yourself')

    def test_follow_unknown_profile(self):
        response = self.client.post(reverse('follow', args=['00000000-0000-0000-0000-000000000000']))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unfollow_endpoint(self):
        """Test the unfollow API endpoint."""
        self.profile1.follow(self.profile2)

        url = reverse('unfollow', args=[self.profile2.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(self.profile1.is_following(self.profile2))

        # not following anymore, still a success
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_profile_by_username(self):
        self.profile1.follow(self.profile2)
        response = self.client.get(reverse('profile', args=['api_user2']))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['followersCount'], 1)
        self.assertEqual(response.data['followingCount'], 0)
        self.assertTrue(response.data['isFollowing'])

    def test_unknown_username(self):
        response = self.client.get(reverse('profile', args=['ghost']))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_public_profile_counts(self):
        Trip.objects.create(owner=self.user2, name='Public', is_public=True)
        Trip.objects.create(owner=self.user2, name='Private')
        Review.objects.create(author=self.user2, place_id='p1', rating=5)
        Review.objects.create(author=self.user2, place_id='p2', rating=3, is_public=False)

        response = self.client.get(reverse('public-profile', args=['api_user2']))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['tripsCount'], 1)
        self.assertEqual(response.data['reviewsCount'], 1)
        self.assertFalse(response.data['isFollowing'])

    def test_stats_and_lists(self):
        self.profile1.follow(self.profile2)

        stats = self.client.get(reverse('user-stats', args=['api_user2']))
        self.assertEqual(stats.data, {'followersCount': 1, 'followingCount': 0})

        followers = self.client.get(reverse('user-followers', args=['api_user2']))
        self.assertEqual([u['username'] for u in followers.data], ['api_user1'])

        following = self.client.get(reverse('user-following', args=['api_user1']))
        self.assertEqual([u['username'] for u in following.data], ['api_user2'])

    def test_search(self):
        self.profile2.display_name = 'Second Tester'
        self.profile2.save()

        response = self.client.get(reverse('user-search'), {'query': 'TESTER'})
        self.assertEqual([u['username'] for u in response.data], ['api_user2'])

        response = self.client.get(reverse('user-search'), {'query': 'api_user'})
        self.assertEqual(len(response.data), 2)

        response = self.client.get(reverse('user-search'), {'query': ''})
        self.assertEqual(response.data, [])

    def test_search_is_limited(self):
        for i in range(12):
            User.objects.create_user(username=f'crowd{i}', password='password123')
        response = self.client.get(reverse('user-search'), {'query': 'crowd'})
        self.assertEqual(len(response.data), 10)

    def test_user_trips_only_public(self):
        Trip.objects.create(owner=self.user2, name='Open', is_public=True)
        Trip.objects.create(owner=self.user2, name='Hidden')
        response = self.client.get(reverse('user-trips', args=['api_user2']))
        self.assertEqual([t['name'] for t in response.data], ['Open'])

    def test_user_reviews_hide_private_from_others(self):
        Review.objects.create(author=self.user2, place_id='p1', rating=5)
        Review.objects.create(author=self.user2, place_id='p2', rating=3, is_public=False)

        response = self.client.get(reverse('user-reviews', args=['api_user2']))
        self.assertEqual([r['placeId'] for r in response.data], ['p1'])

        self.client.force_authenticate(user=self.user2)
        response = self.client.get(reverse('user-reviews', args=['api_user2']))
        self.assertEqual(len(response.data), 2)

    def test_export(self):
        Review.objects.create(author=self.user1, place_id='p1', rating=4)
        PlaceLike.objects.create(user=self.user1, place_id='p1', place_name='Cafe')
        Trip.objects.create(owner=self.user1, name='Weekend')
        self.profile1.follow(self.profile2)

        response = self.client.get(reverse('me-export'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('attachment', response['Content-Disposition'])

        data = json.loads(response.content)
        self.assertEqual(data['profile']['username'], 'api_user1')
        self.assertEqual(len(data['reviews']), 1)
        self.assertEqual(len(data['savedPlaces']), 1)
        self.assertEqual(len(data['trips']), 1)
        self.assertEqual([u['username'] for u in data['following']], ['api_user2'])

    def test_delete_account(self):
        Review.objects.create(author=self.user1, place_id='p1', rating=4)
        Trip.objects.create(owner=self.user1, name='Weekend')
        self.profile1.follow(self.profile2)

        response = self.client.delete(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(username='api_user1').exists())
        self.assertFalse(Review.objects.filter(place_id='p1').exists())
        self.assertFalse(Trip.objects.exists())
        self.assertEqual(FollowRelation.objects.count(), 0)

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from reviews.models import Review
from .models import Group, GroupMembership, GroupMessage
from .services import GroupService, is_admin, is_member

User = get_user_model()


class MembershipPredicateTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(username='owner', password='password123')
        self.member = User.objects.create_user(username='member', password='password123')
        self.outsider = User.objects.create_user(username='outsider', password='password123')
        self.group = GroupService.create_group(self.owner, name='Hikers')
        GroupService.join(self.group, self.member)

    def test_creator_is_admin(self):
        self.assertTrue(is_member(self.group.pk, self.owner.pk))
        self.assertTrue(is_admin(self.group.pk, self.owner.pk))

    def test_member_is_not_admin(self):
        self.assertTrue(is_member(self.group.pk, self.member.pk))
        self.assertFalse(is_admin(self.group.pk, self.member.pk))

    def test_outsider(self):
        self.assertFalse(is_member(self.group.pk, self.outsider.pk))
        self.assertFalse(is_member(self.group.pk, None))

    def test_join_twice(self):
        self.assertFalse(GroupService.join(self.group, self.member))
        self.assertEqual(GroupMembership.objects.filter(group=self.group).count(), 2)

    def test_leave_removes_access(self):
        GroupService.leave(self.group, self.member)
        self.assertFalse(is_member(self.group.pk, self.member.pk))


class GroupAPITests(APITestCase):
    def setUp(self):
        self.owner = User.objects.create_user(username='owner', password='password123')
        self.member = User.objects.create_user(username='member', password='password123')
        self.outsider = User.objects.create_user(username='outsider', password='password123')
        self.group = GroupService.create_group(self.owner, name='Hikers', description='Trails')
        GroupService.join(self.group, self.member)
        self.list_url = reverse('groups:group-list')
        self.client.force_authenticate(user=self.member)

    def test_create_group(self):
        response = self.client.post(self.list_url, {'name': 'Foodies', 'description': 'Eat'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['memberCount'], 1)
        self.assertTrue(response.data['isAdmin'])
        self.assertEqual(response.data['userRole'], 'admin')

        group = Group.objects.get(name='Foodies')
        self.assertTrue(is_admin(group.pk, self.member.pk))

    def test_create_requires_name(self):
        response = self.client.post(self.list_url, {'description': 'Nameless'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Group.objects.filter(description='Nameless').exists())

    def test_list_annotations(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry = response.data[0]
        self.assertEqual(entry['name'], 'Hikers')
        self.assertEqual(entry['memberCount'], 2)
        self.assertTrue(entry['isJoined'])
        self.assertEqual(entry['userRole'], 'member')
        self.assertFalse(entry['isAdmin'])
        self.assertEqual(entry['creatorUsername'], 'owner')

    def test_list_for_outsider(self):
        self.client.force_authenticate(user=self.outsider)
        entry = self.client.get(self.list_url).data[0]
        self.assertFalse(entry['isJoined'])
        self.assertIsNone(entry['userRole'])

    def test_update_admin_only(self):
        url = reverse('groups:group-detail', args=[self.group.pk])
        response = self.client.patch(url, {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.owner)
        response = self.client.patch(url, {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.group.refresh_from_db()
        self.assertEqual(self.group.name, 'Renamed')
        self.assertEqual(self.group.description, 'Trails')

    def test_join_and_leave(self):
        self.client.force_authenticate(user=self.outsider)
        join_url = reverse('groups:group-join', args=[self.group.pk])

        response = self.client.post(join_url)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(is_member(self.group.pk, self.outsider.pk))

        response = self.client.post(join_url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Already a member of this group')

        leave_url = reverse('groups:group-leave', args=[self.group.pk])
        self.assertEqual(self.client.delete(leave_url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(is_member(self.group.pk, self.outsider.pk))
        # leaving again is a no-op
        self.assertEqual(self.client.delete(leave_url).status_code, status.HTTP_204_NO_CONTENT)

    def test_join_unknown_group(self):
        response = self.client.post(reverse('groups:group-join', args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_members_list(self):
        response = self.client.get(reverse('groups:group-members', args=[self.group.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        roles = {m['username']: m['role'] for m in response.data}
        self.assertEqual(roles, {'owner': 'admin', 'member': 'member'})

    def test_messages(self):
        url = reverse('groups:group-messages', args=[self.group.pk])
        response = self.client.post(url, {'content': 'Anyone up for Saturday?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['username'], 'member')

        GroupMessage.objects.create(group=self.group, author=self.owner, content='Sure')
        response = self.client.get(url)
        self.assertEqual([m['content'] for m in response.data], ['Sure', 'Anyone up for Saturday?'])

    def test_empty_message_rejected(self):
        url = reverse('groups:group-messages', args=[self.group.pk])
        response = self.client.post(url, {'content': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_member_only_endpoints(self):
        self.client.force_authenticate(user=self.outsider)
        for name in ('groups:group-members', 'groups:group-messages', 'groups:group-reviews'):
            with self.subTest(endpoint=name):
                response = self.client.get(reverse(name, args=[self.group.pk]))
                self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
                self.assertEqual(response.data['error'], 'Not a member of this group')

        response = self.client.post(
            reverse('groups:group-messages', args=[self.group.pk]), {'content': 'hi'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_group_reviews_include_private(self):
        Review.objects.create(author=self.owner, place_id='p1', rating=5, is_public=False, group=self.group)
        Review.objects.create(author=self.owner, place_id='p2', rating=4)

        response = self.client.get(reverse('groups:group-reviews', args=[self.group.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['placeId'] for r in response.data], ['p1'])
        self.assertEqual(response.data[0]['groupName'], 'Hikers')

    def test_group_reviews_unknown_group(self):
        response = self.client.get(reverse('groups:group-reviews', args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_401_UNAUTHORIZED)

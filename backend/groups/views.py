"""
API views for groups app endpoints.
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from config.exceptions import Conflict
from reviews.serializers import ReviewSerializer
from reviews.services import FeedService
from .models import Group, GroupMembership, GroupMessage
from .serializers import GroupMemberSerializer, GroupMessageSerializer, GroupSerializer
from .services import GroupService, is_admin, is_member

logger = logging.getLogger(__name__)


class GroupViewSet(viewsets.ViewSet):
    """
    ViewSet for groups, membership, group chat and the group review feed.
    Chat and feed are visible to members only; editing is for admins.
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9]+'

    def _annotated(self, request, pk) -> Group:
        return get_object_or_404(GroupService.annotated_groups(request.user), pk=pk)

    def _member_group(self, request, pk) -> Group:
        group = get_object_or_404(Group, pk=pk)
        if not is_member(group.pk, request.user.pk):
            logger.warning("User %s denied access to group %s", request.user.pk, group.pk)
            raise PermissionDenied("Not a member of this group")
        return group

    def list(self, request):
        groups = GroupService.annotated_groups(request.user)
        return Response(GroupSerializer(groups, many=True).data)

    def create(self, request):
        serializer = GroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        group = GroupService.create_group(request.user, **serializer.validated_data)
        return Response(
            GroupSerializer(self._annotated(request, group.pk)).data,
            status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        return Response(GroupSerializer(self._annotated(request, pk)).data)

    def update(self, request, pk=None):
        group = get_object_or_404(Group, pk=pk)
        if not is_admin(group.pk, request.user.pk):
            raise PermissionDenied("Only group admins can update the group")

        serializer = GroupSerializer(group, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(GroupSerializer(self._annotated(request, group.pk)).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @action(detail=True, methods=['post'])
    def join(self, request, pk=None):
        group = get_object_or_404(Group, pk=pk)
        if not GroupService.join(group, request.user):
            raise Conflict("Already a member of this group")
        return Response(
            {'success': True, 'message': f"Joined {group.name}"},
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['delete'])
    def leave(self, request, pk=None):
        group = get_object_or_404(Group, pk=pk)
        GroupService.leave(group, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        group = self._member_group(request, pk)
        memberships = (
            GroupMembership.objects.filter(group=group)
            .select_related('user', 'user__profile')
            .order_by('joined_at', 'id')
        )
        return Response(GroupMemberSerializer(memberships, many=True).data)

    @action(detail=True, methods=['get', 'post'])
    def messages(self, request, pk=None):
        group = self._member_group(request, pk)

        if request.method == 'POST':
            serializer = GroupMessageSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            message = serializer.save(group=group, author=request.user)
            return Response(GroupMessageSerializer(message).data, status=status.HTTP_201_CREATED)

        messages = (
            GroupMessage.objects.filter(group=group)
            .select_related('author', 'author__profile')
            .order_by('-created_at', '-id')
        )
        return Response(GroupMessageSerializer(messages, many=True).data)

    @action(detail=True, methods=['get'])
    def reviews(self, request, pk=None):
        """Every review shared with the group, regardless of visibility."""
        group = self._member_group(request, pk)
        feed = FeedService.for_request(request)
        reviews = feed.enrich(feed.paginate(feed.group(group), request.query_params))
        return Response(ReviewSerializer(reviews, many=True).data)

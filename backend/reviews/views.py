"""
API views for reviews app endpoints.
Handles review CRUD, the community / following / place feeds and likes.
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from config.exceptions import Conflict
from groups.models import Group
from groups.services import is_member
from .models import Review
from .serializers import ReviewCreateSerializer, ReviewSerializer, ReviewUpdateSerializer
from .services import FeedService

logger = logging.getLogger(__name__)


class ReviewViewSet(viewsets.ViewSet):
    """
    ViewSet for reviews and the feeds built from them.

    Every listing accepts ``userLat`` / ``userLng`` to add distances and
    ``limit`` / ``offset`` to slice the result.
    """
    lookup_value_regex = '[0-9]+'

    def get_permissions(self):
        if self.action in ('community', 'place'):
            return [AllowAny()]
        return [IsAuthenticated()]

    def _feed_response(self, feed: FeedService, queryset):
        reviews = feed.enrich(feed.paginate(queryset, self.request.query_params))
        return Response(ReviewSerializer(reviews, many=True).data)

    def _get_own_review(self, request, pk) -> Review:
        review = get_object_or_404(Review, pk=pk)
        if review.author_id != request.user.pk:
            logger.warning("User %s tried to modify review %s", request.user.pk, pk)
            raise PermissionDenied("You can only modify your own reviews")
        return review

    def list(self, request):
        """The viewer's own reviews, private ones included."""
        feed = FeedService.for_request(request)
        return self._feed_response(feed, feed.authored_by(request.user, include_private=True))

    def create(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        group = None
        if data.get('group_id') is not None:
            group = Group.objects.filter(pk=data['group_id']).first()
            if group is None:
                raise NotFound("Group not found")
            if not is_member(group.pk, request.user.pk):
                raise PermissionDenied("Not a member of this group")

        review = Review.objects.create(
            author=request.user,
            place_id=data['place_id'],
            place_name=data['place_name'],
            rating=data['rating'],
            comment=data['comment'],
            is_public=data['is_public'],
            location=data['location'],
            group=group,
        )
        logger.info("User %s reviewed place %s (review %s)", request.user.pk, review.place_id, review.pk)

        feed = FeedService.for_request(request)
        return Response(ReviewSerializer(feed.get(review.pk)).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        review = self._get_own_review(request, pk)
        serializer = ReviewUpdateSerializer(review, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        feed = FeedService.for_request(request)
        return Response(ReviewSerializer(feed.get(review.pk)).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        review = self._get_own_review(request, pk)
        review.delete()
        logger.info("User %s deleted review %s", request.user.pk, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def community(self, request):
        """Public reviews from everyone."""
        feed = FeedService.for_request(request)
        return self._feed_response(feed, feed.community())

    @action(detail=False, methods=['get'])
    def following(self, request):
        """Public reviews from the users the viewer follows."""
        feed = FeedService.for_request(request)
        return self._feed_response(feed, feed.following())

    def place(self, request, place_id=None):
        """All reviews of one external place."""
        feed = FeedService.for_request(request)
        return self._feed_response(feed, feed.place(place_id))

    @action(detail=True, methods=['post', 'delete'])
    def like(self, request, pk=None):
        review = get_object_or_404(Review, pk=pk)

        if request.method == 'DELETE':
            FeedService.unlike(review, request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)

        if not FeedService.like(review, request.user):
            raise Conflict("Already liked this review")

        return Response({'success': True, 'message': 'Review liked'}, status=status.HTTP_201_CREATED)

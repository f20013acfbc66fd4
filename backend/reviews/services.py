"""
Domain service for the review feeds.
Selects the reviews visible in a scope and enriches them for the viewer.
"""
import logging
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.db.models import BooleanField, Count, Exists, OuterRef, QuerySet, Value
from rest_framework.exceptions import ValidationError

from locations.services import GeoService, Coordinates
from user.models import FollowRelation
from .models import Review, ReviewLike

logger = logging.getLogger(__name__)


def has_liked(review_id, user_id) -> bool:
    if user_id is None:
        return False
    return ReviewLike.objects.filter(review_id=review_id, user_id=user_id).exists()


def _non_negative_int(params, name: str) -> Optional[int]:
    raw = params.get(name)
    if raw in (None, ''):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: ["Must be a non-negative integer."]})
    if value < 0:
        raise ValidationError({name: ["Must be a non-negative integer."]})
    return value


class FeedService:
    """
    Domain service responsible for the review feeds.

    Every scope shares one ordering (newest first, ties by id) and one
    enrichment pass: like count, the viewer's liked flag and, when the
    viewer sent coordinates, the distance to the review's location.
    """

    def __init__(self, viewer=None, origin: Optional[Coordinates] = None):
        self.viewer = viewer if viewer is not None and viewer.is_authenticated else None
        self.origin = origin

    @classmethod
    def for_request(cls, request) -> "FeedService":
        return cls(viewer=request.user, origin=GeoService.parse_origin(request.query_params))

    def _base_queryset(self) -> QuerySet:
        """
        Like count and liked flag are computed for the whole candidate set
        in the same query.
        """
        if self.viewer is not None:
            liked = Exists(ReviewLike.objects.filter(review=OuterRef('pk'), user=self.viewer))
        else:
            liked = Value(False, output_field=BooleanField())

        return (
            Review.objects.select_related('author', 'group')
            .annotate(likes_count=Count('likes', distinct=True), is_liked=liked)
            .order_by('-created_at', 'id')
        )

    # Scopes

    def community(self) -> QuerySet:
        return self._base_queryset().filter(is_public=True)

    def following(self) -> QuerySet:
        """Public reviews written by users the viewer follows."""
        followed_users = FollowRelation.objects.filter(
            follower__user=self.viewer
        ).values('following__user_id')
        return self._base_queryset().filter(is_public=True, author_id__in=followed_users)

    def group(self, group) -> QuerySet:
        """Every review attached to the group, public or not."""
        return self._base_queryset().filter(group=group)

    def place(self, place_id: str) -> QuerySet:
        return self._base_queryset().filter(place_id=place_id)

    def authored_by(self, author, include_private: bool = False) -> QuerySet:
        queryset = self._base_queryset().filter(author=author)
        if not include_private:
            queryset = queryset.filter(is_public=True)
        return queryset

    def get(self, review_id) -> Review:
        review = self._base_queryset().get(pk=review_id)
        return self.enrich([review])[0]

    # Shaping

    @staticmethod
    def paginate(queryset: QuerySet, params) -> QuerySet:
        """
        Apply the optional ``limit`` / ``offset`` query parameters.
        """
        limit = _non_negative_int(params, 'limit')
        offset = _non_negative_int(params, 'offset') or 0
        if limit is None:
            return queryset[offset:] if offset else queryset
        return queryset[offset:offset + limit]

    def enrich(self, reviews) -> List[Review]:
        enriched = list(reviews)
        for review in enriched:
            review.distance = GeoService.distance_to(self.origin, review.location)
        return enriched

    # Likes

    @staticmethod
    def like(review: Review, user) -> bool:
        """Returns False when the user had already liked the review."""
        try:
            with transaction.atomic():
                _, created = ReviewLike.objects.get_or_create(review=review, user=user)
        except IntegrityError:
            return False
        if created:
            logger.info("User %s liked review %s", user.pk, review.pk)
        return created

    @staticmethod
    def unlike(review: Review, user) -> None:
        deleted, _ = ReviewLike.objects.filter(review=review, user=user).delete()
        if deleted:
            logger.info("User %s unliked review %s", user.pk, review.pk)

"""
API views for locations app endpoints.
"""
import logging

from django.db import IntegrityError, transaction
from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from config.exceptions import Conflict
from .models import PlaceLike
from .serializers import PlaceLikeSerializer

logger = logging.getLogger(__name__)


class PlaceLikeViewSet(viewsets.ViewSet):
    """
    Saved places of the current user, addressed by external place id.
    """
    permission_classes = [IsAuthenticated]
    lookup_field = 'place_id'
    lookup_value_regex = '[^/]+'

    def list(self, request):
        likes = PlaceLike.objects.filter(user=request.user).order_by('-created_at', 'id')
        return Response(PlaceLikeSerializer(likes, many=True).data)

    def create(self, request):
        """Save a place. Saving the same place twice is rejected."""
        serializer = PlaceLikeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        place_id = serializer.validated_data['place_id']
        if PlaceLike.objects.filter(user=request.user, place_id=place_id).exists():
            raise Conflict('Place already liked')

        try:
            with transaction.atomic():
                like = serializer.save(user=request.user)
        except IntegrityError:
            raise Conflict('Place already liked')

        logger.info("User %s saved place %s", request.user.pk, place_id)
        return Response(PlaceLikeSerializer(like).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, place_id=None):
        deleted, _ = PlaceLike.objects.filter(user=request.user, place_id=place_id).delete()
        if deleted:
            logger.info("User %s removed saved place %s", request.user.pk, place_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

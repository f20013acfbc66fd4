"""
API views for trips app endpoints.
"""
import logging

from django.db import transaction
from django.db.models import Count
from django.shortcuts import get_object_or_404
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response

from .models import Trip, TripPlace
from .serializers import (
    TripSerializer,
    TripSummarySerializer,
    TripPlaceSerializer,
    TripReorderSerializer,
)

logger = logging.getLogger(__name__)


class TripViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Trip CRUD operations and trip places.

    Trips are private to their owner; public trips can also be browsed
    and opened through a shared link.
    """
    serializer_class = TripSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9]+'

    def get_queryset(self):
        """The owner's trips for listing, any trip for detail lookups"""
        queryset = Trip.objects.select_related('owner').prefetch_related('places')
        if self.action == 'list':
            return queryset.filter(owner=self.request.user).order_by('-created_at', 'id')
        return queryset

    def get_permissions(self):
        """
        Allow anyone to browse public and shared trips.
        Require authentication for everything else.
        """
        if self.action in ('public', 'shared'):
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_object(self):
        """Only the owner may open or change a trip"""
        trip = super().get_object()
        if trip.owner_id != self.request.user.pk:
            logger.warning("User %s denied access to trip %s", self.request.user.pk, trip.pk)
            raise PermissionDenied("You can only access your own trips")
        return trip

    def perform_create(self, serializer):
        """Automatically set the owner to the current user"""
        trip = serializer.save(owner=self.request.user)
        logger.info("User %s created trip %s", self.request.user.pk, trip.pk)

    def update(self, request, *args, **kwargs):
        # fields left out of the body keep their values
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        logger.info("User %s deleted trip %s", self.request.user.pk, instance.pk)
        instance.delete()

    @action(detail=False, methods=['get'])
    def public(self, request):
        """
        Get all public trips with their owner and place count.
        """
        trips = (
            Trip.objects.filter(is_public=True)
            .select_related('owner')
            .annotate(places_total=Count('places'))
            .order_by('-created_at', 'id')
        )
        return Response(TripSummarySerializer(trips, many=True).data)

    def shared(self, request, pk=None):
        """
        Open a trip by link. Private and unknown trips look the same.
        """
        trip = get_object_or_404(
            Trip.objects.select_related('owner').prefetch_related('places'),
            pk=pk,
            is_public=True,
        )
        return Response(TripSerializer(trip).data)

    @action(detail=True, methods=['get', 'post'])
    def places(self, request, pk=None):
        """
        List the places of a trip or add one.
        A place without an explicit order goes to the end.
        """
        trip = self.get_object()

        if request.method == 'GET':
            return Response(TripPlaceSerializer(trip.places.all(), many=True).data)

        serializer = TripPlaceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.validated_data.get('order')
        if order is None:
            order = trip.next_order()
        place = serializer.save(trip=trip, order=order)
        return Response(TripPlaceSerializer(place).data, status=status.HTTP_201_CREATED)

    def remove_place(self, request, pk=None, place_pk=None):
        trip = self.get_object()
        place = get_object_or_404(TripPlace, pk=place_pk, trip=trip)
        place.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def reorder(self, request, pk=None):
        """
        Reorder the places of a trip.

        Request body:
        {
            "order": [
                {"id": 12, "order": 0},
                {"id": 9, "order": 1},
                ...
            ]
        }

        Returns the places in their new order.
        """
        trip = self.get_object()
        serializer = TripReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entries = serializer.validated_data['order']

        places = {place.id: place for place in trip.places.all()}
        unknown = [entry['id'] for entry in entries if entry['id'] not in places]
        if unknown:
            raise ValidationError({'order': [f"Places not in this trip: {unknown}"]})

        with transaction.atomic():
            for entry in entries:
                place = places[entry['id']]
                place.order = entry['order']
                place.save(update_fields=['order'])

        return Response(TripPlaceSerializer(TripPlace.objects.filter(trip=trip), many=True).data)

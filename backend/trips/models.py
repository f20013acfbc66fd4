from django.db import models
from django.db.models import F, Max
from django.conf import settings


class Trip(models.Model):
    """
    A planned trip. Places to visit are kept in TripPlace, ordered by the
    owner.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='trips',
        help_text="Reference to the owner of the trip"
    )

    name = models.CharField(
        max_length=255,
        help_text="User defined name for the trip"
    )
    description = models.TextField(blank=True, default="")

    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    is_public = models.BooleanField(
        default=False,
        help_text="Public trips appear on profiles and can be shared by link"
    )

    # Destination
    location_name = models.CharField(max_length=255, blank=True, default="")
    location_lat = models.FloatField(null=True, blank=True)
    location_lng = models.FloatField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', 'id']
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='trip_owner_created_idx'),
            models.Index(fields=['is_public'], name='trip_public_idx'),
        ]

    def __str__(self):
        return self.name

    def next_order(self) -> int:
        """Position after the last ordered place."""
        last = self.places.aggregate(last=Max('order'))['last']
        return 0 if last is None else last + 1


class TripPlace(models.Model):
    """
    A place on a trip, with the owner's notes and planned visit date.
    """

    trip = models.ForeignKey(
        Trip,
        on_delete=models.CASCADE,
        related_name='places',
        help_text="Reference to the parent trip"
    )
    place_id = models.CharField(max_length=255, help_text="External place identifier")
    place_name = models.CharField(max_length=255)
    place_address = models.CharField(max_length=512, blank=True, default="")

    notes = models.TextField(blank=True, default="", max_length=1000)
    visit_date = models.DateField(null=True, blank=True)
    order = models.IntegerField(
        null=True,
        blank=True,
        help_text="Position in the trip (0, 1, 2...)"
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = [F('order').asc(nulls_last=True), 'id']
        indexes = [
            models.Index(fields=['trip', 'order'], name='trip_place_order_idx'),
        ]

    def __str__(self):
        return f"{self.trip.name} - {self.place_name}"

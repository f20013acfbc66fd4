from django.conf import settings
from django.db import models


class PlaceLike(models.Model):
    """
    A place saved by a user. Places live in the external maps provider,
    so only the identifiers and display fields needed by the client are kept.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='place_likes',
    )
    place_id = models.CharField(max_length=255, help_text="External place identifier")
    place_name = models.CharField(max_length=255)
    place_address = models.CharField(max_length=512, blank=True, default='')
    place_type = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Provider category, e.g. restaurant or museum",
    )
    rating = models.FloatField(null=True, blank=True)
    price_level = models.PositiveSmallIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'locations_place_like'
        unique_together = ('user', 'place_id')
        ordering = ['-created_at', 'id']
        indexes = [
            models.Index(fields=['place_type'], name='place_like_type_idx'),
        ]

    def __str__(self):
        return f"{self.user} saved {self.place_name}"

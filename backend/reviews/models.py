from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Review(models.Model):
    """
    A user's rating of an external place. Only rating and comment change
    after creation.
    """

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews',
    )
    place_id = models.CharField(max_length=255, help_text="External place identifier")
    place_name = models.CharField(max_length=255, blank=True, default='')
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True, default='')
    is_public = models.BooleanField(default=True)
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviews',
        help_text="Also visible to the members of this group",
    )
    location = models.JSONField(
        null=True,
        blank=True,
        help_text="{lat, lng, formatted_address[, city][, country]}",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reviews_review'
        ordering = ['-created_at', 'id']
        indexes = [
            models.Index(fields=['place_id'], name='review_place_idx'),
            models.Index(fields=['-created_at'], name='review_created_idx'),
        ]

    def __str__(self):
        return f"{self.author} on {self.place_name or self.place_id}: {self.rating}"


class ReviewLike(models.Model):
    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name='likes')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='review_likes',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'reviews_review_like'
        unique_together = ('review', 'user')

    def __str__(self):
        return f"{self.user} likes review {self.review_id}"

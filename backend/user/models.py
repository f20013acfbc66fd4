import uuid

from django.db import models, transaction, IntegrityError
from django.conf import settings


class UserProfile(models.Model):

    class Role(models.TextChoices):
        CASUAL = "casual", "Casual"
        ADMIN = "admin", "Admin"
        BUSINESS = "business", "Business"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile"
    )
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    display_name = models.CharField(max_length=150, blank=True, default="")
    avatar_url = models.URLField(max_length=500, blank=True, null=True)
    bio = models.TextField(max_length=500, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CASUAL)

    business_name = models.CharField(max_length=255, blank=True, default="")
    business_address = models.CharField(max_length=512, blank=True, default="")
    business_description = models.TextField(blank=True, default="")

    # free-form client settings, e.g. {"preferredPriceLevel": 2}
    preferences = models.JSONField(default=dict, blank=True)

    following = models.ManyToManyField(
        'self',
        through='FollowRelation',
        through_fields=('follower', 'following'),
        symmetrical=False,
        related_name='followers'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.user.username

    @property
    def username(self):
        return self.user.username

    def follow(self, target_profile: "UserProfile") -> bool:
        """Returns False when the relation already existed."""
        if self == target_profile:
            return False
        try:
            with transaction.atomic():
                _, created = FollowRelation.objects.get_or_create(follower=self, following=target_profile)
        except IntegrityError:
            # lost a race with an identical request
            return False
        return created

    def unfollow(self, target_profile: "UserProfile") -> bool:
        deleted, _ = FollowRelation.objects.filter(follower=self, following=target_profile).delete()
        return deleted > 0

    def is_following(self, target_profile) -> bool:
        return FollowRelation.objects.filter(follower=self, following=target_profile).exists()

    def followers_count(self) -> int:
        return FollowRelation.objects.filter(following=self).count()

    def following_count(self) -> int:
        return FollowRelation.objects.filter(follower=self).count()


class FollowRelation(models.Model):
    follower = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="following_relation")
    following = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="follower_relation")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('follower', 'following')

    def __str__(self):
        return f"{self.follower} -> {self.following}"

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import UserProfile

User = get_user_model()

# Names taken by literal routes in user/urls.py
RESERVED_USERNAMES = {"register", "login", "logout", "me", "search"}


class UserProfileSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    email = serializers.CharField(source="user.email", read_only=True)
    displayName = serializers.CharField(source="display_name", max_length=150, required=False, allow_blank=True)
    avatarUrl = serializers.URLField(source="avatar_url", max_length=500, required=False, allow_blank=True, allow_null=True)
    businessName = serializers.CharField(source="business_name", max_length=255, required=False, allow_blank=True)
    businessAddress = serializers.CharField(source="business_address", max_length=512, required=False, allow_blank=True)
    businessDescription = serializers.CharField(source="business_description", required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            "id",
            "userId",
            "username",
            "email",
            "displayName",
            "bio",
            "location",
            "avatarUrl",
            "role",
            "businessName",
            "businessAddress",
            "businessDescription",
            "preferences",
            "createdAt",
        ]
        read_only_fields = ["id", "role"]

    def validate_preferences(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Preferences must be an object.")
        return value


class PublicProfileSerializer(serializers.ModelSerializer):
    """Profile as seen by other users; counts come from queryset annotations."""
    userId = serializers.IntegerField(source="user_id", read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    displayName = serializers.CharField(source="display_name", read_only=True)
    avatarUrl = serializers.CharField(source="avatar_url", read_only=True)
    businessName = serializers.CharField(source="business_name", read_only=True)
    followersCount = serializers.IntegerField(source="followers_total", read_only=True)
    followingCount = serializers.IntegerField(source="following_total", read_only=True)
    isFollowing = serializers.BooleanField(source="is_followed", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            "id",
            "userId",
            "username",
            "displayName",
            "bio",
            "location",
            "avatarUrl",
            "role",
            "businessName",
            "followersCount",
            "followingCount",
            "isFollowing",
            "createdAt",
        ]


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact entry for search results and follower lists."""
    username = serializers.CharField(source="user.username", read_only=True)
    displayName = serializers.CharField(source="display_name", read_only=True)
    avatarUrl = serializers.CharField(source="avatar_url", read_only=True)

    class Meta:
        model = UserProfile
        fields = ["id", "username", "displayName", "avatarUrl", "bio", "role"]


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=6, max_length=128)
    email = serializers.EmailField(required=False, allow_blank=True)
    displayName = serializers.CharField(max_length=150, required=False, allow_blank=True)
    role = serializers.ChoiceField(
        choices=[UserProfile.Role.CASUAL, UserProfile.Role.BUSINESS],
        default=UserProfile.Role.CASUAL,
    )

    def validate_username(self, value):
        if value.lower() in RESERVED_USERNAMES:
            raise serializers.ValidationError("This username is reserved")
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username already exists")
        return value

    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data["username"],
            password=validated_data["password"],
            email=validated_data.get("email", ""),
        )
        profile = user.profile
        profile.role = validated_data["role"]
        profile.display_name = validated_data.get("displayName", "")
        profile.save(update_fields=["role", "display_name", "updated_at"])
        return user


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


"""
DRF Serializers for reviews and the feed entries built from them.
"""
from rest_framework import serializers

from locations.serializers import LocationField
from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    """
    Feed entry. Expects a review produced by FeedService, which carries
    ``likes_count``, ``is_liked`` and ``distance``.
    """
    userId = serializers.IntegerField(source='author_id', read_only=True)
    username = serializers.CharField(source='author.username', read_only=True)
    placeId = serializers.CharField(source='place_id', read_only=True)
    placeName = serializers.CharField(source='place_name', read_only=True)
    isPublic = serializers.BooleanField(source='is_public', read_only=True)
    groupId = serializers.IntegerField(source='group_id', read_only=True)
    groupName = serializers.SerializerMethodField()
    likes = serializers.SerializerMethodField()
    isLiked = serializers.SerializerMethodField()
    distance = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'userId',
            'username',
            'placeId',
            'placeName',
            'rating',
            'comment',
            'isPublic',
            'groupId',
            'groupName',
            'location',
            'likes',
            'isLiked',
            'distance',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = ['id', 'rating', 'comment', 'location']

    def get_groupName(self, obj):
        return obj.group.name if obj.group_id else None

    def get_likes(self, obj):
        return getattr(obj, 'likes_count', 0)

    def get_isLiked(self, obj):
        return bool(getattr(obj, 'is_liked', False))

    def get_distance(self, obj):
        return getattr(obj, 'distance', None)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # unknown distance is left out, 0.0 is a real value
        if data.get('distance') is None:
            data.pop('distance', None)
        return data


class ReviewCreateSerializer(serializers.Serializer):
    placeId = serializers.CharField(source='place_id', max_length=255)
    placeName = serializers.CharField(source='place_name', max_length=255, required=False, allow_blank=True, default='')
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default='')
    isPublic = serializers.BooleanField(source='is_public', required=False, default=True)
    location = LocationField(required=False, allow_null=True, default=None)
    groupId = serializers.IntegerField(source='group_id', required=False, allow_null=True, default=None)


class ReviewUpdateSerializer(serializers.Serializer):
    """Only rating and comment can change after creation."""
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(required=False, allow_blank=True)

    def update(self, instance, validated_data):
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save(update_fields=[*validated_data.keys(), 'updated_at'])
        return instance

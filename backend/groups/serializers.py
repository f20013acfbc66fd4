"""
DRF Serializers for groups, memberships and group chat.
"""
from rest_framework import serializers

from .models import Group, GroupMembership, GroupMessage


class GroupSerializer(serializers.ModelSerializer):
    """
    Group as listed to a viewer. The membership fields come from
    GroupService.annotated_groups.
    """
    avatarUrl = serializers.URLField(source='avatar_url', max_length=500, required=False, allow_blank=True)
    createdBy = serializers.IntegerField(source='created_by_id', read_only=True)
    creatorUsername = serializers.SerializerMethodField()
    memberCount = serializers.SerializerMethodField()
    isJoined = serializers.SerializerMethodField()
    userRole = serializers.SerializerMethodField()
    isAdmin = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'avatarUrl',
            'createdBy',
            'creatorUsername',
            'memberCount',
            'isJoined',
            'userRole',
            'isAdmin',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = ['id']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Group name is required.")
        return value.strip()

    def get_creatorUsername(self, obj):
        return obj.created_by.username if obj.created_by_id else None

    def get_memberCount(self, obj):
        return getattr(obj, 'member_count', 0)

    def get_isJoined(self, obj):
        return bool(getattr(obj, 'is_joined', False))

    def get_userRole(self, obj):
        return getattr(obj, 'user_role', None)

    def get_isAdmin(self, obj):
        return getattr(obj, 'user_role', None) == GroupMembership.Role.ADMIN


class GroupMemberSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    displayName = serializers.CharField(source='user.profile.display_name', read_only=True)
    avatarUrl = serializers.CharField(source='user.profile.avatar_url', read_only=True)
    joinedAt = serializers.DateTimeField(source='joined_at', read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['userId', 'username', 'displayName', 'avatarUrl', 'role', 'joinedAt']


class GroupMessageSerializer(serializers.ModelSerializer):
    groupId = serializers.IntegerField(source='group_id', read_only=True)
    userId = serializers.IntegerField(source='author_id', read_only=True)
    username = serializers.CharField(source='author.username', read_only=True)
    avatarUrl = serializers.CharField(source='author.profile.avatar_url', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = GroupMessage
        fields = ['id', 'groupId', 'userId', 'username', 'avatarUrl', 'content', 'createdAt']
        read_only_fields = ['id']

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Message content is required.")
        return value

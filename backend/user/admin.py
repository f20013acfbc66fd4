from django.contrib import admin
from .models import UserProfile, FollowRelation


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'display_name', 'role', 'created_at']
    list_filter = ['role']
    search_fields = ['user__username', 'display_name', 'business_name']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(FollowRelation)
class FollowRelationAdmin(admin.ModelAdmin):
    list_display = ['follower', 'following', 'created_at']
    search_fields = ['follower__user__username', 'following__user__username']

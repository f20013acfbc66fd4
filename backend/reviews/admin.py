from django.contrib import admin
from .models import Review, ReviewLike


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['place_name', 'author', 'rating', 'is_public', 'group', 'created_at']
    list_filter = ['rating', 'is_public', 'created_at']
    search_fields = ['place_name', 'place_id', 'comment', 'author__username']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(ReviewLike)
class ReviewLikeAdmin(admin.ModelAdmin):
    list_display = ['review', 'user', 'created_at']
    search_fields = ['user__username']

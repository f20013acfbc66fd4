from django.contrib import admin
from .models import PlaceLike


@admin.register(PlaceLike)
class PlaceLikeAdmin(admin.ModelAdmin):
    list_display = ['place_name', 'place_type', 'user', 'rating', 'price_level', 'created_at']
    list_filter = ['place_type', 'price_level', 'created_at']
    search_fields = ['place_name', 'place_id', 'place_address', 'user__username']
    readonly_fields = ['created_at']

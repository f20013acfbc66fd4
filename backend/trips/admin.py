from django.contrib import admin
from .models import Trip, TripPlace


class TripPlaceInline(admin.TabularInline):
    model = TripPlace
    extra = 0
    readonly_fields = ['created_at']


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    """
    Admin interface for Trip model.
    """
    list_display = ['name', 'owner', 'is_public', 'start_date', 'end_date', 'created_at']
    list_filter = ['is_public', 'created_at', 'start_date']
    search_fields = ['name', 'location_name', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'created_at'
    inlines = [TripPlaceInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('owner', 'name', 'description', 'is_public')
        }),
        ('Trip Details', {
            'fields': ('start_date', 'end_date')
        }),
        ('Destination', {
            'fields': ('location_name', 'location_lat', 'location_lng')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )

    def get_queryset(self, request):
        """Optimize queryset with select_related"""
        queryset = super().get_queryset(request)
        return queryset.select_related('owner')

"""
DRF Serializers for saved places and review locations.
"""
from rest_framework import serializers

from .models import PlaceLike
from .services import GeoService


class PlaceLikeSerializer(serializers.ModelSerializer):
    """Saved place in the client's camelCase shape"""

    userId = serializers.IntegerField(source='user_id', read_only=True)
    placeId = serializers.CharField(source='place_id', max_length=255)
    placeName = serializers.CharField(source='place_name', max_length=255)
    placeAddress = serializers.CharField(
        source='place_address', max_length=512, required=False, allow_blank=True, allow_null=True
    )
    placeType = serializers.CharField(
        source='place_type', max_length=100, required=False, allow_blank=True, allow_null=True
    )
    rating = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=5)
    priceLevel = serializers.IntegerField(
        source='price_level', required=False, allow_null=True, min_value=0, max_value=4
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = PlaceLike
        fields = [
            'id',
            'userId',
            'placeId',
            'placeName',
            'placeAddress',
            'placeType',
            'rating',
            'priceLevel',
            'createdAt',
        ]

    def validate(self, attrs):
        # nullable on the wire, blank in the table
        for key in ('place_address', 'place_type'):
            if attrs.get(key) is None:
                attrs[key] = ''
        return attrs


class LocationField(serializers.Field):
    """
    Review location. Accepts the flat or the nested client form and
    stores ``{lat, lng, formatted_address[, city][, country]}``.
    """

    default_error_messages = {
        'invalid': 'Location must contain valid lat and lng coordinates.',
    }

    def to_internal_value(self, data):
        location = GeoService.normalize_location(data)
        if location is None:
            self.fail('invalid')
        return location

    def to_representation(self, value):
        return value

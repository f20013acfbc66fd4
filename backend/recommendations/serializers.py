"""
DRF Serializers for recommendation results.
"""
from rest_framework import serializers


class ScoredPlaceSerializer(serializers.Serializer):
    """Serializer for a ScoredPlace DTO"""
    placeId = serializers.CharField(source='place_id')
    placeName = serializers.CharField(source='place_name')
    placeAddress = serializers.CharField(source='place_address')
    placeType = serializers.CharField(source='place_type')
    rating = serializers.FloatField(allow_null=True)
    priceLevel = serializers.IntegerField(source='price_level', allow_null=True)
    score = serializers.FloatField()
    reason = serializers.CharField()

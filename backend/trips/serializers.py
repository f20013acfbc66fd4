"""
DRF Serializers for Trip and TripPlace models.
"""
from rest_framework import serializers
from .models import Trip, TripPlace


class TripPlaceSerializer(serializers.ModelSerializer):
    """Serializer for TripPlace model"""
    tripId = serializers.IntegerField(source='trip_id', read_only=True)
    placeId = serializers.CharField(source='place_id', max_length=255)
    placeName = serializers.CharField(source='place_name', max_length=255)
    placeAddress = serializers.CharField(source='place_address', max_length=512, required=False, allow_blank=True)
    visitDate = serializers.DateField(source='visit_date', required=False, allow_null=True)
    order = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = TripPlace
        fields = [
            'id',
            'tripId',
            'placeId',
            'placeName',
            'placeAddress',
            'notes',
            'visitDate',
            'order',
            'createdAt',
        ]
        read_only_fields = ['id']


class TripSerializer(serializers.ModelSerializer):
    """Serializer for Trip model"""
    places = TripPlaceSerializer(many=True, read_only=True)
    userId = serializers.IntegerField(source='owner_id', read_only=True)
    username = serializers.CharField(source='owner.username', read_only=True)
    startDate = serializers.DateField(source='start_date', required=False, allow_null=True)
    endDate = serializers.DateField(source='end_date', required=False, allow_null=True)
    isPublic = serializers.BooleanField(source='is_public', required=False)
    locationName = serializers.CharField(source='location_name', max_length=255, required=False, allow_blank=True)
    locationLat = serializers.FloatField(source='location_lat', required=False, allow_null=True, min_value=-90, max_value=90)
    locationLng = serializers.FloatField(source='location_lng', required=False, allow_null=True, min_value=-180, max_value=180)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Trip
        fields = [
            'id',
            'userId',
            'username',
            'name',
            'description',
            'startDate',
            'endDate',
            'isPublic',
            'locationName',
            'locationLat',
            'locationLng',
            'places',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = ['id']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': ["End date cannot be before start date."]})
        return attrs


class TripSummarySerializer(serializers.ModelSerializer):
    """Lightweight serializer for public listings"""
    userId = serializers.IntegerField(source='owner_id', read_only=True)
    username = serializers.CharField(source='owner.username', read_only=True)
    startDate = serializers.DateField(source='start_date', read_only=True)
    endDate = serializers.DateField(source='end_date', read_only=True)
    isPublic = serializers.BooleanField(source='is_public', read_only=True)
    locationName = serializers.CharField(source='location_name', read_only=True)
    placesCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Trip
        fields = [
            'id',
            'userId',
            'username',
            'name',
            'description',
            'startDate',
            'endDate',
            'isPublic',
            'locationName',
            'placesCount',
            'createdAt',
        ]

    def get_placesCount(self, obj):
        """Get count of places, annotated by the listing query when available"""
        total = getattr(obj, 'places_total', None)
        return total if total is not None else obj.places.count()


class PlaceOrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order = serializers.IntegerField(min_value=0)


class TripReorderSerializer(serializers.Serializer):
    """Serializer for reordering the places of a trip"""
    order = PlaceOrderSerializer(many=True, allow_empty=False)

    def validate_order(self, value):
        ids = [entry['id'] for entry in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Each place may appear only once.")
        return value

"""
URL routing for trips app.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import TripViewSet

router = DefaultRouter()
router.register(r'', TripViewSet, basename='trip')

app_name = 'trips'

urlpatterns = [
    # Explicit paths for link sharing and removing a single place
    path('shared/<int:pk>/', TripViewSet.as_view({'get': 'shared'}), name='trip-shared'),
    path(
        '<int:pk>/places/<int:place_pk>/',
        TripViewSet.as_view({'delete': 'remove_place'}),
        name='trip-place-detail'
    ),
    path('', include(router.urls)),
]

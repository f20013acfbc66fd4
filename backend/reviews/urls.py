"""
URL routing for reviews app.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ReviewViewSet

router = DefaultRouter()
router.register(r'', ReviewViewSet, basename='review')

app_name = 'reviews'

urlpatterns = [
    path(
        'place/<str:place_id>/',
        ReviewViewSet.as_view({'get': 'place'}),
        name='review-place'
    ),
    path('', include(router.urls)),
]

"""
URL routing for locations app.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PlaceLikeViewSet

router = DefaultRouter()
router.register(r'likes', PlaceLikeViewSet, basename='place-like')

app_name = 'locations'

urlpatterns = [
    path('', include(router.urls)),
]

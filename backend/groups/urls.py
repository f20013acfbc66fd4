"""
URL routing for groups app.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import GroupViewSet

router = DefaultRouter()
router.register(r'', GroupViewSet, basename='group')

app_name = 'groups'

urlpatterns = [
    path('', include(router.urls)),
]

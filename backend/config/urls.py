from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/users/', include('user.urls')),
    path('api/locations/', include('locations.urls')),
    path('api/reviews/', include('reviews.urls')),
    path('api/groups/', include('groups.urls')),
    path('api/trips/', include('trips.urls')),
    path('api/recommendations/', include('recommendations.urls')),
]

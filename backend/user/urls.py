from django.urls import path
from .views import (
    RegisterView, LoginView, LogoutView, MeView, ExportView, SearchView,
    ProfileView, PublicProfileView, StatsView, FollowersView, FollowingView,
    UserTripsView, UserReviewsView, FollowView, UnfollowView,
)

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
    path("me/export/", ExportView.as_view(), name="me-export"),
    path("search/", SearchView.as_view(), name="user-search"),
    path("<uuid:id>/follow/", FollowView.as_view(), name="follow"),
    path("<uuid:id>/unfollow/", UnfollowView.as_view(), name="unfollow"),
    path("<str:username>/", ProfileView.as_view(), name="profile"),
    path("<str:username>/public/", PublicProfileView.as_view(), name="public-profile"),
    path("<str:username>/stats/", StatsView.as_view(), name="user-stats"),
    path("<str:username>/followers/", FollowersView.as_view(), name="user-followers"),
    path("<str:username>/following/", FollowingView.as_view(), name="user-following"),
    path("<str:username>/trips/", UserTripsView.as_view(), name="user-trips"),
    path("<str:username>/reviews/", UserReviewsView.as_view(), name="user-reviews"),
]

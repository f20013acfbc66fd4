import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.db import IntegrityError, transaction
from django.db.models import Count, Exists, OuterRef, Q, Value, BooleanField
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from config.exceptions import Conflict
from locations.models import PlaceLike
from locations.serializers import PlaceLikeSerializer
from reviews.serializers import ReviewSerializer
from reviews.services import FeedService
from trips.models import Trip
from trips.serializers import TripSerializer, TripSummarySerializer
from .models import UserProfile, FollowRelation
from .serializers import (
    LoginSerializer, PublicProfileSerializer, RegisterSerializer,
    UserProfileSerializer, UserSummarySerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

SEARCH_LIMIT = 10


def profiles_with_counts(viewer):
    """Profiles annotated with follower/following totals and the viewer's follow flag."""
    queryset = UserProfile.objects.select_related("user").annotate(
        followers_total=Count("follower_relation", distinct=True),
        following_total=Count("following_relation", distinct=True),
    )
    if viewer is not None and viewer.is_authenticated:
        queryset = queryset.annotate(
            is_followed=Exists(
                FollowRelation.objects.filter(follower__user=viewer, following=OuterRef("pk"))
            )
        )
    else:
        queryset = queryset.annotate(is_followed=Value(False, output_field=BooleanField()))
    return queryset


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            with transaction.atomic():
                user = serializer.save()
        except IntegrityError:
            raise ValidationError({"username": ["Username already exists"]})

        login(request, user)
        logger.info("Registered user %s", user.pk)
        return Response(UserProfileSerializer(user.profile).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request,
            username=serializer.validated_data["username"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            logger.warning("Failed login for %s", serializer.validated_data["username"])
            raise AuthenticationFailed("Invalid credentials")

        login(request, user)
        return Response(UserProfileSerializer(user.profile).data)


class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        logout(request)
        return Response({"success": True, "message": "Logged out"}, status=status.HTTP_200_OK)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile = request.user.profile
        serializer = UserProfileSerializer(profile)
        return Response(serializer.data)

    def patch(self, request):
        profile = request.user.profile
        serializer = UserProfileSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def delete(self, request):
        """Delete the account with everything it owns and end the session."""
        user = request.user
        user_id = user.pk
        with transaction.atomic():
            logout(request)
            user.delete()
        logger.info("Deleted account %s", user_id)
        return Response({"success": True, "message": "Account deleted"}, status=status.HTTP_200_OK)


class ExportView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        profile = user.profile
        feed = FeedService(viewer=user)

        following = UserProfile.objects.filter(follower_relation__follower=profile).select_related("user")
        followers = UserProfile.objects.filter(following_relation__following=profile).select_related("user")
        trips = Trip.objects.filter(owner=user).prefetch_related("places").order_by("-created_at", "id")

        data = {
            "exportedAt": timezone.now().isoformat(),
            "profile": UserProfileSerializer(profile).data,
            "reviews": ReviewSerializer(feed.authored_by(user, include_private=True), many=True).data,
            "savedPlaces": PlaceLikeSerializer(
                PlaceLike.objects.filter(user=user).order_by("-created_at", "id"), many=True
            ).data,
            "trips": TripSerializer(trips, many=True).data,
            "following": UserSummarySerializer(following, many=True).data,
            "followers": UserSummarySerializer(followers, many=True).data,
        }
        response = Response(data)
        response["Content-Disposition"] = f'attachment; filename="voxa-export-{user.username}.json"'
        return response


class SearchView(APIView):

    def get(self, request):
        query = (request.query_params.get("query") or "").strip()
        if not query:
            return Response([])

        profiles = (
            UserProfile.objects.select_related("user")
            .filter(Q(user__username__icontains=query) | Q(display_name__icontains=query))
            .order_by("user__username")[:SEARCH_LIMIT]
        )
        return Response(UserSummarySerializer(profiles, many=True).data)


class ProfileView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, username):
        profile = get_object_or_404(profiles_with_counts(request.user), user__username=username)
        return Response(PublicProfileSerializer(profile).data)


class PublicProfileView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, username):
        profile = get_object_or_404(profiles_with_counts(request.user), user__username=username)
        data = PublicProfileSerializer(profile).data
        data["tripsCount"] = Trip.objects.filter(owner=profile.user, is_public=True).count()
        data["reviewsCount"] = profile.user.reviews.filter(is_public=True).count()
        return Response(data)


class StatsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, username):
        profile = get_object_or_404(UserProfile, user__username=username)
        return Response({
            "followersCount": profile.followers_count(),
            "followingCount": profile.following_count(),
        })


class FollowersView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, username):
        profile = get_object_or_404(UserProfile, user__username=username)
        followers = (
            UserProfile.objects.select_related("user")
            .filter(following_relation__following=profile)
            .order_by("-following_relation__created_at")
        )
        return Response(UserSummarySerializer(followers, many=True).data)


class FollowingView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, username):
        profile = get_object_or_404(UserProfile, user__username=username)
        following = (
            UserProfile.objects.select_related("user")
            .filter(follower_relation__follower=profile)
            .order_by("-follower_relation__created_at")
        )
        return Response(UserSummarySerializer(following, many=True).data)


class UserTripsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, username):
        owner = get_object_or_404(User, username=username)
        trips = (
            Trip.objects.filter(owner=owner, is_public=True)
            .select_related("owner")
            .annotate(places_total=Count("places"))
            .order_by("-created_at", "id")
        )
        return Response(TripSummarySerializer(trips, many=True).data)


class UserReviewsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, username):
        author = get_object_or_404(User, username=username)
        feed = FeedService.for_request(request)
        reviews = feed.authored_by(author, include_private=request.user == author)
        reviews = feed.enrich(feed.paginate(reviews, request.query_params))
        return Response(ReviewSerializer(reviews, many=True).data)


class FollowView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        follower = request.user.profile
        followed_profile = get_object_or_404(UserProfile, id=id)

        if follower == followed_profile:
            raise ValidationError("Cannot follow yourself")

        if not follower.follow(followed_profile):
            raise Conflict("Already following this user")

        logger.info("Profile %s followed %s", follower.id, followed_profile.id)
        return Response(
            {"success": True, "message": "Successfully followed"},
            status=status.HTTP_200_OK
        )


class UnfollowView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        follower = request.user.profile
        followed = get_object_or_404(UserProfile, id=id)

        if follower == followed:
            raise ValidationError("Cannot unfollow yourself")

        if follower.unfollow(followed):
            logger.info("Profile %s unfollowed %s", follower.id, followed.id)
        return Response(
            {"success": True, "message": "Successfully unfollowed"},
            status=status.HTTP_200_OK
        )

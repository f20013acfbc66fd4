"""
API views for recommendations app endpoints.
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .scoring_service import ScoringService
from .serializers import ScoredPlaceSerializer


class RecommendationView(APIView):
    """
    Place suggestions for the current user, best first.
    Computed on every request, nothing is stored.
    """
    permission_classes = [IsAuthenticated]
    service = ScoringService()

    def get(self, request):
        places = self.service.generate_recommendations(request.user)
        return Response(ScoredPlaceSerializer(places, many=True).data)

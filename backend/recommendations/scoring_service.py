"""
ScoringService: ranks places saved by other users for the current user.
"""
import logging
from collections import Counter
from typing import Dict, List, Optional

from django.db.models import F

from locations.models import PlaceLike
from recommendations.dtos import ScoredPlace

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Algorithm Service: content based scoring over saved places.

    Score = weight(type) * WEIGHT_INTEREST + rating * WEIGHT_RATING
            (+ PRICE_MATCH_BONUS when the price level is the preferred one)
    """

    WEIGHT_INTEREST = 2
    WEIGHT_RATING = 10
    PRICE_MATCH_BONUS = 20

    TOP_TYPES = 3
    PER_TYPE = 5
    MAX_RESULTS = 10

    def generate_recommendations(self, user) -> List[ScoredPlace]:
        """
        Orchestrator method that generates top-k recommendations for a user.

        Steps:
        1. Weight place types by how often the user saved them
        2. Collect candidates of the top types saved by other users
        3. Score, deduplicate by place id and keep the best
        """
        weights = self.preference_weights(user)
        if not weights:
            return []

        preferred_price = self._preferred_price_level(user)
        saved_ids = set(PlaceLike.objects.filter(user=user).values_list('place_id', flat=True))

        best: Dict[str, ScoredPlace] = {}
        top_types = sorted(weights.items(), key=lambda item: (-item[1], item[0]))[:self.TOP_TYPES]
        for place_type, _ in top_types:
            for like in self._candidates(user, place_type, saved_ids):
                scored = ScoredPlace(
                    place_id=like.place_id,
                    place_name=like.place_name,
                    place_type=place_type,
                    place_address=like.place_address,
                    rating=like.rating,
                    price_level=like.price_level,
                    score=self.compute_score(weights[place_type], like.rating, like.price_level, preferred_price),
                    reason=self.reason_for(place_type),
                )
                current = best.get(scored.place_id)
                if current is None or scored.score > current.score:
                    best[scored.place_id] = scored

        ranked = sorted(best.values(), key=lambda place: (-place.score, place.place_id))
        return ranked[:self.MAX_RESULTS]

    def preference_weights(self, user) -> Counter:
        """Number of saved places per place type."""
        types = PlaceLike.objects.filter(user=user).exclude(place_type='').values_list('place_type', flat=True)
        return Counter(types)

    def compute_score(self, weight: int, rating: Optional[float], price_level: Optional[int],
                      preferred_price: Optional[int]) -> float:
        score = weight * self.WEIGHT_INTEREST + (rating or 0) * self.WEIGHT_RATING
        if preferred_price is not None and price_level == preferred_price:
            score += self.PRICE_MATCH_BONUS
        return score

    @staticmethod
    def reason_for(place_type: str) -> str:
        return f"Based on your interest in {place_type.replace('_', ' ').lower()} places"

    def _candidates(self, user, place_type: str, saved_ids) -> List[PlaceLike]:
        """Up to PER_TYPE distinct places of a type, best rated first."""
        rows = (
            PlaceLike.objects.filter(place_type=place_type)
            .exclude(user=user)
            .exclude(place_id__in=saved_ids)
            .order_by(F('rating').desc(nulls_last=True), '-created_at', 'id')
        )
        picked = {}
        for like in rows.iterator():
            if like.place_id not in picked:
                picked[like.place_id] = like
                if len(picked) == self.PER_TYPE:
                    break
        return list(picked.values())

    @staticmethod
    def _preferred_price_level(user) -> Optional[int]:
        preferences = getattr(getattr(user, 'profile', None), 'preferences', None) or {}
        value = preferences.get('preferredPriceLevel')
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.debug("Ignoring preferredPriceLevel %r for user %s", value, user.pk)
            return None

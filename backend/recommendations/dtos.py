"""
Data Transfer Objects (DTOs) for results in the recommendation system.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ScoredPlace:
    """
    Place with its computed recommendation score.
    Returned by ScoringService.generate_recommendations().
    """
    place_id: str
    place_name: str
    place_type: str
    score: float
    reason: str
    place_address: str = ""
    rating: Optional[float] = None
    price_level: Optional[int] = None

"""
Domain services for the locations app: great-circle distances and the
validation of the location values attached to reviews.
"""
import math
import logging
from numbers import Real
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371

Coordinates = Tuple[float, float]


def _as_coordinate(value) -> Optional[float]:
    """Coerce a number or numeric string to a finite float, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class GeoService:
    """
    Stateless geo helpers. Nothing here raises on bad input: an unusable
    coordinate simply means "no distance".
    """

    @staticmethod
    def haversine_km(lat1, lon1, lat2, lon2) -> Optional[float]:
        """
        Great-circle distance between two points in kilometers.

        Args:
            lat1, lon1: First point in decimal degrees
            lat2, lon2: Second point in decimal degrees

        Returns:
            Distance rounded to one decimal, or None when any input is
            missing, non-numeric or not finite
        """
        for value in (lat1, lon1, lat2, lon2):
            if value is None or isinstance(value, bool) or not isinstance(value, Real):
                return None
            if not math.isfinite(value):
                return None

        phi1 = math.radians(lat1)
        phi2 = math.radians(lat2)
        dphi = math.radians(lat2 - lat1)
        dlambda = math.radians(lon2 - lon1)

        a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
        # rounding can push a just past 1 near the antipode
        a = min(1.0, max(0.0, a))
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return round(EARTH_RADIUS_KM * c, 1)

    @staticmethod
    def is_location_valid(lat: float, lon: float) -> bool:
        """
        Validates if the coordinates fall within supported bounds.
        """
        return -90 <= lat <= 90 and -180 <= lon <= 180

    @staticmethod
    def normalize_location(raw) -> Optional[Dict]:
        """
        Turn a client supplied location into the stored shape.

        Accepts ``{lat, lng, formatted_address}`` or the nested form
        ``{coordinates: {lat, lng}, formatted_address, city, country}``.

        Returns:
            ``{lat, lng, formatted_address[, city][, country]}`` or None
            when the value cannot be used
        """
        if not isinstance(raw, dict):
            return None

        source = raw.get('coordinates') if isinstance(raw.get('coordinates'), dict) else raw
        lat = _as_coordinate(source.get('lat'))
        lng = _as_coordinate(source.get('lng'))
        if lat is None or lng is None or not GeoService.is_location_valid(lat, lng):
            return None

        location = {
            'lat': lat,
            'lng': lng,
            'formatted_address': str(raw.get('formatted_address') or ''),
        }
        for key in ('city', 'country'):
            if raw.get(key):
                location[key] = str(raw[key])
        return location

    @staticmethod
    def parse_origin(query_params) -> Optional[Coordinates]:
        """
        Read the viewer position from ``userLat`` / ``userLng``.

        An absent or unparsable pair yields None and the feed is served
        without distances.
        """
        lat = _as_coordinate(query_params.get('userLat'))
        lng = _as_coordinate(query_params.get('userLng'))
        if lat is None or lng is None:
            return None
        if not GeoService.is_location_valid(lat, lng):
            logger.debug("Ignoring out of range origin %s,%s", lat, lng)
            return None
        return lat, lng

    @staticmethod
    def distance_to(origin: Optional[Coordinates], location: Optional[Dict]) -> Optional[float]:
        """Kilometers from the viewer to a stored location, None when unknown."""
        if origin is None or not isinstance(location, dict):
            return None
        lat = _as_coordinate(location.get('lat'))
        lng = _as_coordinate(location.get('lng'))
        if lat is None or lng is None:
            return None
        return GeoService.haversine_km(origin[0], origin[1], lat, lng)

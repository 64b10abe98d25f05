import logging
from typing import Dict, List, Optional, Sequence

from supabase import Client

from app.utils.formatting import format_initiative
from app.utils.geo import InvalidLocation, bbox_around, filter_by_distance

logger = logging.getLogger(__name__)

IN_BOUNDS_RPC = "get_initiatives_in_bounds"


def fetch_in_bounds(
    supabase: Client,
    bounds: Sequence[float],
    types: Optional[List[str]] = None,
    verified_only: bool = False,
    limit: int = 50000,
) -> List[Dict]:
    west, south, east, north = bounds

    rows = supabase.rpc(IN_BOUNDS_RPC, {
        "p_west": west,
        "p_south": south,
        "p_east": east,
        "p_north": north,
        "p_types": types or None,
        "p_verified_only": verified_only,
        "p_limit": limit,
    }).execute().data or []

    initiatives = []
    for row in rows:
        try:
            initiatives.append(format_initiative(row))
        except InvalidLocation:
            logger.warning(f"Skipping initiative {row.get('id')}: unreadable location")

    return initiatives


def find_nearby(
    supabase: Client,
    longitude: float,
    latitude: float,
    radius_km: float,
    types: Optional[List[str]] = None,
    verified_only: bool = False,
) -> List[Dict]:
    """Initiatives within ``radius_km`` of a point, nearest first, with ``distance_km``."""
    candidates = fetch_in_bounds(
        supabase,
        bbox_around(longitude, latitude, radius_km),
        types=types,
        verified_only=verified_only,
    )
    return filter_by_distance(candidates, (longitude, latitude), radius_km)

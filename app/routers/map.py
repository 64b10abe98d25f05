from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from app.core.cache import cache
from app.core.database import get_supabase
from app.models.initiative_types import InitiativeType
from app.services.initiatives import fetch_in_bounds, find_nearby
from app.utils.formatting import format_distance
from app.utils.geo import fetch_limit_for_zoom, group_by_type, parse_bbox, stratified_sample
from app.utils.validators import ValidationError, clean_coordinates

router = APIRouter(prefix="/map", tags=["map"])


@router.get("/initiatives")
def get_initiatives_in_viewport(
    bbox: str,
    types: Optional[List[InitiativeType]] = Query(None),
    verified_only: bool = False,
    zoom: float = 5.5,
    limit: Optional[int] = Query(None, ge=1),
    seed: Optional[int] = None,
    supabase: Client = Depends(get_supabase),
):
    try:
        bounds = parse_bbox(bbox)
    except ValueError:
        raise HTTPException(400, "Invalid bbox")

    type_values = [t.value for t in types] if types else None
    fetch_limit = fetch_limit_for_zoom(zoom)

    # ~10 m grid so tiny pans hit the cache
    key = (
        tuple(round(v, 4) for v in bounds),
        tuple(type_values or ()),
        verified_only,
        fetch_limit,
    )

    initiatives = cache.get_or_set(
        "/map/initiatives",
        key,
        lambda: fetch_in_bounds(
            supabase,
            bounds,
            types=type_values,
            verified_only=verified_only,
            limit=fetch_limit,
        ),
    )

    sampled = limit is not None and len(initiatives) > limit
    if sampled:
        initiatives = stratified_sample(initiatives, limit, seed=seed)

    by_type = {t: len(items) for t, items in group_by_type(initiatives).items()}

    return {
        "initiatives": initiatives,
        "count": len(initiatives),
        "sampled": sampled,
        "by_type": by_type,
        "bounds": {
            "west": bounds[0],
            "south": bounds[1],
            "east": bounds[2],
            "north": bounds[3],
        },
    }


@router.get("/nearby")
def get_nearby_initiatives(
    lat: float,
    lng: float,
    radius_km: float = Query(5, gt=0, le=100),
    types: Optional[List[InitiativeType]] = Query(None),
    verified_only: bool = False,
    supabase: Client = Depends(get_supabase),
):
    try:
        lat, lng = clean_coordinates(lat, lng)
    except ValidationError as e:
        raise HTTPException(400, str(e))

    initiatives = find_nearby(
        supabase,
        lng,
        lat,
        radius_km,
        types=[t.value for t in types] if types else None,
        verified_only=verified_only,
    )

    for initiative in initiatives:
        initiative["distance_label"] = format_distance(initiative["distance_km"])

    return {
        "center": {"lat": lat, "lng": lng},
        "radius_km": radius_km,
        "count": len(initiatives),
        "initiatives": initiatives,
    }

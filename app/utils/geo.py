import math
import random
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from shapely import wkb, wkt
from shapely.geometry import box

EARTH_RADIUS_KM = 6371
KM_PER_DEGREE = 111.32

# metropolitan France + Corsica: west, south, east, north
FRANCE_BOUNDS = (-5.5, 41.0, 10.0, 51.5)

WORLD = box(-180, -90, 180, 90)


class InvalidLocation(ValueError):
    pass


# --------------------------------------------------
# PostGIS encoding
# --------------------------------------------------

def to_wkt(longitude: float, latitude: float) -> str:
    return f"POINT({longitude} {latitude})"


def parse_location(value: str) -> Tuple[float, float]:
    """
    Decode a PostGIS point into (lng, lat).

    Accepts WKT (``POINT(lng lat)``, what the RPCs return as ``location_text``)
    and EWKB hex (what a plain ``select`` on a geography column returns).
    """
    if not value:
        raise InvalidLocation("Initiative missing location data")

    try:
        if value.lstrip().upper().startswith("POINT"):
            geom = wkt.loads(value)
        else:
            geom = wkb.loads(value, hex=True)
    except Exception as e:
        raise InvalidLocation(f"Invalid location format: {value}") from e

    if geom.geom_type != "Point":
        raise InvalidLocation(f"Expected a point, got {geom.geom_type}")

    return geom.x, geom.y


def to_geojson(longitude: float, latitude: float) -> Dict:
    return {"type": "Point", "coordinates": [longitude, latitude]}


# --------------------------------------------------
# Distances
# --------------------------------------------------

def haversine_km(point1: Sequence[float], point2: Sequence[float]) -> float:
    """Great-circle distance in km between two (lng, lat) points, rounded to 0.1."""
    lon1, lat1 = point1
    lon2, lat2 = point2

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(EARTH_RADIUS_KM * c, 1)


def filter_by_distance(
    initiatives: List[Dict],
    center: Sequence[float],
    max_distance_km: float,
) -> List[Dict]:
    result = []
    for initiative in initiatives:
        distance = haversine_km(center, initiative["location"]["coordinates"])
        if distance <= max_distance_km:
            result.append({**initiative, "distance_km": distance})

    return sorted(result, key=lambda i: i["distance_km"])


def group_by_type(initiatives: List[Dict]) -> Dict[str, List[Dict]]:
    groups: Dict[str, List[Dict]] = defaultdict(list)
    for initiative in initiatives:
        groups[initiative["type"]].append(initiative)
    return dict(groups)


# --------------------------------------------------
# Viewport
# --------------------------------------------------

def parse_bbox(bbox: str) -> Tuple[float, float, float, float]:
    """``west,south,east,north`` -> tuple, validated against WGS84."""
    try:
        west, south, east, north = (float(v) for v in bbox.split(","))
    except ValueError:
        raise ValueError("Invalid bbox")

    if any(math.isnan(v) for v in (west, south, east, north)):
        raise ValueError("Invalid bbox")

    if west >= east or south >= north:
        raise ValueError("Invalid bbox")

    if not WORLD.covers(box(west, south, east, north)):
        raise ValueError("Invalid bbox")

    return west, south, east, north


def fetch_limit_for_zoom(zoom: float) -> int:
    # heatmap / clustering / individual markers
    if zoom < 9:
        return 50000
    if zoom < 14:
        return 30000
    return 10000


def bbox_around(longitude: float, latitude: float, radius_km: float) -> Tuple[float, float, float, float]:
    """Envelope enclosing the circle of `radius_km` around a point, clamped to WGS84."""
    d_lat = radius_km / KM_PER_DEGREE
    d_lng = radius_km / (KM_PER_DEGREE * max(math.cos(math.radians(latitude)), 0.01))

    return (
        max(longitude - d_lng, -180.0),
        max(latitude - d_lat, -90.0),
        min(longitude + d_lng, 180.0),
        min(latitude + d_lat, 90.0),
    )


def stratified_sample(
    rows: List[Dict],
    limit: int,
    key: str = "type",
    seed: Optional[int] = None,
) -> List[Dict]:
    """
    Randomly keep ``limit`` rows while preserving the share of each ``key`` value.

    Quotas use largest-remainder rounding; every stratum keeps at least one row
    when ``limit`` is at least the number of strata.
    """
    if limit <= 0:
        return []
    if len(rows) <= limit:
        return list(rows)

    rng = random.Random(seed)

    strata: Dict[str, List[Dict]] = defaultdict(list)
    for row in rows:
        strata[row.get(key)].append(row)

    total = len(rows)
    quotas = {k: limit * len(v) / total for k, v in strata.items()}
    alloc = {k: int(q) for k, q in quotas.items()}

    if limit >= len(strata):
        for k in alloc:
            if alloc[k] == 0:
                alloc[k] = 1

    remaining = limit - sum(alloc.values())
    by_remainder = sorted(quotas, key=lambda k: quotas[k] - int(quotas[k]), reverse=True)
    for k in by_remainder:
        if remaining <= 0:
            break
        if alloc[k] == int(quotas[k]) and alloc[k] < len(strata[k]):
            alloc[k] += 1
            remaining -= 1

    # the minimum-one bump can overshoot on tiny limits
    while sum(alloc.values()) > limit:
        biggest = max(alloc, key=alloc.get)
        alloc[biggest] -= 1

    sample = []
    for k, members in strata.items():
        sample.extend(rng.sample(members, min(alloc[k], len(members))))

    rng.shuffle(sample)
    return sample

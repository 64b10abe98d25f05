"""
Import of initiatives from OpenStreetMap through the Overpass API.

Imported rows go through the ``insert_initiative`` stored procedure, which
converts the WKT location to geography. They have no owner and start
unverified.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

import requests
from requests.adapters import HTTPAdapter
from slugify import slugify
from supabase import Client
from urllib3.util.retry import Retry

from app.core.config import settings
from app.models.initiative import SOCIAL_FIELDS
from app.models.initiative_types import InitiativeType
from app.services.initiatives import find_nearby
from app.utils.geo import FRANCE_BOUNDS, to_wkt

logger = logging.getLogger(__name__)

DUPLICATE_RADIUS_KM = 0.05
SAME_NAME_RADIUS_KM = 0.5

# Overpass wants south,west,north,east
FRANCE_BBOX = "{1},{0},{3},{2}".format(*FRANCE_BOUNDS)

OSM_TAG_MAPPING: Dict[str, Dict] = {
    "second_hand": {
        "type": InitiativeType.RESSOURCERIE,
        "query": 'node["shop"="second_hand"]',
    },
    "recycling": {
        "type": InitiativeType.POINT_DE_COLLECTE,
        "query": 'node["amenity"="recycling"]',
    },
    "organic_shop": {
        "type": InitiativeType.AMAP,
        "query": 'node["shop"="organic"]',
    },
    "social_facility": {
        "type": InitiativeType.AUTRE,
        "query": 'node["amenity"="social_facility"]',
    },
    "repair_cafe": {
        "type": InitiativeType.REPAIR_CAFE,
        "query": 'node["amenity"="community_centre"]["community_centre:for"~"repair"]',
    },
}

session = requests.Session()
session.mount(
    "https://",
    HTTPAdapter(
        max_retries=Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
        )
    )
)


@dataclass
class ImportReport:
    tag: str
    found: int = 0
    named: int = 0
    duplicates: int = 0
    inserted: int = 0
    errors: int = 0
    ids: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return {
            "tag": self.tag,
            "found": self.found,
            "named": self.named,
            "duplicates": self.duplicates,
            "inserted": self.inserted,
            "errors": self.errors,
        }


# ==================================================
# OSM -> INITIATIVE
# ==================================================

def build_overpass_query(query: str, bbox: str = FRANCE_BBOX) -> str:
    return f"""
    [out:json][timeout:60];
    (
      {query}({bbox});
    );
    out body;
    """


def build_address(tags: Optional[Dict]) -> Optional[str]:
    if not tags:
        return None

    parts = [
        tags.get(k)
        for k in ("addr:housenumber", "addr:street", "addr:postcode", "addr:city")
        if tags.get(k)
    ]
    return " ".join(parts) if parts else None


def osm_node_to_initiative(node: Dict, initiative_type: InitiativeType) -> Dict:
    tags = node.get("tags") or {}

    return {
        "name": tags.get("name") or f"{initiative_type.value} #{node['id']}",
        "type": initiative_type.value,
        "description": tags.get("description"),
        "address": build_address(tags),
        "location": to_wkt(node["lon"], node["lat"]),
        "lng": node["lon"],
        "lat": node["lat"],
        "verified": False,
        "website": tags.get("website") or tags.get("contact:website"),
        "phone": tags.get("phone") or tags.get("contact:phone"),
        "email": tags.get("email") or tags.get("contact:email"),
        "opening_hours": {"raw": tags["opening_hours"]} if tags.get("opening_hours") else None,
        **{f: tags.get(f"contact:{f}") or tags.get(f) for f in SOCIAL_FIELDS},
    }


# ==================================================
# FETCH / INSERT
# ==================================================

def fetch_from_overpass(query: str) -> List[Dict]:
    logger.info(f"[OSM] Querying Overpass: {query}")

    r = session.post(
        settings.OVERPASS_URL,
        data={"data": build_overpass_query(query)},
        timeout=90,
    )
    r.raise_for_status()

    return [el for el in r.json().get("elements", []) if el.get("type") == "node"]


def is_duplicate(supabase: Client, initiative: Dict) -> bool:
    """Anything within 50 m, or the same name within 500 m (coarse geocoding)."""
    wanted = slugify(initiative["name"])

    for existing in find_nearby(supabase, initiative["lng"], initiative["lat"], SAME_NAME_RADIUS_KM):
        if existing["distance_km"] <= DUPLICATE_RADIUS_KM:
            return True
        if slugify(existing["name"]) == wanted:
            return True

    return False


def insert_initiative(supabase: Client, initiative: Dict) -> Optional[str]:
    return supabase.rpc("insert_initiative", {
        "p_name": initiative["name"],
        "p_type": initiative["type"],
        "p_location_text": initiative["location"],
        "p_description": initiative["description"],
        "p_address": initiative["address"],
        "p_verified": initiative["verified"],
        "p_website": initiative["website"],
        "p_phone": initiative["phone"],
        "p_email": initiative["email"],
        "p_opening_hours": initiative["opening_hours"],
        **{f"p_{f}": initiative[f] for f in SOCIAL_FIELDS},
    }).execute().data


# ==================================================
# IMPORT
# ==================================================

def import_from_osm(supabase: Client, tag: str, skip_duplicates: bool = False) -> ImportReport:
    mapping = OSM_TAG_MAPPING.get(tag)
    if not mapping:
        raise ValueError(
            f"Unknown tag key: {tag}. Available: {', '.join(OSM_TAG_MAPPING)}"
        )

    report = ImportReport(tag=tag)
    initiative_type = mapping["type"]

    logger.info(f"[OSM] Importing {initiative_type.value} (bbox {FRANCE_BBOX})")

    nodes = fetch_from_overpass(mapping["query"])
    report.found = len(nodes)

    # unnamed nodes are usually low quality
    named = [n for n in nodes if (n.get("tags") or {}).get("name")]
    report.named = len(named)

    for node in named:
        initiative = osm_node_to_initiative(node, initiative_type)

        try:
            if skip_duplicates and is_duplicate(supabase, initiative):
                report.duplicates += 1
                continue

            new_id = insert_initiative(supabase, initiative)
        except Exception:
            logger.exception(f"[OSM] Failed inserting {initiative['name']}")
            report.errors += 1
            continue

        report.inserted += 1
        if new_id:
            report.ids.append(new_id)

    logger.info(
        f"[OSM] Done tag={tag} found={report.found} named={report.named} "
        f"duplicates={report.duplicates} inserted={report.inserted} errors={report.errors}"
    )
    return report

import re
from datetime import datetime
from typing import Dict, Optional, Union

import pytz
from dateutil.parser import isoparse

from app.models.initiative import SOCIAL_FIELDS
from app.utils.geo import parse_location, to_geojson

PARIS = pytz.timezone("Europe/Paris")

MONTHS_FR = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]


# --------------------------------------------------
# Initiatives
# --------------------------------------------------

def format_initiative(row: Dict) -> Dict:
    """Database row (table select or RPC) -> API initiative."""
    location = row.get("location_text") or row.get("location")
    lng, lat = parse_location(location)

    social = {f: row[f] for f in SOCIAL_FIELDS if row.get(f)}

    item = {
        "id": row["id"],
        "name": row["name"],
        "type": row["type"],
        "description": row.get("description"),
        "address": row.get("address"),
        "location": to_geojson(lng, lat),
        "verified": bool(row.get("verified")),
        "image_url": row.get("image_url"),
        "website": row.get("website"),
        "phone": row.get("phone"),
        "email": row.get("email"),
        "social_media": social or None,
        "opening_hours": row.get("opening_hours"),
        "user_id": row.get("user_id"),
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    }

    if row.get("distance_meters") is not None:
        item["distance_km"] = round(row["distance_meters"] / 1000, 1)

    return item


def seo_description(initiative: Dict) -> str:
    text = f"{initiative['name']} - {initiative['type']}"

    if initiative.get("address"):
        text += f" situé à {initiative['address']}"

    if initiative.get("description"):
        text += f". {truncate(initiative['description'], 100)}"

    return text


def share_url(base_url: str, initiative_id: str) -> str:
    return f"{base_url.rstrip('/')}/initiatives/{initiative_id}"


# --------------------------------------------------
# Text
# --------------------------------------------------

def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def format_phone(phone: str) -> str:
    digits = re.sub(r"\D", "", phone)

    if digits.startswith("0033"):
        digits = digits[2:]

    if digits.startswith("33") and len(digits) == 11:
        rest = digits[3:]
        pairs = " ".join(rest[i:i + 2] for i in range(0, 8, 2))
        return f"+33 {digits[2]} {pairs}"

    if len(digits) == 10:
        return " ".join(digits[i:i + 2] for i in range(0, 10, 2))

    return phone


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        return f"{round(distance_km * 1000)} m"

    # French grouping: 1 234,5 km
    text = f"{distance_km:,.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return text.replace(",", " ").replace(".", ",") + " km"


# --------------------------------------------------
# Dates (Europe/Paris)
# --------------------------------------------------

def _to_paris(value: Union[str, datetime]) -> datetime:
    dt = isoparse(value) if isinstance(value, str) else value
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(PARIS)


def format_date(
    value: Union[str, datetime],
    style: str = "long",
    now: Optional[datetime] = None,
) -> str:
    dt = _to_paris(value)

    if style == "short":
        return dt.strftime("%d/%m/%Y")

    if style == "relative":
        now = _to_paris(now or datetime.now(pytz.utc))
        days = (now - dt).days

        if days <= 0:
            return "Aujourd'hui"
        if days == 1:
            return "Hier"
        if days < 7:
            return f"Il y a {days} jours"
        if days < 30:
            return f"Il y a {days // 7} semaines"
        if days < 365:
            return f"Il y a {days // 30} mois"
        return f"Il y a {days // 365} ans"

    return f"{dt.day} {MONTHS_FR[dt.month - 1]} {dt.year}"

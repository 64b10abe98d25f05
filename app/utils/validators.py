"""
Input validation for initiative payloads.

Every check raises ``ValidationError`` with the message shown to the user;
routers turn it into a 400.
"""

import math
import re
from typing import Any, Dict, Iterable, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
FRENCH_PHONE_RE = re.compile(r"^(?:(?:\+|00)33|0)\s*[1-9](?:[\s.-]*\d{2}){4}$")
INTERNATIONAL_PHONE_RE = re.compile(r"^\+[1-9](?:[\s.-]*\d){7,14}$")

NAME_MIN_LENGTH = 3

MSG_NAME_TOO_SHORT = "Le nom doit contenir au moins 3 caractères"
MSG_TYPE_REQUIRED = "Le type est obligatoire"
MSG_COORDS_INVALID = "Les coordonnées GPS sont invalides"
MSG_COORDS_OUT_OF_RANGE = "Les coordonnées GPS sont hors limites"
MSG_EMAIL_INVALID = "L'adresse email est invalide"
MSG_PHONE_INVALID = "Le numéro de téléphone est invalide"


class ValidationError(ValueError):
    pass


def validate_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return bool(EMAIL_RE.match(email))


def validate_phone(phone: Optional[str]) -> bool:
    """French phone numbers: 0X XX XX XX XX, +33 / 0033 prefixes, any separators."""
    if not phone:
        return False
    return bool(FRENCH_PHONE_RE.match(phone))


def validate_international_phone(phone: Optional[str]) -> bool:
    """E.164-style numbers: + then 8 to 15 digits, any separators."""
    if not phone:
        return False
    return bool(INTERNATIONAL_PHONE_RE.match(phone))


def clean_name(name: Optional[str]) -> str:
    if not name or len(name.strip()) < NAME_MIN_LENGTH:
        raise ValidationError(MSG_NAME_TOO_SHORT)
    return name.strip()


def clean_coordinates(latitude: Any, longitude: Any) -> tuple:
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError(MSG_COORDS_INVALID)

    if math.isnan(lat) or math.isnan(lng):
        raise ValidationError(MSG_COORDS_INVALID)

    if not (-90 <= lat <= 90) or not (-180 <= lng <= 180):
        raise ValidationError(MSG_COORDS_OUT_OF_RANGE)

    return lat, lng


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def clean_text_fields(data: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Optional[str]]:
    """Trim the given fields present in ``data``; empty strings become None."""
    cleaned = {}
    for field in fields:
        if field in data:
            cleaned[field] = clean_text(data[field])

    if cleaned.get("email") and not validate_email(cleaned["email"]):
        raise ValidationError(MSG_EMAIL_INVALID)

    phone = cleaned.get("phone")
    if phone and not (validate_phone(phone) or validate_international_phone(phone)):
        raise ValidationError(MSG_PHONE_INVALID)

    return cleaned

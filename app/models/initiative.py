from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.initiative_types import InitiativeType

SOCIAL_FIELDS = ["facebook", "instagram", "twitter", "linkedin", "youtube", "tiktok"]

TEXT_FIELDS = ["description", "address", "website", "phone", "email", "image_url"] + SOCIAL_FIELDS


# --------------------------------------------------
# Opening hours
# --------------------------------------------------

HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"


class TimeBreak(BaseModel):
    start: str = Field(pattern=HHMM)
    end: str = Field(pattern=HHMM)


class TimeSlot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    open: str = Field(pattern=HHMM)
    close: str = Field(pattern=HHMM)
    break_: Optional[TimeBreak] = Field(default=None, alias="break")


class OpeningHours(BaseModel):
    monday: Optional[TimeSlot] = None
    tuesday: Optional[TimeSlot] = None
    wednesday: Optional[TimeSlot] = None
    thursday: Optional[TimeSlot] = None
    friday: Optional[TimeSlot] = None
    saturday: Optional[TimeSlot] = None
    sunday: Optional[TimeSlot] = None
    # raw OSM "opening_hours" tag, set by imports
    raw: Optional[str] = None


# --------------------------------------------------
# Payloads
# --------------------------------------------------

class InitiativeCreate(BaseModel):
    name: Optional[str] = None
    type: Optional[InitiativeType] = None
    # any JSON value; clean_coordinates does the parsing
    latitude: Optional[Any] = None
    longitude: Optional[Any] = None
    description: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    youtube: Optional[str] = None
    tiktok: Optional[str] = None
    opening_hours: Optional[OpeningHours] = None


class InitiativeUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[InitiativeType] = None
    latitude: Optional[Any] = None
    longitude: Optional[Any] = None
    description: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    youtube: Optional[str] = None
    tiktok: Optional[str] = None
    opening_hours: Optional[OpeningHours] = None


class VerifyPayload(BaseModel):
    verified: bool


from datetime import datetime, timezone
from typing import List, Literal, Optional
import logging
import math

from dateutil.parser import isoparse
from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from app.core.cache import cache, revalidate_path
from app.core.config import settings
from app.core.database import get_supabase
from app.core.security import get_current_user, require_verifier
from app.models.initiative import (
    TEXT_FIELDS,
    InitiativeCreate,
    InitiativeUpdate,
    VerifyPayload,
)
from app.models.initiative_types import InitiativeType
from app.utils.formatting import (
    format_date,
    format_initiative,
    format_phone,
    seo_description,
    share_url,
)
from app.utils.geo import to_wkt
from app.utils.validators import (
    MSG_TYPE_REQUIRED,
    ValidationError,
    clean_coordinates,
    clean_name,
    clean_text_fields,
)

router = APIRouter(prefix="/initiatives", tags=["initiatives"])
logger = logging.getLogger(__name__)

NOT_FOUND = "Initiative non trouvée"


# --------------------------------------------------
# Utils
# --------------------------------------------------

def db_error_message(e: Exception) -> str:
    return getattr(e, "message", None) or str(e)


def dump_opening_hours(opening_hours) -> Optional[dict]:
    if opening_hours is None:
        return None
    return opening_hours.model_dump(by_alias=True, exclude_none=True) or None


def get_owned_initiative(supabase: Client, initiative_id: str, user_id: str, action: str) -> dict:
    rows = (
        supabase.table("initiatives")
        .select("id, user_id")
        .eq("id", initiative_id)
        .limit(1)
        .execute()
        .data
    )

    if not rows:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    if rows[0].get("user_id") != user_id:
        logger.info(f"User {user_id} refused to {action} initiative {initiative_id}")
        raise HTTPException(
            status_code=403,
            detail=f"Vous n'êtes pas autorisé à {action} cette initiative",
        )

    return rows[0]


# --------------------------------------------------
# GET /initiatives
# --------------------------------------------------

@router.get("")
def list_initiatives(
    types: Optional[List[InitiativeType]] = Query(None),
    verified_only: bool = False,
    search_query: Optional[str] = None,
    created_after: Optional[str] = None,
    created_before: Optional[str] = None,
    sort: Literal["created_at", "updated_at", "name"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    supabase: Client = Depends(get_supabase),
):
    try:
        after = isoparse(created_after).isoformat() if created_after else None
        before = isoparse(created_before).isoformat() if created_before else None
    except ValueError:
        raise HTTPException(status_code=400, detail="Date invalide")

    type_values = tuple(t.value for t in types) if types else None

    key = (type_values, verified_only, search_query, after, before, sort, order, page, per_page)

    def load():
        q = supabase.table("initiatives").select("*", count="exact")

        if type_values:
            q = q.in_("type", list(type_values))
        if verified_only:
            q = q.eq("verified", True)
        if search_query:
            q = q.ilike("name", f"%{search_query.strip()}%")
        if after:
            q = q.gte("created_at", after)
        if before:
            q = q.lte("created_at", before)

        start = (page - 1) * per_page
        res = q.order(sort, desc=(order == "desc")).range(start, start + per_page - 1).execute()

        total = res.count or 0
        total_pages = math.ceil(total / per_page) if total else 0

        pagination = {
            "current_page": page,
            "per_page": per_page,
            "total_count": total,
            "total_pages": total_pages,
        }
        if page < total_pages:
            pagination["next_page"] = page + 1
        if page > 1:
            pagination["prev_page"] = page - 1

        return {
            "data": [format_initiative(r) for r in res.data or []],
            "pagination": pagination,
        }

    return cache.get_or_set("/initiatives", key, load)


# --------------------------------------------------
# GET /initiatives/{id}
# --------------------------------------------------

@router.get("/{initiative_id}")
def get_initiative(initiative_id: str, supabase: Client = Depends(get_supabase)):
    rows = (
        supabase.table("initiatives")
        .select("*")
        .eq("id", initiative_id)
        .limit(1)
        .execute()
        .data
    )

    if not rows:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    initiative = format_initiative(rows[0])

    return {
        **initiative,
        "phone_display": format_phone(initiative["phone"]) if initiative["phone"] else None,
        "created_label": format_date(initiative["created_at"]) if initiative["created_at"] else None,
        "seo_description": seo_description(initiative),
        "share_url": share_url(settings.PUBLIC_BASE_URL, initiative["id"]),
    }


# --------------------------------------------------
# POST /initiatives
# --------------------------------------------------

@router.post("", status_code=201)
def create_initiative(
    payload: InitiativeCreate,
    user_id: str = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    try:
        name = clean_name(payload.name)
        if payload.type is None:
            raise ValidationError(MSG_TYPE_REQUIRED)
        lat, lng = clean_coordinates(payload.latitude, payload.longitude)
        fields = clean_text_fields(payload.model_dump(), TEXT_FIELDS)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    row = {
        "name": name,
        "type": payload.type.value,
        **fields,
        "location": to_wkt(lng, lat),
        "opening_hours": dump_opening_hours(payload.opening_hours),
        "user_id": user_id,
        "verified": False,
    }

    try:
        res = supabase.table("initiatives").insert(row).execute()
    except Exception as e:
        logger.exception("Supabase insert error")
        raise HTTPException(status_code=500, detail=f"Erreur lors de l'ajout: {db_error_message(e)}")

    if not res.data:
        raise HTTPException(status_code=500, detail="Erreur lors de l'ajout: aucune ligne créée")

    initiative_id = res.data[0]["id"]
    logger.info(f"Initiative {initiative_id} created by {user_id}")

    revalidate_path("/")

    return {"success": True, "data": {"id": initiative_id}}


# --------------------------------------------------
# PUT /initiatives/{id}
# --------------------------------------------------

@router.put("/{initiative_id}")
def update_initiative(
    initiative_id: str,
    payload: InitiativeUpdate,
    user_id: str = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    get_owned_initiative(supabase, initiative_id, user_id, "modifier")

    data = payload.model_dump(exclude_unset=True)
    updates = {}

    try:
        if "name" in data:
            updates["name"] = clean_name(data["name"])

        if data.get("type") is not None:
            updates["type"] = payload.type.value

        updates.update(clean_text_fields(data, TEXT_FIELDS))

        # location only moves when both coordinates are sent
        if data.get("latitude") is not None and data.get("longitude") is not None:
            lat, lng = clean_coordinates(data["latitude"], data["longitude"])
            updates["location"] = to_wkt(lng, lat)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if "opening_hours" in data:
        updates["opening_hours"] = dump_opening_hours(payload.opening_hours)

    if not updates:
        return {"success": True}

    updates["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        supabase.table("initiatives") \
            .update(updates) \
            .eq("id", initiative_id) \
            .execute()
    except Exception as e:
        logger.exception("Supabase update error")
        raise HTTPException(
            status_code=500,
            detail=f"Erreur lors de la modification: {db_error_message(e)}",
        )

    revalidate_path("/")

    return {"success": True}


# --------------------------------------------------
# DELETE /initiatives/{id}
# --------------------------------------------------

@router.delete("/{initiative_id}")
def delete_initiative(
    initiative_id: str,
    user_id: str = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    get_owned_initiative(supabase, initiative_id, user_id, "supprimer")

    try:
        supabase.table("initiatives") \
            .delete() \
            .eq("id", initiative_id) \
            .execute()
    except Exception as e:
        logger.exception("Supabase delete error")
        raise HTTPException(
            status_code=500,
            detail=f"Erreur lors de la suppression: {db_error_message(e)}",
        )

    logger.info(f"Initiative {initiative_id} deleted by {user_id}")
    revalidate_path("/")

    return {"success": True}


# --------------------------------------------------
# PATCH /initiatives/{id}/verify
# --------------------------------------------------

@router.patch("/{initiative_id}/verify")
def verify_initiative(
    initiative_id: str,
    payload: VerifyPayload,
    user_id: str = Depends(require_verifier),
    supabase: Client = Depends(get_supabase),
):
    try:
        res = supabase.table("initiatives") \
            .update({
                "verified": payload.verified,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }) \
            .eq("id", initiative_id) \
            .execute()
    except Exception as e:
        logger.exception("Supabase verify error")
        raise HTTPException(
            status_code=500,
            detail=f"Erreur lors de la vérification: {db_error_message(e)}",
        )

    if not res.data:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    logger.info(f"Initiative {initiative_id} verified={payload.verified} by {user_id}")
    revalidate_path("/")

    return {"success": True}

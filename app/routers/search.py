from fastapi import APIRouter, Depends, Query
from typing import Optional
from supabase import Client

from app.core.database import get_supabase
from app.utils.formatting import format_initiative

router = APIRouter()


@router.get("/search")
def search(
    q: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=50),
    supabase: Client = Depends(get_supabase),
):
    q = (q or "").strip()
    if not q:
        return {"items": []}

    items = []
    seen = set()

    # ---------------- BY NAME ----------------
    by_name = supabase.table("initiatives") \
        .select("*") \
        .ilike("name", f"%{q}%") \
        .limit(limit) \
        .execute() \
        .data or []

    # ---------------- BY ADDRESS ----------------
    by_address = supabase.table("initiatives") \
        .select("*") \
        .ilike("address", f"%{q}%") \
        .limit(limit) \
        .execute() \
        .data or []

    for row in by_name + by_address:
        if row["id"] in seen:
            continue
        seen.add(row["id"])

        i = format_initiative(row)
        items.append({
            "id": i["id"],
            "name": i["name"],
            "type": i["type"],
            "address": i["address"],
            "verified": i["verified"],
            "location": i["location"],
        })

    return {
        "items": items[:limit]
    }

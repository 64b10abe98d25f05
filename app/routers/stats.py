from fastapi import APIRouter, Depends
from supabase import Client

from app.core.cache import cache
from app.core.database import get_supabase
from app.models.initiative_types import InitiativeType

router = APIRouter(tags=["stats"])


@router.get("/stats")
def get_stats(supabase: Client = Depends(get_supabase)):
    def count(**filters):
        q = supabase.table("initiatives").select("id", count="exact").limit(1)
        for column, value in filters.items():
            q = q.eq(column, value)
        return q.execute().count or 0

    def load():
        total = count()
        verified = count(verified=True)

        by_type = {t.value: count(type=t.value) for t in InitiativeType}

        return {
            "total": total,
            "verified": verified,
            "unverified": total - verified,
            "by_type": {k: v for k, v in by_type.items() if v},
        }

    return cache.get_or_set("/stats", None, load)

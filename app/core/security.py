import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from app.core.config import settings
from app.core.database import get_supabase

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

NOT_AUTHENTICATED = "Vous devez être connecté"


def get_current_user(
    token: HTTPAuthorizationCredentials | None = Depends(security),
    supabase: Client = Depends(get_supabase),
) -> str:
    if token is None:
        raise HTTPException(status_code=401, detail=NOT_AUTHENTICATED)

    try:
        res = supabase.auth.get_user(token.credentials)
    except Exception as e:
        logger.warning(f"Auth error: {e}")
        raise HTTPException(status_code=401, detail=NOT_AUTHENTICATED)

    if not res or not res.user:
        raise HTTPException(status_code=401, detail=NOT_AUTHENTICATED)

    return res.user.id


def require_verifier(
    user_id: str = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
) -> str:
    if not settings.VERIFY_REQUIRES_MODERATOR:
        return user_id

    profile = (
        supabase.table("users_profiles")
        .select("is_moderator")
        .eq("user_id", user_id)
        .limit(1)
        .execute()
        .data
    )

    if not profile or not profile[0].get("is_moderator"):
        raise HTTPException(
            status_code=403,
            detail="Seuls les modérateurs peuvent vérifier une initiative",
        )

    return user_id

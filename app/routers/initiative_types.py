from fastapi import APIRouter

from app.models.initiative_types import type_catalogue

router = APIRouter(tags=["initiative-types"])


@router.get("/initiative-types")
def list_initiative_types():
    return type_catalogue()

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel
from supabase import Client
import logging
import time

from app.core.cache import revalidate_path
from app.core.config import settings
from app.core.database import get_supabase
from app.core.security import get_current_user
from app.services.osm_import import OSM_TAG_MAPPING, import_from_osm

router = APIRouter(prefix="/ingestions", tags=["ingestions"])
logger = logging.getLogger(__name__)

SOURCE_NAME = "openstreetmap"


# ==================================================
# REQUEST MODEL
# ==================================================

class OSMIngestRequest(BaseModel):
    tag: str
    skip_duplicates: bool = False


# ==================================================
# BACKGROUND INGESTION
# ==================================================

def run_osm_ingestion(supabase: Client, tags: list, skip_duplicates: bool):
    for i, tag in enumerate(tags):
        if i:
            # be nice to Overpass between requests
            time.sleep(settings.OSM_IMPORT_PAUSE)

        try:
            import_from_osm(supabase, tag, skip_duplicates=skip_duplicates)
        except Exception:
            logger.exception(f"[OSM] Import failed for tag={tag}")

    revalidate_path("/")


# ==================================================
# API (NON BLOCKING)
# ==================================================

@router.get("/osm/tags")
def list_osm_tags():
    return [
        {"tag": tag, "type": mapping["type"].value}
        for tag, mapping in OSM_TAG_MAPPING.items()
    ]


@router.post("/osm", status_code=202)
def ingest_osm(
    payload: OSMIngestRequest,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    if payload.tag == "all":
        tags = list(OSM_TAG_MAPPING)
    elif payload.tag in OSM_TAG_MAPPING:
        tags = [payload.tag]
    else:
        raise HTTPException(400, f"Unknown tag: {payload.tag}")

    logger.info(f"[OSM] Ingestion {tags} requested by {user_id}")
    background_tasks.add_task(run_osm_ingestion, supabase, tags, payload.skip_duplicates)

    return {
        "status": "started",
        "source": SOURCE_NAME,
        "tags": tags,
        "skip_duplicates": payload.skip_duplicates,
        "message": "OSM ingestion running in background",
    }

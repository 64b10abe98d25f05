import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.routers import (
    health,
    initiatives,
    initiative_types,
    map,
    search,
    stats,
)
from app.routers.ingestions import osm as ingestions_osm

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="LaMap API",
    version="0.1.0",
)

# -----------------------
# CORS
# -----------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------
# Routers
# -----------------------

app.include_router(health.router)
app.include_router(initiatives.router)
app.include_router(initiative_types.router)
app.include_router(map.router)
app.include_router(search.router)
app.include_router(stats.router)
app.include_router(ingestions_osm.router)


@app.get("/")
def root():
    return {
        "name": "LaMap API",
        "version": "0.1.0",
        "status": "ok"
    }

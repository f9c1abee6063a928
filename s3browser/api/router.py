"""Root API router that aggregates all endpoint modules."""
from fastapi import APIRouter

from s3browser.api.routes import files, health, metrics, version

api_router = APIRouter(prefix="/api")
api_router.include_router(files.router, tags=["files"])
api_router.include_router(health.router, tags=["health"])
api_router.include_router(metrics.router, tags=["metrics"])
api_router.include_router(version.router, tags=["version"])

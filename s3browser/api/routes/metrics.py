"""Metrics endpoint for operational visibility."""
from fastapi import APIRouter, Depends

from s3browser.api.dependencies import get_service_registry
from s3browser.services.registry import ServiceRegistry

router = APIRouter()


@router.get("/metrics", summary="Return aggregated per-route request metrics")
async def read_metrics(registry: ServiceRegistry = Depends(get_service_registry)) -> dict:
    return {
        "metrics": registry.metrics.snapshot(),
    }

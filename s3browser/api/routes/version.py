"""Build version endpoint."""
from fastapi import APIRouter, Depends

from s3browser.api.dependencies import get_service_registry
from s3browser.schemas import VersionResponse
from s3browser.services.registry import ServiceRegistry

router = APIRouter()


@router.get("/version", response_model=VersionResponse, summary="Build and uptime information")
async def read_version(registry: ServiceRegistry = Depends(get_service_registry)) -> VersionResponse:
    return VersionResponse(**registry.server_info.as_dict())

"""FastAPI dependency providers."""
from fastapi import Depends, Request

from s3browser.core.exceptions import ServiceUnavailableError
from s3browser.services.access_service import AccessService
from s3browser.services.health_service import HealthService
from s3browser.services.listing_service import ListingService
from s3browser.services.registry import ServiceRegistry


def get_service_registry(request: Request) -> ServiceRegistry:
    """Return the service registry stored on the FastAPI application state."""

    registry = getattr(request.app.state, "services", None)
    if not isinstance(registry, ServiceRegistry):
        raise ServiceUnavailableError("Storage services not initialised")
    return registry


def get_listing_service(registry: ServiceRegistry = Depends(get_service_registry)) -> ListingService:
    return registry.listing_service


def get_access_service(registry: ServiceRegistry = Depends(get_service_registry)) -> AccessService:
    return registry.access_service


def get_health_service(registry: ServiceRegistry = Depends(get_service_registry)) -> HealthService:
    return registry.health_service

"""Storage-facing services of the bucket browser."""
from .registry import ServiceRegistry

__all__ = ["ServiceRegistry"]

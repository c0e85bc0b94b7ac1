"""FastAPI dependencies."""

from fastapi import Request

from uiregistry.services.registry_service import RegistryService


def get_registry_service(request: Request) -> RegistryService:
    """Return the service the application was created with."""
    return request.app.state.registry_service

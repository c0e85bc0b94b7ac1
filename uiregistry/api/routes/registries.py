"""API routes for UI component registries."""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger

from uiregistry.api.dependencies import get_registry_service
from uiregistry.models.schemas import Registry, RegistryCreate, RegistryUpdate
from uiregistry.services.registry_service import RegistryService

router = APIRouter(prefix="/api/registries", tags=["registries"])


@router.get("", response_model=List[Registry], response_model_exclude_none=True)
async def list_registries(service: RegistryService = Depends(get_registry_service)):
    """List every registry with its components."""
    try:
        return await service.list_registries()
    except Exception as e:
        logger.error(f"Error listing registries: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{registry_id}", response_model=Registry, response_model_exclude_none=True)
async def get_registry(
    registry_id: int, service: RegistryService = Depends(get_registry_service)
):
    """Get a specific registry by ID."""
    try:
        return await service.get_registry(registry_id)
    except HTTPException as e:
        # Re-raise HTTP exceptions
        raise e
    except Exception as e:
        logger.error(f"Error fetching registry {registry_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=Registry, status_code=status.HTTP_201_CREATED)
async def create_registry(
    registry: RegistryCreate, service: RegistryService = Depends(get_registry_service)
):
    """Create a registry. ``name``, ``slug`` and ``framework`` are required."""
    try:
        return await service.create_registry(registry)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error creating registry: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/{registry_id}", response_model=Registry, response_model_exclude_none=True)
async def update_registry(
    registry_id: int,
    registry_update: RegistryUpdate,
    service: RegistryService = Depends(get_registry_service),
):
    """Update only the supplied fields of a registry."""
    try:
        return await service.update_registry(registry_id, registry_update)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error updating registry {registry_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{registry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_registry(
    registry_id: int, service: RegistryService = Depends(get_registry_service)
):
    """Delete a registry with all of its components and examples."""
    try:
        await service.delete_registry(registry_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error deleting registry {registry_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

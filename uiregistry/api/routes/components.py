"""API routes for UI components and their examples."""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from loguru import logger

from uiregistry.api.dependencies import get_registry_service
from uiregistry.models.schemas import (
    Component,
    ComponentCreate,
    ComponentListResponse,
    ComponentStatus,
    ComponentType,
    ComponentUpdate,
    Example,
    ExampleCreate,
)
from uiregistry.services.pagination import pagination_metadata
from uiregistry.services.query import DEFAULT_LIST_LIMIT
from uiregistry.services.registry_service import RegistryService

router = APIRouter(prefix="/api/components", tags=["components"])


@router.get("", response_model=ComponentListResponse)
async def list_components(
    registry_id: Optional[int] = Query(None, alias="registryId"),
    registry_slug: Optional[List[str]] = Query(None, alias="registrySlug"),
    type: Optional[ComponentType] = Query(None, description="Filter by component type"),
    status_filter: Optional[ComponentStatus] = Query(
        None, alias="status", description="Filter by component status"
    ),
    query: Optional[str] = Query(None, description="Fuzzy match on name, description or slug"),
    limit: int = Query(DEFAULT_LIST_LIMIT, description="Items per page", ge=1),
    offset: int = Query(0, description="Items to skip", ge=0),
    service: RegistryService = Depends(get_registry_service),
):
    """List components with pagination and optional filtering."""
    try:
        results = await service.search_components(
            registries=registry_slug,
            query=query,
            limit=limit,
            offset=offset,
            type=type,
            status=status_filter,
            registry_ids=[registry_id] if registry_id is not None and not registry_slug else None,
        )
        return ComponentListResponse(
            items=results.items, pagination=pagination_metadata(results)
        )
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error listing components: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=Component, status_code=status.HTTP_201_CREATED)
async def create_component(
    component: ComponentCreate, service: RegistryService = Depends(get_registry_service)
):
    """Create a component in the registry given by ``registryId`` or ``registrySlug``."""
    try:
        return await service.create_component(component)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error creating component: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{component_id}", response_model=Component)
async def get_component(
    component_id: int, service: RegistryService = Depends(get_registry_service)
):
    """Get a component with its registry and examples."""
    try:
        return await service.get_component(component_id)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error fetching component {component_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/{component_id}", response_model=Component)
async def update_component(
    component_id: int,
    component_update: ComponentUpdate,
    service: RegistryService = Depends(get_registry_service),
):
    """Update only the supplied fields of a component."""
    try:
        return await service.update_component(component_id, component_update)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error updating component {component_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{component_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_component(
    component_id: int, service: RegistryService = Depends(get_registry_service)
):
    """Delete a component and its examples."""
    try:
        await service.delete_component(component_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error deleting component {component_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{component_id}/examples", response_model=List[Example])
async def list_component_examples(
    component_id: int, service: RegistryService = Depends(get_registry_service)
):
    """List the examples of a component."""
    try:
        return await service.list_examples(component_id)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error listing examples for component {component_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post(
    "/{component_id}/examples", response_model=Example, status_code=status.HTTP_201_CREATED
)
async def create_component_example(
    component_id: int,
    example: ExampleCreate,
    service: RegistryService = Depends(get_registry_service),
):
    """Add an example to a component. ``name``, ``slug``, ``language`` and ``code`` are required."""
    try:
        return await service.create_example(component_id, example)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error creating example for component {component_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

"""API routes for component examples addressed by their own ID."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger

from uiregistry.api.dependencies import get_registry_service
from uiregistry.models.schemas import Example, ExampleUpdate
from uiregistry.services.registry_service import RegistryService

router = APIRouter(prefix="/api/examples", tags=["examples"])


@router.get("/{example_id}", response_model=Example)
async def get_example(example_id: int, service: RegistryService = Depends(get_registry_service)):
    """Get an example with its component."""
    try:
        return await service.get_example(example_id)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error fetching example {example_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/{example_id}", response_model=Example)
async def update_example(
    example_id: int,
    example_update: ExampleUpdate,
    service: RegistryService = Depends(get_registry_service),
):
    """Update only the supplied fields of an example."""
    try:
        return await service.update_example(example_id, example_update)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error updating example {example_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{example_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_example(
    example_id: int, service: RegistryService = Depends(get_registry_service)
):
    """Delete an example."""
    try:
        await service.delete_example(example_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException as e:
        raise e
    except Exception as e:
        logger.error(f"Error deleting example {example_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

"""Idol CRUD API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kpopapi.api.deps import get_actor
from kpopapi.core.database import get_db
from kpopapi.schemas.auth import ErrorResponse
from kpopapi.schemas.idol import DeletedResponse, IdolCreate, IdolResponse, IdolUpdate
from kpopapi.services.idol import IdolService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/idols",
    tags=["idols"],
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)


def get_idol_service(db: AsyncSession = Depends(get_db)) -> IdolService:
    return IdolService(db)


def _not_found(idol_id: int) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"idol {idol_id} not found")


@router.get("", response_model=list[IdolResponse])
async def list_idols(
    service: IdolService = Depends(get_idol_service),
) -> list[IdolResponse]:
    """List all idols."""
    idols = await service.list()
    return [IdolResponse.model_validate(idol) for idol in idols]


@router.post("", response_model=IdolResponse, status_code=status.HTTP_201_CREATED)
async def create_idol(
    data: IdolCreate,
    service: IdolService = Depends(get_idol_service),
    actor: str = Depends(get_actor),
) -> IdolResponse:
    """Create a new idol."""
    idol = await service.create(data, actor=actor)
    logger.info("Idol created", extra={"idol_id": idol.id, "user": actor})
    return IdolResponse.model_validate(idol)


@router.get("/{idol_id}", response_model=IdolResponse)
async def get_idol(
    idol_id: int,
    service: IdolService = Depends(get_idol_service),
) -> IdolResponse:
    """Get a single idol."""
    idol = await service.get(idol_id)
    if not idol:
        raise _not_found(idol_id)
    return IdolResponse.model_validate(idol)


@router.put("/{idol_id}", response_model=IdolResponse)
async def update_idol(
    idol_id: int,
    data: IdolUpdate,
    service: IdolService = Depends(get_idol_service),
    actor: str = Depends(get_actor),
) -> IdolResponse:
    """Replace an idol's name, group and position."""
    idol = await service.update(idol_id, data, actor=actor)
    if not idol:
        raise _not_found(idol_id)
    logger.info(f"Idol updated to version {idol.version}", extra={"idol_id": idol_id, "user": actor})
    return IdolResponse.model_validate(idol)


@router.delete("/{idol_id}", response_model=DeletedResponse)
async def delete_idol(
    idol_id: int,
    service: IdolService = Depends(get_idol_service),
    actor: str = Depends(get_actor),
) -> DeletedResponse:
    """Soft-delete an idol."""
    deleted = await service.delete(idol_id, actor=actor)
    if not deleted:
        raise _not_found(idol_id)
    logger.info("Idol deleted", extra={"idol_id": idol_id, "user": actor})
    return DeletedResponse()

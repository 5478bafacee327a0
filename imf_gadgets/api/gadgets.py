"""Gadget inventory API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from imf_gadgets.api.dependencies import get_current_identity, get_gadget_service
from imf_gadgets.models.gadget import (
    Gadget,
    GadgetStatus,
    GadgetUpdate,
    GadgetWithProbability,
    RetireResponse,
    SelfDestructResponse,
)
from imf_gadgets.services.gadget_service import GadgetService

router = APIRouter(
    prefix="/gadgets",
    tags=["Gadgets"],
    dependencies=[Depends(get_current_identity)],
)


@router.get("", response_model=list[GadgetWithProbability])
async def list_gadgets(
    status: Optional[GadgetStatus] = Query(default=None, description="Filter by status"),
    service: GadgetService = Depends(get_gadget_service),
) -> list[GadgetWithProbability]:
    """List gadgets, each with a freshly randomized mission success probability."""
    return await service.list_gadgets(status)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Gadget)
async def create_gadget(
    service: GadgetService = Depends(get_gadget_service),
) -> Gadget:
    """Add an Available gadget with a unique codename."""
    return await service.create()


@router.patch("/{gadget_id}", response_model=Gadget)
async def update_gadget(
    gadget_id: UUID,
    patch: GadgetUpdate,
    service: GadgetService = Depends(get_gadget_service),
) -> Gadget:
    """Update a gadget's name and/or status.

    Decommissioned gadgets cannot be updated (400).
    """
    return await service.update(gadget_id, patch)


@router.delete("/{gadget_id}", response_model=RetireResponse)
async def decommission_gadget(
    gadget_id: UUID,
    service: GadgetService = Depends(get_gadget_service),
) -> RetireResponse:
    """Mark a gadget Decommissioned instead of deleting it."""
    gadget = await service.retire(gadget_id)
    return RetireResponse(gadget=gadget)


@router.post("/{gadget_id}/self-destruct", response_model=SelfDestructResponse)
async def self_destruct_gadget(
    gadget_id: UUID,
    service: GadgetService = Depends(get_gadget_service),
) -> SelfDestructResponse:
    """Trigger the self-destruct sequence and return a confirmation code."""
    code = await service.self_destruct(gadget_id)
    return SelfDestructResponse(confirmation_code=code)

"""Gadget lifecycle: creation, listing, edits, retirement and self-destruct."""

import random
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

import structlog

from imf_gadgets.errors import InvalidStateTransition, NotFound
from imf_gadgets.models.gadget import (
    Gadget,
    GadgetAction,
    GadgetStatus,
    GadgetUpdate,
    GadgetWithProbability,
    is_allowed,
)
from imf_gadgets.services.codename_service import CodenameAllocator
from imf_gadgets.services.gadget_store import GadgetStore

logger = structlog.get_logger(__name__)

CONFIRMATION_CODE_MIN = 1000
CONFIRMATION_CODE_MAX = 9999


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GadgetService:
    """Enforces status rules on top of the gadget store."""

    def __init__(
        self,
        store: GadgetStore,
        allocator: Optional[CodenameAllocator] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.allocator = allocator or CodenameAllocator(store, rng=self.rng)
        self._clock = clock or _utcnow

    async def _get_or_raise(self, gadget_id: UUID) -> Gadget:
        gadget = await self.store.get(gadget_id)
        if gadget is None:
            raise NotFound()
        return gadget

    def _check_transition(self, action: GadgetAction, gadget: Gadget) -> None:
        if not is_allowed(action, gadget.status):
            logger.info(
                "gadget_transition_rejected",
                gadget_id=str(gadget.id),
                action=action.value,
                status=gadget.status.value,
            )
            raise InvalidStateTransition()

    async def create(self) -> Gadget:
        """Create an Available gadget with a freshly allocated codename."""
        name = await self.allocator.allocate()
        gadget = await self.store.insert(name, GadgetStatus.AVAILABLE)
        logger.info("gadget_created", gadget_id=str(gadget.id), codename=gadget.name)
        return gadget

    async def list_gadgets(
        self, status: Optional[GadgetStatus] = None
    ) -> list[GadgetWithProbability]:
        """List gadgets with a random mission success probability each.

        The probability is recomputed on every call and never stored.
        """
        gadgets = await self.store.list_gadgets(status)
        return [
            GadgetWithProbability(
                **gadget.model_dump(),
                mission_success_probability=f"{self.rng.randrange(100)}%",
            )
            for gadget in gadgets
        ]

    async def update(self, gadget_id: UUID, patch: GadgetUpdate) -> Gadget:
        """Apply a partial edit.

        Raises:
            NotFound: If the gadget does not exist
            InvalidStateTransition: If the gadget is Decommissioned
        """
        gadget = await self._get_or_raise(gadget_id)
        self._check_transition(GadgetAction.UPDATE, gadget)

        updated = await self.store.update(
            gadget_id,
            name=patch.name,
            status=patch.status,
        )
        if updated is None:
            raise NotFound()

        logger.info(
            "gadget_updated",
            gadget_id=str(gadget_id),
            fields=sorted(patch.model_dump(exclude_none=True)),
        )
        return updated

    async def retire(self, gadget_id: UUID) -> Gadget:
        """Decommission a gadget, refreshing decommissioned_at on every call.

        Raises:
            NotFound: If the gadget does not exist
        """
        gadget = await self._get_or_raise(gadget_id)
        self._check_transition(GadgetAction.RETIRE, gadget)

        updated = await self.store.update(
            gadget_id,
            status=GadgetStatus.DECOMMISSIONED,
            decommissioned_at=self._clock(),
        )
        if updated is None:
            raise NotFound()

        logger.info(
            "gadget_decommissioned",
            gadget_id=str(gadget_id),
            previous_status=gadget.status.value,
        )
        return updated

    async def self_destruct(self, gadget_id: UUID) -> int:
        """Mark a gadget Destroyed and return a display-only confirmation code.

        Raises:
            NotFound: If the gadget does not exist
        """
        gadget = await self._get_or_raise(gadget_id)
        self._check_transition(GadgetAction.SELF_DESTRUCT, gadget)

        confirmation_code = self.rng.randint(CONFIRMATION_CODE_MIN, CONFIRMATION_CODE_MAX)
        updated = await self.store.update(gadget_id, status=GadgetStatus.DESTROYED)
        if updated is None:
            raise NotFound()

        logger.info(
            "gadget_self_destructed",
            gadget_id=str(gadget_id),
            previous_status=gadget.status.value,
        )
        return confirmation_code

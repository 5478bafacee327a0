"""Gadget models and the status transition table."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GadgetStatus(str, Enum):
    """Gadget lifecycle status."""

    AVAILABLE = "Available"
    DEPLOYED = "Deployed"
    DESTROYED = "Destroyed"
    DECOMMISSIONED = "Decommissioned"


class GadgetAction(str, Enum):
    """Operations that change a gadget's stored state."""

    UPDATE = "update"
    RETIRE = "retire"
    SELF_DESTRUCT = "self_destruct"


# Statuses each action may start from. Destroyed gadgets stay editable;
# only Decommissioned freezes generic updates.
ALLOWED_FROM: dict[GadgetAction, frozenset[GadgetStatus]] = {
    GadgetAction.UPDATE: frozenset(
        {GadgetStatus.AVAILABLE, GadgetStatus.DEPLOYED, GadgetStatus.DESTROYED}
    ),
    GadgetAction.RETIRE: frozenset(GadgetStatus),
    GadgetAction.SELF_DESTRUCT: frozenset(GadgetStatus),
}


def is_allowed(action: GadgetAction, status: GadgetStatus) -> bool:
    """Return True if ``action`` may be applied to a gadget in ``status``."""
    return status in ALLOWED_FROM[action]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Gadget(_CamelModel):
    """A gadget in the inventory.

    Attributes:
        id: Gadget UUID
        name: Codename assigned at creation (editable via update)
        status: Current lifecycle status
        decommissioned_at: Set only when the gadget is retired
        created_at: Insert timestamp
        updated_at: Last modification timestamp
    """

    id: UUID
    name: str
    status: GadgetStatus = GadgetStatus.AVAILABLE
    decommissioned_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class GadgetWithProbability(Gadget):
    """Gadget listing entry with a per-request random success estimate."""

    mission_success_probability: str


class GadgetUpdate(_CamelModel):
    """Partial update body. Only provided fields are applied."""

    name: Optional[str] = Field(default=None, min_length=1)
    status: Optional[GadgetStatus] = None


class RetireResponse(_CamelModel):
    """Response for a decommissioned gadget."""

    message: str = "Gadget decommissioned"
    gadget: Gadget


class SelfDestructResponse(_CamelModel):
    """Response for an initiated self-destruct sequence."""

    message: str = "Self-destruct sequence initiated"
    confirmation_code: int = Field(ge=1000, le=9999)

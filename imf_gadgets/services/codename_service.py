"""Codename allocation for new gadgets."""

import random
from typing import AbstractSet, Callable, Optional
from uuid import UUID, uuid4

import structlog

logger = structlog.get_logger(__name__)

CODENAMES = (
    "The Nightingale",
    "The Kraken",
    "Phantom Shadow",
    "Iron Falcon",
    "Ghost Whisperer",
    "Cyber Panther",
    "Silent Viper",
    "Storm Breaker",
    "Black Hawk",
    "Omega Phantom",
)

FALLBACK_PREFIX = "Codename-"


def fallback_codename(id_factory: Callable[[], UUID] = uuid4) -> str:
    """Build a generated codename from the first 8 hex chars of a UUID."""
    return f"{FALLBACK_PREFIX}{id_factory().hex[:8]}"


def choose_codename(
    taken: AbstractSet[str],
    rng: Optional[random.Random] = None,
    id_factory: Callable[[], UUID] = uuid4,
    pool: tuple[str, ...] = CODENAMES,
) -> str:
    """Pick a codename not held by any live gadget.

    Candidates are drawn uniformly at random from the pool; a taken
    candidate is discarded and the draw repeats. Once the pool is
    exhausted a generated ``Codename-xxxxxxxx`` name is returned.

    Args:
        taken: Names currently held by gadgets that are not Destroyed
        rng: Random source (module-level random when omitted)
        id_factory: UUID source for the fallback name
        pool: Candidate names

    Returns:
        A non-empty codename
    """
    rng = rng or random.Random()
    remaining = list(pool)

    while remaining:
        index = rng.randrange(len(remaining))
        candidate = remaining[index]
        if candidate not in taken:
            return candidate
        remaining.pop(index)

    return fallback_codename(id_factory)


class CodenameAllocator:
    """Allocates codenames using the gadget store's view of taken names."""

    def __init__(self, store, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()

    async def allocate(self) -> str:
        """Return a codename for a new gadget.

        Names held only by Destroyed gadgets count as free and may be
        recycled.
        """
        taken = await self.store.names_in_use(CODENAMES)
        name = choose_codename(taken, rng=self.rng)
        logger.debug(
            "codename_allocated",
            codename=name,
            pool_taken=len(taken),
            fallback=name.startswith(FALLBACK_PREFIX),
        )
        return name

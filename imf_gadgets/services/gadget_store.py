"""Gadget persistence backed by the gadgets table."""

from datetime import datetime, timezone
from typing import Iterable, Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from imf_gadgets.database import acquire
from imf_gadgets.models.gadget import Gadget, GadgetStatus

logger = structlog.get_logger(__name__)

_COLUMNS = "id, name, status, decommissioned_at, created_at, updated_at"


def _row_to_gadget(row) -> Gadget:
    return Gadget(
        id=row["id"],
        name=row["name"],
        status=row["status"],
        decommissioned_at=row["decommissioned_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class GadgetStore:
    """CRUD over gadget rows. Rows are never deleted."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def insert(self, name: str, status: GadgetStatus = GadgetStatus.AVAILABLE) -> Gadget:
        """Insert a new gadget and return it."""
        gadget_id = uuid4()
        now = datetime.now(timezone.utc)

        async with acquire(self.pool) as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO gadgets (id, name, status, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {_COLUMNS}
                """,
                gadget_id,
                name,
                status.value,
                now,
                now,
            )

        return _row_to_gadget(row)

    async def get(self, gadget_id: UUID) -> Optional[Gadget]:
        """Get a gadget by id, or None if unknown."""
        async with acquire(self.pool) as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM gadgets WHERE id = $1",
                gadget_id,
            )

        if row is None:
            return None

        return _row_to_gadget(row)

    async def list_gadgets(self, status: Optional[GadgetStatus] = None) -> list[Gadget]:
        """List gadgets, optionally restricted to one status."""
        async with acquire(self.pool) as conn:
            if status is not None:
                rows = await conn.fetch(
                    f"""
                    SELECT {_COLUMNS} FROM gadgets
                    WHERE status = $1
                    ORDER BY created_at ASC
                    """,
                    status.value,
                )
            else:
                rows = await conn.fetch(
                    f"SELECT {_COLUMNS} FROM gadgets ORDER BY created_at ASC"
                )

        return [_row_to_gadget(row) for row in rows]

    async def names_in_use(self, names: Iterable[str]) -> set[str]:
        """Return which of ``names`` are held by gadgets that are not Destroyed."""
        async with acquire(self.pool) as conn:
            rows = await conn.fetch(
                """
                SELECT DISTINCT name FROM gadgets
                WHERE name = ANY($1::text[]) AND status <> $2
                """,
                list(names),
                GadgetStatus.DESTROYED.value,
            )

        return {row["name"] for row in rows}

    async def update(
        self,
        gadget_id: UUID,
        name: Optional[str] = None,
        status: Optional[GadgetStatus] = None,
        decommissioned_at: Optional[datetime] = None,
    ) -> Optional[Gadget]:
        """Update gadget fields that are not None.

        Returns:
            Updated Gadget, or None if the id is unknown
        """
        # Build SET clause dynamically for non-None fields
        set_clauses = []
        params = []
        param_idx = 1

        if name is not None:
            set_clauses.append(f"name = ${param_idx}")
            params.append(name)
            param_idx += 1

        if status is not None:
            set_clauses.append(f"status = ${param_idx}")
            params.append(status.value)
            param_idx += 1

        if decommissioned_at is not None:
            set_clauses.append(f"decommissioned_at = ${param_idx}")
            params.append(decommissioned_at)
            param_idx += 1

        if not set_clauses:
            return await self.get(gadget_id)

        now = datetime.now(timezone.utc)
        set_clauses.append(f"updated_at = ${param_idx}")
        params.append(now)
        param_idx += 1

        params.append(gadget_id)

        query = f"""
            UPDATE gadgets
            SET {', '.join(set_clauses)}
            WHERE id = ${param_idx}
            RETURNING {_COLUMNS}
        """

        async with acquire(self.pool) as conn:
            row = await conn.fetchrow(query, *params)

        if row is None:
            return None

        logger.debug(
            "gadget_row_updated",
            gadget_id=str(gadget_id),
            fields_updated=[c.split(" = ")[0] for c in set_clauses if "updated_at" not in c],
        )

        return _row_to_gadget(row)

"""
Person persistence (raw SQL).

`PersonRepository` wraps an asyncpg pool handed in by the caller. Driver and
connection failures are re-raised as `StorageError` so the service layer does
not need to know about asyncpg.
"""

from __future__ import annotations

import asyncio
from typing import Any
from uuid import UUID

import asyncpg

from . import schemas

PERSON_COLUMNS = "id, external_id, name, email, date_of_birth, created_at, updated_at"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS persons (
    id BIGSERIAL PRIMARY KEY,
    external_id UUID NOT NULL,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    date_of_birth TIMESTAMPTZ NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    CONSTRAINT persons_external_id_key UNIQUE (external_id)
)
"""


class StorageError(RuntimeError):
    pass


async def ensure_schema(pool: asyncpg.Pool) -> None:
    """
    Create the persons table if it does not exist yet. Safe to run on every start.
    """
    await pool.execute(SCHEMA_SQL)


class PersonRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def _fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        try:
            row = await self._pool.fetchrow(sql, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
            raise StorageError(str(exc)) from exc
        return dict(row) if row is not None else None

    async def create(self, request: schemas.SavePersonRequest) -> dict[str, Any] | None:
        """
        Insert a person. Returns the stored row, or None when the external_id
        is already taken (the unique constraint decides, nothing is written).
        """
        return await self._fetch_one(
            f"""
            INSERT INTO persons (external_id, name, email, date_of_birth)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (external_id) DO NOTHING
            RETURNING {PERSON_COLUMNS}
            """,
            request.external_id,
            request.name,
            str(request.email),
            request.date_of_birth,
        )

    async def get_by_id(self, person_id: int) -> dict[str, Any] | None:
        return await self._fetch_one(
            f"""
            SELECT {PERSON_COLUMNS}
            FROM persons
            WHERE id = $1
            """,
            person_id,
        )

    async def get_by_external_id(self, external_id: UUID) -> dict[str, Any] | None:
        return await self._fetch_one(
            f"""
            SELECT {PERSON_COLUMNS}
            FROM persons
            WHERE external_id = $1
            """,
            external_id,
        )

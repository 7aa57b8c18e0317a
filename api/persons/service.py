"""
Person business logic.

Flow for saves: validated request -> early duplicate lookup -> atomic insert ->
response. Reads: parse id -> lookup -> response.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol
from uuid import UUID

from fastapi import HTTPException, status

from . import schemas
from .repository import StorageError

# Largest value a BIGSERIAL id can take.
MAX_PERSON_ID = 2**63 - 1

CONFLICT_MESSAGE = "Person with this external_id already exists"
NOT_FOUND_MESSAGE = "Person not found"
INVALID_ID_MESSAGE = "Invalid ID format"

logger = logging.getLogger(__name__)


class PersonStore(Protocol):
    async def create(self, request: schemas.SavePersonRequest) -> dict[str, Any] | None: ...

    async def get_by_id(self, person_id: int) -> dict[str, Any] | None: ...

    async def get_by_external_id(self, external_id: UUID) -> dict[str, Any] | None: ...


def to_response(row: dict[str, Any]) -> schemas.PersonResponse:
    return schemas.PersonResponse(
        external_id=row["external_id"],
        name=str(row["name"]),
        email=str(row["email"]),
        date_of_birth=row["date_of_birth"],
    )


def parse_person_id(raw: str) -> int:
    value = raw or ""
    # int() would also accept "+5", " 5" and "1_000".
    if not value.isascii() or not value.isdigit():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_ID_MESSAGE)

    person_id = int(value)
    if not 1 <= person_id <= MAX_PERSON_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_ID_MESSAGE)
    return person_id


async def save_person(store: PersonStore, payload: schemas.SavePersonRequest) -> schemas.PersonResponse:
    try:
        existing = await store.get_by_external_id(payload.external_id)
        if existing is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CONFLICT_MESSAGE)

        row = await store.create(payload)
    except StorageError as exc:
        logger.exception("person_save_failed external_id=%s", payload.external_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save person",
        ) from exc

    # A concurrent save won the unique constraint between lookup and insert.
    if row is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CONFLICT_MESSAGE)

    logger.info("person_created id=%s external_id=%s", row["id"], row["external_id"])
    # timestamptz comes back in UTC; answer with the offset the client sent.
    return to_response({**row, "date_of_birth": payload.date_of_birth})


async def get_person(store: PersonStore, person_id: int) -> schemas.PersonResponse:
    try:
        row = await store.get_by_id(person_id)
    except StorageError as exc:
        logger.exception("person_lookup_failed id=%s", person_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve person",
        ) from exc

    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
    return to_response(row)

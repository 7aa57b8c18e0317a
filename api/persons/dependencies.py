"""
Person store dependency for FastAPI routes.

Tests swap the store through `app.dependency_overrides[get_person_store]`.
"""

from __future__ import annotations

from core import db

from .repository import PersonRepository


async def get_person_store() -> PersonRepository:
    return PersonRepository(db.pool())

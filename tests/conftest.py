from datetime import datetime, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient

from main import app
from persons import dependencies
from persons.repository import StorageError


class StubPersonStore:
    """In-memory stand-in for PersonRepository."""

    def __init__(self):
        self.rows = {}
        self._ids = count(1)

    async def create(self, request):
        if any(row["external_id"] == request.external_id for row in self.rows.values()):
            return None
        now = datetime.now(timezone.utc)
        row = {
            "id": next(self._ids),
            "external_id": request.external_id,
            "name": request.name,
            "email": str(request.email),
            # timestamptz reads back in UTC.
            "date_of_birth": request.date_of_birth.astimezone(timezone.utc),
            "created_at": now,
            "updated_at": now,
        }
        self.rows[row["id"]] = row
        return row

    async def get_by_id(self, person_id):
        return self.rows.get(person_id)

    async def get_by_external_id(self, external_id):
        for row in self.rows.values():
            if row["external_id"] == external_id:
                return row
        return None


class BrokenPersonStore:
    async def create(self, request):
        raise StorageError("connection refused")

    async def get_by_id(self, person_id):
        raise StorageError("connection refused")

    async def get_by_external_id(self, external_id):
        raise StorageError("connection refused")


@pytest.fixture
def store():
    return StubPersonStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[dependencies.get_person_store] = lambda: store
    # No `with` block: the lifespan (and its real DB pool) stays off.
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client():
    app.dependency_overrides[dependencies.get_person_store] = lambda: BrokenPersonStore()
    yield TestClient(app)
    app.dependency_overrides.clear()

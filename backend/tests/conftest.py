from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from employee_api.main import app
from employee_api.services.employee_service import employee_service


class FakeCursor:
    """The slice of a motor cursor the service relies on."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def skip(self, count: int) -> FakeCursor:
        self._docs = self._docs[count:]
        return self

    def limit(self, count: int) -> FakeCursor:
        if count:
            self._docs = self._docs[:count]
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        docs = self._docs if length is None else self._docs[:length]
        return [copy.deepcopy(doc) for doc in docs]

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield copy.deepcopy(doc)


class FakeCollection:
    """In-memory stand-in for an ``AsyncIOMotorCollection``.

    Supports equality and ``$in`` filters and ``$set`` updates, which is all
    the employee service issues.
    """

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    @staticmethod
    def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
        for key, condition in query.items():
            value = doc.get(key)
            if isinstance(condition, dict) and "$in" in condition:
                if value not in condition["$in"]:
                    return False
            elif value != condition:
                return False
        return True

    def _select(self, query: dict[str, Any]) -> list[dict[str, Any]]:
        return [doc for doc in self.docs if self._matches(doc, query)]

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        matches = self._select(query)
        return copy.deepcopy(matches[0]) if matches else None

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor(self._select(query or {}))

    async def count_documents(self, query: dict[str, Any]) -> int:
        return len(self._select(query))

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        matches = self._select(query)
        if matches:
            matches[0].update(update.get("$set", {}))
        return SimpleNamespace(matched_count=len(matches[:1]))

    async def find_one_and_delete(self, query: dict[str, Any]) -> dict[str, Any] | None:
        matches = self._select(query)
        if not matches:
            return None
        self.docs.remove(matches[0])
        return matches[0]

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        matches = self._select(query)
        self.docs = [doc for doc in self.docs if doc not in matches]
        return SimpleNamespace(deleted_count=len(matches))


@pytest.fixture(autouse=True)
def _store_settings():
    from employee_api.core.config import settings

    original_url = settings.MONGO_URL
    settings.MONGO_URL = ""
    yield
    settings.MONGO_URL = original_url


@pytest.fixture
def store():
    previous = (employee_service.employees, employee_service.contacts, employee_service.initialized)
    employee_service.employees = FakeCollection()
    employee_service.contacts = FakeCollection()
    employee_service.initialized = True
    yield employee_service
    employee_service.employees, employee_service.contacts, employee_service.initialized = previous


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


JANE_DOE: dict[str, str] = {
    "fullName": "Jane Doe",
    "jobTitle": "Engineer",
    "phoneNumber": "555-0000",
    "email": "jane@example.com",
    "address": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "emergencyContact1": "Bob",
    "emergencyContact1Phone": "555-1111",
    "emergencyContact1Relationship": "Brother",
    "emergencyContact2": "Alice",
    "emergencyContact2Phone": "555-2222",
    "emergencyContact2Relationship": "Mother",
}


@pytest.fixture
def jane_doe() -> dict[str, str]:
    return dict(JANE_DOE)

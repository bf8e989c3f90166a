"""
Shared fixtures

API tests run the real routers against an in-memory stand-in for the
motor database (only the collection methods the routes call).
"""

import copy
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from config import Settings, get_settings
from database.mongodb import get_database
from server import app


def _matches(doc: dict, query: dict) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda d: d.get(key), reverse=direction == -1)
        return self

    async def to_list(self, length=None):
        docs = self._docs if length is None else self._docs[:length]
        return [copy.deepcopy(d) for d in docs]


class FakeCollection:
    def __init__(self):
        self.docs = {}

    async def find_one(self, query):
        for doc in self.docs.values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        return FakeCursor([d for d in self.docs.values() if _matches(d, query or {})])

    async def insert_one(self, doc):
        doc = copy.deepcopy(doc)
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update, upsert=False):
        for doc in self.docs.values():
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1, upserted_id=None)

        if not upsert:
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

        doc = dict(query)
        doc.update(copy.deepcopy(update.get("$setOnInsert", {})))
        doc.update(copy.deepcopy(update.get("$set", {})))
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=doc["_id"])

    async def delete_one(self, query):
        for key, doc in list(self.docs.items()):
            if _matches(doc, query):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def create_index(self, keys, **kwargs):
        return kwargs.get("name", str(keys))


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self._collections.setdefault(name, FakeCollection())

    def __getitem__(self, name):
        return getattr(self, name)


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def settings():
    return Settings(mongo_url="mongodb://localhost:27017", db_name="flightops_test")


@pytest.fixture
def client(fake_db, settings):
    """TestClient without the lifespan, so no real MongoDB connection is made"""
    app.dependency_overrides[get_database] = lambda: fake_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def aircraft(client):
    """A maintenance-tracked aircraft with Airframe, Engine 1 and APU"""
    response = client.post("/api/fleet", json={
        "tail_number": "n123ab",
        "model": "Citation CJ3",
        "tracked_component_names": ["Airframe", "Engine 1", "APU"]
    })
    assert response.status_code == 201
    return response.json()

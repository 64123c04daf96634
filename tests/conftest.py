"""Pytest fixtures for the classvote tests.

The storage adapter talks to motor in production. Here it gets mongomock
collections behind a thin async facade, so unique indexes raise the real
pymongo DuplicateKeyError. Every facade call yields to the event loop once,
like a network round trip would, which lets concurrent tests interleave.
"""

import asyncio
import io

import httpx
import mongomock
import pytest
from starlette.datastructures import Headers, UploadFile

from classvote.config import Settings, ensure_directories
from classvote.main import create_app
from classvote.storage_mongo import MongoStorage


class AsyncCursor:
    def __init__(self, cursor):
        self._cursor = cursor

    def sort(self, *args, **kwargs):
        self._cursor = self._cursor.sort(*args, **kwargs)
        return self

    def __aiter__(self):
        return self

    async def __anext__(self):
        await asyncio.sleep(0)
        try:
            return next(self._cursor)
        except StopIteration:
            raise StopAsyncIteration


class AsyncCollection:
    def __init__(self, collection):
        self._collection = collection

    @property
    def name(self):
        return self._collection.name

    async def insert_one(self, document):
        await asyncio.sleep(0)
        return self._collection.insert_one(document)

    async def find_one(self, *args, **kwargs):
        await asyncio.sleep(0)
        return self._collection.find_one(*args, **kwargs)

    async def create_index(self, *args, **kwargs):
        await asyncio.sleep(0)
        return self._collection.create_index(*args, **kwargs)

    def find(self, *args, **kwargs):
        return AsyncCursor(self._collection.find(*args, **kwargs))


class AsyncDatabase:
    def __init__(self, db):
        self._db = db

    def __getitem__(self, name):
        return AsyncCollection(self._db[name])

    async def command(self, *args, **kwargs):
        await asyncio.sleep(0)
        return self._db.command(*args, **kwargs)


class AsyncMongoClient:
    """Stands in for AsyncIOMotorClient when the app lifespan is exercised."""

    def __init__(self):
        self.sync_client = mongomock.MongoClient()
        self.closed = False

    def __getitem__(self, name):
        return AsyncDatabase(self.sync_client[name])

    def close(self):
        self.closed = True


@pytest.fixture
def mongo_db():
    """A fresh in-memory database per test."""
    return AsyncDatabase(mongomock.MongoClient()["classvote_test"])


@pytest.fixture
def mongo_client():
    return AsyncMongoClient()


@pytest.fixture
async def storage(mongo_db) -> MongoStorage:
    storage = MongoStorage(mongo_db)
    await storage.ensure_indexes()
    return storage


@pytest.fixture
def settings(tmp_path) -> Settings:
    settings = Settings(
        upload_dir=tmp_path / "uploads",
        public_dir=tmp_path / "public",
    )
    ensure_directories(settings)
    return settings


@pytest.fixture
def app(settings, storage):
    """Application with the test storage attached; the lifespan is not run."""
    app = create_app(settings)
    app.state.storage = storage
    return app


@pytest.fixture
async def api_client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_upload():
    """Build an UploadFile the way FastAPI hands one to a route."""
    def _make(data: bytes = b"\x89PNG\r\n\x1a\nfake", filename: str = "cat.png",
              content_type: str = "image/png") -> UploadFile:
        return UploadFile(
            file=io.BytesIO(data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make

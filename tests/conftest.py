"""Shared fixtures: in-memory MongoDB (mongomock) and an authenticated TestClient."""
from collections.abc import Callable, Iterator

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.database import Database

from app.core.security import create_access_token
from app.db.mongodb import get_mongo_db
from app.main import app
from app.services.bookmark_service import BookmarkService


@pytest.fixture
def mongo_db() -> Iterator[Database]:
    """Fresh in-memory database per test."""
    client = mongomock.MongoClient()
    yield client["bookmarks_test"]
    client.close()


@pytest.fixture
def service(mongo_db: Database) -> BookmarkService:
    return BookmarkService(mongo_db)


@pytest.fixture
def client(mongo_db: Database) -> Iterator[TestClient]:
    """
    TestClient wired to the in-memory database.

    The lifespan hook is not run (no `with` block), so no real MongoDB is needed.
    """
    app.dependency_overrides[get_mongo_db] = lambda: mongo_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    def _headers(user_id: str) -> dict[str, str]:
        token = create_access_token({"sub": user_id})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def bookmark_payload() -> dict:
    return {
        "title": "T",
        "description": "D",
        "url": "https://example.com",
    }

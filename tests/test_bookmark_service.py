"""Tests for the ownership-checked bookmark CRUD service."""
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DocumentTooLarge, PyMongoError, ServerSelectionTimeoutError

from app.core.exceptions import (
    ForbiddenException,
    OperationFailedException,
    ResourceNotFoundException,
    ValidationException,
)
from app.services.bookmark_service import BookmarkService

ALICE = "alice"
BOB = "bob"


def _failing_service(method: str, error: Exception) -> BookmarkService:
    """Service whose bookmarks collection raises `error` from `method`."""
    collection = MagicMock()
    getattr(collection, method).side_effect = error
    db = MagicMock()
    db.__getitem__.return_value = collection
    return BookmarkService(db)


def test_create_sets_owner_and_defaults(service: BookmarkService, bookmark_payload: dict) -> None:
    doc = service.create_bookmark(ALICE, {**bookmark_payload, "owner": BOB, "user": BOB})

    assert isinstance(doc["_id"], ObjectId)
    assert doc["owner"] == ALICE
    assert doc["content"] == "D"
    assert doc["created_at"] is not None

    stored = service.collection.find_one({"_id": doc["_id"]})
    assert stored["owner"] == ALICE
    assert "user" not in stored


def test_create_rejects_invalid_payload(service: BookmarkService) -> None:
    with pytest.raises(ValidationException):
        service.create_bookmark(ALICE, {"title": "T", "description": "D", "url": "not-a-url"})
    assert service.collection.count_documents({}) == 0


def test_list_returns_only_own_bookmarks(service: BookmarkService, bookmark_payload: dict) -> None:
    service.create_bookmark(ALICE, bookmark_payload)
    service.create_bookmark(ALICE, {**bookmark_payload, "title": "Second"})
    service.create_bookmark(BOB, bookmark_payload)

    items, count = service.list_bookmarks(ALICE)
    assert count == 2
    assert {item["owner"] for item in items} == {ALICE}

    items, count = service.list_bookmarks("nobody")
    assert items == []
    assert count == 0


def test_list_newest_first(service: BookmarkService, bookmark_payload: dict) -> None:
    first = service.create_bookmark(ALICE, {**bookmark_payload, "title": "first"})
    second = service.create_bookmark(ALICE, {**bookmark_payload, "title": "second"})
    for doc, year in ((first, 2000), (second, 2020)):
        service.collection.update_one(
            {"_id": doc["_id"]}, {"$set": {"created_at": datetime(year, 1, 1)}}
        )

    items, _ = service.list_bookmarks(ALICE)
    assert [item["title"] for item in items] == ["second", "first"]


def test_get_own_bookmark(service: BookmarkService, bookmark_payload: dict) -> None:
    created = service.create_bookmark(ALICE, bookmark_payload)
    doc = service.get_bookmark(ALICE, str(created["_id"]))
    assert doc["title"] == "T"


def test_get_missing_bookmark_raises_not_found(service: BookmarkService) -> None:
    missing = str(ObjectId())
    with pytest.raises(ResourceNotFoundException) as exc_info:
        service.get_bookmark(ALICE, missing)
    assert missing in exc_info.value.message


def test_get_other_users_bookmark_is_forbidden(
    service: BookmarkService, bookmark_payload: dict,
) -> None:
    """Existence is revealed; the record is not."""
    created = service.create_bookmark(ALICE, bookmark_payload)
    with pytest.raises(ForbiddenException) as exc_info:
        service.get_bookmark(BOB, str(created["_id"]))
    assert "not authorized" in exc_info.value.message


def test_malformed_id_is_validation_error(service: BookmarkService) -> None:
    for call in (
        lambda: service.get_bookmark(ALICE, "123"),
        lambda: service.update_bookmark(ALICE, "123", {"title": "x"}),
        lambda: service.delete_bookmark(ALICE, "123"),
    ):
        with pytest.raises(ValidationException) as exc_info:
            call()
        assert "Invalid bookmark ID format" in exc_info.value.message


def test_update_partial_keeps_other_fields(service: BookmarkService, bookmark_payload: dict) -> None:
    created = service.create_bookmark(ALICE, {**bookmark_payload, "image": "https://img"})
    updated = service.update_bookmark(ALICE, str(created["_id"]), {"title": " Renamed "})

    assert updated["title"] == "Renamed"
    assert updated["description"] == "D"
    assert updated["content"] == "D"
    assert updated["image"] == "https://img"
    assert updated["created_at"] is not None


def test_update_never_changes_owner(service: BookmarkService, bookmark_payload: dict) -> None:
    created = service.create_bookmark(ALICE, bookmark_payload)
    updated = service.update_bookmark(
        ALICE, str(created["_id"]), {"owner": BOB, "description": "New"},
    )
    assert updated["owner"] == ALICE
    assert updated["description"] == "New"
    assert service.collection.find_one({"_id": created["_id"]})["owner"] == ALICE


def test_update_with_no_changes_returns_record(
    service: BookmarkService, bookmark_payload: dict,
) -> None:
    created = service.create_bookmark(ALICE, bookmark_payload)
    doc = service.update_bookmark(ALICE, str(created["_id"]), {})
    assert doc["_id"] == created["_id"]


def test_update_validates_merged_result(service: BookmarkService, bookmark_payload: dict) -> None:
    created = service.create_bookmark(ALICE, bookmark_payload)
    with pytest.raises(ValidationException):
        service.update_bookmark(ALICE, str(created["_id"]), {"source": {"url": "https://x.com"}})
    assert service.collection.find_one({"_id": created["_id"]})["source"] is None


def test_update_other_users_bookmark_is_forbidden(
    service: BookmarkService, bookmark_payload: dict,
) -> None:
    created = service.create_bookmark(ALICE, bookmark_payload)
    with pytest.raises(ForbiddenException):
        service.update_bookmark(BOB, str(created["_id"]), {"title": "Hijacked"})
    assert service.collection.find_one({"_id": created["_id"]})["title"] == "T"


def test_update_missing_bookmark_raises_not_found(service: BookmarkService) -> None:
    with pytest.raises(ResourceNotFoundException):
        service.update_bookmark(ALICE, str(ObjectId()), {"title": "x"})


def test_delete_removes_record(service: BookmarkService, bookmark_payload: dict) -> None:
    created = service.create_bookmark(ALICE, bookmark_payload)
    assert service.delete_bookmark(ALICE, str(created["_id"])) is None
    assert service.collection.count_documents({}) == 0

    with pytest.raises(ResourceNotFoundException):
        service.get_bookmark(ALICE, str(created["_id"]))


def test_delete_other_users_bookmark_is_forbidden(
    service: BookmarkService, bookmark_payload: dict,
) -> None:
    created = service.create_bookmark(ALICE, bookmark_payload)
    with pytest.raises(ForbiddenException):
        service.delete_bookmark(BOB, str(created["_id"]))
    assert service.collection.count_documents({}) == 1


def test_delete_missing_bookmark_raises_not_found(service: BookmarkService) -> None:
    with pytest.raises(ResourceNotFoundException):
        service.delete_bookmark(ALICE, str(ObjectId()))


def test_custom_collection_name(mongo_db, bookmark_payload: dict) -> None:
    service = BookmarkService(mongo_db, collection_name="saved_links")
    service.create_bookmark(ALICE, bookmark_payload)
    assert mongo_db["saved_links"].count_documents({}) == 1


@pytest.mark.parametrize(
    ("method", "call"),
    [
        ("find", lambda s: s.list_bookmarks(ALICE)),
        ("find_one", lambda s: s.get_bookmark(ALICE, str(ObjectId()))),
        ("insert_one", lambda s: s.create_bookmark(
            ALICE, {"title": "T", "description": "D", "url": "https://example.com"},
        )),
        ("find_one", lambda s: s.delete_bookmark(ALICE, str(ObjectId()))),
    ],
)
def test_store_errors_become_operation_failed(method: str, call) -> None:
    service = _failing_service(method, ServerSelectionTimeoutError("connection refused"))
    with pytest.raises(OperationFailedException) as exc_info:
        call(service)
    assert exc_info.value.message == "connection refused"


def test_store_error_during_update_write(bookmark_payload: dict) -> None:
    collection = MagicMock()
    collection.find_one.return_value = {
        "_id": ObjectId(), "owner": ALICE, **bookmark_payload,
        "content": "D", "image": None, "published_at": None, "source": None,
    }
    collection.find_one_and_update.side_effect = PyMongoError("write conflict")
    db = MagicMock()
    db.__getitem__.return_value = collection

    with pytest.raises(OperationFailedException) as exc_info:
        BookmarkService(db).update_bookmark(ALICE, str(ObjectId()), {"title": "x"})
    assert exc_info.value.message == "write conflict"


def test_record_deleted_between_load_and_write(bookmark_payload: dict) -> None:
    collection = MagicMock()
    collection.find_one.return_value = {"_id": ObjectId(), "owner": ALICE, **bookmark_payload}
    collection.find_one_and_update.return_value = None
    collection.delete_one.return_value.deleted_count = 0
    db = MagicMock()
    db.__getitem__.return_value = collection
    service = BookmarkService(db)

    with pytest.raises(ResourceNotFoundException):
        service.update_bookmark(ALICE, str(ObjectId()), {"title": "x"})
    with pytest.raises(ResourceNotFoundException):
        service.delete_bookmark(ALICE, str(ObjectId()))


@pytest.mark.parametrize(
    ("method", "call"),
    [
        ("insert_one", lambda s: s.create_bookmark(
            ALICE, {"title": "T", "description": "D" * 10, "url": "https://example.com"},
        )),
        ("find_one", lambda s: s.get_bookmark(ALICE, str(ObjectId()))),
    ],
)
def test_bson_errors_become_operation_failed(method: str, call) -> None:
    """DocumentTooLarge is a bson InvalidDocument, outside the PyMongoError tree."""
    service = _failing_service(method, DocumentTooLarge("BSON document too large"))
    with pytest.raises(OperationFailedException) as exc_info:
        call(service)
    assert exc_info.value.message == "BSON document too large"


def test_oversized_update_becomes_operation_failed(bookmark_payload: dict) -> None:
    collection = MagicMock()
    collection.find_one.return_value = {"_id": ObjectId(), "owner": ALICE, **bookmark_payload}
    collection.find_one_and_update.side_effect = DocumentTooLarge("BSON document too large")
    db = MagicMock()
    db.__getitem__.return_value = collection

    with pytest.raises(OperationFailedException) as exc_info:
        BookmarkService(db).update_bookmark(ALICE, str(ObjectId()), {"description": "huge"})
    assert exc_info.value.message == "BSON document too large"

"""
북마크 CRUD 서비스.

모든 작업은 요청한 사용자 식별자(owner)를 받아 소유권을 확인합니다.
- 존재하지 않는 id: ResourceNotFoundException (404)
- 존재하지만 다른 사용자 소유: ForbiddenException (401)
- pymongo/BSON 에러: OperationFailedException (400, 저장소 메시지 그대로)
"""
import logging
from typing import Any, Dict, List, Tuple

from bson import ObjectId
from bson.errors import BSONError
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.core.exceptions import (
    ForbiddenException,
    OperationFailedException,
    ResourceNotFoundException,
)
from app.core.settings import settings
from app.models.bookmark import build_bookmark_changes, build_new_bookmark
from app.utils.mongodb import safe_object_id

logger = logging.getLogger(__name__)

# DocumentTooLarge 등 BSON 인코딩 에러는 PyMongoError 계열이 아님
STORE_ERRORS = (PyMongoError, BSONError)


class BookmarkService:
    """
    bookmarks 컬렉션에 대한 소유권 확인 CRUD.

    저장소 핸들(Database)은 생성 시 주입받습니다.
    """

    def __init__(self, db: Database, collection_name: str | None = None) -> None:
        self.db = db
        self.collection = db[collection_name or settings.mongo_bookmarks_collection]

    def list_bookmarks(self, owner: str) -> Tuple[List[Dict[str, Any]], int]:
        try:
            items = list(
                self.collection.find({"owner": owner}).sort("created_at", DESCENDING)
            )
        except STORE_ERRORS as e:
            raise self._store_failure("list", e) from e
        return items, len(items)

    def get_bookmark(self, owner: str, bookmark_id: str) -> Dict[str, Any]:
        oid = safe_object_id(bookmark_id, "bookmark ID")
        return self._load_owned(owner, oid, bookmark_id, "access")

    def create_bookmark(self, owner: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        doc = build_new_bookmark(owner, payload)
        try:
            result = self.collection.insert_one(doc)
        except STORE_ERRORS as e:
            raise self._store_failure("create", e) from e
        doc["_id"] = result.inserted_id
        logger.info(f"Bookmark created: id={result.inserted_id} owner={owner}")
        return doc

    def update_bookmark(
        self, owner: str, bookmark_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        oid = safe_object_id(bookmark_id, "bookmark ID")
        existing = self._load_owned(owner, oid, bookmark_id, "update")

        changes = build_bookmark_changes(existing, payload)
        if not changes:
            return existing

        try:
            updated = self.collection.find_one_and_update(
                {"_id": oid, "owner": owner},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except STORE_ERRORS as e:
            raise self._store_failure("update", e) from e

        # 조회 이후 삭제된 경우
        if updated is None:
            raise self._not_found(bookmark_id)
        logger.info(f"Bookmark updated: id={bookmark_id} fields={sorted(changes)}")
        return updated

    def delete_bookmark(self, owner: str, bookmark_id: str) -> None:
        oid = safe_object_id(bookmark_id, "bookmark ID")
        self._load_owned(owner, oid, bookmark_id, "delete")

        try:
            result = self.collection.delete_one({"_id": oid, "owner": owner})
        except STORE_ERRORS as e:
            raise self._store_failure("delete", e) from e

        if result.deleted_count == 0:
            raise self._not_found(bookmark_id)
        logger.info(f"Bookmark deleted: id={bookmark_id} owner={owner}")

    def _load_owned(
        self, owner: str, oid: ObjectId, bookmark_id: str, action: str
    ) -> Dict[str, Any]:
        try:
            doc = self.collection.find_one({"_id": oid})
        except STORE_ERRORS as e:
            raise self._store_failure("find", e) from e

        if doc is None:
            raise self._not_found(bookmark_id)
        if str(doc.get("owner")) != owner:
            logger.warning(f"Ownership check failed: id={bookmark_id} user={owner}")
            raise ForbiddenException(
                f"User {owner} is not authorized to {action} this bookmark"
            )
        return doc

    @staticmethod
    def _not_found(bookmark_id: str) -> ResourceNotFoundException:
        return ResourceNotFoundException(f"Bookmark not found with id of {bookmark_id}")

    @staticmethod
    def _store_failure(op: str, exc: Exception) -> OperationFailedException:
        logger.error(f"Bookmark {op} failed: {exc}")
        return OperationFailedException(str(exc))

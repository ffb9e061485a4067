import logging
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError
from fastapi import Request

from app.core.exceptions import MongoDBException
from app.core.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def build_mongo_uri(settings: Settings) -> str:
    """
    설정값으로 MongoDB 접속 URI 생성.
    MONGODB_SERVER_URL이 있으면 그대로 사용.
    """
    if settings.mongo_url:
        return settings.mongo_url

    host = settings.mongo_host
    port = settings.mongo_port
    user = settings.mongo_user
    password = settings.mongo_password
    auth_source = settings.mongo_auth_source

    if user and password:
        return f"mongodb://{user}:{password}@{host}:{port}/?authSource={auth_source}"
    return f"mongodb://{host}:{port}/"


def init_mongo(settings: Settings = default_settings) -> tuple[MongoClient, Database]:
    """
    MongoDB 클라이언트를 생성하고 연결을 확인.
    FastAPI lifespan에서 호출되며, 실패 시 MongoDBException을 던져 서버 기동을 중단시킨다.

    Returns:
        (client, db) 튜플
    """
    if not settings.mongo_url and not settings.mongo_host:
        raise MongoDBException("MONGODB_SERVER_URL/MONGO_HOST is not set")

    try:
        client = MongoClient(
            build_mongo_uri(settings),
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
            maxPoolSize=100,
        )
        # 연결 테스트
        client.admin.command("ping")
    except PyMongoError as e:
        logger.error(f"MongoDB initialization failed: {e}")
        raise MongoDBException(f"MongoDB initialization failed: {e}") from e

    db = client[settings.mongo_db]
    logger.info(
        f"MongoDB connected: host={client.address} db={settings.mongo_db} "
        f"user={settings.mongo_user or 'none'}"
    )
    return client, db


def ensure_indexes(db: Database, settings: Settings = default_settings) -> None:
    """
    bookmarks 컬렉션 인덱스 보장 (owner별 목록 조회용).
    """
    coll = db[settings.mongo_bookmarks_collection]
    coll.create_index([("owner", ASCENDING), ("created_at", DESCENDING)])


def close_mongo(client: MongoClient | None) -> None:
    """
    애플리케이션 종료 시 MongoDB 클라이언트 종료.
    """
    if client is None:
        return
    try:
        client.close()
        logger.info("MongoDB connection closed")
    except PyMongoError as e:
        logger.error(f"Error closing MongoDB connection: {e}")


def get_mongo_db(request: Request) -> Database:
    """
    FastAPI Dependency Injection용 MongoDB 데이터베이스 제공.
    lifespan에서 app.state.mongo_db에 넣어 둔 핸들을 돌려준다.

    Usage:
        @router.get("/endpoint")
        def endpoint(db: Database = Depends(get_mongo_db)):
            collection = db["collection_name"]
            ...
    """
    db = getattr(request.app.state, "mongo_db", None)
    if db is None:
        raise MongoDBException("MongoDB is not initialized")
    return db

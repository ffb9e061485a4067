from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

# 앱 시작 시 로깅 설정 적용 (가장 먼저 호출)
from app.core.logging_config import setup_logging
setup_logging()

from app.core.settings import settings
from app.core.exceptions import (
    AppException,
    DatabaseException,
    ForbiddenException,
    OperationFailedException,
    ResourceNotFoundException,
    UnauthorizedException,
    ValidationException,
)
from app.api.routes.bookmarks import router as bookmarks_router
from app.db.mongodb import close_mongo, ensure_indexes, init_mongo
from app.schemas.bookmark import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: MongoDB 연결 실패 시 예외가 그대로 올라가 서버 기동이 중단됨
    client, db = init_mongo(settings)
    ensure_indexes(db, settings)
    app.state.mongo_client = client
    app.state.mongo_db = db
    logger.info(f"Server starting in {settings.app_env} mode")

    yield

    # Shutdown
    close_mongo(app.state.mongo_client)
    app.state.mongo_client = None
    app.state.mongo_db = None


app = FastAPI(title="Bookmark API", lifespan=lifespan)


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


# Exception handlers
@app.exception_handler(OperationFailedException)
async def operation_failed_handler(request: Request, exc: OperationFailedException):
    """저장소 작업 실패. 저장소 메시지를 그대로 전달"""
    logger.error(f"Store operation failed at {request.url.path}: {exc}")
    return _error(400, exc.message)


@app.exception_handler(DatabaseException)
async def database_exception_handler(request: Request, exc: DatabaseException):
    """데이터베이스 연결/초기화 관련 예외 처리"""
    logger.error(f"Database error at {request.url.path}: {exc}", exc_info=True)
    return _error(500, "Database operation failed")


@app.exception_handler(ResourceNotFoundException)
async def resource_not_found_handler(request: Request, exc: ResourceNotFoundException):
    """리소스를 찾을 수 없음 예외 처리"""
    logger.warning(f"Resource not found at {request.url.path}: {exc}")
    return _error(404, exc.message)


@app.exception_handler(ForbiddenException)
async def forbidden_handler(request: Request, exc: ForbiddenException):
    """소유자가 아닌 접근. 존재 여부는 숨기지 않고 401로 응답"""
    logger.warning(f"Forbidden at {request.url.path}: {exc}")
    return _error(401, exc.message)


@app.exception_handler(UnauthorizedException)
async def unauthorized_handler(request: Request, exc: UnauthorizedException):
    """인증 실패 예외 처리"""
    return _error(401, exc.message, headers={"WWW-Authenticate": "Bearer"})


@app.exception_handler(ValidationException)
async def validation_exception_handler(request: Request, exc: ValidationException):
    """입력값 검증 실패 예외 처리"""
    logger.warning(f"Validation error at {request.url.path}: {exc}")
    return _error(400, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """요청 본문 파싱/타입 오류도 400 envelope로 응답"""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body") or "body"
        parts.append(f"{loc}: {err.get('msg')}")
    message = "Invalid request: " + ", ".join(parts)
    logger.warning(f"Request validation error at {request.url.path}: {message}")
    return _error(400, message)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """일반 애플리케이션 예외 처리"""
    logger.warning(f"Application error at {request.url.path}: {exc}")
    return _error(400, exc.message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """처리되지 않은 예외도 envelope로 응답"""
    logger.error(f"Unhandled error at {request.url.path}: {exc}", exc_info=True)
    return _error(500, "Internal server error")


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Authorization"],
)

app.include_router(bookmarks_router)


@app.get("/")
def root():
    return {"message": "API is running..."}

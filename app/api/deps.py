import logging

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from pymongo.database import Database

from app.core.exceptions import UnauthorizedException
from app.core.security import decode_access_token
from app.db.mongodb import get_mongo_db
from app.services.bookmark_service import BookmarkService

logger = logging.getLogger(__name__)

# 토큰 발급은 외부 인증 서비스 담당. 여기서는 검증만 한다.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
) -> str:
    """
    요청의 Bearer 토큰에서 사용자 식별자를 꺼낸다.
    실패 시 UnauthorizedException (HTTP 401).
    """
    if not token:
        logger.info(f"Missing bearer token at {request.url.path}")
        raise UnauthorizedException("Not authorized to access this route")

    user_id = decode_access_token(token)
    if user_id is None:
        logger.info(f"Invalid bearer token at {request.url.path}")
        raise UnauthorizedException("Not authorized to access this route")

    return user_id


def get_bookmark_service(db: Database = Depends(get_mongo_db)) -> BookmarkService:
    return BookmarkService(db)

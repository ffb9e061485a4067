"""
북마크(Bookmark) 관련 Pydantic 스키마.

API 요청/응답 모델과 공통 응답 envelope를 정의합니다.
JSON 필드명은 camelCase(publishedAt, createdAt)이며,
필드 제약 검증은 app.models.bookmark에서 수행합니다.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _iso_utc(value: Optional[datetime]) -> Optional[str]:
    # MongoDB는 밀리초 정밀도, tz 없는 UTC로 돌려줌
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookmarkSourceIn(CamelModel):
    name: Optional[str] = None
    url: Optional[str] = None


class BookmarkCreate(CamelModel):
    """
    북마크 생성 요청 모델.

    owner/user 등 알 수 없는 필드는 무시됩니다.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None
    published_at: Optional[datetime] = None
    source: Optional[BookmarkSourceIn] = None

    def to_fields(self) -> Dict[str, Any]:
        """
        클라이언트가 실제로 보낸 필드만 저장 키(snake_case)로 반환.
        """
        return self.model_dump(exclude_unset=True)


class BookmarkUpdate(BookmarkCreate):
    """
    북마크 수정 요청 모델. 보낸 필드만 변경됩니다.
    """
    pass


class BookmarkSourceOut(CamelModel):
    name: str
    url: Optional[str] = None


class BookmarkOut(CamelModel):
    """
    북마크 응답 모델.
    """
    id: str
    owner: str
    title: str
    description: str
    content: Optional[str] = None
    url: str
    image: Optional[str] = None
    published_at: Optional[datetime] = None
    source: Optional[BookmarkSourceOut] = None
    created_at: datetime

    @field_serializer("published_at", "created_at")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return _iso_utc(value)


class ApiResponse(BaseModel, Generic[T]):
    """
    공통 성공 응답 envelope: {"success": true, "data": ...}
    """
    success: bool = True
    data: T


class BookmarkListResponse(ApiResponse[List[BookmarkOut]]):
    """
    북마크 목록 응답: {"success": true, "count": n, "data": [...]}
    """
    count: int


class ErrorResponse(BaseModel):
    """
    공통 실패 응답 envelope: {"success": false, "message": "..."}
    """
    success: bool = False
    message: str

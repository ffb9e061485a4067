"""
북마크(Bookmark) 엔티티 스키마.

MongoDB bookmarks 컬렉션에 저장되는 문서의 형태와 필드 제약을 정의합니다.
모든 쓰기(생성/수정)는 저장 전에 이 모듈의 검증을 거칩니다.

저장 문서 예시:
    {
        "_id": ObjectId(...),
        "owner": "64b7...",
        "title": "...",
        "description": "...",
        "content": "...",
        "url": "https://...",
        "image": None,
        "published_at": None,
        "source": {"name": "...", "url": None},
        "created_at": datetime(...),
    }
"""
from __future__ import annotations
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.core.exceptions import ValidationException

URL_PATTERN = re.compile(
    r"https?://(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_\+.~#?&//=]*)"
)

MSG_TITLE = "Please add a title"
MSG_DESCRIPTION = "Please add a description"
MSG_URL_REQUIRED = "Please add a URL"
MSG_URL_INVALID = "Please use a valid URL with HTTP or HTTPS"
MSG_SOURCE_NAME = "Please add a source name"

# 클라이언트가 보내도 무시하는 시스템 필드
SYSTEM_FIELDS = ("_id", "id", "owner", "user", "created_at", "createdAt")


def _required(value: Optional[str], message: str) -> str:
    if value is None or value == "":
        raise PydanticCustomError("required", message)
    return value


def _check_url(value: str) -> str:
    if not URL_PATTERN.fullmatch(value):
        raise PydanticCustomError("url_pattern", MSG_URL_INVALID)
    return value


class BookmarkSource(BaseModel):
    """
    북마크 출처. name 필수, url은 있을 때만 형식 검사.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, validate_default=True)
    url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> str:
        return _required(v, MSG_SOURCE_NAME)

    @field_validator("url")
    @classmethod
    def check_source_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return v
        return _check_url(v)


class BookmarkFields(BaseModel):
    """
    사용자가 쓸 수 있는 북마크 필드 집합.

    누락된 필수 필드도 커스텀 메시지로 보고하기 위해
    필수 필드를 Optional + validate_default로 선언합니다.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, validate_default=True)
    description: Optional[str] = Field(default=None, validate_default=True)
    content: Optional[str] = None
    url: Optional[str] = Field(default=None, validate_default=True)
    image: Optional[str] = None
    published_at: Optional[datetime] = None
    source: Optional[BookmarkSource] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: Optional[str]) -> str:
        if v is not None:
            v = v.strip()
        return _required(v, MSG_TITLE)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: Optional[str]) -> str:
        return _required(v, MSG_DESCRIPTION)

    @field_validator("url")
    @classmethod
    def check_url(cls, v: Optional[str]) -> str:
        return _check_url(_required(v, MSG_URL_REQUIRED))


WRITABLE_FIELDS = tuple(BookmarkFields.model_fields)


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "bookmark"
        parts.append(f"{loc}: {err['msg']}")
    return "Bookmark validation failed: " + ", ".join(parts)


def validate_bookmark(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    필드 제약을 검사하고 정규화된 필드 dict를 반환.

    Raises:
        ValidationException: 필드 규칙 위반 (위반한 필드와 규칙을 메시지에 포함)
    """
    try:
        fields = BookmarkFields.model_validate(data)
    except ValidationError as e:
        raise ValidationException(_format_errors(e)) from e
    return fields.model_dump()


def build_new_bookmark(
    owner: str,
    payload: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    생성용 문서를 만든다.

    - payload의 owner/user 등 시스템 필드는 무시하고 owner는 호출자 식별자로 고정
    - content가 없으면 저장 직전에 description 값으로 한 번만 채움
    - created_at은 현재 UTC 시각
    """
    data = {k: v for k, v in payload.items() if k not in SYSTEM_FIELDS}
    doc = validate_bookmark(data)

    if doc["content"] is None:
        doc["content"] = doc["description"]

    doc["owner"] = owner
    doc["created_at"] = now or datetime.now(timezone.utc)
    return doc


def build_bookmark_changes(existing: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    부분 수정용 $set 값을 만든다.

    기존 문서에 변경분을 합친 결과 전체를 검증한 뒤,
    payload에 포함된 쓰기 가능 필드만 돌려준다. content는 다시 계산하지 않는다.
    """
    changes = {k: v for k, v in payload.items() if k in WRITABLE_FIELDS}
    merged = {k: existing.get(k) for k in WRITABLE_FIELDS}
    merged.update(changes)
    validated = validate_bookmark(merged)
    return {k: validated[k] for k in changes}

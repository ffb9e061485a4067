"""
MongoDB 관련 유틸리티 함수.

ObjectId 변환, 문서 직렬화 등 MongoDB 작업에 필요한 공통 함수를 제공합니다.
"""

from bson import ObjectId
from bson.errors import InvalidId
from typing import Any, Dict

from app.core.exceptions import ValidationException


def safe_object_id(id_str: str, field_name: str = "ID") -> ObjectId:
    """
    문자열을 안전하게 ObjectId로 변환.

    유효하지 않은 ObjectId 형식인 경우 ValidationException을 발생시킵니다.

    Args:
        id_str: 변환할 문자열 ID
        field_name: 에러 메시지에 표시할 필드 이름 (기본: "ID")

    Returns:
        ObjectId: 변환된 ObjectId 객체

    Raises:
        ValidationException: 유효하지 않은 ObjectId 형식인 경우 (HTTP 400)

    Example:
        >>> oid = safe_object_id("507f1f77bcf86cd799439011", "bookmark ID")
    """
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        raise ValidationException(f"Invalid {field_name} format: {id_str}")


def serialize_doc_for_api(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    MongoDB 문서를 API 응답용으로 직렬화.

    - "_id"를 "id"로 변경하고 문자열로 변환
    - 원본 문서는 수정하지 않음

    Example:
        >>> doc = {"_id": ObjectId(...), "title": "..."}
        >>> serialize_doc_for_api(doc)
        {"id": "507f...", "title": "..."}
    """
    out = dict(doc)
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    return out

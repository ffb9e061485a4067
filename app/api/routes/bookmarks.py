from fastapi import APIRouter, Depends, status

from app.api.deps import get_bookmark_service, get_current_user
from app.schemas.bookmark import (
    ApiResponse,
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkOut,
    BookmarkUpdate,
)
from app.services.bookmark_service import BookmarkService
from app.utils.mongodb import serialize_doc_for_api

# 모든 라우트에 인증 적용
router = APIRouter(
    prefix="/api/v1/bookmarks",
    tags=["bookmarks"],
    dependencies=[Depends(get_current_user)],
)


def _to_out(doc: dict) -> BookmarkOut:
    # API 응답용으로 변환: _id → id
    return BookmarkOut.model_validate(serialize_doc_for_api(doc))


@router.get("", response_model=BookmarkListResponse)
@router.get("/", response_model=BookmarkListResponse, include_in_schema=False)
def list_bookmarks(
    current_user: str = Depends(get_current_user),
    service: BookmarkService = Depends(get_bookmark_service),
):
    items, count = service.list_bookmarks(current_user)
    return BookmarkListResponse(count=count, data=[_to_out(doc) for doc in items])


@router.post("", response_model=ApiResponse[BookmarkOut], status_code=status.HTTP_201_CREATED)
@router.post(
    "/",
    response_model=ApiResponse[BookmarkOut],
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
def create_bookmark(
    payload: BookmarkCreate,
    current_user: str = Depends(get_current_user),
    service: BookmarkService = Depends(get_bookmark_service),
):
    doc = service.create_bookmark(current_user, payload.to_fields())
    return ApiResponse[BookmarkOut](data=_to_out(doc))


@router.get("/{bookmark_id}", response_model=ApiResponse[BookmarkOut])
def get_bookmark(
    bookmark_id: str,
    current_user: str = Depends(get_current_user),
    service: BookmarkService = Depends(get_bookmark_service),
):
    doc = service.get_bookmark(current_user, bookmark_id)
    return ApiResponse[BookmarkOut](data=_to_out(doc))


@router.put("/{bookmark_id}", response_model=ApiResponse[BookmarkOut])
def update_bookmark(
    bookmark_id: str,
    payload: BookmarkUpdate,
    current_user: str = Depends(get_current_user),
    service: BookmarkService = Depends(get_bookmark_service),
):
    doc = service.update_bookmark(current_user, bookmark_id, payload.to_fields())
    return ApiResponse[BookmarkOut](data=_to_out(doc))


@router.delete("/{bookmark_id}", response_model=ApiResponse[dict])
def delete_bookmark(
    bookmark_id: str,
    current_user: str = Depends(get_current_user),
    service: BookmarkService = Depends(get_bookmark_service),
):
    service.delete_bookmark(current_user, bookmark_id)
    return ApiResponse[dict](data={})

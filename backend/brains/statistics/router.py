# backend/brains/statistics/router.py

import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from brains.store.client import StoreClient

from .schemas import UserStatisticsRequest, UserStatisticsResponse
from .service import AuthenticationError, UserStatisticsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["statistics"])


@lru_cache()
def get_user_statistics_service() -> UserStatisticsService:
    return UserStatisticsService(StoreClient())


async def requested_user_id(request: Request) -> Optional[str]:
    """
    リクエストボディから userId を取り出す。

    ボディが空・JSON として不正・形式違いの場合は userId 無しとして扱い、
    Authorization ヘッダーでの解決に回す。
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return UserStatisticsRequest.model_validate_json(raw).user_id
    except ValidationError:
        logger.info("Ignoring unparseable user-statistics body.")
        return None


def _status_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content={"status": "error", "message": message},
        status_code=status_code,
    )


@router.post(
    "/user-statistics",
    response_model=UserStatisticsResponse,
    summary="ユーザーの利用状況",
)
def get_user_statistics(
    requested_id: Optional[str] = Depends(requested_user_id),
    authorization: Optional[str] = Header(None),
    service: UserStatisticsService = Depends(get_user_statistics_service),
):
    """
    - userId 省略時は Authorization ヘッダーから解決（失敗は 401）
    - 予期しない例外は 500 {error, status: "error"}
    """
    try:
        user_id = service.resolve_user_id(requested_id, authorization)
    except AuthenticationError as exc:
        return _status_error(str(exc), status.HTTP_401_UNAUTHORIZED)

    if not user_id:
        return _status_error("User ID is required", status.HTTP_400_BAD_REQUEST)

    try:
        return service.collect(user_id)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in user-statistics. user_id=%s", user_id)
        return JSONResponse(
            content={"error": str(exc) or "Unknown error occurred", "status": "error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

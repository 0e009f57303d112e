# backend/brains/notion/router.py

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends

from brains.store.client import StoreClient
from brains.utils.responses import error_response

from .schemas import (
    NotionDatabasesRequest,
    NotionDatabasesResponse,
    NotionImportRequest,
    NotionImportResponse,
)
from .service import NotionImportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notion", tags=["notion"])


@lru_cache()
def get_notion_import_service() -> NotionImportService:
    """
    NotionImportService のシングルトンインスタンスを取得する。

    テストでは app.dependency_overrides で差し替える。
    """
    return NotionImportService(StoreClient())


@router.post(
    "/import-page",
    response_model=NotionImportResponse,
    summary="Notion ページをプロジェクトノートとして取り込む",
    description=(
        "userId / pageId / projectId を受け取り、Notion ページの内容を "
        "Markdown 風テキストに変換して project_notes に保存する。"
    ),
)
def import_notion_page(
    body: NotionImportRequest,
    service: NotionImportService = Depends(get_notion_import_service),
):
    """
    - 正常系: 作成したノートを {success, note, message} で返す
    - 異常系: 入力不足・Notion API エラー・保存失敗はすべて 400 {success: false, error}
    """
    try:
        return service.import_page(body)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in notion import-page. page_id=%s", body.page_id)
        return error_response(exc, status_code=400)


@router.post(
    "/databases",
    response_model=NotionDatabasesResponse,
    summary="Notion ワークスペースのデータベース一覧",
)
def list_notion_databases(
    body: NotionDatabasesRequest,
    service: NotionImportService = Depends(get_notion_import_service),
):
    try:
        return service.list_databases(body)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in notion databases. user_id=%s", body.user_id)
        return error_response(exc, status_code=400)

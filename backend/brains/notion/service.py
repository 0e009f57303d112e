# backend/brains/notion/service.py

"""
Notion インポートのサービス層。

- リクエストの必須項目チェック
- プロジェクトのアクセス権確認と Notion 接続情報の取得
- ページ取得 → タイトル推定 → ブロック変換 → 整形 → ノート保存
- ワークスペース内のデータベース一覧取得
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from brains.store.client import StoreClient
from brains.store.connections import get_notion_connection
from brains.store.notes import NotePersister
from brains.store.projects import ensure_project_access
from brains.utils.formatting import format_text

from .client import NotionClient
from .converter import render_blocks
from .fetcher import BlockFetcher, FetchedPage
from .schemas import (
    ImportedDocument,
    NotionDatabaseSummary,
    NotionDatabasesRequest,
    NotionDatabasesResponse,
    NotionImportRequest,
    NotionImportResponse,
    SourceDocument,
    join_rich_text,
)
from .title import resolve_title

logger = logging.getLogger(__name__)

# アクセストークン → NotionClient（テストではフェイクを渡す）
NotionClientFactory = Callable[[str], NotionClient]


class MissingParametersError(ValueError):
    """リクエストの必須項目が欠けている場合の例外。"""


def build_document(fetched: FetchedPage) -> ImportedDocument:
    """
    取得済みのページから ImportedDocument を組み立てる（HTTP 通信なし）。
    """
    title = resolve_title(fetched.page, fetched.blocks)
    body = format_text(render_blocks(fetched.blocks))

    return ImportedDocument(
        title=title,
        body=body,
        source=SourceDocument(
            type="notion",
            url=fetched.url or None,
            name=title,
            id=fetched.page_id,
        ),
    )


def _database_icon(icon: Any) -> Optional[str]:
    if not isinstance(icon, dict):
        return None
    if icon.get("type") == "emoji":
        return icon.get("emoji")
    if icon.get("type") == "external":
        external = icon.get("external") or {}
        return external.get("url")
    return None


def _to_database_summary(raw: Dict[str, Any]) -> NotionDatabaseSummary:
    title = "Untitled Database"
    if isinstance(raw.get("title"), list):
        title = join_rich_text(raw["title"])

    return NotionDatabaseSummary(
        id=raw.get("id", ""),
        title=title,
        url=raw.get("url"),
        icon=_database_icon(raw.get("icon")),
        created_time=raw.get("created_time"),
        last_edited_time=raw.get("last_edited_time"),
    )


class NotionImportService:
    """
    Notion ページ 1 件をプロジェクトノートとして取り込むサービス。

    - StoreClient はコンストラクタで注入する
    - NotionClient はユーザーのアクセストークンごとに client_factory で生成する
    """

    def __init__(
        self,
        store: StoreClient,
        *,
        client_factory: NotionClientFactory = NotionClient,
    ) -> None:
        self._store = store
        self._client_factory = client_factory
        self._persister = NotePersister(store)

    def import_page(self, request: NotionImportRequest) -> NotionImportResponse:
        if not request.user_id or not request.page_id or not request.project_id:
            raise MissingParametersError(
                "Missing required parameters: userId, pageId, and projectId"
            )

        ensure_project_access(self._store, request.project_id, request.user_id)
        connection = get_notion_connection(self._store, request.user_id)

        fetcher = BlockFetcher(self._client_factory(connection.access_token))
        fetched = fetcher.fetch_page(request.page_id)

        document = build_document(fetched)
        logger.info("Extracted page title. page_id=%s title=%r", request.page_id, document.title)

        note = self._persister.create_note(
            document,
            project_id=request.project_id,
            user_id=request.user_id,
        )

        return NotionImportResponse(
            note=note,
            message=f'Successfully imported "{document.title}" from Notion',
        )

    def list_databases(self, request: NotionDatabasesRequest) -> NotionDatabasesResponse:
        if not request.user_id:
            raise MissingParametersError("Missing required parameter: userId")

        logger.info("Processing database request. user_id=%s", request.user_id)

        connection = get_notion_connection(self._store, request.user_id)
        client = self._client_factory(connection.access_token)

        results = client.search_databases()
        logger.info("Retrieved %d databases from Notion API", len(results))

        databases: List[NotionDatabaseSummary] = [
            _to_database_summary(raw) for raw in results if isinstance(raw, dict)
        ]
        return NotionDatabasesResponse(
            databases=databases,
            workspace_name=connection.workspace_name,
        )

# backend/brains/store/connections.py

"""
ユーザーごとの Notion 接続情報（notion_connections テーブル）。
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .client import StoreClient, StoreError, eq

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_NAME = "Notion Workspace"


class NotionConnectionNotFoundError(LookupError):
    """Notion 接続情報が見つからない場合の例外。"""

    def __init__(self) -> None:
        super().__init__("Notion connection not found")


@dataclass(frozen=True)
class NotionConnection:
    access_token: str
    workspace_name: str = DEFAULT_WORKSPACE_NAME

    def __repr__(self) -> str:
        # アクセストークンはログに出さない
        return f"NotionConnection(workspace_name={self.workspace_name!r})"


def get_notion_connection(store: StoreClient, user_id: str) -> NotionConnection:
    try:
        row: Optional[dict] = store.select_one(
            "notion_connections",
            columns="access_token,workspace_name",
            filters={"user_id": eq(user_id)},
        )
    except StoreError as exc:
        logger.error("Error fetching Notion connection. user_id=%s error=%s", user_id, exc)
        raise NotionConnectionNotFoundError() from exc

    if not row or not row.get("access_token"):
        raise NotionConnectionNotFoundError()

    return NotionConnection(
        access_token=row["access_token"],
        workspace_name=row.get("workspace_name") or DEFAULT_WORKSPACE_NAME,
    )

# backend/brains/store/notes.py

"""
project_notes テーブルへの書き込み。
"""

import logging
from typing import Any, Dict, List

from brains.notion.schemas import ImportedDocument

from .client import StoreClient, StoreError

logger = logging.getLogger(__name__)

NOTES_TABLE = "project_notes"
NOTION_IMPORT_TAGS: List[str] = ["notion", "imported", "notion-import"]


class NotePersister:
    """
    ImportedDocument を 1 行のノートとして保存する。

    insert は 1 回のみ。失敗時のロールバックなどはストア側の原子性に任せる。
    """

    def __init__(self, store: StoreClient) -> None:
        self._store = store

    def create_note(
        self,
        document: ImportedDocument,
        *,
        project_id: str,
        user_id: str,
    ) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "title": document.title,
            "content": document.body,
            "project_id": project_id,
            "user_id": user_id,
            "tags": list(NOTION_IMPORT_TAGS),
            "source_document": document.source.model_dump(),
        }

        try:
            return self._store.insert(NOTES_TABLE, row)
        except StoreError as exc:
            logger.error(
                "Error creating note. project_id=%s source_id=%s error=%s",
                project_id,
                document.source.id,
                exc,
            )
            raise StoreError(
                f"Failed to create note: {exc.message}",
                status_code=exc.status_code,
                code=exc.code,
            ) from exc

# backend/brains/notion/schemas.py

"""
Notion から取得したデータを内部で扱うためのスキーマ定義。

- NotionBlock: ブロック 1 件（種別ごとの付帯情報と、取得済みの子ブロックを持つ）
- ImportedDocument: 変換後のドキュメント（タイトル・本文・取得元情報）
- /notion/* エンドポイントのリクエスト・レスポンス
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BlockKind(str, Enum):
    """
    変換対象として扱うブロック種別。

    Notion の type タグがここに無い場合は UNKNOWN として扱い、
    元のタグ文字列は NotionBlock.type に残す。
    """

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    CHILD_PAGE = "child_page"
    QUOTE = "quote"
    CODE = "code"
    DIVIDER = "divider"
    CALLOUT = "callout"
    TABLE = "table"
    COLUMN_LIST = "column_list"
    UNKNOWN = "unknown"

    @classmethod
    def from_type(cls, type_tag: str) -> "BlockKind":
        try:
            kind = cls(type_tag)
        except ValueError:
            return cls.UNKNOWN
        return kind


class RichTextRun(BaseModel):
    """リッチテキストの 1 区間。装飾は扱わず plain_text のみ使う。"""

    plain_text: str = ""


def join_rich_text(runs: Optional[List[Dict[str, Any]]]) -> str:
    """
    Notion API の rich_text / title 配列を区切り無しで連結する。
    """
    if not isinstance(runs, list):
        return ""
    return "".join(
        run.get("plain_text") or "" for run in runs if isinstance(run, dict)
    )


class NotionBlock(BaseModel):
    """
    Notion ブロック 1 件分。

    has_children が True のブロックは、fetcher によって children が埋められる。
    子ブロックの取得に失敗した場合は children_error が True になる。
    """

    id: str = Field(..., description="ブロック ID")
    type: str = Field(..., description="Notion 上の type タグ（未対応種別でもそのまま保持）")
    kind: BlockKind = Field(..., description="変換で使う種別")
    rich_text: List[RichTextRun] = Field(default_factory=list)
    has_children: bool = False

    checked: bool = Field(False, description="to_do のチェック状態")
    language: Optional[str] = Field(None, description="code ブロックの言語")
    emoji: Optional[str] = Field(None, description="callout のアイコン絵文字")
    title: Optional[str] = Field(None, description="child_page のタイトル")

    children: List[NotionBlock] = Field(default_factory=list)
    children_error: bool = False

    @property
    def text(self) -> str:
        return "".join(run.plain_text for run in self.rich_text)

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "NotionBlock":
        """
        Notion API のブロックオブジェクト（dict）から NotionBlock を組み立てる。
        """
        type_tag = raw.get("type") or ""
        payload = raw.get(type_tag)
        if not isinstance(payload, dict):
            payload = {}

        runs = payload.get("rich_text")
        rich_text = [
            RichTextRun(plain_text=run.get("plain_text") or "")
            for run in (runs if isinstance(runs, list) else [])
            if isinstance(run, dict)
        ]

        icon = payload.get("icon")
        emoji = icon.get("emoji") if isinstance(icon, dict) else None

        return cls(
            id=raw.get("id", ""),
            type=type_tag,
            kind=BlockKind.from_type(type_tag),
            rich_text=rich_text,
            has_children=bool(raw.get("has_children")),
            checked=bool(payload.get("checked")),
            language=payload.get("language"),
            emoji=emoji,
            title=payload.get("title") if isinstance(payload.get("title"), str) else None,
        )


class SourceDocument(BaseModel):
    """インポート元の情報（project_notes.source_document に保存）。"""

    type: str = "notion"
    url: Optional[str] = None
    name: str
    id: str


class ImportedDocument(BaseModel):
    """Notion ページを変換した結果。"""

    title: str
    body: str
    source: SourceDocument


class NotionImportRequest(BaseModel):
    """
    /notion/import-page のリクエストボディ。

    必須チェックはサービス層で行い、欠けていれば 400 を返す。
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    page_id: Optional[str] = Field(None, alias="pageId")
    project_id: Optional[str] = Field(None, alias="projectId")


class NotionImportResponse(BaseModel):
    """/notion/import-page の成功レスポンス。"""

    success: bool = True
    note: Dict[str, Any]
    message: str


class NotionDatabasesRequest(BaseModel):
    """/notion/databases のリクエストボディ。"""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")


class NotionDatabaseSummary(BaseModel):
    """検索結果のデータベース 1 件分。"""

    id: str
    title: str = "Untitled Database"
    url: Optional[str] = None
    icon: Optional[str] = None
    created_time: Optional[str] = None
    last_edited_time: Optional[str] = None


class NotionDatabasesResponse(BaseModel):
    """/notion/databases の成功レスポンス。"""

    success: bool = True
    databases: List[NotionDatabaseSummary]
    workspace_name: str

# backend/brains/notion/title.py

"""
Notion ページのタイトル推定。

プロパティ → 本文ブロック → 日付入りの固定文字列、の順にフォールバックし、
空文字列は決して返さない。
"""

from datetime import date
from typing import Any, Dict, Iterable, Optional

from .schemas import BlockKind, NotionBlock, join_rich_text

MAX_PARAGRAPH_TITLE_LENGTH = 40


def _title_property_text(prop: Any) -> str:
    if not isinstance(prop, dict):
        return ""
    return join_rich_text(prop.get("title"))


def _title_from_properties(properties: Dict[str, Any]) -> str:
    # 1. 標準の "title" プロパティ
    text = _title_property_text(properties.get("title"))
    if text:
        return text

    # 2. データベースでよく使われる "Name" プロパティ
    text = _title_property_text(properties.get("Name"))
    if text:
        return text

    # 3. type が title の最初のプロパティ
    for prop in properties.values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            text = _title_property_text(prop)
            if text:
                return text

    return ""


def _first_block_text(blocks: Iterable[NotionBlock], kind: BlockKind) -> str:
    for block in blocks:
        if block.kind == kind and block.text:
            return block.text
    return ""


def fallback_title(today: Optional[date] = None) -> str:
    """
    最終フォールバックのタイトル。日付は M/D/YYYY 形式。
    """
    today = today or date.today()
    return f"Notion Page ({today.month}/{today.day}/{today.year})"


def resolve_title(
    page: Dict[str, Any],
    blocks: Iterable[NotionBlock],
    *,
    today: Optional[date] = None,
) -> str:
    """
    ページメタデータと直下のブロックからタイトルを決める。

    1. properties["title"]
    2. properties["Name"]
    3. type == "title" の最初のプロパティ
    4. 最初の heading_1 ブロック
    5. 最初の paragraph ブロック（40 文字を超える場合は切り詰めて "..."）
    6. "Notion Page (<日付>)"
    """
    blocks = list(blocks)

    properties = page.get("properties")
    if isinstance(properties, dict):
        title = _title_from_properties(properties)
        if title:
            return title

    title = _first_block_text(blocks, BlockKind.HEADING_1)
    if title:
        return title

    title = _first_block_text(blocks, BlockKind.PARAGRAPH)
    if title:
        if len(title) > MAX_PARAGRAPH_TITLE_LENGTH:
            title = title[:MAX_PARAGRAPH_TITLE_LENGTH] + "..."
        return title

    return fallback_title(today)

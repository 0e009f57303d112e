# backend/brains/notion/converter.py

"""
Notion ブロックツリー → Markdown 風テキストの変換。

- ネストの深さ 1 つにつきインデント 2 スペース
- rich_text は区切り無しで連結
- 子ブロックは親の断片の直後に level + 1 で連結（ドキュメント順のまま）

ここでは HTTP 通信は行わない。子ブロックは fetcher で取得済みである前提。
"""

from typing import Callable, Dict, Iterable

from .schemas import BlockKind, NotionBlock

NESTED_ERROR_PLACEHOLDER = "\n\n*[Error loading nested content]*\n\n"

Renderer = Callable[[NotionBlock, str], str]


def _paragraph(block: NotionBlock, indent: str) -> str:
    # 空の段落でも空行を 1 つ出す
    return f"{indent}{block.text}\n\n"


def _heading(level: int) -> Renderer:
    marker = "#" * level

    def render(block: NotionBlock, indent: str) -> str:
        if not block.text:
            return ""
        return f"{indent}{marker} {block.text}\n\n"

    return render


def _bulleted_list_item(block: NotionBlock, indent: str) -> str:
    if not block.text:
        return ""
    return f"{indent}- {block.text}\n"


def _numbered_list_item(block: NotionBlock, indent: str) -> str:
    if not block.text:
        return ""
    return f"{indent}1. {block.text}\n"


def _to_do(block: NotionBlock, indent: str) -> str:
    if not block.text:
        return ""
    checkbox = "[x]" if block.checked else "[ ]"
    return f"{indent}- {checkbox} {block.text}\n"


def _toggle(block: NotionBlock, indent: str) -> str:
    if not block.text:
        return ""
    return f"{indent}**Toggle: {block.text}**\n\n"


def _child_page(block: NotionBlock, indent: str) -> str:
    return f"{indent}**Child Page: {block.title or 'Untitled'}**\n\n"


def _quote(block: NotionBlock, indent: str) -> str:
    if not block.text:
        return ""
    return f"{indent}> {block.text}\n\n"


def _code(block: NotionBlock, indent: str) -> str:
    if not block.text:
        return ""
    return f"{indent}```{block.language or ''}\n{block.text}\n```\n\n"


def _divider(block: NotionBlock, indent: str) -> str:
    return f"{indent}---\n\n"


def _callout(block: NotionBlock, indent: str) -> str:
    if not block.text:
        return ""
    emoji = f"{block.emoji} " if block.emoji else ""
    return f"{indent}> {emoji}**Callout:** {block.text}\n\n"


def _table(block: NotionBlock, indent: str) -> str:
    return f"{indent}[Table content not fully supported]\n\n"


def _column_list(block: NotionBlock, indent: str) -> str:
    return f"{indent}[Column layout not fully supported]\n\n"


def _unsupported(block: NotionBlock, indent: str) -> str:
    return f"{indent}[{block.type} block type not supported]\n\n"


_RENDERERS: Dict[BlockKind, Renderer] = {
    BlockKind.PARAGRAPH: _paragraph,
    BlockKind.HEADING_1: _heading(1),
    BlockKind.HEADING_2: _heading(2),
    BlockKind.HEADING_3: _heading(3),
    BlockKind.BULLETED_LIST_ITEM: _bulleted_list_item,
    BlockKind.NUMBERED_LIST_ITEM: _numbered_list_item,
    BlockKind.TO_DO: _to_do,
    BlockKind.TOGGLE: _toggle,
    BlockKind.CHILD_PAGE: _child_page,
    BlockKind.QUOTE: _quote,
    BlockKind.CODE: _code,
    BlockKind.DIVIDER: _divider,
    BlockKind.CALLOUT: _callout,
    BlockKind.TABLE: _table,
    BlockKind.COLUMN_LIST: _column_list,
    BlockKind.UNKNOWN: _unsupported,
}


def render_block(block: NotionBlock, level: int = 0) -> str:
    """
    ブロック 1 件（子ブロックは含まない）をテキスト断片に変換する。
    """
    indent = "  " * level
    renderer = _RENDERERS.get(block.kind, _unsupported)
    return renderer(block, indent)


def render_blocks(blocks: Iterable[NotionBlock], level: int = 0) -> str:
    """
    ブロック列を再帰的に変換して連結する。

    子ブロックの取得に失敗していたブロックの後ろにはプレースホルダーを入れる。
    """
    parts = []
    for block in blocks:
        parts.append(render_block(block, level))

        if block.children_error:
            parts.append(NESTED_ERROR_PLACEHOLDER)
        elif block.children:
            parts.append(render_blocks(block.children, level + 1))

    return "".join(parts)

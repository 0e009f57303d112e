# backend/brains/notion/fetcher.py

"""
Notion ページとブロックツリーの取得。

- ページメタデータ: GET /pages/{page_id}
- 直下のブロック: GET /blocks/{page_id}/children?page_size=100（1 ページ分のみ）
- has_children のブロック: GET /blocks/{block_id}/children を再帰的に取得

子ブロックの取得は 1 件ずつ、ドキュメント順に逐次実行する。
深さの上限や循環の検出は行わない。
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from .client import NotionClient, NotionClientError
from .config import TOP_LEVEL_PAGE_SIZE
from .schemas import NotionBlock

logger = logging.getLogger(__name__)


@dataclass
class FetchedPage:
    """取得済みのページメタデータと、子ブロックまで埋めたブロック列。"""

    page_id: str
    page: Dict[str, Any]
    blocks: List[NotionBlock]

    @property
    def url(self) -> str:
        return self.page.get("url") or ""


class BlockFetcher:
    """
    NotionClient を使ってページ 1 件分のブロックツリーを組み立てる。

    ページ本体・直下ブロックの取得失敗は例外としてそのまま上に伝える。
    ネストした子ブロックの取得失敗はそのブロックに children_error を立てて続行する。
    """

    def __init__(self, client: NotionClient) -> None:
        self._client = client

    def fetch_page(self, page_id: str) -> FetchedPage:
        page = self._client.retrieve_page(page_id)
        raw_blocks = self._client.list_block_children(
            page_id, page_size=TOP_LEVEL_PAGE_SIZE
        )

        blocks = [NotionBlock.from_api(raw) for raw in raw_blocks]
        self._attach_children(blocks)

        return FetchedPage(page_id=page_id, page=page, blocks=blocks)

    def _attach_children(self, blocks: List[NotionBlock]) -> None:
        for block in blocks:
            if not block.has_children:
                continue

            try:
                raw_children = self._client.list_block_children(block.id)
            except NotionClientError as exc:
                logger.warning(
                    "Failed to fetch children for block. block_id=%s error=%s",
                    block.id,
                    exc,
                )
                block.children_error = True
                continue

            block.children = [NotionBlock.from_api(raw) for raw in raw_children]
            self._attach_children(block.children)

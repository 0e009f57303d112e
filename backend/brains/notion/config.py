# backend/brains/notion/config.py

"""
Notion 連携に必要な設定値をまとめるモジュール。

アクセストークンはユーザーごとに notion_connections テーブルから取得するため、
ここでは API のエンドポイントやバージョンなど共通の値だけを扱う。
"""

from dataclasses import dataclass
from functools import lru_cache

from brains.utils.config import get_env, get_env_float

# ページ直下のブロック取得時の page_size。これ以上のページングは行わない。
TOP_LEVEL_PAGE_SIZE = 100


@dataclass(frozen=True)
class NotionConfig:
    """Notion API 用の設定値コンテナ。"""

    api_base_url: str
    api_version: str
    timeout_seconds: float = 30.0


@lru_cache()
def get_notion_config() -> NotionConfig:
    """
    環境変数から Notion 設定を読み込む。

    任意:
      - NOTION_API_BASE_URL    (デフォルト: https://api.notion.com/v1)
      - NOTION_API_VERSION     (デフォルト: 2022-06-28)
      - NOTION_TIMEOUT_SECONDS (デフォルト: 30)
    """
    api_base_url = get_env(
        "NOTION_API_BASE_URL",
        default="https://api.notion.com/v1",
        required=False,
    )
    api_version = get_env(
        "NOTION_API_VERSION",
        default="2022-06-28",
        required=False,
    )

    return NotionConfig(
        api_base_url=api_base_url.rstrip("/"),
        api_version=api_version,
        timeout_seconds=get_env_float("NOTION_TIMEOUT_SECONDS", 30.0),
    )

# backend/brains/store/config.py

"""
マネージドデータベース接続用の設定値。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from brains.utils.config import get_env, get_env_float


@dataclass(frozen=True)
class StoreConfig:
    """REST / Auth API 用の設定値コンテナ。"""

    url: str
    service_role_key: str
    anon_key: Optional[str] = None
    timeout_seconds: float = 10.0

    @property
    def rest_url(self) -> str:
        return f"{self.url}/rest/v1"

    @property
    def auth_url(self) -> str:
        return f"{self.url}/auth/v1"


@lru_cache()
def get_store_config() -> StoreConfig:
    """
    環境変数からストア設定を読み込む。

    必須:
      - SUPABASE_URL
      - SUPABASE_SERVICE_ROLE_KEY

    任意:
      - SUPABASE_ANON_KEY          （Authorization ヘッダーからユーザーを解決する場合に使用）
      - SUPABASE_TIMEOUT_SECONDS   （デフォルト: 10）
    """
    url = get_env("SUPABASE_URL")
    service_role_key = get_env("SUPABASE_SERVICE_ROLE_KEY")

    return StoreConfig(
        url=url.rstrip("/"),
        service_role_key=service_role_key,
        anon_key=get_env("SUPABASE_ANON_KEY", required=False),
        timeout_seconds=get_env_float("SUPABASE_TIMEOUT_SECONDS", 10.0),
    )

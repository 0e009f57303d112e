# backend/brains/summaries/config.py

"""
LLM プロバイダ関連の設定値。

API キーはどちらも任意。どちらも未設定の場合は要約リクエスト時にエラーにする。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from brains.utils.config import get_env, get_env_float


@dataclass(frozen=True)
class LLMConfig:
    openai_api_key: Optional[str]
    claude_api_key: Optional[str]
    openai_base_url: str = "https://api.openai.com/v1"
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    anthropic_version: str = "2023-06-01"
    openai_model: str = "gpt-4o-mini"
    claude_model: str = "claude-3-sonnet-20240229"
    timeout_seconds: float = 60.0


@lru_cache()
def get_llm_config() -> LLMConfig:
    """
    環境変数から LLM 設定を読み込む。

    任意:
      - OPENAI_API_KEY / CLAUDE_API_KEY
      - OPENAI_MODEL (デフォルト: gpt-4o-mini)
      - CLAUDE_MODEL (デフォルト: claude-3-sonnet-20240229)
      - LLM_TIMEOUT_SECONDS (デフォルト: 60)
    """
    return LLMConfig(
        openai_api_key=get_env("OPENAI_API_KEY", required=False),
        claude_api_key=get_env("CLAUDE_API_KEY", required=False),
        openai_model=get_env("OPENAI_MODEL", default="gpt-4o-mini", required=False),
        claude_model=get_env(
            "CLAUDE_MODEL", default="claude-3-sonnet-20240229", required=False
        ),
        timeout_seconds=get_env_float("LLM_TIMEOUT_SECONDS", 60.0),
    )

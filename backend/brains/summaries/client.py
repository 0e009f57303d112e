# backend/brains/summaries/client.py

"""
Claude (Messages API) / OpenAI (Chat Completions API) を呼び出すクライアント。

Claude は httpx で直接、OpenAI は公式 SDK 経由で呼び出す。
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import OpenAI

from .config import LLMConfig, get_llm_config

logger = logging.getLogger(__name__)


class LLMClientError(RuntimeError):
    """LLM クライアント全般の例外。"""


class LLMAPIError(LLMClientError):
    """LLM API が 2xx 以外を返した場合の例外。"""

    def __init__(self, provider: str, status_code: int, reason: str) -> None:
        super().__init__(f"{provider} API error: {reason}")
        self.provider = provider
        self.status_code = status_code


class LLMClient:
    """
    要約用途に必要な最小限の呼び出しだけを持つクライアント。
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        *,
        openai_client: Optional[OpenAI] = None,
    ) -> None:
        self.config = config or get_llm_config()
        self._openai_client = openai_client

    @property
    def has_claude(self) -> bool:
        return bool(self.config.claude_api_key)

    @property
    def has_openai(self) -> bool:
        return bool(self.config.openai_api_key)

    def _post(
        self,
        provider: str,
        url: str,
        headers: Dict[str, str],
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            response = httpx.post(
                url,
                headers=headers,
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise LLMClientError(f"Failed to call {provider} API: {exc}") from exc

        if response.status_code // 100 != 2:
            # 本文はログにのみ残す（プロンプトやキーは含まれない）
            logger.error("%s API error: status=%s body=%s", provider, response.status_code, response.text)
            raise LLMAPIError(provider, response.status_code, response.reason_phrase)

        return response.json()

    def claude_message(self, prompt: str, *, max_tokens: int) -> str:
        if not self.config.claude_api_key:
            raise LLMClientError("CLAUDE_API_KEY is not set")

        data = self._post(
            "Claude",
            f"{self.config.anthropic_base_url}/messages",
            {
                "Content-Type": "application/json",
                "x-api-key": self.config.claude_api_key,
                "anthropic-version": self.config.anthropic_version,
            },
            {
                "model": self.config.claude_model,
                "max_tokens": max_tokens,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

        try:
            return data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMClientError("Unexpected Claude API response format.") from exc

    def _openai(self) -> OpenAI:
        """OpenAI SDK クライアントを遅延生成する。"""
        if self._openai_client is None:
            self._openai_client = OpenAI(
                api_key=self.config.openai_api_key,
                base_url=self.config.openai_base_url,
                timeout=self.config.timeout_seconds,
                max_retries=0,
            )
        return self._openai_client

    def openai_chat(
        self,
        messages: List[Dict[str, str]],
        *,
        max_tokens: int,
        temperature: Optional[float] = None,
    ) -> str:
        if not self.config.openai_api_key:
            raise LLMClientError("OPENAI_API_KEY is not set")

        options: Dict[str, Any] = {}
        if temperature is not None:
            options["temperature"] = temperature

        try:
            response = self._openai().chat.completions.create(
                model=self.config.openai_model,
                messages=messages,
                max_tokens=max_tokens,
                **options,
            )
        except openai.APIStatusError as exc:
            logger.error("OpenAI API error: status=%s body=%s", exc.status_code, exc.body)
            raise LLMAPIError("OpenAI", exc.status_code, exc.response.reason_phrase) from exc
        except openai.APIError as exc:
            raise LLMClientError(f"Failed to call OpenAI API: {exc}") from exc

        try:
            return response.choices[0].message.content or ""
        except (AttributeError, IndexError) as exc:
            raise LLMClientError("Unexpected OpenAI API response format.") from exc

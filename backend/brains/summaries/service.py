# backend/brains/summaries/service.py
"""
要約ロジックのサービス層。

責務:
- 利用可能な API キーに応じて Claude / OpenAI を選択する
- 入力テキストを上限文字数で切り詰める
- LLM の出力を共通の整形パスにかける
"""

import logging
from typing import Optional

from brains.utils.formatting import format_text

from .client import LLMClient, LLMClientError
from .schemas import (
    GenerateSummaryRequest,
    GenerateSummaryResponse,
    SummarizeTextRequest,
    SummarizeTextResponse,
    SummaryModel,
)

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 100_000

SUMMARIZE_INSTRUCTION = (
    "Please summarize the following text. Use proper formatting with paragraphs, "
    "bullet points, and headings where appropriate. Make sure to leave proper spacing "
    "between paragraphs and after headings. Focus on the key points and main ideas:"
)

OPENAI_SYSTEM_PROMPT = (
    "You are an AI assistant that summarizes documents. Create a concise but "
    "comprehensive summary that captures the key points and main ideas. Use proper "
    "formatting with paragraphs, bullet points, and headings as appropriate. Make sure "
    "to leave proper spacing between paragraphs and after headings."
)

# ノート本文向けの構造化要約プロンプト
STRUCTURED_SUMMARY_PROMPT = """You are an expert BCG consultant summarizing business documents in a structured format.
Be concise, data-driven, and focus on actionable insights with a strategic perspective.

Create summaries with these specific sections:

1. Executive Summary: A brief 2-3 sentence overview highlighting the core strategic message and business implications
2. Description: A clear explanation of the content and its business context without unnecessary details
3. Key Learning Points: The critical strategic insights from the document, presented as focused bullet points
4. Warnings: Any potential risks, challenges, or red flags that should be considered (if relevant, otherwise omit)
5. Next Steps: Recommended actions and strategic priorities based on this information (if relevant)

FORMAT YOUR SUMMARY AS CLEAN MARKDOWN with these exact section headings. Maintain a professional, consulting tone throughout."""

STRUCTURED_SUMMARY_MAX_TOKENS = 500
STRUCTURED_SUMMARY_TEMPERATURE = 0.7


class SummaryError(RuntimeError):
    """要約処理全般の例外。"""


class SummaryService:
    """
    テキストを受け取り、整形済みの要約を返すサービスクラス。

    - コンストラクタで LLMClient を注入可能（テストではフェイクを渡す）
    """

    def __init__(self, client: Optional[LLMClient] = None) -> None:
        self._client = client or LLMClient()

    def select_model(self, requested: str) -> SummaryModel:
        """
        claude が要求され、かつ Claude のキーがあれば Claude。
        それ以外は OpenAI のキーがあれば OpenAI。どちらも無ければエラー。
        """
        if requested == SummaryModel.CLAUDE.value and self._client.has_claude:
            return SummaryModel.CLAUDE
        if self._client.has_openai:
            return SummaryModel.OPENAI
        raise SummaryError("No API key available for the selected model")

    def summarize_text(self, request: SummarizeTextRequest) -> SummarizeTextResponse:
        text = request.text or ""
        if not text.strip():
            raise SummaryError("No text provided for summarization")

        model = self.select_model(request.model)
        logger.info(
            "Summarizing text. model=%s length=%d title=%r project_id=%s",
            model.value,
            len(text),
            request.title,
            request.project_id,
        )

        truncated = text[:MAX_INPUT_CHARS]
        if model == SummaryModel.CLAUDE:
            summary = self._client.claude_message(
                f"{SUMMARIZE_INSTRUCTION}\n\n{truncated}",
                max_tokens=request.max_length,
            )
        else:
            summary = self._client.openai_chat(
                [
                    {"role": "system", "content": OPENAI_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": f"Please summarize the following text:\n\n{truncated}",
                    },
                ],
                max_tokens=request.max_length,
            )

        return SummarizeTextResponse(summary=format_text(summary), model=model)

    def generate_structured_summary(
        self, request: GenerateSummaryRequest
    ) -> GenerateSummaryResponse:
        """
        ノート本文を Executive Summary / Key Learning Points などの節に分けて要約する。
        """
        content = request.content or ""
        if not content.strip():
            raise SummaryError("No content provided for summarization")

        logger.info("Generating structured summary. length=%d", len(content))

        try:
            summary = self._client.openai_chat(
                [
                    {"role": "system", "content": STRUCTURED_SUMMARY_PROMPT},
                    {
                        "role": "user",
                        "content": f"Please summarize the following note: {content}",
                    },
                ],
                max_tokens=STRUCTURED_SUMMARY_MAX_TOKENS,
                temperature=STRUCTURED_SUMMARY_TEMPERATURE,
            )
        except LLMClientError as exc:
            raise SummaryError(f"Error processing text: {exc}") from exc

        return GenerateSummaryResponse(summary=summary)

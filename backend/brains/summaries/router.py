# backend/brains/summaries/router.py
"""
要約用の FastAPI ルーター定義。

- /summaries/summarize-text
- /summaries/generate
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends

from brains.utils.responses import error_response

from .schemas import (
    GenerateSummaryRequest,
    GenerateSummaryResponse,
    SummarizeTextRequest,
    SummarizeTextResponse,
)
from .service import SummaryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/summaries", tags=["summaries"])


@lru_cache()
def get_summary_service() -> SummaryService:
    return SummaryService()


@router.post(
    "/summarize-text",
    response_model=SummarizeTextResponse,
    summary="テキストの要約",
    description="Claude（キーが無ければ OpenAI）でテキストを要約し、整形済みの要約を返す。",
)
def summarize_text(
    body: SummarizeTextRequest,
    service: SummaryService = Depends(get_summary_service),
):
    """
    - 正常系: {success, summary, model}
    - 異常系: 入力不足・キー未設定・LLM エラーはすべて 500 {success: false, error}
    """
    try:
        return service.summarize_text(body)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in summarize-text. project_id=%s", body.project_id)
        return error_response(exc, status_code=500)


@router.post(
    "/generate",
    response_model=GenerateSummaryResponse,
    summary="ノート本文の構造化要約",
)
def generate_summary(
    body: GenerateSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
):
    try:
        return service.generate_structured_summary(body)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in generate-summary.")
        return error_response(exc, status_code=500)

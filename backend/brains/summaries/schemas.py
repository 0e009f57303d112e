# backend/brains/summaries/schemas.py
"""
/summaries/* 用の Pydantic スキーマ定義。
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SummaryModel(str, Enum):
    """要約に使う LLM プロバイダ。"""

    CLAUDE = "claude"
    OPENAI = "openai"


class SummarizeTextRequest(BaseModel):
    """
    /summaries/summarize-text のリクエストボディ。

    model が claude でも Claude のキーが無ければ OpenAI にフォールバックする。
    """

    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = Field(None, description="要約対象のテキスト")
    model: str = Field(SummaryModel.CLAUDE.value, description="claude / openai")
    max_length: int = Field(1500, alias="maxLength", gt=0, description="max_tokens として渡す値")
    title: Optional[str] = None
    project_id: Optional[str] = Field(None, alias="projectId")


class SummarizeTextResponse(BaseModel):
    success: bool = True
    summary: str
    model: SummaryModel = Field(..., description="実際に使用したプロバイダ")


class GenerateSummaryRequest(BaseModel):
    """/summaries/generate のリクエストボディ（ノート本文の構造化要約）。"""

    content: Optional[str] = None


class GenerateSummaryResponse(BaseModel):
    success: bool = True
    summary: str

# backend/brains/main.py

"""
バックエンドアプリケーションのエントリーポイント。

主な責務:
- /notion/import-page, /notion/databases エンドポイントを公開する
- /summaries/summarize-text, /summaries/generate エンドポイントを公開する
- /user-statistics エンドポイントを公開する
- すべてのエンドポイントで CORS プリフライト（OPTIONS）に応答する
"""

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError

from brains.notion.router import router as notion_router
from brains.statistics.router import router as statistics_router
from brains.summaries.router import router as summaries_router
from brains.utils.responses import (
    add_cors_headers,
    error_response,
    preflight_response,
    validation_error_message,
)

NOTION_PATH_PREFIX = "/notion/"


def create_app() -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    - Notion 連携エンドポイント (/notion/*)
    - 要約エンドポイント (/summaries/*)
    - 利用状況エンドポイント (/user-statistics)
    - ヘルスチェックエンドポイント (/health)
    """
    app = FastAPI(title="Brains Workspace Backend")

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        # OPTIONS はルーティング前に空ボディで返す
        if request.method == "OPTIONS":
            return preflight_response()
        response = await call_next(request)
        return add_cors_headers(response)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Notion 連携は入力エラーも {success: false, error} の 400 で返す
        if request.url.path.startswith(NOTION_PATH_PREFIX):
            return error_response(ValueError(validation_error_message(exc)), status_code=400)
        return await request_validation_exception_handler(request, exc)

    # ルーター登録
    app.include_router(notion_router)
    app.include_router(summaries_router)
    app.include_router(statistics_router)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        モニタリングや動作確認用。
        """
        return {"status": "ok"}

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()

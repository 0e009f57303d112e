# backend/brains/utils/responses.py

"""
エンドポイント共通のレスポンス組み立てヘルパー。

CORS ヘッダーの付与と OPTIONS への応答は main.py のミドルウェアで行う。
"""

from typing import Any, Dict

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

DEFAULT_ERROR_MESSAGE = "Unknown error occurred"


def error_response(exc: Exception, status_code: int = 400) -> JSONResponse:
    """
    例外を {success: false, error} のエンベロープに変換する。

    例外メッセージが空の場合は DEFAULT_ERROR_MESSAGE を使う。
    """
    body: Dict[str, Any] = {
        "success": False,
        "error": str(exc) or DEFAULT_ERROR_MESSAGE,
    }
    return JSONResponse(content=body, status_code=status_code)


def validation_error_message(exc: RequestValidationError) -> str:
    """
    バリデーションエラーを 1 行のメッセージにまとめる。

    例: "Invalid request body: userId: Input should be a valid string"
    """
    details = []
    for error in exc.errors():
        # loc の先頭は "body" などの取得元
        fields = [str(part) for part in error.get("loc", ())[1:]]
        field = ".".join(fields) or "body"
        details.append(f"{field}: {error.get('msg', 'invalid')}")
    return "Invalid request body: " + "; ".join(details)


def preflight_response() -> Response:
    """CORS プリフライト（OPTIONS）用の空レスポンス。"""
    return Response(status_code=200, headers=CORS_HEADERS)


def add_cors_headers(response: Response) -> Response:
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response

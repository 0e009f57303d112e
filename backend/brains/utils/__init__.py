# backend/brains/utils/__init__.py
"""
プロジェクト横断で使うユーティリティ群（環境変数・テキスト整形・HTTP 応答）。
"""

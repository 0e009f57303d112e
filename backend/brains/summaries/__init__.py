# backend/brains/summaries/__init__.py

"""
LLM（Claude / OpenAI）を使ったテキスト要約モジュール群。
"""

# backend/brains/__init__.py
"""
Brains workspace backend application package.

This package contains:
- main: FastAPI application entrypoint
- notion: Notion import pipeline (page fetch, title, block conversion)
- store: managed database (PostgREST / auth) access
- summaries: LLM based summarization
- statistics: per-user usage statistics
"""

# backend/brains/statistics/__init__.py

"""
ユーザーごとの利用状況（API 呼び出し回数・brain 数・ドキュメント数）の集計。
"""

"""
数据模型模块
"""

from .base import (
    create_db_engine, get_engine, reset_engine, get_db, init_db, db_session_context
)

__all__ = [
    "create_db_engine",
    "get_engine",
    "reset_engine",
    "get_db",
    "init_db",
    "db_session_context",
]

"""
数据库基础模块
包含数据库引擎、会话管理等基础功能
"""

from .database import (
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

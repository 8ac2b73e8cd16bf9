"""
数据库连接和会话管理
引擎按需创建，服务层可注入自定义引擎（如测试用内存 SQLite）
"""

import threading
from contextlib import contextmanager
from typing import Generator, Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session

from common_service.config import get_settings

_engine: Optional[Engine] = None
_engine_lock = threading.Lock()


def create_db_engine(database_url: Optional[str] = None, **kwargs) -> Engine:
    """
    根据配置创建数据库引擎

    Args:
        database_url: 数据库连接串，默认取配置 DATABASE_URL
        **kwargs: 透传给 create_engine 的额外参数（优先级最高）

    Returns:
        SQLAlchemy 引擎
    """
    settings = get_settings()
    url = database_url or settings.require_database_url()

    options = {"echo": settings.SQL_ECHO}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_pre_ping=settings.DB_POOL_PRE_PING,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
        if url.startswith("mysql"):
            options["connect_args"] = {"charset": "utf8mb4"}
    options.update(kwargs)

    return create_engine(url, **options)


def get_engine() -> Engine:
    """获取进程级默认引擎（首次调用时创建）"""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = create_db_engine()
                logger.info(f"数据库引擎已创建: {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def reset_engine() -> None:
    """释放默认引擎的连接池，下次调用 get_engine 时重新创建"""
    global _engine
    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
            _engine = None


def get_db() -> Generator[Session, None, None]:
    """获取数据库会话 - 生成器形式，便于依赖注入"""
    with Session(get_engine()) as session:
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"数据库会话操作失败: {e}")
            raise


@contextmanager
def db_session_context(engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    """数据库会话上下文管理器 - 成功提交，异常回滚"""
    with Session(engine or get_engine()) as session:
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"数据库会话操作失败: {e}")
            raise


def init_db(engine: Optional[Engine] = None) -> None:
    """创建所有已注册的 SQLModel 表"""
    target = engine or get_engine()
    SQLModel.metadata.create_all(bind=target)
    logger.info(f"数据库表创建成功 | 表数量: {len(SQLModel.metadata.tables)}")

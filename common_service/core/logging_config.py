"""
日志配置模块
基于 loguru 统一输出格式，并提供 trace_id 追踪机制，用于关联同一次调用链的所有日志
"""
import contextvars
import logging
import os
import sys
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger

_trace_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("trace_id", default=None)

_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[trace]}{name}:{function}:{line} - {message}\n"
_COLOR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | "
    "<yellow>{extra[trace]}</yellow><cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>\n"
)


def get_trace_id() -> Optional[str]:
    """获取当前上下文的 trace_id"""
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str]) -> None:
    """设置当前上下文的 trace_id"""
    _trace_id.set(trace_id)


def generate_trace_id(prefix: str = "") -> str:
    """生成新的 trace_id（8位短ID）"""
    short_id = uuid.uuid4().hex[:8]
    return f"{prefix}_{short_id}" if prefix else short_id


@contextmanager
def trace_context(trace_id: Optional[str] = None) -> Iterator[str]:
    """在代码块内绑定 trace_id，退出后恢复原值"""
    tid = trace_id or generate_trace_id()
    token = _trace_id.set(tid)
    try:
        yield tid
    finally:
        _trace_id.reset(token)


def _patch_trace(record) -> None:
    tid = get_trace_id()
    record["extra"]["trace"] = f"[{tid}] " if tid else ""


def _plain_format(record) -> str:
    _patch_trace(record)
    return _PLAIN_FORMAT


def _color_format(record) -> str:
    _patch_trace(record)
    return _COLOR_FORMAT


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    配置 loguru 日志输出

    Args:
        level: 日志级别，默认取配置 LOG_LEVEL
        log_file: 日志文件路径，默认取配置 LOG_FILE，为空则只输出到控制台
    """
    from common_service.config import get_settings

    cfg = get_settings()
    level = (level or cfg.LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else cfg.LOG_FILE

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=_color_format,
        colorize=sys.stderr.isatty() and not os.getenv("NO_COLOR"),
    )
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        logger.add(log_file, level=level, format=_plain_format, rotation="1 day", retention="30 days")

    # 压缩 SQLAlchemy 内部日志
    for name in ("sqlalchemy.engine", "sqlalchemy.pool", "sqlalchemy.dialects"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(f"日志初始化完成 | 级别: {level} | 文件: {log_file or '-'}")

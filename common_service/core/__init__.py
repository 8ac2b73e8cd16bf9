"""
核心模块：异常定义与日志配置
"""

from .exceptions import (
    CommonServiceException,
    DatabaseException,
    ValidationException,
    BeanInstantiationException,
)
from .logging_config import (
    setup_logging, get_trace_id, set_trace_id, generate_trace_id, trace_context
)

__all__ = [
    "CommonServiceException",
    "DatabaseException",
    "ValidationException",
    "BeanInstantiationException",
    "setup_logging",
    "get_trace_id",
    "set_trace_id",
    "generate_trace_id",
    "trace_context",
]

"""
common-service - 基于 SQLModel 的通用查询与对象转换工具
"""

from .core.exceptions import (
    CommonServiceException,
    DatabaseException,
    ValidationException,
    BeanInstantiationException,
)
from .dao.query_wrapper import Condition, QueryWrapper
from .services.base_service import BaseService, ModelService
from .utils.bean_utils import BeanUtils
from .utils.common_service_utils import CommonServiceUtils

__version__ = "1.0.0"

__all__ = [
    "CommonServiceException",
    "DatabaseException",
    "ValidationException",
    "BeanInstantiationException",
    "Condition",
    "QueryWrapper",
    "BaseService",
    "ModelService",
    "BeanUtils",
    "CommonServiceUtils",
]

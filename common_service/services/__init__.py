"""
服务层模块
"""

from .base_service import BaseService, ModelService

__all__ = [
    "BaseService",
    "ModelService",
]

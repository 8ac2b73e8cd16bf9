"""
数据访问层：查询条件构造
"""

from .query_wrapper import Condition, FieldRef, QueryWrapper

__all__ = [
    "Condition",
    "FieldRef",
    "QueryWrapper",
]

"""
工具模块
"""

from .bean_utils import BeanUtils, copy_to
from .common_service_utils import (
    CommonServiceUtils,
    find_by_field_in_target_field,
    build_query_wrapper_by_field,
    find_by_field_eq_target_field,
    find_by_field_eq_target_fields,
    convert_list,
    copy_properties,
)

__all__ = [
    "BeanUtils",
    "copy_to",
    "CommonServiceUtils",
    "find_by_field_in_target_field",
    "build_query_wrapper_by_field",
    "find_by_field_eq_target_field",
    "find_by_field_eq_target_fields",
    "convert_list",
    "copy_properties",
]

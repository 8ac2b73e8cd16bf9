"""
通用服务工具类
基于 QueryWrapper 和 BaseService 的通用查询方法，以及基于 BeanUtils 的对象转换方法
所有方法均为静态方法，无状态，可并发调用
"""

from collections.abc import Mapping
from operator import attrgetter
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, TypeVar, Union

from loguru import logger
from sqlalchemy.orm import InstrumentedAttribute

from common_service.core.exceptions import BeanInstantiationException, ValidationException
from common_service.dao.query_wrapper import FieldRef, QueryWrapper
from common_service.services.base_service import BaseService
from common_service.utils.bean_utils import copy_to

T = TypeVar("T")
R = TypeVar("R")

SourceField = Union[Callable[[Any], Any], InstrumentedAttribute, str]


class CommonServiceUtils:
    """通用服务工具类，所有方法均为静态调用，无需实例化"""

    def __init__(self):
        raise TypeError("CommonServiceUtils 不允许实例化")

    @staticmethod
    def find_by_field_in_target_field(
            source_list: Optional[Sequence[T]],
            service: BaseService[R],
            source_field: SourceField,
            target_field: FieldRef,
    ) -> List[R]:
        """
        从源集合中提取指定属性，作为 IN 条件查询目标集合

        Args:
            source_list: 源集合
            service: 执行查询的服务
            source_field: 提取源元素属性值的函数、列属性或属性名（如 Order.user_id）
            target_field: 目标模型的查询字段（如 User.id）

        Returns:
            查询结果，顺序由服务决定；源集合为空时不发起查询，直接返回空列表
        """
        getter = _as_getter(source_field)
        # 保留重复值
        field_values = [getter(item) for item in (source_list or [])]
        if not field_values:
            return []

        query = QueryWrapper(service.model).in_(target_field, field_values)
        return service.list(query)

    @staticmethod
    def build_query_wrapper_by_field(
            field: FieldRef,
            field_value: Any,
            service: Optional[BaseService[T]] = None,
    ) -> QueryWrapper[T]:
        """
        根据字段和值构建等值查询条件，不执行查询

        Args:
            field: 查询字段（如 User.username）
            field_value: 字段值
            service: 可选，提供模型以解析字符串字段名

        Returns:
            新的 QueryWrapper，可继续追加条件或交给服务执行
        """
        model = service.model if service is not None else None
        return QueryWrapper(model).eq(field, field_value)

    @staticmethod
    def find_by_field_eq_target_field(
            field: FieldRef,
            field_value: Any,
            service: BaseService[T],
    ) -> List[T]:
        """根据单个字段等值查询，没有匹配记录时返回空列表"""
        query = CommonServiceUtils.build_query_wrapper_by_field(field, field_value, service)
        return service.list(query)

    @staticmethod
    def find_by_field_eq_target_fields(
            field_conditions: Dict[FieldRef, Any],
            service: BaseService[T],
    ) -> List[T]:
        """
        根据多个字段等值查询，所有条件以 AND 组合

        Args:
            field_conditions: 字段 -> 值
            service: 执行查询的服务

        Raises:
            ValidationException: 条件为空（不允许无条件查询全表）
        """
        if not field_conditions:
            raise ValidationException("查询条件不能为空")

        query = QueryWrapper(service.model)
        for field, value in field_conditions.items():
            query.eq(field, value)
        return service.list(query)

    @staticmethod
    def convert_list(source_list: Optional[Sequence[Any]], target_class: Type[R]) -> List[R]:
        """
        将一个类型的列表转换为另一个类型的列表

        任一元素为 None 或构造失败则整体失败，不返回部分结果

        Raises:
            ValidationException: 列表中存在 None 元素
            BeanInstantiationException: 目标类型无法实例化
        """
        if not source_list:
            return []
        if any(source is None for source in source_list):
            logger.error(f"列表转换失败: 源列表包含 None 元素, target={target_class}")
            raise ValidationException("源列表不能包含 None 元素")
        try:
            return [copy_to(source, target_class) for source in source_list]
        except BeanInstantiationException as e:
            logger.error(f"列表转换失败: {e}")
            raise

    @staticmethod
    def copy_properties(source: Any, target_class: Optional[Type[R]]) -> Optional[R]:
        """
        复制属性并返回新的目标对象

        Returns:
            目标对象；source 或 target_class 为 None 时返回 None

        Raises:
            BeanInstantiationException: 目标类型无法实例化
        """
        if source is None or target_class is None:
            return None
        return copy_to(source, target_class)


def _as_getter(source_field: SourceField) -> Callable[[Any], Any]:
    """将属性引用统一转换为取值函数"""
    if isinstance(source_field, InstrumentedAttribute):
        source_field = source_field.key
    if isinstance(source_field, str):
        name = source_field
        read_attr = attrgetter(name)

        def getter(item):
            if isinstance(item, Mapping):
                return item[name]
            return read_attr(item)
        return getter
    if callable(source_field):
        return source_field
    raise ValidationException(f"无效的源字段引用: {source_field!r}")


find_by_field_in_target_field = CommonServiceUtils.find_by_field_in_target_field
build_query_wrapper_by_field = CommonServiceUtils.build_query_wrapper_by_field
find_by_field_eq_target_field = CommonServiceUtils.find_by_field_eq_target_field
find_by_field_eq_target_fields = CommonServiceUtils.find_by_field_eq_target_fields
convert_list = CommonServiceUtils.convert_list
copy_properties = CommonServiceUtils.copy_properties

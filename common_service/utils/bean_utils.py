"""
对象属性复制工具
按属性名匹配、按声明类型校验，将源对象的属性复制到目标对象
支持 SQLModel / pydantic 模型、dataclass、普通对象，源对象还可以是字典
"""

import dataclasses
import inspect
import types
import typing
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Dict, Iterable, Optional, Type, TypeVar, Union

from loguru import logger
from pydantic import BaseModel

from common_service.core.exceptions import BeanInstantiationException

T = TypeVar("T")

# 无类型信息的属性，不做类型校验
_UNTYPED = object()

_NUMERIC_TOWER = {
    int: (int,),
    float: (int, float),
    complex: (int, float, complex),
}


class BeanUtils:
    """对象属性复制工具类"""

    @staticmethod
    def instantiate(target_class: Type[T]) -> T:
        """
        使用默认构造方式创建目标类型实例

        SQLModel 表模型和普通类直接调用无参构造；
        非表 pydantic 模型使用 model_construct（跳过校验），必填字段置为 None

        Raises:
            BeanInstantiationException: 目标不是类或构造失败
        """
        if not inspect.isclass(target_class):
            raise BeanInstantiationException(target_class, "目标类型不是类")
        if inspect.isabstract(target_class):
            raise BeanInstantiationException(target_class, "目标类型是抽象类")
        try:
            if issubclass(target_class, BaseModel) and not hasattr(target_class, "__table__"):
                required = {
                    name: None for name, info in target_class.model_fields.items() if info.is_required()
                }
                return target_class.model_construct(**required)
            return target_class()
        except Exception as e:
            raise BeanInstantiationException(target_class, str(e), e) from e

    @staticmethod
    def copy_properties(source: Any, target: T, ignore_properties: Iterable[str] = ()) -> T:
        """
        复制同名且类型兼容的属性

        Args:
            source: 源对象（不会被修改）
            target: 目标对象
            ignore_properties: 不复制的属性名

        Returns:
            目标对象本身
        """
        ignored = set(ignore_properties)
        writable = BeanUtils.get_writable_properties(type(target))
        if not _is_pydantic(target) and not dataclasses.is_dataclass(target):
            # 普通对象实例上已有的公开属性同样可写
            for name in _public_instance_attrs(target):
                writable.setdefault(name, _UNTYPED)

        for name, value in BeanUtils.get_readable_properties(source).items():
            if name in ignored or name not in writable:
                continue
            if not _is_assignable(value, writable[name]):
                logger.debug(f"属性类型不兼容，跳过: {type(target).__name__}.{name} <- {type(value).__name__}")
                continue
            try:
                setattr(target, name, value)
            except Exception as e:
                logger.debug(f"属性写入失败，跳过: {type(target).__name__}.{name}: {e}")
        return target

    @staticmethod
    def get_readable_properties(source: Any) -> Dict[str, Any]:
        """读取源对象所有可读属性，getter 抛异常的属性跳过"""
        if source is None:
            return {}
        if isinstance(source, Mapping):
            return {k: v for k, v in source.items() if isinstance(k, str)}
        if _is_pydantic(source):
            names = list(type(source).model_fields)
        elif dataclasses.is_dataclass(source):
            names = [f.name for f in dataclasses.fields(source)]
        else:
            names = _public_instance_attrs(source) + [
                name for name, prop in _properties(type(source)).items() if prop.fget is not None
            ]

        values = {}
        for name in names:
            try:
                values[name] = getattr(source, name)
            except Exception as e:
                logger.debug(f"属性读取失败，跳过: {type(source).__name__}.{name}: {e}")
        return values

    @staticmethod
    def get_writable_properties(target_class: Type) -> Dict[str, Any]:
        """
        目标类型的可写属性及其声明类型

        Returns:
            属性名 -> 类型注解（无注解时为内部占位对象）
        """
        return dict(_writable_properties(target_class))


@lru_cache(maxsize=256)
def _writable_properties(target_class: Type) -> tuple:
    if issubclass(target_class, BaseModel):
        return tuple((name, info.annotation) for name, info in target_class.model_fields.items())

    hints = _type_hints(target_class)
    if dataclasses.is_dataclass(target_class):
        return tuple(
            (f.name, hints.get(f.name, _UNTYPED)) for f in dataclasses.fields(target_class)
        )

    writable = {
        name: hint for name, hint in hints.items()
        if not name.startswith("_") and typing.get_origin(hint) is not typing.ClassVar
    }
    # 无注解的类属性默认值（如 username = None）
    for klass in reversed(target_class.__mro__[:-1]):
        for name, attr in vars(klass).items():
            if name.startswith("_") or name in writable:
                continue
            if callable(attr) or hasattr(attr, "__get__") or hasattr(attr, "__set__"):
                continue
            writable[name] = _UNTYPED
    for name, prop in _properties(target_class).items():
        if prop.fset is None:
            writable.pop(name, None)
            continue
        hint = _UNTYPED
        if prop.fget is not None:
            hint = _type_hints(prop.fget).get("return", _UNTYPED)
        writable[name] = hint
    return tuple(writable.items())


def _type_hints(obj) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception:
        # 前向引用无法解析时，退化为不做类型校验
        return {name: _UNTYPED for name in getattr(obj, "__annotations__", {})}


def _properties(cls: Type) -> Dict[str, property]:
    found = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_"):
                found[name] = attr
    return found


def _public_instance_attrs(obj: Any) -> list:
    try:
        return [name for name in vars(obj) if not name.startswith("_")]
    except TypeError:
        return []


def _is_pydantic(obj: Any) -> bool:
    return isinstance(obj, BaseModel)


def _is_assignable(value: Any, annotation: Any) -> bool:
    """判断值是否可赋给声明类型"""
    if annotation is _UNTYPED or annotation is Any or annotation is object:
        return True
    if isinstance(annotation, (str, typing.ForwardRef, TypeVar)):
        return True

    origin = typing.get_origin(annotation)
    if origin is Union or origin is getattr(types, "UnionType", None):
        return any(_is_assignable(value, arg) for arg in typing.get_args(annotation))
    if origin is typing.Literal:
        return value in typing.get_args(annotation)
    if origin is typing.Annotated:
        return _is_assignable(value, typing.get_args(annotation)[0])

    if value is None:
        return annotation is type(None) or annotation is None
    if origin is not None:
        return inspect.isclass(origin) and isinstance(value, origin)
    if inspect.isclass(annotation):
        if annotation in _NUMERIC_TOWER:
            # int 可赋给 float/complex，bool 不视为数值
            return not isinstance(value, bool) and isinstance(value, _NUMERIC_TOWER[annotation])
        return isinstance(value, annotation)
    return True


def copy_to(source: Any, target_class: Type[T], ignore_properties: Iterable[str] = ()) -> Optional[T]:
    """创建目标类型实例并复制属性；source 为 None 时返回 None"""
    if source is None:
        return None
    target = BeanUtils.instantiate(target_class)
    return BeanUtils.copy_properties(source, target, ignore_properties)

"""
查询条件构造器
以 SQLModel 列属性（如 User.username）作为字段引用，既能标识列，又能读取实体上的值
所有条件以 AND 组合，构造过程不涉及任何数据库 I/O
"""
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Optional, Tuple, Type, TypeVar, Union

from sqlalchemy import and_, func
from sqlalchemy.orm import InstrumentedAttribute
from sqlmodel import select

from common_service.core.exceptions import ValidationException

T = TypeVar("T")

FieldRef = Union[InstrumentedAttribute, str]

EQ = "eq"
NE = "ne"
IN = "in"


@dataclass(frozen=True)
class Condition:
    """单个查询条件：列 + 操作符 + 值"""
    column: InstrumentedAttribute
    operator: str
    value: Any

    @property
    def key(self) -> str:
        """条件所在列的属性名"""
        return self.column.key

    def to_clause(self):
        """转换为 SQLAlchemy 布尔表达式"""
        if self.operator == EQ:
            return self.column.is_(None) if self.value is None else self.column == self.value
        if self.operator == NE:
            return self.column.is_not(None) if self.value is None else self.column != self.value
        if self.operator == IN:
            return self.column.in_(self.value)
        raise ValidationException(f"不支持的操作符: {self.operator}")


class QueryWrapper(Generic[T]):
    """
    查询条件包装器

    用法:
        QueryWrapper(User).eq(User.username, "alice").in_(User.id, [1, 2])
        QueryWrapper().eq(User.username, "alice")   # 模型由第一个列属性推断
    """

    def __init__(self, model: Optional[Type[T]] = None):
        self._model: Optional[Type[T]] = model
        self._conditions: List[Condition] = []
        self._order_by: List[Any] = []

    @property
    def entity_class(self) -> Optional[Type[T]]:
        return self._model

    @property
    def conditions(self) -> Tuple[Condition, ...]:
        return tuple(self._conditions)

    def is_empty_of_where(self) -> bool:
        """是否没有任何 where 条件"""
        return not self._conditions

    # ==================== 条件构造 ====================

    def eq(self, field: FieldRef, value: Any, condition: bool = True) -> "QueryWrapper[T]":
        """等值条件：field = value"""
        return self._add(field, EQ, value, condition)

    def ne(self, field: FieldRef, value: Any, condition: bool = True) -> "QueryWrapper[T]":
        """不等条件：field <> value"""
        return self._add(field, NE, value, condition)

    def in_(self, field: FieldRef, values: Iterable[Any], condition: bool = True) -> "QueryWrapper[T]":
        """IN 条件：field IN (values)，保留重复值与原始顺序"""
        return self._add(field, IN, list(values), condition)

    def order_by_asc(self, *fields: FieldRef) -> "QueryWrapper[T]":
        for field in fields:
            self._order_by.append(self._resolve(field).asc())
        return self

    def order_by_desc(self, *fields: FieldRef) -> "QueryWrapper[T]":
        for field in fields:
            self._order_by.append(self._resolve(field).desc())
        return self

    # ==================== 语句生成 ====================

    def where_clause(self):
        """所有条件的 AND 组合，无条件时返回 None"""
        if not self._conditions:
            return None
        return and_(*(c.to_clause() for c in self._conditions))

    def to_statement(self):
        """生成 select 语句"""
        model = self._require_model()
        stmt = select(model)
        clause = self.where_clause()
        if clause is not None:
            stmt = stmt.where(clause)
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        return stmt

    def to_count_statement(self):
        """生成 count 语句"""
        model = self._require_model()
        stmt = select(func.count()).select_from(model)
        clause = self.where_clause()
        if clause is not None:
            stmt = stmt.where(clause)
        return stmt

    # ==================== 私有辅助方法 ====================

    def _add(self, field: FieldRef, operator: str, value: Any, condition: bool) -> "QueryWrapper[T]":
        if condition:
            self._conditions.append(Condition(self._resolve(field), operator, value))
        return self

    def _resolve(self, field: FieldRef) -> InstrumentedAttribute:
        """将字段引用解析为当前模型的列属性"""
        if isinstance(field, str):
            model = self._require_model()
            column = getattr(model, field, None)
            if not isinstance(column, InstrumentedAttribute):
                raise ValidationException(f"{model.__name__} 不存在字段: {field}")
            return column

        if not isinstance(field, InstrumentedAttribute):
            raise ValidationException(f"无效的字段引用: {field!r}")

        owner = field.class_
        if self._model is None:
            self._model = owner
        elif not issubclass(self._model, owner):
            raise ValidationException(
                f"字段 {owner.__name__}.{field.key} 不属于模型 {self._model.__name__}"
            )
        return field

    def _require_model(self) -> Type[T]:
        if self._model is None:
            raise ValidationException("QueryWrapper 未指定实体模型")
        return self._model

    def __repr__(self) -> str:
        name = self._model.__name__ if self._model is not None else "?"
        parts = ", ".join(f"{c.key} {c.operator} {c.value!r}" for c in self._conditions)
        return f"QueryWrapper<{name}>({parts})"

"""
通用服务层
BaseService 定义查询工具依赖的最小能力（按条件列表查询），
ModelService 基于 SQLModel 为单个实体模型提供常用的增删改查
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from common_service.core.exceptions import DatabaseException, ValidationException
from common_service.dao.query_wrapper import QueryWrapper
from common_service.models.base.database import get_engine

T = TypeVar("T")


class BaseService(ABC, Generic[T]):
    """数据访问服务基类"""

    #: 服务对应的实体模型，用于解析字符串字段名
    model: Optional[Type[T]] = None

    @abstractmethod
    def list(self, wrapper: Optional[QueryWrapper[T]] = None) -> List[T]:
        """
        按条件查询实体列表

        Args:
            wrapper: 查询条件，为空时查询全部

        Returns:
            实体列表，顺序由数据源决定
        """
        pass

    def query_wrapper(self) -> QueryWrapper[T]:
        """创建绑定到本服务模型的查询条件"""
        return QueryWrapper(self.model)


class ModelService(BaseService[T]):
    """基于 SQLModel 的实体服务"""

    def __init__(self, model: Type[T], engine: Optional[Engine] = None):
        self.model = model
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine or get_engine()

    # ==================== 查询 ====================

    def list(self, wrapper: Optional[QueryWrapper[T]] = None) -> List[T]:
        stmt = self._checked(wrapper).to_statement()
        try:
            with Session(self.engine) as session:
                return list(session.exec(stmt).all())
        except SQLAlchemyError as e:
            self._raise_db_error("list", e)

    def count(self, wrapper: Optional[QueryWrapper[T]] = None) -> int:
        """按条件统计数量"""
        stmt = self._checked(wrapper).to_count_statement()
        try:
            with Session(self.engine) as session:
                return int(session.exec(stmt).one())
        except SQLAlchemyError as e:
            self._raise_db_error("count", e)

    def get_one(self, wrapper: QueryWrapper[T]) -> Optional[T]:
        """按条件查询第一条记录，不存在返回 None"""
        stmt = self._checked(wrapper).to_statement()
        try:
            with Session(self.engine) as session:
                return session.exec(stmt).first()
        except SQLAlchemyError as e:
            self._raise_db_error("get_one", e)

    def get_by_id(self, entity_id: Any) -> Optional[T]:
        """根据主键查询"""
        try:
            with Session(self.engine) as session:
                return session.get(self.model, entity_id)
        except SQLAlchemyError as e:
            self._raise_db_error("get_by_id", e)

    def list_by_ids(self, entity_ids: Iterable[Any]) -> List[T]:
        """根据主键批量查询，空集合直接返回空列表"""
        ids = list(entity_ids)
        if not ids:
            return []
        return self.list(self.query_wrapper().in_(self._primary_key(), ids))

    # ==================== 写入 ====================

    def save(self, entity: T) -> T:
        """
        插入单条记录

        Returns:
            插入后的实体（包含数据库生成的字段）
        """
        try:
            with Session(self.engine) as session:
                session.add(entity)
                session.commit()
                session.refresh(entity)
                return entity
        except SQLAlchemyError as e:
            self._raise_db_error("save", e)

    def save_batch(self, entities: Iterable[T]) -> int:
        """批量插入，单事务提交，返回插入条数"""
        items = list(entities)
        if not items:
            return 0
        try:
            with Session(self.engine) as session:
                session.add_all(items)
                session.commit()
                for item in items:
                    session.refresh(item)
            logger.debug(f"批量插入成功: {self.model.__name__}, 条数: {len(items)}")
            return len(items)
        except SQLAlchemyError as e:
            self._raise_db_error("save_batch", e)

    def update_by_id(self, entity: T) -> bool:
        """按主键更新，记录不存在返回 False"""
        pk_name = self._primary_key()
        entity_id = getattr(entity, pk_name, None)
        if entity_id is None:
            raise ValidationException(f"{self.model.__name__}.{pk_name} 为空，无法按主键更新")
        try:
            with Session(self.engine) as session:
                if session.get(self.model, entity_id) is None:
                    return False
                session.merge(entity)
                session.commit()
                return True
        except SQLAlchemyError as e:
            self._raise_db_error("update_by_id", e)

    def remove_by_id(self, entity_id: Any) -> bool:
        """按主键删除，记录不存在返回 False"""
        try:
            with Session(self.engine) as session:
                existing = session.get(self.model, entity_id)
                if existing is None:
                    return False
                session.delete(existing)
                session.commit()
                return True
        except SQLAlchemyError as e:
            self._raise_db_error("remove_by_id", e)

    def remove(self, wrapper: QueryWrapper[T]) -> int:
        """按条件删除，禁止无条件删除全表"""
        checked = self._checked(wrapper)
        if checked.is_empty_of_where():
            raise ValidationException(f"拒绝无条件删除 {self.model.__name__} 全表数据")
        stmt = delete(self.model).where(checked.where_clause())
        try:
            with Session(self.engine) as session:
                result = session.exec(stmt)
                session.commit()
                return int(result.rowcount or 0)
        except SQLAlchemyError as e:
            self._raise_db_error("remove", e)

    # ==================== 私有辅助方法 ====================

    def _checked(self, wrapper: Optional[QueryWrapper[T]]) -> QueryWrapper[T]:
        if wrapper is None:
            return self.query_wrapper()
        owner = wrapper.entity_class
        if owner is None:
            return QueryWrapper(self.model)
        if not issubclass(self.model, owner):
            raise ValidationException(
                f"查询条件模型 {owner.__name__} 与服务模型 {self.model.__name__} 不一致"
            )
        return wrapper

    def _primary_key(self) -> str:
        keys = self.model.__table__.primary_key.columns.keys()
        if len(keys) != 1:
            raise ValidationException(f"{self.model.__name__} 不是单列主键")
        return keys[0]

    def _raise_db_error(self, operation: str, exc: SQLAlchemyError) -> None:
        logger.error(f"{self.model.__name__}.{operation} 执行失败: {exc}")
        raise DatabaseException(f"{self.model.__name__}.{operation} failed: {exc}", exc) from exc

"""
测试配置和公共fixtures
"""

from typing import Generator, List, Optional

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from common_service.config import get_settings
from common_service.dao.query_wrapper import QueryWrapper
from common_service.models.base.database import create_db_engine, init_db
from common_service.services.base_service import BaseService, ModelService
from tests.entities import Order, User


class RecordingService(BaseService):
    """记录 list 调用的服务桩"""

    def __init__(self, model=None, results: Optional[list] = None):
        self.model = model
        self.results = list(results or [])
        self.calls: List[Optional[QueryWrapper]] = []

    def list(self, wrapper: Optional[QueryWrapper] = None) -> list:
        self.calls.append(wrapper)
        return list(self.results)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """每个测试重新读取环境变量"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    """内存 SQLite 引擎，已建表"""
    test_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(test_engine)
    try:
        yield test_engine
    finally:
        SQLModel.metadata.drop_all(test_engine)
        test_engine.dispose()


@pytest.fixture(scope="function")
def bare_engine() -> Generator[Engine, None, None]:
    """未建表的内存 SQLite 引擎"""
    test_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    try:
        yield test_engine
    finally:
        test_engine.dispose()


@pytest.fixture
def user_service(engine: Engine) -> ModelService[User]:
    return ModelService(User, engine=engine)


@pytest.fixture
def order_service(engine: Engine) -> ModelService[Order]:
    return ModelService(Order, engine=engine)


@pytest.fixture
def sample_users(user_service: ModelService[User]) -> List[User]:
    """示例用户数据"""
    users = [
        User(username="alice", nickname="小爱"),
        User(username="bob", nickname="阿波"),
        User(username="carol", is_active=False),
    ]
    user_service.save_batch(users)
    return users


@pytest.fixture
def sample_orders(order_service: ModelService[Order], sample_users: List[User]) -> List[Order]:
    """示例订单数据：alice 两单，carol 一单"""
    alice, _, carol = sample_users
    orders = [
        Order(user_id=alice.id, amount=10.5),
        Order(user_id=alice.id, amount=20.0, status="paid"),
        Order(user_id=carol.id, amount=8.0),
    ]
    order_service.save_batch(orders)
    return orders


@pytest.fixture
def recording_service() -> RecordingService:
    return RecordingService()

"""
对象属性复制工具测试
"""

from abc import ABC, abstractmethod
from datetime import datetime

import pytest

from common_service.core.exceptions import BeanInstantiationException
from common_service.utils.bean_utils import BeanUtils, copy_to
from tests.entities import (
    BrokenGetter,
    ClassDefaultTarget,
    FrozenRecord,
    FrozenUserDTO,
    NoDefaultConstructor,
    Order,
    PlainUser,
    User,
    UserDTO,
    UserRecord,
)


class AbstractTarget(ABC):
    @abstractmethod
    def run(self):
        pass


class TestInstantiate:
    """实例化测试类"""

    def test_table_model(self):
        """测试 SQLModel 表模型使用无参构造"""
        user = BeanUtils.instantiate(User)

        assert isinstance(user, User)
        assert user.id is None
        assert isinstance(user.created_at, datetime)
        assert user.created_at.tzinfo is not None

    def test_pydantic_model_skips_validation(self):
        """测试 pydantic 模型缺少必填字段也能构造"""
        dto = BeanUtils.instantiate(UserDTO)

        assert isinstance(dto, UserDTO)
        assert dto.remark == "无"
        assert dto.username is None

    def test_plain_class(self):
        """测试普通类"""
        assert isinstance(BeanUtils.instantiate(PlainUser), PlainUser)

    @pytest.mark.parametrize("target", [NoDefaultConstructor, AbstractTarget, "User", None])
    def test_failures(self, target):
        """测试无法实例化的目标"""
        with pytest.raises(BeanInstantiationException) as exc_info:
            BeanUtils.instantiate(target)

        assert exc_info.value.target_class is target


class TestCopyProperties:
    """属性复制测试类"""

    def test_dict_source(self):
        """测试字典作为源对象"""
        target = BeanUtils.copy_properties({"id": 1, "username": "alice", "unknown": 1}, UserRecord())

        assert target == UserRecord(id=1, username="alice", is_active="N")

    def test_source_is_not_mutated(self):
        """测试源对象不被修改"""
        source = UserRecord(id=1, username="alice", is_active="Y")

        BeanUtils.copy_properties(source, User())

        assert source == UserRecord(id=1, username="alice", is_active="Y")

    def test_optional_accepts_none(self):
        """测试 Optional 字段接受 None"""
        target = User(username="old", nickname="旧昵称")

        BeanUtils.copy_properties({"nickname": None}, target)

        assert target.nickname is None

    def test_none_skipped_for_required_type(self):
        """测试非 Optional 字段不接受 None"""
        target = User(username="keep")

        BeanUtils.copy_properties({"username": None}, target)

        assert target.username == "keep"

    def test_ignore_properties(self):
        """测试忽略指定属性"""
        target = BeanUtils.copy_properties(
            UserDTO(id=9, username="bob"), User(), ignore_properties=["id"]
        )

        assert target.id is None
        assert target.username == "bob"

    def test_frozen_targets_are_skipped(self):
        """测试不可变目标对象的属性写入失败时跳过"""
        frozen_record = FrozenRecord()
        frozen_dto = FrozenUserDTO()

        BeanUtils.copy_properties({"id": 5, "username": "x"}, frozen_record)
        BeanUtils.copy_properties({"id": 5, "username": "x"}, frozen_dto)

        assert frozen_record == FrozenRecord()
        assert (frozen_dto.id, frozen_dto.username) == (None, "")

    def test_plain_object_properties(self):
        """测试普通对象：只读 property 跳过，可写 property 和实例属性复制"""
        target = BeanUtils.copy_properties(
            {"username": "amy", "display_name": "X", "nickname": "艾米", "tags": ["a"]},
            PlainUser(),
        )

        assert target.username == "amy"
        assert target.nickname == "艾米"
        assert target.display_name == "艾米"
        assert target.tags == ["a"]

    def test_literal_annotation(self):
        """测试 Literal 类型按取值校验"""
        target = PlainUser()

        BeanUtils.copy_properties({"level": "bronze"}, target)
        assert target.level == "silver"

        BeanUtils.copy_properties({"level": "gold"}, target)
        assert target.level == "gold"

    def test_raising_getter_is_skipped(self):
        """测试 getter 抛异常的属性被跳过"""
        target = BeanUtils.copy_properties(BrokenGetter(), User())

        assert target.username == "bob"
        assert target.nickname is None

    def test_readable_properties_of_plain_object(self):
        """测试普通对象的可读属性"""
        props = BeanUtils.get_readable_properties(PlainUser())

        assert props == {"username": "", "tags": [], "display_name": "-", "nickname": "-"}

    def test_writable_properties_of_plain_class(self):
        """测试普通类的可写属性不包含只读 property 和私有属性"""
        props = BeanUtils.get_writable_properties(PlainUser)

        assert set(props) == {"username", "level", "nickname"}

    def test_class_level_defaults_are_writable(self):
        """测试仅以类属性声明默认值的普通类"""
        target = BeanUtils.copy_properties(User(id=1, username="alice"), ClassDefaultTarget())

        assert (target.id, target.username, target.status) == (1, "alice", "new")
        assert target.describe() == "1:alice"
        assert set(BeanUtils.get_writable_properties(ClassDefaultTarget)) == {"id", "username", "status"}

    def test_int_accepted_for_float(self):
        """测试 int 可以赋给 float 字段"""
        target = BeanUtils.copy_properties({"amount": 10}, Order(user_id=1))

        assert target.amount == 10

    def test_bool_rejected_for_int(self):
        """测试 bool 不能赋给 int 字段"""
        target = BeanUtils.copy_properties({"user_id": True, "amount": False}, Order(user_id=3))

        assert target.user_id == 3
        assert target.amount == 0.0


class TestCopyTo:
    """copy_to 测试类"""

    def test_none_source(self):
        assert copy_to(None, UserDTO) is None

    def test_creates_and_copies(self):
        dto = copy_to(User(id=1, username="alice"), UserDTO)

        assert (dto.id, dto.username, dto.remark) == (1, "alice", "无")

"""
统一异常类型定义
"""


class CommonServiceException(Exception):
    """通用服务层异常基类"""
    pass


class DatabaseException(CommonServiceException):
    """数据库操作异常 - 包装 SQLAlchemy 异常"""

    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception


class ValidationException(CommonServiceException):
    """参数校验异常（空条件、未知字段、字段与模型不匹配等）"""
    pass


class BeanInstantiationException(CommonServiceException):
    """目标类型无法实例化"""

    def __init__(self, target_class, message: str, original_exception: Exception = None):
        name = getattr(target_class, "__name__", repr(target_class))
        super().__init__(f"无法实例化 {name}: {message}")
        self.target_class = target_class
        self.original_exception = original_exception


__all__ = [
    "CommonServiceException",
    "DatabaseException",
    "ValidationException",
    "BeanInstantiationException",
]

"""
配置模块 - 纯环境变量方式
根据 ENVIRONMENT 加载对应的 .env 文件，其余配置全部来自环境变量
"""
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from loguru import logger


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_environment(base_dir: Optional[str] = None) -> Optional[str]:
    """
    加载环境变量文件

    Args:
        base_dir: .env 文件所在目录，默认当前工作目录

    Returns:
        实际加载的文件路径，文件不存在时返回 None
    """
    env = os.getenv("ENVIRONMENT", "development")
    env_file = ".env.production" if env == "production" else ".env.development"
    if base_dir:
        env_file = os.path.join(base_dir, env_file)

    if os.path.exists(env_file):
        # 已存在的环境变量优先
        load_dotenv(env_file, override=False)
        logger.info(f"已加载环境变量文件: {env_file}")
        return env_file

    logger.debug(f"环境变量文件不存在: {env_file}")
    return None


class Settings:
    """应用配置 - 纯环境变量方式"""

    def __init__(self):
        # 应用基础配置
        self.APP_NAME = os.getenv("APP_NAME", "common-service")
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

        # 数据库配置（仅在构建默认引擎时必需）
        self.DATABASE_URL = os.getenv("DATABASE_URL")
        self.SQL_ECHO = _env_bool("SQL_ECHO", "false")

        # 数据库连接池配置（SQLite 不使用）
        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
        self.DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
        self.DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        self.DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
        self.DB_POOL_PRE_PING = _env_bool("DB_POOL_PRE_PING", "true")

        # 日志配置
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FILE = os.getenv("LOG_FILE", "")

    def require_database_url(self) -> str:
        """返回数据库连接串，未配置时抛出异常"""
        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL 环境变量未设置，请在 .env 文件中配置数据库连接信息")
        return self.DATABASE_URL


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取全局配置实例（首次调用时加载 .env 文件）"""
    load_environment()
    return Settings()

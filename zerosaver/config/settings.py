import os
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 过期清理配置
    sweep_interval_seconds: float = 10.0  # 10秒

    # 商品发布配置
    description_limit: int = 240
    default_max_distance_km: float = 10.0

    # 环保影响估算系数（演示用近似值）
    bulk_weight_pattern: str = "5kg"
    bulk_item_kg: float = 5.0
    default_item_kg: float = 0.4
    co2e_factor: float = 2.5  # 1kg 食物浪费 ≈ 2.5kg CO2e

    # 展示配置
    currency_symbol: str = "$"

    # 日志与调试
    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "ZEROSAVER_"
        case_sensitive = False


def get_settings(env: Optional[str] = None) -> Settings:
    """重新读取环境变量生成配置，env 为 development 时使用开发环境配置"""
    env = env or os.getenv("ZEROSAVER_ENV", "production")
    if env == "development":
        from .environments.development import DevelopmentSettings
        return DevelopmentSettings()
    return Settings()


# 全局设置实例
settings = Settings()

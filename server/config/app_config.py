#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一应用配置管理
所有配置统一从这里读取，避免配置分散
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from core.config.naming_config import NamingConfig


def _normalize_env(value: str) -> str:
    """ENV / APP_ENV 标准化为 local / staging / production"""
    value = (value or 'local').lower()
    if value in ('staging', 'stage'):
        return 'staging'
    if value in ('prod', 'production'):
        return 'production'
    return 'local'


@dataclass
class AppConfig:
    """应用配置"""
    env: str = 'local'
    debug: bool = False
    log_level: str = 'INFO'

    # 子配置
    naming: NamingConfig = field(default_factory=NamingConfig)

    @property
    def is_production(self) -> bool:
        return self.env == 'production'

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """从环境变量创建完整配置"""
        return cls(
            env=_normalize_env(os.getenv('ENV', os.getenv('APP_ENV', 'local'))),
            debug=os.getenv('DEBUG', 'False').lower() == 'true',
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            naming=NamingConfig.from_env(),
        )


# 全局配置实例（单例模式）
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例（单例）"""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reload_config():
    """重新加载配置（用于热更新）"""
    global _config
    _config = AppConfig.from_env()
    return _config

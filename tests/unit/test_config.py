#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置管理单元测试
测试统一配置管理
"""

import pytest
import os
import sys
from unittest.mock import patch

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.config.naming_config import NamingConfig
from server.config.app_config import (
    AppConfig,
    get_config,
    reload_config
)


class TestNamingConfig:
    """流水线配置测试"""

    def test_from_env(self):
        """测试从环境变量创建流水线配置"""
        with patch.dict(os.environ, {
            'NAMING_PIPELINE_TIMEOUT': '3.5',
            'NAMING_MAX_POOL_SIZE': '6',
            'NAMING_MAX_COMBINATIONS': '20',
            'NAMING_TOP_N': '5',
            'NAMING_ZODIAC_BOUNDARY_MODE': 'APPROXIMATE',
            'NAMING_DATA_DIR': '/tmp/tables'
        }):
            config = NamingConfig.from_env()

            assert config.pipeline_timeout == 3.5
            assert config.max_pool_size == 6
            assert config.max_combinations == 20
            assert config.top_n == 5
            assert config.zodiac_boundary_mode == 'approximate'
            assert config.data_dir == '/tmp/tables'

    def test_defaults(self):
        """测试流水线配置默认值"""
        with patch.dict(os.environ, {}, clear=True):
            config = NamingConfig.from_env()

            assert config.pipeline_timeout == 15.0
            assert config.top_n == 10
            assert config.zodiac_boundary_mode == 'lunar'
            assert config.data_dir is None


class TestAppConfig:
    """应用配置测试"""

    def test_app_config_from_env(self):
        """测试从环境变量创建完整配置"""
        with patch.dict(os.environ, {
            'ENV': 'prod',
            'DEBUG': 'true',
            'LOG_LEVEL': 'debug',
            'NAMING_TOP_N': '3'
        }):
            config = AppConfig.from_env()

            assert config.env == 'production'
            assert config.is_production
            assert config.debug is True
            assert config.log_level == 'DEBUG'
            assert config.naming.top_n == 3

    @pytest.mark.parametrize("raw,expected", [
        ('stage', 'staging'),
        ('STAGING', 'staging'),
        ('dev', 'local'),
    ])
    def test_env_normalization(self, raw, expected):
        with patch.dict(os.environ, {'ENV': raw}):
            assert AppConfig.from_env().env == expected

    def test_app_env_fallback(self):
        with patch.dict(os.environ, {'APP_ENV': 'production'}, clear=True):
            assert AppConfig.from_env().env == 'production'

    def test_get_config_singleton(self):
        """测试配置单例"""
        assert get_config() is get_config()

    def test_reload_config(self):
        """测试重新加载配置"""
        with patch.dict(os.environ, {'NAMING_TOP_N': '7'}):
            config = reload_config()
            assert config.naming.top_n == 7
            assert get_config() is config
        reload_config()

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest 全局配置

提供：
- 共享 fixtures（字库、配置、执行器、示例请求）
- 测试钩子
"""

import pytest
import sys
import os
from typing import Dict, Any

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)


# ==================== 数据 Fixtures ====================

@pytest.fixture(scope="session")
def store():
    """
    默认字库（整个测试会话共享，只读）

    Returns:
        DataStore 实例
    """
    from core.data.store import load_default_store
    return load_default_store()


@pytest.fixture(scope="function")
def naming_config():
    """
    测试用流水线配置

    Returns:
        NamingConfig 实例
    """
    from core.config.naming_config import NamingConfig
    return NamingConfig(pipeline_timeout=30.0, max_pool_size=8, max_combinations=30, top_n=10)


@pytest.fixture(scope="function")
def executor(store, naming_config):
    """
    流水线执行器

    Yields:
        PipelineExecutor 实例
    """
    from core.naming.executor import PipelineExecutor
    executor = PipelineExecutor(store=store, config=naming_config)
    yield executor
    executor.shutdown()


@pytest.fixture(scope="function")
def sample_naming_request() -> Dict[str, Any]:
    """
    示例起名请求（精确出生时间）

    Returns:
        请求字典
    """
    return {
        "family_name": "吴",
        "gender": "male",
        "birth_info": {"year": 2025, "month": 10, "day": 31, "hour": 10, "minute": 0},
    }


# ==================== Pytest Hooks ====================

def pytest_configure(config):
    """
    pytest 配置钩子

    在 pytest 初始化时调用
    """
    config.addinivalue_line("markers", "slow: 标记为慢速测试，可通过 -m 'not slow' 跳过")
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "api: API 测试")


def pytest_collection_modifyitems(config, items):
    """
    修改测试收集

    自动为测试添加标记
    """
    for item in items:
        if "unit" in item.nodeid:
            item.add_marker(pytest.mark.unit)
        elif "api" in item.nodeid:
            item.add_marker(pytest.mark.api)


# ==================== 辅助函数 ====================

def assert_response_success(response: Dict[str, Any]):
    """
    断言响应成功

    Args:
        response: API 响应字典
    """
    assert response.get("success") == True, f"Expected success=True, got {response}"
    assert response.get("error") is None, f"Unexpected error: {response.get('error')}"

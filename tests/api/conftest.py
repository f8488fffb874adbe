#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tests/api/ 目录的 conftest：提供 client 和 sample_generate_request fixtures

注意: 这些测试需要 fastapi 和 httpx (TestClient 依赖) 已安装
"""
import pytest

# 尝试导入 FastAPI, 本地开发环境可能没有
fastapi = pytest.importorskip("fastapi", reason="fastapi not installed")
pytest.importorskip("httpx", reason="httpx not installed (required for TestClient)")

from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def client():
    """创建 FastAPI TestClient"""
    from server.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_generate_request():
    """标准起名请求参数（camelCase）"""
    return {
        "familyName": "吴",
        "gender": "male",
        "birthInfo": {"year": 2025, "month": 10, "day": 31, "hour": 10, "minute": 0},
    }

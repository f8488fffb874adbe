#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一 API 响应模型

提供标准化的 API 响应格式，确保所有接口返回一致的结构。
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class BaseAPIResponse(BaseModel):
    """
    基础 API 响应模型

    标准响应格式：
    {
        "success": true/false,
        "data": {...},           # 成功时返回数据
        "error": "错误信息",      # 失败时返回错误
        "message": "附加信息",    # 可选的附加信息
        "timestamp": "2026-02-04T12:00:00"
    }
    """
    # 允许额外字段（向后兼容）
    model_config = ConfigDict(extra='allow')

    success: bool = Field(..., description="请求是否成功")
    data: Optional[Any] = Field(default=None, description="响应数据")
    error: Optional[str] = Field(default=None, description="错误信息")
    message: Optional[str] = Field(default=None, description="附加消息")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now().isoformat(),
        description="响应时间戳"
    )


class NamingBaseResponse(BaseAPIResponse):
    """起名相关 API 的基础响应"""
    pass


def success_response(
    data: Any = None,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """
    创建成功响应（字典格式）

    Args:
        data: 响应数据
        message: 附加消息

    Returns:
        标准格式的响应字典
    """
    response = {
        "success": True,
        "data": data,
        "timestamp": datetime.now().isoformat()
    }
    if message:
        response["message"] = message
    return response


def error_response(
    error: str,
    data: Any = None,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """创建失败响应（字典格式），data 可携带部分结果"""
    response = {
        "success": False,
        "error": error,
        "timestamp": datetime.now().isoformat()
    }
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    return response

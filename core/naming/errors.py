#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名流水线异常定义

执行报告中的每条错误都由这里的异常对象 to_dict() 得到。
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """错误分类"""
    FATAL_INPUT = 'fatal-input'                  # 姓氏/性别缺失或非法，流水线不启动
    DEGRADED_INPUT = 'degraded-input'            # 出生时间不完整或不可解析，降级确定性
    DATA_MISS = 'data-miss'                      # 字库全部数据源未命中
    BOUNDARY_AMBIGUITY = 'boundary-ambiguity'    # 预产期跨生肖边界，非错误但需要双场景
    PLUGIN_EXCEPTION = 'plugin-exception'        # 插件内部异常
    TIMEOUT = 'timeout'                          # 流水线整体超时


class NamingError(Exception):
    """起名流水线异常基类"""
    kind = ErrorKind.PLUGIN_EXCEPTION

    def __init__(self, message: str, details: dict = None, plugin_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.plugin_id = plugin_id

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'message': self.message,
            'plugin_id': self.plugin_id,
            'details': self.details,
        }


class NamingInputError(NamingError):
    """请求参数不合法（致命）"""
    kind = ErrorKind.FATAL_INPUT


class DegradedInputError(NamingError):
    """出生信息不可用，降级处理"""
    kind = ErrorKind.DEGRADED_INPUT


class CharacterDataMissError(NamingError):
    """字库中找不到该字"""
    kind = ErrorKind.DATA_MISS


class PluginExecutionError(NamingError):
    """插件执行失败"""
    kind = ErrorKind.PLUGIN_EXCEPTION


class PipelineTimeoutError(NamingError):
    """流水线超时"""
    kind = ErrorKind.TIMEOUT


class DependencyCycleError(NamingError):
    """插件依赖存在环或依赖未注册"""


_ERROR_TYPES = {
    ErrorKind.FATAL_INPUT: NamingInputError,
    ErrorKind.DEGRADED_INPUT: DegradedInputError,
    ErrorKind.DATA_MISS: CharacterDataMissError,
    ErrorKind.PLUGIN_EXCEPTION: PluginExecutionError,
    ErrorKind.TIMEOUT: PipelineTimeoutError,
}


def error_for(kind: ErrorKind, message: str, plugin_id: Optional[str] = None,
              details: dict = None) -> NamingError:
    """按错误分类构造对应的异常对象"""
    error_type = _ERROR_TYPES.get(ErrorKind(kind), PluginExecutionError)
    return error_type(message, details, plugin_id)

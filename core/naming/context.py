#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
流水线执行上下文

每次执行独立创建：持有请求、字库解析器、确定性等级、插件结果与执行日志。
插件只写入自己的结果，确定性等级只能下调。
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.config.naming_config import NamingConfig
from core.data.store import DataStore
from core.naming.character_resolver import CharacterDataResolver
from core.naming.errors import NamingError, PipelineTimeoutError
from core.naming.models import (
    CertaintyLevel,
    LogEntry,
    NamingRequest,
    PluginResult,
    PredueAnalysis,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


class ExecutionLog:
    """结构化执行日志，随报告返回，同时转发到标准 logging"""

    def __init__(self):
        self._entries: List[LogEntry] = []
        self._lock = threading.Lock()

    def add(self, level: str, message: str, plugin_id: Optional[str] = None,
            payload: Optional[Mapping[str, Any]] = None) -> LogEntry:
        entry = LogEntry(timestamp=datetime.now(), level=level, plugin_id=plugin_id,
                         message=message, payload=dict(payload or {}))
        with self._lock:
            self._entries.append(entry)
        prefix = f"[{plugin_id}] " if plugin_id else ''
        logger.log(_LOG_LEVELS.get(level, logging.INFO), f"{prefix}{message}")
        return entry

    @property
    def entries(self) -> List[LogEntry]:
        with self._lock:
            return list(self._entries)

    def __len__(self):
        return len(self._entries)


class ExecutionContext:

    def __init__(self, request: NamingRequest, store: DataStore, config: NamingConfig,
                 certainty_level: CertaintyLevel, poetry_provider=None):
        self.request = request
        self.store = store
        self.config = config
        self.resolver = CharacterDataResolver(store)
        self.poetry_provider = poetry_provider
        self.predue_analysis: Optional[PredueAnalysis] = None
        self.log = ExecutionLog()
        self.warnings: List[str] = []
        self.errors: List[Dict[str, Any]] = []
        self._initial_level = certainty_level
        self._certainty_level = certainty_level
        self._results: Dict[str, PluginResult] = {}
        self.timeout: Optional[float] = None
        self.deadline: Optional[float] = None
        self._lock = threading.Lock()

    # ==================== 确定性等级 ====================

    @property
    def certainty_level(self) -> CertaintyLevel:
        return self._certainty_level

    @property
    def initial_certainty_level(self) -> CertaintyLevel:
        return self._initial_level

    def downgrade(self, level: CertaintyLevel, reason: str) -> CertaintyLevel:
        """只允许下调确定性等级，上调请求被忽略"""
        with self._lock:
            lowered = self._certainty_level.lower_of(level)
            if lowered != self._certainty_level:
                self.log.add('warning', f"确定性等级下调: {self._certainty_level.value} -> {lowered.value}（{reason}）",
                             payload={'reason': reason})
                self._certainty_level = lowered
            return self._certainty_level

    # ==================== 插件结果 ====================

    def set_result(self, result: PluginResult):
        with self._lock:
            if result.plugin_id in self._results:
                raise ValueError(f'插件结果已存在，不允许覆盖: {result.plugin_id}')
            self._results[result.plugin_id] = result

    def get_result(self, plugin_id: str) -> Optional[PluginResult]:
        return self._results.get(plugin_id)

    def payload(self, plugin_id: str) -> Any:
        """成功插件的输出，未执行、跳过或失败时返回 None"""
        result = self._results.get(plugin_id)
        if result is None or not result.success:
            return None
        return result.payload

    @property
    def results(self) -> Dict[str, PluginResult]:
        with self._lock:
            return dict(self._results)

    def add_warning(self, message: str, plugin_id: Optional[str] = None):
        with self._lock:
            self.warnings.append(message)
        self.log.add('warning', message, plugin_id)

    def record_error(self, error: NamingError):
        with self._lock:
            self.errors.append(error.to_dict())
        self.log.add('error', error.message, error.plugin_id)

    def snapshot(self) -> Tuple[Dict[str, PluginResult], List[Dict[str, Any]], List[str]]:
        """结果、错误、警告的一致快照（超时后插件线程可能仍在写入）"""
        with self._lock:
            return dict(self._results), list(self.errors), list(self.warnings)

    # ==================== 超时 ====================

    def start_deadline(self, timeout: float):
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout

    def check_deadline(self):
        """超过整体时限时抛出 PipelineTimeoutError，长循环内定期调用"""
        if self.deadline is not None and time.monotonic() > self.deadline:
            raise PipelineTimeoutError(f'流水线执行超时（{self.timeout}秒），返回部分结果',
                                       {'timeout_seconds': self.timeout})

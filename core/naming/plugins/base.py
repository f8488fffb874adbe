#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
插件基类

插件声明 id、层级、依赖与是否必需；process() 返回 PluginResult。
插件内部抛出的异常由执行器捕获并记录为 failed。
"""

from typing import Any, Sequence, Tuple

from core.naming.errors import ErrorKind
from core.naming.models import PluginResult


class NamingPlugin:
    plugin_id: str = ''
    layer: int = 0
    dependencies: Tuple[str, ...] = ()
    # 必需插件失败时，依赖它的插件被跳过
    required: bool = True
    confidence: float = 1.0
    description: str = ''

    def process(self, context) -> PluginResult:
        raise NotImplementedError

    def ok(self, payload: Any, confidence: float = None, warnings: Sequence[str] = ()) -> PluginResult:
        return PluginResult.ok(self.plugin_id, payload,
                               self.confidence if confidence is None else confidence,
                               tuple(warnings))

    def skip(self, reason: str) -> PluginResult:
        return PluginResult.skipped(self.plugin_id, reason)

    def fail(self, message: str, kind: ErrorKind = ErrorKind.PLUGIN_EXCEPTION) -> PluginResult:
        return PluginResult.failed(self.plugin_id, message, kind)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.plugin_id} layer={self.layer}>"

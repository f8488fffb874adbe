#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名流水线执行器

执行顺序：
1. 校验请求，判断确定性等级
2. 只有预产期时先做生肖边界分析
3. 第一层插件按层内依赖分批并行执行，其余各层依次执行
4. 整条流水线受超时控制，超时返回已完成的部分结果

插件在执行器自己的线程池中运行，超时后调用方立即拿到报告，
插件之间与长循环内检查截止时间，尽快停止剩余工作。
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional, Union

from core.analyzers.predue_boundary_analyzer import PredueBoundaryAnalyzer
from core.config.naming_config import NamingConfig
from core.data.store import DataStore, load_default_store
from core.naming.certainty import CertaintyLevelManager
from core.naming.context import ExecutionContext
from core.naming.dependency_graph import DependencyGraph
from core.naming.errors import (
    ErrorKind,
    NamingInputError,
    PipelineTimeoutError,
    error_for,
)
from core.naming.models import (
    CertaintyLevel,
    ExecutionReport,
    NamingRequest,
    PluginResult,
    PluginStatus,
)
from core.naming.plugins.base import NamingPlugin
from core.naming.plugins.registry import default_plugins

logger = logging.getLogger(__name__)

# 这些插件失败时流水线中止
FATAL_PLUGINS = ('surname', 'gender')
SCORING_PLUGIN = 'comprehensive-scoring'
BOTH_BIRTH_AND_PREDUE = '同时提供了出生时间与预产期，按精确出生时间处理'
MIN_WORKERS = 4


class PipelineExecutor:
    """六层插件流水线"""

    def __init__(self, store: Optional[DataStore] = None, config: Optional[NamingConfig] = None,
                 plugins: Optional[Iterable[NamingPlugin]] = None, poetry_provider=None):
        self.config = config or NamingConfig.from_env()
        self.store = store or load_default_store(self.config.data_dir)
        self.plugins: List[NamingPlugin] = list(plugins) if plugins is not None else default_plugins()
        self.poetry_provider = poetry_provider
        self.graph = DependencyGraph(self.plugins)
        self.graph.validate()
        self.layers = self.graph.layers()
        self._plugins = {p.plugin_id: p for p in self.plugins}
        self.predue_analyzer = PredueBoundaryAnalyzer(self.config.zodiac_boundary_mode)
        workers = max(MIN_WORKERS, len(self.layers[0]) if self.layers else 1)
        self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="naming_plugin")

    # ==================== 对外接口 ====================

    async def execute(self, request: Union[NamingRequest, Mapping[str, Any]]) -> ExecutionReport:
        started = time.perf_counter()
        if not isinstance(request, NamingRequest):
            try:
                request = NamingRequest.from_dict(request)
            except NamingInputError as e:
                logger.warning(f"⚠️ 请求参数不合法: {e.message}")
                return self._rejected(e, started)

        level = CertaintyLevelManager.determine(request)
        context = ExecutionContext(request, self.store, self.config, level, self.poetry_provider)
        level_config = CertaintyLevelManager.config_for(level)
        timeout = min(self.config.pipeline_timeout, level_config.timeout_ms / 1000)
        context.start_deadline(timeout)
        context.log.add('info', f"🚀 开始起名: {request.family_name} {request.gender.value} "
                                f"等级{level.value} 策略{level_config.strategy}")

        try:
            await asyncio.wait_for(self._run(context), timeout=timeout)
        except asyncio.TimeoutError:
            context.record_error(PipelineTimeoutError(f'流水线执行超时（{timeout}秒），返回部分结果',
                                                      {'timeout_seconds': timeout}))
        except PipelineTimeoutError as e:
            context.record_error(e)

        report = self._report(context, started)
        logger.info(f"✅ 起名完成: 候选{len(report.candidates)}个 耗时{report.execution_time_ms:.1f}ms")
        return report

    def execute_sync(self, request: Union[NamingRequest, Mapping[str, Any]]) -> ExecutionReport:
        return asyncio.run(self.execute(request))

    def shutdown(self, wait: bool = False):
        self._pool.shutdown(wait=wait)

    # ==================== 流水线 ====================

    async def _run(self, context: ExecutionContext):
        loop = asyncio.get_running_loop()
        request = context.request

        if request.birth_info is not None and request.predue_info is not None:
            context.add_warning(BOTH_BIRTH_AND_PREDUE)
        elif request.predue_info is not None:
            analysis = await loop.run_in_executor(self._pool, self.predue_analyzer.analyze, request.predue_info)
            context.predue_analysis = analysis
            if analysis.is_cross_zodiac:
                context.log.add('warning', '预产期跨越生肖年边界，按双生肖评估',
                                payload={'kind': ErrorKind.BOUNDARY_AMBIGUITY.value,
                                         'probability': analysis.boundary.probability})

        for index, layer in enumerate(self.layers):
            parallel = index == 0 and CertaintyLevelManager.config_for(context.certainty_level).parallel
            for wave in self.graph.waves(layer):
                plugins = [self._plugins[pid] for pid in wave]
                if parallel and len(plugins) > 1:
                    await asyncio.gather(*(
                        loop.run_in_executor(self._pool, self._run_plugin, plugin, context) for plugin in plugins
                    ))
                else:
                    for plugin in plugins:
                        await loop.run_in_executor(self._pool, self._run_plugin, plugin, context)

            fatal = [pid for pid in FATAL_PLUGINS
                     if context.get_result(pid) is not None and not context.get_result(pid).success]
            if fatal:
                context.log.add('error', f"❌ 基础信息插件失败，流水线中止: {fatal}")
                self._skip_remaining(context, index + 1, f'基础信息插件失败: {", ".join(fatal)}')
                return

    def _run_plugin(self, plugin: NamingPlugin, context: ExecutionContext) -> PluginResult:
        context.check_deadline()
        reason = self._skip_reason(plugin, context)
        if reason:
            result = PluginResult.skipped(plugin.plugin_id, reason)
            context.log.add('info', f"⏭️ 跳过: {reason}", plugin.plugin_id)
        else:
            started = time.perf_counter()
            try:
                result = plugin.process(context)
            except PipelineTimeoutError as e:
                context.set_result(PluginResult.failed(plugin.plugin_id, e.message, ErrorKind.TIMEOUT))
                raise
            except Exception as e:
                logger.error(f"❌ 插件 {plugin.plugin_id} 执行异常: {e}", exc_info=True)
                result = PluginResult.failed(plugin.plugin_id, f'{type(e).__name__}: {e}')
            duration_ms = (time.perf_counter() - started) * 1000
            result = replace(
                result,
                duration_ms=duration_ms,
                confidence=CertaintyLevelManager.clamp_confidence(context.certainty_level, result.confidence),
            )

        context.set_result(result)
        if result.status == PluginStatus.FAILED:
            kind = result.error_kind or ErrorKind.PLUGIN_EXCEPTION
            context.record_error(error_for(kind, result.error, plugin.plugin_id))
        for warning in result.warnings:
            context.add_warning(warning, plugin.plugin_id)
        return result

    def _skip_reason(self, plugin: NamingPlugin, context: ExecutionContext) -> Optional[str]:
        level = context.certainty_level
        if not CertaintyLevelManager.is_plugin_enabled(level, plugin.plugin_id):
            return f'确定性等级 {level.value} 下不执行该插件'
        for dep in plugin.dependencies:
            dep_result = context.get_result(dep)
            if self._plugins[dep].required and (dep_result is None or not dep_result.success):
                return f'必需依赖 {dep} 未成功执行'
        return None

    def _skip_remaining(self, context: ExecutionContext, start_layer: int, reason: str):
        for layer in self.layers[start_layer:]:
            for pid in layer:
                context.set_result(PluginResult.skipped(pid, reason))

    # ==================== 报告 ====================

    def _report(self, context: ExecutionContext, started: float) -> ExecutionReport:
        results, errors, warnings = context.snapshot()
        scoring = results.get(SCORING_PLUGIN)
        scoring = scoring.payload if scoring is not None and scoring.success else None
        candidates = list(scoring['candidates']) if scoring else []
        final = {}
        if scoring:
            final = dict(scoring['final_recommendation'])
            final['statistics'] = scoring['summary']
        return ExecutionReport(
            success=bool(candidates),
            certainty_level=context.certainty_level,
            execution_time_ms=(time.perf_counter() - started) * 1000,
            plugin_results=results,
            candidates=candidates,
            final_recommendation=final,
            errors=errors,
            warnings=warnings,
            predue_analysis=context.predue_analysis,
            logs=context.log.entries,
        )

    @staticmethod
    def _rejected(error: NamingInputError, started: float) -> ExecutionReport:
        return ExecutionReport(
            success=False,
            certainty_level=CertaintyLevel.UNKNOWN,
            execution_time_ms=(time.perf_counter() - started) * 1000,
            plugin_results={},
            errors=[error.to_dict()],
        )


def generate_names(request: Union[NamingRequest, Mapping[str, Any]], **kwargs) -> ExecutionReport:
    """同步便捷入口"""
    executor = PipelineExecutor(**kwargs)
    try:
        return executor.execute_sync(request)
    finally:
        executor.shutdown()

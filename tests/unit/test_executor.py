#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名流水线执行器测试

覆盖确定性等级、致命输入、降级、插件异常与超时。
"""

import pytest
import os
import sys
import time

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.config.naming_config import NamingConfig
from core.naming.errors import ErrorKind
from core.naming.executor import BOTH_BIRTH_AND_PREDUE, PipelineExecutor
from core.naming.models import CertaintyLevel, NamingRequest, PluginStatus
from core.naming.plugins import NamingPlugin, default_plugins


class SlowPlugin(NamingPlugin):
    plugin_id = 'slow'
    layer = 1
    required = False

    def process(self, context):
        time.sleep(0.5)
        return self.ok({})


class SlowBasePlugin(NamingPlugin):
    plugin_id = 'slow-base'
    layer = 1
    required = True

    def process(self, context):
        time.sleep(0.2)
        return self.ok({'value': 42})


class NeedsBasePlugin(NamingPlugin):
    plugin_id = 'needs-base'
    layer = 1
    dependencies = ('slow-base',)
    required = False

    def process(self, context):
        return self.ok({'value': context.payload('slow-base')['value'] + 1})


class StuckPlugin(NamingPlugin):
    plugin_id = 'stuck'
    layer = 1
    required = False

    def process(self, context):
        time.sleep(2.0)
        return self.ok({})


class BoomPlugin(NamingPlugin):
    plugin_id = 'boom'
    layer = 1
    required = False

    def process(self, context):
        raise RuntimeError('插件内部错误')


def error_kinds(report):
    return [e['kind'] for e in report.errors]


class TestFullPipeline:
    """完整流水线"""

    @pytest.mark.asyncio
    async def test_exact_birth_time(self, executor, sample_naming_request):
        report = await executor.execute(sample_naming_request)

        assert report.success
        assert report.certainty_level == CertaintyLevel.FULLY_DETERMINED
        assert report.candidates
        assert len(report.candidates) <= 10
        top = report.candidates[0]
        assert 0 < top.composite < 100
        assert top.family_name == '吴'
        composites = [c.composite for c in report.candidates]
        assert composites == sorted(composites, reverse=True)
        assert report.final_recommendation['names'][0]['priority'] == 'primary'
        assert report.final_recommendation['statistics']['total'] >= len(report.candidates)
        assert all(r.status == PluginStatus.SUCCESS for r in report.plugin_results.values())

    @pytest.mark.asyncio
    async def test_confidence_within_ceiling(self, executor):
        request = {'family_name': '李', 'gender': 'female', 'birth_info': {'year': 2024, 'month': 5, 'day': 1}}
        report = await executor.execute(request)

        assert report.certainty_level == CertaintyLevel.PARTIALLY_DETERMINED
        for result in report.plugin_results.values():
            assert result.confidence <= 0.85

    @pytest.mark.asyncio
    async def test_no_birth_info(self, executor):
        report = await executor.execute({'family_name': '吴', 'gender': 'male'})

        assert report.success
        assert report.certainty_level == CertaintyLevel.UNKNOWN
        assert report.plugin_results['destiny'].status == PluginStatus.SKIPPED
        assert report.plugin_results['zodiac'].status == PluginStatus.SKIPPED
        assert all(c.scores.zodiac is None for c in report.candidates)

    @pytest.mark.asyncio
    async def test_request_object(self, executor):
        request = NamingRequest.from_dict({'familyName': '欧阳', 'gender': 'female',
                                           'preferences': {'nameLength': 1}})
        report = await executor.execute(request)

        assert report.success
        assert all(len(c.characters) == 1 for c in report.candidates)
        assert all(c.full_name.startswith('欧阳') for c in report.candidates)

    @pytest.mark.asyncio
    async def test_every_listed_surname(self, executor, store):
        """字库收录的常见单姓与复姓都能生成候选"""
        surnames = sorted(store.common_surnames | store.compound_surnames)
        assert len(surnames) == 32
        for family_name in surnames:
            report = await executor.execute({'family_name': family_name, 'gender': 'male'})
            assert report.success, (family_name, report.errors)
            assert all(c.full_name.startswith(family_name) for c in report.candidates)

    def test_execute_sync(self, executor, sample_naming_request):
        report = executor.execute_sync(sample_naming_request)
        assert report.success
        assert report.to_dict()['certainty_level'] == 'FULLY_DETERMINED'


class TestPredue:

    @pytest.mark.asyncio
    async def test_cross_zodiac(self, executor):
        request = {'family_name': '吴', 'gender': 'male',
                   'predue_info': {'year': 2026, 'month': 2, 'day': 17, 'week_offset': 2}}
        report = await executor.execute(request)

        assert report.success
        assert report.certainty_level == CertaintyLevel.ESTIMATED
        assert report.predue_analysis.is_cross_zodiac
        assert report.plugin_results['destiny'].status == PluginStatus.SKIPPED
        contexts = report.plugin_results['zodiac'].payload['contexts']
        assert len(contexts) == 2
        assert sum(c.probability for c in contexts) == pytest.approx(1.0)
        assert set(report.candidates[0].zodiac_breakdown) == {'蛇', '马'}

    @pytest.mark.asyncio
    async def test_exact_birth_wins(self, executor, sample_naming_request):
        request = dict(sample_naming_request, predue_info={'year': 2026, 'month': 2})
        report = await executor.execute(request)

        assert report.certainty_level == CertaintyLevel.FULLY_DETERMINED
        assert report.predue_analysis is None
        assert BOTH_BIRTH_AND_PREDUE in report.warnings

    @pytest.mark.asyncio
    async def test_uncertain_predue(self, executor):
        report = await executor.execute({'family_name': '吴', 'gender': 'male',
                                         'predue_info': {'month': 6}})

        assert report.success
        assert report.certainty_level == CertaintyLevel.UNKNOWN


class TestFailures:

    @pytest.mark.asyncio
    async def test_invalid_surname_aborts(self, executor):
        report = await executor.execute({'family_name': 'abc', 'gender': 'male'})

        assert not report.success
        assert ErrorKind.FATAL_INPUT.value in error_kinds(report)
        assert report.plugin_results['comprehensive-scoring'].status == PluginStatus.SKIPPED
        assert report.candidates == []

    @pytest.mark.asyncio
    async def test_invalid_gender_rejected(self, executor):
        report = await executor.execute({'family_name': '吴', 'gender': 'other'})

        assert not report.success
        assert report.plugin_results == {}
        assert error_kinds(report) == [ErrorKind.FATAL_INPUT.value]

    @pytest.mark.asyncio
    async def test_invalid_birth_date_downgrades(self, executor):
        request = {'family_name': '吴', 'gender': 'male',
                   'birth_info': {'year': 2025, 'month': 2, 'day': 30, 'hour': 8}}
        report = await executor.execute(request)

        assert report.success
        assert report.certainty_level == CertaintyLevel.UNKNOWN
        assert ErrorKind.DEGRADED_INPUT.value in error_kinds(report)
        assert report.plugin_results['birth-time'].status == PluginStatus.FAILED

    @pytest.mark.asyncio
    async def test_plugin_exception(self, store, naming_config, sample_naming_request):
        executor = PipelineExecutor(store=store, config=naming_config, plugins=default_plugins() + [BoomPlugin()])
        report = await executor.execute(sample_naming_request)

        assert report.success
        result = report.plugin_results['boom']
        assert result.status == PluginStatus.FAILED
        assert 'RuntimeError' in result.error
        assert ErrorKind.PLUGIN_EXCEPTION.value in error_kinds(report)

    @pytest.mark.asyncio
    async def test_timeout(self, store, sample_naming_request):
        config = NamingConfig(pipeline_timeout=0.1)
        executor = PipelineExecutor(store=store, config=config, plugins=default_plugins() + [SlowPlugin()])
        report = await executor.execute(sample_naming_request)

        assert not report.success
        assert ErrorKind.TIMEOUT.value in error_kinds(report)

    def test_timeout_bounds_sync_call(self, store, sample_naming_request):
        """超时后同步调用立即返回，不等待仍在运行的插件线程"""
        config = NamingConfig(pipeline_timeout=0.2)
        executor = PipelineExecutor(store=store, config=config, plugins=default_plugins() + [StuckPlugin()])

        started = time.perf_counter()
        report = executor.execute_sync(sample_naming_request)
        elapsed = time.perf_counter() - started

        assert elapsed < 1.5
        assert report.execution_time_ms < 1500
        timeouts = [e for e in report.errors if e['kind'] == ErrorKind.TIMEOUT.value]
        assert len(timeouts) == 1
        assert timeouts[0]['details'] == {'timeout_seconds': 0.2}
        executor.shutdown()

    @pytest.mark.asyncio
    async def test_errors_carry_plugin_id(self, store, naming_config, sample_naming_request):
        executor = PipelineExecutor(store=store, config=naming_config, plugins=default_plugins() + [BoomPlugin()])
        report = await executor.execute(sample_naming_request)

        error = next(e for e in report.errors if e['kind'] == ErrorKind.PLUGIN_EXCEPTION.value)
        assert error['plugin_id'] == 'boom'
        assert set(error) == {'kind', 'message', 'plugin_id', 'details'}


class TestSameLayerDependencies:

    @pytest.mark.asyncio
    async def test_dependency_runs_first(self, store, naming_config, sample_naming_request):
        """同层插件等依赖产出结果后才执行"""
        plugins = default_plugins() + [NeedsBasePlugin(), SlowBasePlugin()]
        executor = PipelineExecutor(store=store, config=naming_config, plugins=plugins)
        report = await executor.execute(sample_naming_request)

        assert report.success
        assert report.plugin_results['slow-base'].status == PluginStatus.SUCCESS
        result = report.plugin_results['needs-base']
        assert result.status == PluginStatus.SUCCESS
        assert result.payload['value'] == 43

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
选字策略、候选字筛选与名字组合插件测试
"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.data.constants import Element, Gender
from core.naming.executor import PipelineExecutor
from core.naming.models import PoetryCandidate
from core.naming.plugins.layer3 import SelectionStrategyPlugin
from core.naming.plugins.layer5 import element_chain_score
from core.naming.poetry import StaticPoetryProvider

POETRY_CHARS = ['清', '明', '思', '远']


def given_names(report):
    return [c.given_name for c in report.candidates]


class TestSelectionStrategy:

    def test_weights(self):
        weights = SelectionStrategyPlugin._weights([Element.WATER, Element.WOOD], [Element.FIRE], 0.9)
        assert weights[Element.WATER] == 0.9
        assert weights[Element.WOOD] == 0.81
        assert weights[Element.FIRE] == 0.09
        assert weights[Element.EARTH] == 0.45

    @pytest.mark.asyncio
    async def test_user_preference_without_destiny(self, executor):
        request = {'family_name': '吴', 'gender': 'male', 'preferences': {'preferred_elements': ['水']}}
        report = await executor.execute(request)

        payload = report.plugin_results['selection-strategy'].payload
        assert payload['source'] == 'preference'
        assert payload['preferred_elements'] == (Element.WATER,)
        assert payload['flexibility'] == 'moderate'

    @pytest.mark.asyncio
    async def test_neutral_strategy(self, executor):
        report = await executor.execute({'family_name': '吴', 'gender': 'male'})

        payload = report.plugin_results['selection-strategy'].payload
        assert payload['flexibility'] == 'open'
        assert len(set(payload['position_weights'][0].values())) == 1


class TestCharacterFilter:

    @pytest.mark.asyncio
    async def test_excluded_characters(self, executor):
        request = {'family_name': '吴', 'gender': 'male', 'preferences': {'excluded_characters': ['浩', '宇']}}
        report = await executor.execute(request)

        assert report.success
        assert all('浩' not in name and '宇' not in name for name in given_names(report))

    @pytest.mark.asyncio
    async def test_required_character(self, executor):
        request = {'family_name': '吴', 'gender': 'male', 'preferences': {'required_characters': ['浩']}}
        report = await executor.execute(request)

        assert report.success
        assert all('浩' in name for name in given_names(report))

    @pytest.mark.asyncio
    async def test_surname_character_not_reused(self, executor):
        report = await executor.execute({'family_name': '李', 'gender': 'female'})

        assert all('李' not in name for name in given_names(report))

    @pytest.mark.asyncio
    async def test_stage_counts(self, executor, sample_naming_request):
        report = await executor.execute(sample_naming_request)

        counts = report.plugin_results['character-filter'].payload['stage_counts']
        assert counts['initial'] >= counts['resolved'] > 0
        assert 'zodiac' in counts


class TestPoetrySource:

    @pytest.mark.asyncio
    async def test_request_candidates(self, executor):
        request = {
            'family_name': '吴',
            'gender': 'female',
            'preferences': {
                'source': 'poetry',
                'poetry_candidates': [{'character': c, 'source': '《诗经》'} for c in POETRY_CHARS],
            },
        }
        report = await executor.execute(request)

        assert report.success
        for candidate in report.candidates:
            assert set(candidate.given_name) <= set(POETRY_CHARS)
            assert candidate.details['poetry_sources']

    @pytest.mark.asyncio
    async def test_provider(self, store, naming_config):
        provider = StaticPoetryProvider([PoetryCandidate(c, '《楚辞》') for c in POETRY_CHARS])
        executor = PipelineExecutor(store=store, config=naming_config, poetry_provider=provider)
        report = await executor.execute({'family_name': '吴', 'gender': 'male',
                                         'preferences': {'source': 'poetry'}})

        assert report.success
        assert all(set(name) <= set(POETRY_CHARS) for name in given_names(report))

    @pytest.mark.asyncio
    async def test_falls_back_to_dictionary(self, executor):
        report = await executor.execute({'family_name': '吴', 'gender': 'male',
                                         'preferences': {'source': 'poetry'}})

        assert report.success
        assert '未提供诗词候选字，改用字库候选池' in report.warnings

    @pytest.mark.asyncio
    async def test_unresolvable_candidates_fall_back(self, executor):
        """诗词候选字全部查不到时改用字库候选池，不中止流水线"""
        report = await executor.execute({
            'family_name': '吴', 'gender': 'male',
            'preferences': {'source': 'poetry',
                            'poetry_candidates': [{'character': '𠀀', 'source': '《佚诗》'}]},
        })

        assert report.success
        assert '诗词候选字在字库中均无可用数据，改用字库候选池' in report.warnings
        assert report.plugin_results['character-filter'].payload['poetry_sources'] == {}
        assert all(not c.details['poetry_sources'] for c in report.candidates)

    def test_provider_deduplicates(self):
        provider = StaticPoetryProvider([
            PoetryCandidate('清', '《诗经》'),
            PoetryCandidate('清', '《楚辞》'),
            PoetryCandidate('吴', '《诗经》'),
        ])
        candidates = provider.candidate_characters('吴', Gender.MALE)
        assert [(c.character, c.source) for c in candidates] == [('清', '《诗经》')]


class TestNameCombination:

    @pytest.mark.asyncio
    async def test_combinations_limited_and_unique(self, executor, sample_naming_request):
        report = await executor.execute(sample_naming_request)

        payload = report.plugin_results['name-combination'].payload
        combinations = payload['combinations']
        assert len(combinations) <= 30
        names = [c.given_name for c in combinations]
        assert len(names) == len(set(names))
        assert all(len(set(name)) == len(name) for name in names)
        pre_scores = [c.pre_score for c in combinations]
        assert pre_scores == sorted(pre_scores, reverse=True)

    def test_element_chain_score(self, store):
        from core.naming.character_resolver import CharacterDataResolver
        resolver = CharacterDataResolver(store)
        records = [resolver.resolve(c) for c in '吴浩']
        # 木 -> 水：水生木，不计分
        assert element_chain_score(records) == 70.0

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
综合评分引擎单元测试
"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.data.constants import Element, Gender, Zodiac
from core.naming.character_resolver import CharacterDataResolver
from core.naming.models import (
    CharacterRecord,
    DimensionScores,
    NameCandidate,
    NameCombination,
    ZodiacContext,
)
from core.naming.scoring import DEFAULT_WEIGHTS, ScoringEngine, grade_for


def record(character, **fields):
    fields.setdefault('confidence', 1.0)
    fields.setdefault('completeness', 1.0)
    return CharacterRecord(character=character, **fields)


WU = record('吴', traditional_strokes=7, element=Element.WOOD, pinyin='wú', tone=2)
HAO = record('浩', traditional_strokes=11, element=Element.WATER, pinyin='hào', tone=4, radical='氵',
             polarity='positive', gender_tendency='male', meanings=('广大',), cultural_level=90)
RAN = record('然', traditional_strokes=12, element=Element.FIRE, pinyin='rán', tone=2, radical='灬',
             polarity='positive', gender_tendency='neutral', meanings=('如此',))


def candidate(name, composite):
    scores = DimensionScores(sancai=composite, wuxing=composite, phonetic=composite,
                             meaning=composite, cultural=composite)
    return NameCandidate(family_name=name[0], characters=tuple(record(c) for c in name[1:]),
                         scores=scores, composite=composite, grade=grade_for(composite), rationale='')


class TestWeights:

    def test_default_weights_sum_to_one(self):
        engine = ScoringEngine()
        assert sum(engine.weights.values()) == pytest.approx(1.0)
        assert engine.weights == pytest.approx(DEFAULT_WEIGHTS)

    def test_custom_weights_normalized(self):
        weights = ScoringEngine.normalize_weights({'sancai': 2, 'wuxing': 2})
        assert weights['sancai'] == pytest.approx(0.5)
        assert weights['zodiac'] == 0.0

    def test_negative_weight(self):
        with pytest.raises(ValueError):
            ScoringEngine.normalize_weights({'sancai': -1, 'wuxing': 2})

    def test_zero_weights(self):
        with pytest.raises(ValueError):
            ScoringEngine.normalize_weights({})


class TestGrades:

    @pytest.mark.parametrize("score,grade", [
        (100, 'S'), (90, 'S'), (89.9, 'A'), (85, 'A'), (80, 'B'), (79.9, 'C'), (70, 'C'), (69.9, 'D'), (0, 'D'),
    ])
    def test_grade_bands(self, score, grade):
        assert grade_for(score) == grade


class TestDimensions:

    def test_sancai(self):
        given = [record('浩', traditional_strokes=9), record('然', traditional_strokes=15)]
        score, detail = ScoringEngine.sancai_score([WU], given)
        assert score == 100.0
        assert detail['grids']['tiange'] == 8

    def test_wuxing_producing_chain(self):
        """木生火、火生土"""
        given = [record('炎', element=Element.FIRE), record('坤', element=Element.EARTH)]
        assert ScoringEngine.wuxing_score([WU], given) == 100.0

    def test_wuxing_conflict_and_avoid(self):
        given = [record('钧', element=Element.METAL)]
        assert ScoringEngine.wuxing_score([WU], given) == 70.0
        assert ScoringEngine.wuxing_score([WU], given, avoid=[Element.METAL]) == 58.0

    def test_wuxing_useful_position_factor(self):
        given = [record('浩', element=Element.WATER), record('淼', element=Element.WATER)]
        # 水水同类 +5，喜用 +8 与 +7.2 后截到 100
        assert ScoringEngine.wuxing_score([WU], given, useful=[Element.WATER]) == 100.0
        assert ScoringEngine.wuxing_score([WU], given) == 85.0

    def test_phonetic(self):
        score, detail = ScoringEngine.phonetic_score([WU], [HAO, RAN])
        assert score == 90.0
        assert detail['tones'] == [2, 4, 2]

    def test_meaning(self):
        assert ScoringEngine.meaning_score([HAO, RAN], Gender.MALE) == 90.5
        assert ScoringEngine.meaning_score([HAO], Gender.FEMALE) == 75.0
        assert ScoringEngine.meaning_score([], Gender.MALE) == 0.0

    def test_cultural(self):
        assert ScoringEngine.cultural_score([HAO, RAN]) == 75.0
        assert ScoringEngine.cultural_score([HAO, RAN], {'然': '《诗经》'}) == 79.0

    def test_zodiac_weighted_by_probability(self):
        contexts = [ZodiacContext(zodiac=Zodiac.RAT, probability=0.5),
                    ZodiacContext(zodiac=Zodiac.SNAKE, probability=0.5)]
        weighted, breakdown, reasons = ScoringEngine.zodiac_scores([HAO], contexts)
        assert breakdown == {'鼠': 80.0, '蛇': 60.0}
        assert weighted == 70.0
        assert any('氵' in r for r in reasons)

    def test_zodiac_absent(self):
        assert ScoringEngine.zodiac_scores([HAO], []) == (None, {}, [])


class TestComposite:

    def test_missing_zodiac_renormalizes(self):
        engine = ScoringEngine()
        scores = DimensionScores(sancai=80, wuxing=80, phonetic=80, meaning=80, cultural=80)
        assert engine.composite(scores) == 80.0

    def test_composite_weighted(self):
        engine = ScoringEngine()
        scores = DimensionScores(sancai=100, wuxing=100, phonetic=100, meaning=100, cultural=100, zodiac=0)
        assert engine.composite(scores) == 92.0

    def test_score_is_deterministic(self, store):
        """同样的输入得到同样的分数"""
        resolver = CharacterDataResolver(store)
        surname = [resolver.resolve('吴')]
        combination = NameCombination(family_name='吴', characters=(resolver.resolve('浩'), resolver.resolve('宇')))
        engine = ScoringEngine()
        contexts = [ZodiacContext(zodiac=Zodiac.SNAKE, probability=1.0)]

        first = engine.score(combination, surname, gender=Gender.MALE, zodiac_contexts=contexts)
        second = engine.score(combination, surname, gender=Gender.MALE, zodiac_contexts=contexts)
        assert first == second
        assert 0 <= first.composite <= 100
        assert first.grade == grade_for(first.composite)
        assert first.full_name == '吴浩宇'
        assert '蛇' in first.zodiac_breakdown
        assert 1 <= first.details['yijing']['main']['number'] <= 64
        assert first.details['dayan']['readings']['renge']['number'] == first.details['grids']['renge']

    def test_score_without_zodiac(self, store):
        resolver = CharacterDataResolver(store)
        combination = NameCombination(family_name='吴', characters=(resolver.resolve('浩'),))
        result = ScoringEngine().score(combination, [resolver.resolve('吴')])
        assert result.scores.zodiac is None
        assert '生肖维度不参与计分' in result.rationale


class TestRanking:

    def test_rank_ties_broken_by_name(self):
        ranked = ScoringEngine.rank([candidate('吴然', 85.0), candidate('吴浩', 90.0), candidate('吴宇', 85.0)])
        assert [c.composite for c in ranked] == [90.0, 85.0, 85.0]
        assert [c.full_name for c in ranked[1:]] == sorted(['吴然', '吴宇'])

    def test_summarize(self):
        summary = ScoringEngine.summarize([candidate('吴浩', 90.0), candidate('吴然', 70.0)])
        assert summary['total'] == 2
        assert summary['average'] == 80.0
        assert summary['grade_distribution']['S'] == 1
        assert summary['grade_distribution']['C'] == 1
        assert ScoringEngine.summarize([])['total'] == 0

    def test_final_recommendation(self):
        ranked = ScoringEngine.rank([candidate(n, s) for n, s in
                                     [('吴浩', 91.0), ('吴然', 88.0), ('吴宇', 86.0), ('吴川', 75.0)]])
        final = ScoringEngine.final_recommendation(ranked)
        assert [n['priority'] for n in final['names']] == ['primary', 'alternative', 'alternative']
        assert '吴浩' in final['summary']
        assert ScoringEngine.final_recommendation([])['names'] == []

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""三才五格计算单元测试"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.calculators.sancai_calculator import SancaiCalculator
from core.data.constants import Element
from core.data.numerology import (
    NumberLuck,
    SancaiLevel,
    SANCAI_RULES,
    evaluate_number,
    is_lucky_number,
    normalize_number,
)


class TestGrids:
    def test_single_surname_two_given(self):
        grids = SancaiCalculator.calculate_grids([7], [9, 15])
        assert grids == {'tiange': 8, 'renge': 16, 'dige': 24, 'zongge': 31, 'waige': 16}

    def test_single_surname_one_given(self):
        grids = SancaiCalculator.calculate_grids([7], [9])
        assert grids == {'tiange': 8, 'renge': 16, 'dige': 10, 'zongge': 16, 'waige': 2}

    def test_compound_surname_two_given(self):
        grids = SancaiCalculator.calculate_grids([15, 17], [8, 10])
        assert grids == {'tiange': 32, 'renge': 25, 'dige': 18, 'zongge': 50, 'waige': 25}

    def test_compound_surname_one_given(self):
        grids = SancaiCalculator.calculate_grids([15, 17], [8])
        assert grids['waige'] == 16
        assert grids['dige'] == 9

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            SancaiCalculator.calculate_grids([7], [1, 2, 3])


class TestNumerology:
    def test_normalize_number(self):
        assert normalize_number(81) == 81
        assert normalize_number(82) == 2
        assert normalize_number(170) == 10

    def test_evaluate_number(self):
        assert evaluate_number(31) == NumberLuck.GREAT
        assert evaluate_number(17) == NumberLuck.MINOR
        assert evaluate_number(10) == NumberLuck.BAD

    def test_lucky_number_excludes_bad_categories(self):
        """同时属于凶类的数不算吉数"""
        assert is_lucky_number(16)
        # 21 属首领运，同时属女性孤寡运
        assert not is_lucky_number(21)
        assert not is_lucky_number(28)

    def test_rule_table_complete(self):
        assert len(SANCAI_RULES) == 125
        assert SANCAI_RULES[(Element.WOOD, Element.FIRE, Element.EARTH)] == SancaiLevel.GREAT
        assert SANCAI_RULES[(Element.METAL, Element.EARTH, Element.FIRE)] == SancaiLevel.GOOD_PLUS


class TestEvaluate:
    def test_perfect_combination(self):
        """吴 + 9 画 + 15 画：五格全吉，三才中吉"""
        result = SancaiCalculator.evaluate([7], [9, 15])
        assert result['score'] == 100.0
        assert result['issues'] == []
        assert result['is_valid']
        assert result['sancai']['combination'] == '金土火'
        assert result['sancai']['level'] == SancaiLevel.GOOD_PLUS

    def test_single_given_fixed_waige(self):
        """单名外格为定数，不参与计分"""
        result = SancaiCalculator.evaluate([7], [9])
        assert result['evaluations']['waige']['luck'] == NumberLuck.NEUTRAL
        assert '地格10为凶数' in result['issues']
        assert '三才配置不佳' in result['issues']
        assert result['score'] == 40.0
        assert not result['is_valid']

    def test_score_clamped(self):
        for given in ([2, 2], [10, 10], [20, 20], [9, 15]):
            score = SancaiCalculator.evaluate([7], given)['score']
            assert 0 <= score <= 100


class TestBestStrokeCombinations:
    def test_known_combinations_for_wu(self):
        combos = SancaiCalculator.best_stroke_combinations([7], 2)
        for expected in [(9, 15), (8, 10), (11, 7)]:
            assert expected in combos

    def test_all_combinations_lucky(self):
        for combo in SancaiCalculator.best_stroke_combinations([7], 2):
            grids = SancaiCalculator.calculate_grids([7], combo)
            for key in ('renge', 'dige', 'zongge', 'waige'):
                assert is_lucky_number(grids[key]), (combo, key)

    def test_single_given_combinations(self):
        """吴姓单名没有三才吉配的笔画，退而保留各格均为吉数的组合"""
        combos = SancaiCalculator.best_stroke_combinations([7], 1)
        assert combos == [(4,), (6,), (17,)]
        for combo in combos:
            grids = SancaiCalculator.calculate_grids([7], combo)
            assert grids['dige'] == combo[0] + 1
            assert grids['waige'] == 2
            for key in ('renge', 'dige', 'zongge'):
                assert is_lucky_number(grids[key]), (combo, key)

    @pytest.mark.parametrize("strokes", [5, 6, 7, 15, 16, 17])
    def test_single_given_never_empty(self, strokes):
        assert SancaiCalculator.best_stroke_combinations([strokes], 1)

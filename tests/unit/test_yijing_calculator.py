#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
周易卦象与大衍数理单元测试
"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.calculators.sancai_calculator import SancaiCalculator
from core.calculators.yijing_calculator import TRIGRAMS, YijingCalculator, hexagram_number
from core.data.constants import Gender

# 吴浩然：天格8 人格18 地格23 总格30 外格13
WU_HAO_RAN = SancaiCalculator.calculate_grids([7], [11, 12])


class TestHexagramTable:
    def test_known_hexagrams(self):
        assert hexagram_number(1, 8) == 12   # 天地否
        assert hexagram_number(8, 1) == 11   # 地天泰
        assert hexagram_number(6, 3) == 63   # 水火既济
        assert hexagram_number(3, 6) == 64   # 火水未济

    def test_table_covers_all_64(self):
        numbers = {hexagram_number(upper, lower) for upper in TRIGRAMS for lower in TRIGRAMS}
        assert numbers == set(range(1, 65))


class TestHexagram:
    def test_wu_hao_ran(self):
        """人格18 -> 兑，地格23 -> 艮，总格30 -> 第6爻动"""
        result = YijingCalculator.hexagram(WU_HAO_RAN)

        assert result['main']['name'] == '咸'
        assert result['main']['number'] == 31
        assert result['main']['upper'] == '兑'
        assert result['main']['lower'] == '艮'
        assert result['moving_line'] == 6
        assert result['changed']['name'] == '遁'
        assert result['ti'] == {'trigram': '艮', 'element': '土'}
        assert result['yong'] == {'trigram': '兑', 'element': '金'}
        assert result['tendency'] == '小凶'

    def test_moving_line_in_lower_trigram(self):
        grids = {'renge': 8, 'dige': 8, 'zongge': 13}
        result = YijingCalculator.hexagram(grids)
        assert result['main']['name'] == '坤'
        assert result['moving_line'] == 1
        assert result['changed']['name'] == '复'
        assert result['ti']['trigram'] == '坤'
        assert result['tendency'] == '吉'


class TestDayan:
    def test_male(self):
        result = YijingCalculator.dayan(WU_HAO_RAN, Gender.MALE)
        assert result['readings']['renge']['number'] == 18
        assert result['readings']['renge']['luck'] == '大吉'
        assert '艺能运' in result['readings']['renge']['categories']
        assert result['readings']['zongge']['luck'] == '次吉'
        assert result['cautions'] == []

    def test_female_caution(self):
        result = YijingCalculator.dayan(WU_HAO_RAN, Gender.FEMALE)
        assert result['cautions'] == ['主运18刚性偏强，女性慎用']

    def test_interpret_keys(self):
        assert set(YijingCalculator.interpret(WU_HAO_RAN)) == {'yijing', 'dayan'}

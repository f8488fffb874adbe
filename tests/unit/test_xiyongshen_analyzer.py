#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""喜用神与起名排盘单元测试"""

import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.analyzers.xiyongshen_analyzer import Strength, XiYongShenAnalyzer
from core.calculators.bazi_calculator import BaziCalculator
from core.data.constants import Element, Zodiac

E = Element


def counts(**kwargs):
    mapping = {'wood': E.WOOD, 'fire': E.FIRE, 'earth': E.EARTH, 'metal': E.METAL, 'water': E.WATER}
    result = {e: 0 for e in Element}
    for key, value in kwargs.items():
        result[mapping[key]] = value
    return result


class TestStrength:
    def test_strong_day_master(self):
        """木日主生于寅月，当令加 2"""
        result = XiYongShenAnalyzer.analyze(E.WOOD, '寅', counts(wood=2, fire=2, earth=2, metal=1, water=1))
        assert result['score'] == 4
        assert result['strength'] == Strength.STRONG
        assert result['useful_elements'] == [E.FIRE, E.EARTH, E.METAL]
        assert result['avoid_elements'] == [E.WOOD, E.WATER]

    def test_weak_day_master(self):
        result = XiYongShenAnalyzer.analyze(E.FIRE, '子', counts(wood=1, fire=1, earth=2, metal=2, water=2))
        assert result['strength'] == Strength.WEAK
        assert result['useful_elements'] == [E.WOOD, E.FIRE]
        assert result['avoid_elements'] == [E.WATER, E.EARTH]

    def test_balanced_fills_missing(self):
        result = XiYongShenAnalyzer.analyze(E.EARTH, '子', counts(wood=2, fire=2, earth=2, metal=2))
        assert result['strength'] == Strength.BALANCED
        assert result['missing_elements'] == [E.WATER]
        assert result['useful_elements'] == [E.WATER]
        assert result['avoid_elements'] == []

    def test_balanced_without_missing_uses_weakest(self):
        result = XiYongShenAnalyzer.analyze(E.EARTH, '子', counts(wood=1, fire=3, earth=2, metal=1, water=1))
        assert result['useful_elements'] == [E.WOOD, E.METAL]

    def test_simplified_thresholds(self):
        """三柱时强阈值降为 3"""
        element_counts = counts(wood=1, fire=1, earth=1, metal=2, water=1)
        assert XiYongShenAnalyzer.analyze(E.EARTH, '辰', element_counts)['strength'] == Strength.BALANCED
        assert XiYongShenAnalyzer.analyze(E.EARTH, '辰', element_counts, simplified=True)['strength'] == Strength.STRONG


class TestBaziCalculator:
    def test_four_pillars(self):
        chart = BaziCalculator(1987, 1, 7, 9, 55).calculate()
        assert (chart['pillars']['day']['stem'], chart['pillars']['day']['branch']) == ('丙', '辰')
        assert chart['day_master'] == '丙'
        assert chart['day_master_element'] == E.FIRE
        assert chart['has_hour']
        assert sum(chart['element_counts'].values()) == 8

    def test_three_pillars_without_hour(self):
        chart = BaziCalculator(2025, 10, 31).calculate()
        assert chart['pillars']['hour'] is None
        assert not chart['has_hour']
        assert sum(chart['element_counts'].values()) == 6
        assert chart['zodiac'] == Zodiac.SNAKE

    def test_format_pillars(self):
        chart = BaziCalculator(1987, 1, 7, 9, 55).calculate()
        assert len(BaziCalculator.format_pillars(chart['pillars']).split()) == 4

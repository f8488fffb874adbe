#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
三才五格计算器

五格：天格、人格、地格、总格、外格（康熙笔画）
三才：天、人、地三格数理五行的生克配置
"""

import logging
from typing import Dict, List, Sequence, Tuple

from core.data.constants import number_element
from core.data.numerology import (
    MAX_SINGLE_STROKES,
    MIN_SINGLE_STROKES,
    SANCAI_RULES,
    SELECTED_SANCAI_LEVELS,
    NumberLuck,
    SancaiLevel,
    evaluate_number,
    is_lucky_number,
    normalize_number,
    number_categories,
)

logger = logging.getLogger(__name__)

GRID_NAMES = {
    'tiange': '天格',
    'renge': '人格',
    'dige': '地格',
    'zongge': '总格',
    'waige': '外格',
}

# 各格数理分值：(大吉, 次吉, 凶)
GRID_POINTS = {
    'tiange': (20, 15, 0),
    'renge': (25, 20, -10),
    'dige': (25, 20, -10),
    'zongge': (20, 15, -5),
    'waige': (10, 8, -5),
}

SANCAI_POINTS = {
    SancaiLevel.GREAT: 20,
    SancaiLevel.GOOD_PLUS: 15,
    SancaiLevel.GOOD: 10,
    SancaiLevel.NEUTRAL: 0,
    SancaiLevel.BAD: -15,
    SancaiLevel.TERRIBLE: -15,
}


class SancaiCalculator:
    """三才五格计算"""

    @staticmethod
    def calculate_grids(surname_strokes: Sequence[int], given_strokes: Sequence[int]) -> Dict[str, int]:
        """
        计算五格

        单姓：天格 = 姓 + 1；复姓：天格 = 姓1 + 姓2
        单名：地格 = 名 + 1
        外格 = 总格 - 人格 + 1（复姓单名各自按传统规则处理）

        Args:
            surname_strokes: 姓氏每字笔画（1-2 个）
            given_strokes: 名字每字笔画（1-2 个）
        """
        if not 1 <= len(surname_strokes) <= 2 or not 1 <= len(given_strokes) <= 2:
            raise ValueError('姓氏与名字长度必须为 1-2 个字')

        compound = len(surname_strokes) == 2
        single_given = len(given_strokes) == 1
        surname_total = sum(surname_strokes)
        given_total = sum(given_strokes)

        tiange = surname_total if compound else surname_total + 1
        renge = surname_strokes[-1] + given_strokes[0]
        dige = given_strokes[0] + 1 if single_given else given_total
        zongge = surname_total + given_total

        if compound and single_given:
            waige = surname_strokes[0] + 1
        elif compound:
            waige = zongge - renge
        elif single_given:
            waige = 2
        else:
            waige = zongge - renge + 1

        return {'tiange': tiange, 'renge': renge, 'dige': dige, 'zongge': zongge, 'waige': waige}

    @staticmethod
    def calculate_sancai(grids: Dict[str, int]) -> dict:
        """天人地三才：取天格、人格、地格个位数的数理五行"""
        heaven = number_element(grids['tiange'])
        human = number_element(grids['renge'])
        earth = number_element(grids['dige'])
        level = SANCAI_RULES[(heaven, human, earth)]
        return {
            'heaven': heaven,
            'human': human,
            'earth': earth,
            'combination': f"{heaven.value}{human.value}{earth.value}",
            'level': level,
        }

    @staticmethod
    def evaluate(surname_strokes: Sequence[int], given_strokes: Sequence[int]) -> dict:
        """
        五格三才综合评估

        Returns:
            dict: grids、evaluations、sancai、score(0-100)、issues、is_valid
        """
        grids = SancaiCalculator.calculate_grids(surname_strokes, given_strokes)
        sancai = SancaiCalculator.calculate_sancai(grids)

        score = 0
        issues: List[str] = []
        evaluations = {}
        # 单名外格为定数，不参与吉凶计分
        fixed_waige = len(given_strokes) == 1
        for key, number in grids.items():
            luck = evaluate_number(number)
            if key == 'waige' and fixed_waige:
                luck = NumberLuck.NEUTRAL
            great, minor, bad = GRID_POINTS[key]
            if luck == NumberLuck.GREAT:
                score += great
            elif luck == NumberLuck.MINOR:
                score += minor
            elif luck == NumberLuck.BAD:
                score += bad
                issues.append(f"{GRID_NAMES[key]}{number}为凶数")
            evaluations[key] = {
                'number': number,
                'normalized': normalize_number(number),
                'luck': luck,
                'element': number_element(number),
                'categories': number_categories(number),
            }

        score += SANCAI_POINTS[sancai['level']]
        if sancai['level'] in (SancaiLevel.BAD, SancaiLevel.TERRIBLE):
            issues.append('三才配置不佳')

        score = max(0, min(100, score))
        return {
            'grids': grids,
            'evaluations': evaluations,
            'sancai': sancai,
            'score': float(score),
            'issues': issues,
            'is_valid': not issues and score >= 60,
        }

    @staticmethod
    def best_stroke_combinations(surname_strokes: Sequence[int], name_length: int = 2) -> List[Tuple[int, ...]]:
        """
        遍历名字笔画组合（2-20 画），保留人格、地格、总格、外格均为吉数
        且三才配置为大吉/中吉/吉的组合

        单名外格为定数不参与筛选，人格与总格同数，满足条件的组合很少；
        三才配置全部不达标时，退而保留各格均为吉数的组合。
        """
        if name_length == 1:
            candidates = [(mid,) for mid in range(MIN_SINGLE_STROKES, MAX_SINGLE_STROKES + 1)]
            keys = ('renge', 'dige', 'zongge')
        else:
            candidates = [(mid, last)
                          for mid in range(MIN_SINGLE_STROKES, MAX_SINGLE_STROKES + 1)
                          for last in range(MIN_SINGLE_STROKES, MAX_SINGLE_STROKES + 1)]
            keys = ('renge', 'dige', 'zongge', 'waige')

        lucky: List[Tuple[int, ...]] = []
        combos: List[Tuple[int, ...]] = []
        for given in candidates:
            grids = SancaiCalculator.calculate_grids(surname_strokes, given)
            if not all(is_lucky_number(grids[key]) for key in keys):
                continue
            lucky.append(given)
            if SancaiCalculator.calculate_sancai(grids)['level'] in SELECTED_SANCAI_LEVELS:
                combos.append(given)

        if not combos and name_length == 1:
            logger.debug(f"📐 单名没有三才吉配的笔画，改用各格吉数组合: 姓氏笔画{list(surname_strokes)}")
            combos = lucky
        logger.debug(f"📐 笔画组合遍历完成: 姓氏笔画{list(surname_strokes)}, 有效组合{len(combos)}种")
        return combos

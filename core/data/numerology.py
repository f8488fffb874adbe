#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
三才五格数理常量

81 数理吉凶分类、三才配置等级规则表。
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

from core.data.constants import ALL_ELEMENTS, Element, Relation, get_element_relation

# 吉祥运暗示数（健全、幸福、名誉）
SANCAI_JIXIANG = frozenset([
    1, 3, 5, 7, 8, 11, 13, 15, 16, 18, 21, 23, 24, 25, 31, 32, 33, 35, 37, 39,
    41, 45, 47, 48, 52, 57, 61, 63, 65, 67, 68, 81,
])
# 次吉祥运暗示数（多少有些障碍，但能获得吉运）
SANCAI_XIAOJI = frozenset([6, 17, 26, 27, 29, 30, 38, 49, 51, 55, 58, 71, 73, 75])
# 凶数运暗示数
SANCAI_XIONG = frozenset([
    2, 4, 9, 10, 12, 14, 19, 20, 22, 28, 34, 36, 40, 42, 43, 44, 46, 50, 53, 54,
    56, 59, 60, 62, 64, 66, 69, 70, 72, 74, 76, 77, 78, 79, 80,
])
SANCAI_WISE = frozenset([3, 13, 16, 21, 23, 29, 31, 37, 39, 41, 45, 47])      # 首领运
SANCAI_WEALTH = frozenset([15, 16, 24, 29, 32, 33, 41, 52])                   # 财富运
SANCAI_ARTIST = frozenset([13, 14, 18, 26, 29, 33, 35, 38, 48])               # 艺能运
SANCAI_GOODWIFE = frozenset([5, 6, 11, 13, 15, 16, 24, 32, 35])               # 女德运
SANCAI_DEATH = frozenset([21, 23, 26, 28, 29, 33, 39])                        # 女性孤寡运
SANCAI_ALONE = frozenset([4, 10, 12, 14, 22, 28, 34])                         # 孤独运
SANCAI_MERRY = frozenset([5, 6, 15, 16, 32, 39, 41])                          # 双妻运
SANCAI_STUBBORN = frozenset([7, 17, 18, 25, 27, 28, 37, 47])                  # 刚情运
SANCAI_GENTLE = frozenset([5, 6, 11, 15, 16, 24, 31, 32, 35])                 # 温和运

NUMBER_CATEGORIES: List[Tuple[FrozenSet[int], str]] = [
    (SANCAI_JIXIANG, '吉祥运'),
    (SANCAI_XIAOJI, '次吉祥运'),
    (SANCAI_XIONG, '凶数运'),
    (SANCAI_WISE, '首领运'),
    (SANCAI_WEALTH, '财富运'),
    (SANCAI_ARTIST, '艺能运'),
    (SANCAI_GOODWIFE, '女德运'),
    (SANCAI_DEATH, '女性孤寡运'),
    (SANCAI_ALONE, '孤独运'),
    (SANCAI_MERRY, '双妻运'),
    (SANCAI_STUBBORN, '刚情运'),
    (SANCAI_GENTLE, '温和运'),
]

GOOD_NUM_SET = (SANCAI_JIXIANG | SANCAI_WISE | SANCAI_WEALTH | SANCAI_ARTIST
                | SANCAI_GOODWIFE | SANCAI_MERRY | SANCAI_GENTLE)
BAD_NUM_SET = SANCAI_XIONG | SANCAI_DEATH | SANCAI_ALONE
# 有好没坏的数字
BEST_NUM_SET = GOOD_NUM_SET - BAD_NUM_SET

# 单字笔画遍历范围
MIN_SINGLE_STROKES = 2
MAX_SINGLE_STROKES = 20


class NumberLuck(str, Enum):
    GREAT = '大吉'
    MINOR = '次吉'
    BAD = '凶'
    NEUTRAL = '中性'


class SancaiLevel(str, Enum):
    GREAT = '大吉'
    GOOD_PLUS = '中吉'
    GOOD = '吉'
    NEUTRAL = '中平'
    BAD = '凶'
    TERRIBLE = '大凶'


def normalize_number(number: int) -> int:
    """超过 81 的数理减 80 循环"""
    while number > 81:
        number -= 80
    return number


def evaluate_number(number: int) -> NumberLuck:
    number = normalize_number(number)
    if number in SANCAI_JIXIANG:
        return NumberLuck.GREAT
    if number in SANCAI_XIAOJI:
        return NumberLuck.MINOR
    if number in SANCAI_XIONG:
        return NumberLuck.BAD
    return NumberLuck.NEUTRAL


def number_categories(number: int) -> List[str]:
    number = normalize_number(number)
    return [name for numbers, name in NUMBER_CATEGORIES if number in numbers]


def is_lucky_number(number: int) -> bool:
    return normalize_number(number) in BEST_NUM_SET


# 相邻两才关系分值：上才生下才最佳，下才生上才次之，同气再次，相克为凶
_RELATION_POINTS: Dict[Relation, int] = {
    Relation.ME_PRODUCING: 2,
    Relation.PRODUCING_ME: 1,
    Relation.SAME: 1,
    Relation.ME_CONTROLLING: -2,
    Relation.CONTROLLING_ME: -1,
}


def _sancai_level(heaven: Element, human: Element, earth: Element) -> SancaiLevel:
    # 人地关系影响基础运，权重大于天人关系
    upper = _RELATION_POINTS[get_element_relation(heaven, human)]
    lower = _RELATION_POINTS[get_element_relation(human, earth)]
    points = upper + lower * 2
    if points >= 5:
        return SancaiLevel.GREAT
    if points >= 3:
        return SancaiLevel.GOOD_PLUS
    if points >= 2:
        return SancaiLevel.GOOD
    if points >= 0:
        return SancaiLevel.NEUTRAL
    if points >= -3:
        return SancaiLevel.BAD
    return SancaiLevel.TERRIBLE


# 三才配置规则表：(天, 人, 地) -> 等级，共 125 种组合
SANCAI_RULES: Dict[Tuple[Element, Element, Element], SancaiLevel] = {
    (heaven, human, earth): _sancai_level(heaven, human, earth)
    for heaven in ALL_ELEMENTS
    for human in ALL_ELEMENTS
    for earth in ALL_ELEMENTS
}

SELECTED_SANCAI_LEVELS = frozenset([SancaiLevel.GREAT, SancaiLevel.GOOD_PLUS, SancaiLevel.GOOD])

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
周易卦象与大衍数理

由五格数理起卦：
- 上卦：人格数 % 8（余 0 取 8），按先天八卦数 乾1 兑2 离3 震4 巽5 坎6 艮7 坤8
- 下卦：地格数 % 8
- 动爻：总格数 % 6（余 0 取 6）
体用：不含动爻的一卦为体，含动爻的一卦为用，以用对体的生克判断卦象倾向。

大衍数理：人格（主运）与总格（后运）按 81 数理解读，并给出性别相关的提示。
卦象与数理只作解读，不参与评分。
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from core.data.constants import Element, Gender, Relation, get_element_relation
from core.data.numerology import (
    SANCAI_ALONE,
    SANCAI_DEATH,
    SANCAI_MERRY,
    SANCAI_STUBBORN,
    evaluate_number,
    normalize_number,
    number_categories,
)

logger = logging.getLogger(__name__)

# 先天八卦数 -> (卦名, 符号, 五行, 自下而上三爻, 象)
TRIGRAMS: Dict[int, Tuple[str, str, Element, Tuple[int, int, int], str]] = {
    1: ('乾', '☰', Element.METAL, (1, 1, 1), '天'),
    2: ('兑', '☱', Element.METAL, (1, 1, 0), '泽'),
    3: ('离', '☲', Element.FIRE, (1, 0, 1), '火'),
    4: ('震', '☳', Element.WOOD, (1, 0, 0), '雷'),
    5: ('巽', '☴', Element.WOOD, (0, 1, 1), '风'),
    6: ('坎', '☵', Element.WATER, (0, 1, 0), '水'),
    7: ('艮', '☶', Element.EARTH, (0, 0, 1), '山'),
    8: ('坤', '☷', Element.EARTH, (0, 0, 0), '地'),
}

_LINES_TO_TRIGRAM = {lines: number for number, (_, _, _, lines, _) in TRIGRAMS.items()}

HEXAGRAM_NAMES = (
    '乾', '坤', '屯', '蒙', '需', '讼', '师', '比', '小畜', '履',
    '泰', '否', '同人', '大有', '谦', '豫', '随', '蛊', '临', '观',
    '噬嗑', '贲', '剥', '复', '无妄', '大畜', '颐', '大过', '坎', '离',
    '咸', '恒', '遁', '大壮', '晋', '明夷', '家人', '睽', '蹇', '解',
    '损', '益', '夬', '姤', '萃', '升', '困', '井', '革', '鼎',
    '震', '艮', '渐', '归妹', '丰', '旅', '巽', '兑', '涣', '节',
    '中孚', '小过', '既济', '未济',
)

# 文王卦序：上卦 -> 下卦（乾 震 坎 艮 坤 巽 离 兑）-> 卦序
_KING_WEN_COLUMNS = ('乾', '震', '坎', '艮', '坤', '巽', '离', '兑')
_KING_WEN_ROWS = {
    '乾': (1, 25, 6, 33, 12, 44, 13, 10),
    '震': (34, 51, 40, 62, 16, 32, 55, 54),
    '坎': (5, 3, 29, 39, 8, 48, 63, 60),
    '艮': (26, 27, 4, 52, 23, 18, 22, 41),
    '坤': (11, 24, 7, 15, 2, 46, 36, 19),
    '巽': (9, 42, 59, 53, 20, 57, 37, 61),
    '离': (14, 21, 64, 56, 35, 50, 30, 38),
    '兑': (43, 17, 47, 31, 45, 28, 49, 58),
}

# 用对体的关系 -> 卦象倾向
TI_YONG_TENDENCY = {
    Relation.PRODUCING_ME: ('大吉', '用卦生体卦，得外力相助'),
    Relation.SAME: ('吉', '体用比和，内外协调'),
    Relation.ME_CONTROLLING: ('小吉', '体卦克用卦，凡事可成但需用力'),
    Relation.ME_PRODUCING: ('小凶', '体卦生用卦，付出多而收获少'),
    Relation.CONTROLLING_ME: ('凶', '用卦克体卦，多受外界牵制'),
}

DAYAN_GRIDS = (('renge', '主运'), ('zongge', '后运'))


def _trigram_number(value: int) -> int:
    return value % 8 or 8


def hexagram_number(upper: int, lower: int) -> int:
    """先天八卦数组合 -> 文王卦序（1-64）"""
    upper_name = TRIGRAMS[upper][0]
    lower_name = TRIGRAMS[lower][0]
    return _KING_WEN_ROWS[upper_name][_KING_WEN_COLUMNS.index(lower_name)]


def _hexagram(upper: int, lower: int) -> dict:
    number = hexagram_number(upper, lower)
    upper_name, upper_symbol, _, _, upper_image = TRIGRAMS[upper]
    lower_name, lower_symbol, _, _, lower_image = TRIGRAMS[lower]
    return {
        'number': number,
        'name': HEXAGRAM_NAMES[number - 1],
        'upper': upper_name,
        'lower': lower_name,
        'symbol': f"{upper_symbol}{lower_symbol}",
        'image': f"{upper_image}{lower_image}",
    }


class YijingCalculator:
    """五格起卦与大衍数理解读"""

    @staticmethod
    def hexagram(grids: Dict[str, int]) -> dict:
        """
        由五格起卦

        Args:
            grids: calculate_grids 的结果

        Returns:
            dict: 本卦、变卦、动爻、体用五行与倾向
        """
        upper = _trigram_number(grids['renge'])
        lower = _trigram_number(grids['dige'])
        moving_line = grids['zongge'] % 6 or 6

        lines = list(TRIGRAMS[lower][3] + TRIGRAMS[upper][3])
        lines[moving_line - 1] = 1 - lines[moving_line - 1]
        changed_lower = _LINES_TO_TRIGRAM[tuple(lines[:3])]
        changed_upper = _LINES_TO_TRIGRAM[tuple(lines[3:])]

        # 动爻在下卦时上卦为体
        ti, yong = (upper, lower) if moving_line <= 3 else (lower, upper)
        ti_element = TRIGRAMS[ti][2]
        yong_element = TRIGRAMS[yong][2]
        relation = get_element_relation(ti_element, yong_element)
        tendency, reading = TI_YONG_TENDENCY[relation]

        return {
            'main': _hexagram(upper, lower),
            'changed': _hexagram(changed_upper, changed_lower),
            'moving_line': moving_line,
            'ti': {'trigram': TRIGRAMS[ti][0], 'element': ti_element.value},
            'yong': {'trigram': TRIGRAMS[yong][0], 'element': yong_element.value},
            'tendency': tendency,
            'reading': reading,
        }

    @staticmethod
    def dayan(grids: Dict[str, int], gender: Optional[Gender] = None) -> dict:
        """人格、总格的 81 数理解读"""
        readings = {}
        cautions: List[str] = []
        for key, label in DAYAN_GRIDS:
            number = normalize_number(grids[key])
            readings[key] = {
                'label': label,
                'number': number,
                'luck': evaluate_number(number).value,
                'categories': number_categories(number),
            }
            cautions.extend(f"{label}{number}{note}" for note in _gender_notes(number, gender))
        return {'readings': readings, 'cautions': cautions}

    @staticmethod
    def interpret(grids: Dict[str, int], gender: Optional[Gender] = None) -> dict:
        return {
            'yijing': YijingCalculator.hexagram(grids),
            'dayan': YijingCalculator.dayan(grids, gender),
        }


def _gender_notes(number: int, gender: Optional[Gender]) -> Sequence[str]:
    notes = []
    if number in SANCAI_ALONE:
        notes.append('带孤独运')
    if gender == Gender.FEMALE and number in SANCAI_DEATH:
        notes.append('女性用之有孤寡之嫌')
    if gender == Gender.FEMALE and number in SANCAI_STUBBORN:
        notes.append('刚性偏强，女性慎用')
    if gender == Gender.MALE and number in SANCAI_MERRY:
        notes.append('带双妻运')
    return notes

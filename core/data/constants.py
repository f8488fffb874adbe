#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名基础常量

天干地支、五行、生肖以及五行生克关系的统一定义。
所有规则表都以枚举为键，避免字符串拼写错误。
"""

from enum import Enum
from typing import Dict, List


class Element(str, Enum):
    """五行"""
    WOOD = '木'
    FIRE = '火'
    EARTH = '土'
    METAL = '金'
    WATER = '水'


class Relation(str, Enum):
    """以日主（或前一字）为参照的五行关系"""
    SAME = 'same'                        # 同我
    ME_PRODUCING = 'me_producing'        # 我生
    ME_CONTROLLING = 'me_controlling'    # 我克
    PRODUCING_ME = 'producing_me'        # 生我
    CONTROLLING_ME = 'controlling_me'    # 克我


class Zodiac(str, Enum):
    """十二生肖"""
    RAT = '鼠'
    OX = '牛'
    TIGER = '虎'
    RABBIT = '兔'
    DRAGON = '龙'
    SNAKE = '蛇'
    HORSE = '马'
    GOAT = '羊'
    MONKEY = '猴'
    ROOSTER = '鸡'
    DOG = '狗'
    PIG = '猪'


class Gender(str, Enum):
    MALE = 'male'
    FEMALE = 'female'


HEAVENLY_STEMS = ['甲', '乙', '丙', '丁', '戊', '己', '庚', '辛', '壬', '癸']
EARTHLY_BRANCHES = ['子', '丑', '寅', '卯', '辰', '巳', '午', '未', '申', '酉', '戌', '亥']

STEM_ELEMENTS: Dict[str, Element] = {
    '甲': Element.WOOD, '乙': Element.WOOD,
    '丙': Element.FIRE, '丁': Element.FIRE,
    '戊': Element.EARTH, '己': Element.EARTH,
    '庚': Element.METAL, '辛': Element.METAL,
    '壬': Element.WATER, '癸': Element.WATER,
}

BRANCH_ELEMENTS: Dict[str, Element] = {
    '子': Element.WATER, '丑': Element.EARTH, '寅': Element.WOOD, '卯': Element.WOOD,
    '辰': Element.EARTH, '巳': Element.FIRE, '午': Element.FIRE, '未': Element.EARTH,
    '申': Element.METAL, '酉': Element.METAL, '戌': Element.EARTH, '亥': Element.WATER,
}

# 地支 -> 生肖，顺序与 EARTHLY_BRANCHES 一致
BRANCH_ZODIAC: Dict[str, Zodiac] = dict(zip(EARTHLY_BRANCHES, list(Zodiac)))

# 五行生克关系定义
ELEMENT_RELATIONS: Dict[Element, Dict[str, Element]] = {
    Element.WOOD: {'produces': Element.FIRE, 'controls': Element.EARTH,
                   'produced_by': Element.WATER, 'controlled_by': Element.METAL},
    Element.FIRE: {'produces': Element.EARTH, 'controls': Element.METAL,
                   'produced_by': Element.WOOD, 'controlled_by': Element.WATER},
    Element.EARTH: {'produces': Element.METAL, 'controls': Element.WATER,
                    'produced_by': Element.FIRE, 'controlled_by': Element.WOOD},
    Element.METAL: {'produces': Element.WATER, 'controls': Element.WOOD,
                    'produced_by': Element.EARTH, 'controlled_by': Element.FIRE},
    Element.WATER: {'produces': Element.WOOD, 'controls': Element.FIRE,
                    'produced_by': Element.METAL, 'controlled_by': Element.EARTH},
}

# 数理五行：取个位数（1、2木；3、4火；5、6土；7、8金；9、0水）
NUMBER_ELEMENTS: Dict[int, Element] = {
    1: Element.WOOD, 2: Element.WOOD,
    3: Element.FIRE, 4: Element.FIRE,
    5: Element.EARTH, 6: Element.EARTH,
    7: Element.METAL, 8: Element.METAL,
    9: Element.WATER, 0: Element.WATER,
}


def get_element_relation(base: Element, target: Element) -> Relation:
    """
    判断五行生克关系

    Args:
        base: 参照五行（通常为日主五行）
        target: 目标五行

    Returns:
        Relation: target 相对 base 的关系
    """
    if base == target:
        return Relation.SAME

    relations = ELEMENT_RELATIONS[base]
    if target == relations['produces']:
        return Relation.ME_PRODUCING
    if target == relations['controls']:
        return Relation.ME_CONTROLLING
    if target == relations['produced_by']:
        return Relation.PRODUCING_ME
    return Relation.CONTROLLING_ME


def elements_for_relation(base: Element, relation: Relation) -> Element:
    """根据关系反查五行，例如 (金, 生我) -> 土"""
    if relation == Relation.SAME:
        return base
    key = {
        Relation.ME_PRODUCING: 'produces',
        Relation.ME_CONTROLLING: 'controls',
        Relation.PRODUCING_ME: 'produced_by',
        Relation.CONTROLLING_ME: 'controlled_by',
    }[relation]
    return ELEMENT_RELATIONS[base][key]


def number_element(number: int) -> Element:
    """数理五行"""
    return NUMBER_ELEMENTS[number % 10]


def parse_element(value) -> Element:
    """兼容 '木' / 'WOOD' / 'mu' 三种写法"""
    if isinstance(value, Element):
        return value
    text = str(value).strip()
    pinyin_map = {'mu': Element.WOOD, 'huo': Element.FIRE, 'tu': Element.EARTH,
                  'jin': Element.METAL, 'shui': Element.WATER}
    if text.lower() in pinyin_map:
        return pinyin_map[text.lower()]
    if text.upper() in Element.__members__:
        return Element[text.upper()]
    try:
        return Element(text)
    except ValueError:
        raise ValueError(f'未知五行: {value}')


ALL_ELEMENTS: List[Element] = list(Element)

# 相邻两字五行搭配分：前生后 +10，同五行 +5，相克 -10
PAIR_PRODUCING_POINTS = 10
PAIR_SAME_POINTS = 5
PAIR_CONFLICT_POINTS = -10


def pair_harmony_points(first: Element, second: Element) -> int:
    relation = get_element_relation(first, second)
    if relation == Relation.ME_PRODUCING:
        return PAIR_PRODUCING_POINTS
    if relation == Relation.SAME:
        return PAIR_SAME_POINTS
    if relation in (Relation.ME_CONTROLLING, Relation.CONTROLLING_ME):
        return PAIR_CONFLICT_POINTS
    return 0

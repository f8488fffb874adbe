#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
喜用神分析器

根据八字五行分布判断日主强弱，推导喜用五行与忌用五行。
强弱规则以枚举为键，便于单独测试与调整。
"""

import logging
from enum import Enum
from typing import Dict, List, Tuple

from core.data.constants import (
    ALL_ELEMENTS,
    BRANCH_ELEMENTS,
    Element,
    Relation,
    elements_for_relation,
    get_element_relation,
)

logger = logging.getLogger(__name__)


class Strength(str, Enum):
    STRONG = 'strong'
    WEAK = 'weak'
    BALANCED = 'balanced'


# 强弱 -> (喜用关系, 忌用关系)，关系以日主为参照，顺序即优先级
STRENGTH_RULES: Dict[Strength, Tuple[Tuple[Relation, ...], Tuple[Relation, ...]]] = {
    Strength.STRONG: (
        (Relation.ME_PRODUCING, Relation.ME_CONTROLLING, Relation.CONTROLLING_ME),
        (Relation.SAME, Relation.PRODUCING_ME),
    ),
    Strength.WEAK: (
        (Relation.PRODUCING_ME, Relation.SAME),
        (Relation.CONTROLLING_ME, Relation.ME_PRODUCING),
    ),
    Strength.BALANCED: ((), ()),
}

# (强阈值, 弱阈值)，四柱与三柱分别设定
FULL_THRESHOLDS = (4, 1)
SIMPLIFIED_THRESHOLDS = (3, 1)

SEASON_SAME_BONUS = 2
SEASON_PRODUCING_BONUS = 1


class XiYongShenAnalyzer:
    """日主强弱与喜用神"""

    @staticmethod
    def strength_score(day_master_element: Element, month_branch: str,
                       element_counts: Dict[Element, int]) -> int:
        """同类五行个数 + 月令加成（当令 +2，月令生日主 +1）"""
        score = element_counts.get(day_master_element, 0)
        season = BRANCH_ELEMENTS[month_branch]
        relation = get_element_relation(day_master_element, season)
        if relation == Relation.SAME:
            score += SEASON_SAME_BONUS
        elif relation == Relation.PRODUCING_ME:
            score += SEASON_PRODUCING_BONUS
        return score

    @staticmethod
    def classify(score: int, simplified: bool = False) -> Strength:
        strong, weak = SIMPLIFIED_THRESHOLDS if simplified else FULL_THRESHOLDS
        if score >= strong:
            return Strength.STRONG
        if score <= weak:
            return Strength.WEAK
        return Strength.BALANCED

    @staticmethod
    def analyze(day_master_element: Element, month_branch: str,
                element_counts: Dict[Element, int], simplified: bool = False) -> dict:
        """
        分析喜用神

        Args:
            day_master_element: 日主五行
            month_branch: 月支
            element_counts: 各五行个数
            simplified: 无时柱时为 True，使用三柱阈值

        Returns:
            dict: strength、score、useful_elements、avoid_elements、missing_elements、reasoning
        """
        score = XiYongShenAnalyzer.strength_score(day_master_element, month_branch, element_counts)
        strength = XiYongShenAnalyzer.classify(score, simplified)
        missing = [e for e in ALL_ELEMENTS if element_counts.get(e, 0) == 0]

        if strength == Strength.BALANCED:
            # 中和：补缺失五行，无缺失则补最弱的两个
            if missing:
                useful = list(missing)
            else:
                useful = sorted(ALL_ELEMENTS, key=lambda e: (element_counts.get(e, 0), ALL_ELEMENTS.index(e)))[:2]
            avoid: List[Element] = []
            reasoning = f"日主{day_master_element.value}中和（强度{score}），以补足五行为主"
        else:
            favor_relations, avoid_relations = STRENGTH_RULES[strength]
            useful = [elements_for_relation(day_master_element, r) for r in favor_relations]
            avoid = [elements_for_relation(day_master_element, r) for r in avoid_relations]
            label = '偏强' if strength == Strength.STRONG else '偏弱'
            reasoning = (f"日主{day_master_element.value}{label}（强度{score}），"
                         f"宜用{'、'.join(e.value for e in useful)}，忌{'、'.join(e.value for e in avoid)}")

        logger.info(f"📊 喜用神分析: {reasoning}")
        return {
            'strength': strength,
            'score': score,
            'useful_elements': useful,
            'avoid_elements': avoid,
            'missing_elements': missing,
            'simplified': simplified,
            'reasoning': reasoning,
        }

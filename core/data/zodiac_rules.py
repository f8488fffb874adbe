#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
生肖用字规则

每个生肖的喜用部首、忌用部首，以及生肖之间的六合、三合、六冲、六害关系。
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

from core.data.constants import BRANCH_ELEMENTS, BRANCH_ZODIAC, Element, Zodiac


@dataclass(frozen=True)
class ZodiacRule:
    zodiac: Zodiac
    branch: str
    element: Element
    favorable_radicals: FrozenSet[str]
    unfavorable_radicals: FrozenSet[str]


def _rule(zodiac: Zodiac, favorable: str, unfavorable: str) -> ZodiacRule:
    branch = next(b for b, z in BRANCH_ZODIAC.items() if z == zodiac)
    return ZodiacRule(
        zodiac=zodiac,
        branch=branch,
        element=BRANCH_ELEMENTS[branch],
        favorable_radicals=frozenset(favorable.split()),
        unfavorable_radicals=frozenset(unfavorable.split()),
    )


ZODIAC_RULES: Dict[Zodiac, ZodiacRule] = {
    rule.zodiac: rule for rule in [
        _rule(Zodiac.RAT, '宀 口 米 豆 禾 氵 钅 王 亻 艹', '火 日 马 午 羊 山 刀 力 石'),
        _rule(Zodiac.OX, '艹 禾 田 氵 宀 车 口 土 米', '羊 马 心 忄 月 火 刀 力'),
        _rule(Zodiac.TIGER, '山 王 玉 木 彡 月 心 忄 氵 马', '日 光 申 口 辶 小 巳'),
        _rule(Zodiac.RABBIT, '艹 禾 木 口 宀 月 亻 山 田 豆', '日 钅 金 酉 刀 力 石 马'),
        _rule(Zodiac.DRAGON, '日 月 氵 雨 王 玉 钅 金 云 星', '山 艹 田 犭 犬 小 戌 卯'),
        _rule(Zodiac.SNAKE, '口 宀 艹 木 禾 田 土 山 心 忄 钅 金', '亻 人 虎 寅 亥 豕 犭'),
        _rule(Zodiac.HORSE, '艹 禾 米 豆 木 亻 彡 巾 纟 糸 宀', '氵 水 子 田 北 车 冫'),
        _rule(Zodiac.GOAT, '艹 禾 木 米 豆 口 门 宀 月 足', '氵 水 心 忄 犭 犬 刀 力 车'),
        _rule(Zodiac.MONKEY, '木 禾 王 玉 口 宀 钅 金 豆 米 亻 言 讠', '火 灬 虎 寅 刀 力 石 皿'),
        _rule(Zodiac.ROOSTER, '米 豆 禾 山 宀 彡 巾 纟 糸 钅 金', '犭 犬 卯 兔 刀 力 石 月'),
        _rule(Zodiac.DOG, '宀 亻 人 马 心 忄 月 门 王 火', '口 日 言 讠 辰 龙 酉 山'),
        _rule(Zodiac.PIG, '艹 禾 米 豆 氵 水 门 宀 口 木', '巳 弓 申 石 刀 力 示 衣 虫'),
    ]
}

# 六合
LIU_HE = [
    (Zodiac.RAT, Zodiac.OX), (Zodiac.TIGER, Zodiac.PIG), (Zodiac.RABBIT, Zodiac.DOG),
    (Zodiac.DRAGON, Zodiac.ROOSTER), (Zodiac.SNAKE, Zodiac.MONKEY), (Zodiac.HORSE, Zodiac.GOAT),
]
# 三合
SAN_HE = [
    (Zodiac.RAT, Zodiac.DRAGON, Zodiac.MONKEY),    # 申子辰
    (Zodiac.OX, Zodiac.SNAKE, Zodiac.ROOSTER),     # 巳酉丑
    (Zodiac.TIGER, Zodiac.HORSE, Zodiac.DOG),      # 寅午戌
    (Zodiac.RABBIT, Zodiac.GOAT, Zodiac.PIG),      # 亥卯未
]
# 六冲
LIU_CHONG = [
    (Zodiac.RAT, Zodiac.HORSE), (Zodiac.OX, Zodiac.GOAT), (Zodiac.TIGER, Zodiac.MONKEY),
    (Zodiac.RABBIT, Zodiac.ROOSTER), (Zodiac.DRAGON, Zodiac.DOG), (Zodiac.SNAKE, Zodiac.PIG),
]
# 六害
LIU_HAI = [
    (Zodiac.RAT, Zodiac.GOAT), (Zodiac.OX, Zodiac.HORSE), (Zodiac.TIGER, Zodiac.SNAKE),
    (Zodiac.RABBIT, Zodiac.DRAGON), (Zodiac.DOG, Zodiac.ROOSTER), (Zodiac.MONKEY, Zodiac.PIG),
]


def _pair_in(a: Zodiac, b: Zodiac, pairs) -> bool:
    return (a, b) in pairs or (b, a) in pairs


def zodiac_relationship(a: Zodiac, b: Zodiac) -> Tuple[str, str]:
    """
    两个生肖之间的关系

    Returns:
        (关系类型, 描述)，类型为 same / harmony / compatible / conflict / harm / neutral
    """
    if a == b:
        return 'same', '相同生肖'
    if _pair_in(a, b, LIU_CHONG):
        return 'conflict', f'{a.value}{b.value}相冲，气场不合'
    if _pair_in(a, b, LIU_HAI):
        return 'harm', f'{a.value}{b.value}相害，需注意调和'
    if _pair_in(a, b, LIU_HE):
        return 'harmony', f'{a.value}{b.value}六合，相得益彰'
    for group in SAN_HE:
        if a in group and b in group:
            return 'compatible', f'{a.value}{b.value}三合，相互助益'
    return 'neutral', '关系中性'


# 单字生肖适配分：基础 3 分，喜用部首每个 +1（最多 +2），忌用部首每个 -2，范围 0-5
ZODIAC_BASE_SCORE = 3
ZODIAC_MAX_SCORE = 5


def evaluate_radicals(radicals, zodiac: Zodiac) -> Tuple[int, List[str]]:
    """
    按部首与构件评估单字对某生肖的适配度

    Args:
        radicals: 字本身、部首、构件
        zodiac: 生肖

    Returns:
        (0-5 分, 说明列表)
    """
    rule = ZODIAC_RULES[zodiac]
    parts = set(radicals)
    favorable = sorted(parts & rule.favorable_radicals)
    unfavorable = sorted(parts & rule.unfavorable_radicals)
    score = ZODIAC_BASE_SCORE + min(len(favorable), 2) - 2 * len(unfavorable)
    reasons = [f'含有生肖{zodiac.value}喜用部首"{r}"' for r in favorable]
    reasons += [f'含有生肖{zodiac.value}忌用部首"{r}"' for r in unfavorable]
    return max(0, min(ZODIAC_MAX_SCORE, score)), reasons

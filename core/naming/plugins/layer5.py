#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
第五层：名字组合

各字位候选字做笛卡尔积，去重后按声调与五行搭配预评分，截断到上限。
"""

import itertools
import logging
from typing import List, Sequence

from core.analyzers.phonetic_analyzer import PhoneticAnalyzer
from core.data.constants import pair_harmony_points
from core.naming.models import CharacterRecord, NameCombination
from core.naming.plugins.base import NamingPlugin

logger = logging.getLogger(__name__)

HARMONY_BASE = 70
DEADLINE_CHECK_INTERVAL = 256


def element_chain_score(records: Sequence[CharacterRecord]) -> float:
    """姓氏末字 -> 名字各字的五行相邻搭配分（0-100）"""
    elements = [r.element for r in records if r.element is not None]
    score = HARMONY_BASE + sum(pair_harmony_points(a, b) for a, b in zip(elements, elements[1:]))
    return float(max(0, min(100, score)))


class NameCombinationPlugin(NamingPlugin):
    plugin_id = 'name-combination'
    layer = 5
    dependencies = ('character-filter', 'surname')
    required = True
    description = '候选字组合与预评分'

    def process(self, context):
        filtered = context.payload('character-filter')
        surname = context.payload('surname')
        pools = filtered['pools']
        required = set(filtered['required_characters'])
        family_name = surname['family_name']
        surname_records = tuple(surname['characters'])

        seen = set()
        combinations: List[NameCombination] = []
        for index, chars in enumerate(itertools.product(*pools)):
            if index % DEADLINE_CHECK_INTERVAL == 0:
                context.check_deadline()
            given = ''.join(r.character for r in chars)
            if len(set(given)) != len(given):
                continue
            if required and not required.issubset(set(given)):
                continue
            if given in seen:
                continue
            seen.add(given)
            combinations.append(NameCombination(
                family_name=family_name,
                characters=tuple(chars),
                pre_score=self.pre_score(surname_records, chars),
            ))

        total = len(combinations)
        combinations.sort(key=lambda c: (-c.pre_score, c.given_name))
        combinations = combinations[:context.config.max_combinations]

        warnings = []
        if not combinations:
            warnings.append('没有生成任何名字组合')
        context.log.add('info', f"名字组合: 共{total}个，保留{len(combinations)}个", self.plugin_id)
        return self.ok({'combinations': tuple(combinations), 'total_generated': total},
                       context.get_result('character-filter').confidence, warnings)

    @staticmethod
    def pre_score(surname_records: Sequence[CharacterRecord], given: Sequence[CharacterRecord]) -> float:
        """(声调搭配 + 五行搭配) / 2"""
        records = list(surname_records[-1:]) + list(given)
        tone = PhoneticAnalyzer.analyze([r.pinyin for r in list(surname_records) + list(given)])['score']
        return round((tone + element_chain_score(records)) / 2, 1)

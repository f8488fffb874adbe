#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
第二层：命理分析

- destiny: 八字五行与喜用神（可选，至少需要出生日期）
- zodiac: 生肖场景（可选，确定生肖或预产期双生肖）
"""

import logging

from core.analyzers.xiyongshen_analyzer import XiYongShenAnalyzer
from core.data.zodiac_rules import ZODIAC_RULES, zodiac_relationship
from core.naming.plugins.base import NamingPlugin

logger = logging.getLogger(__name__)


class DestinyPlugin(NamingPlugin):
    plugin_id = 'destiny'
    layer = 2
    dependencies = ('birth-time',)
    required = False
    description = '八字五行分布、日主强弱与喜用神'

    def process(self, context):
        birth = context.payload('birth-time')
        if not birth or not birth.get('chart'):
            return self.skip('没有可用的出生时间，无法排盘')

        chart = birth['chart']
        simplified = not chart['has_hour']
        analysis = XiYongShenAnalyzer.analyze(
            chart['day_master_element'],
            chart['month_branch'],
            chart['element_counts'],
            simplified=simplified,
        )
        payload = {
            'day_master': chart['day_master'],
            'day_master_element': chart['day_master_element'],
            'element_counts': chart['element_counts'],
            'strength': analysis['strength'],
            'strength_score': analysis['score'],
            'useful_elements': tuple(analysis['useful_elements']),
            'avoid_elements': tuple(analysis['avoid_elements']),
            'missing_elements': tuple(analysis['missing_elements']),
            'simplified': simplified,
            'reasoning': analysis['reasoning'],
        }
        context.log.add('info', analysis['reasoning'], self.plugin_id)
        return self.ok(payload, 0.75 if simplified else 0.9)


class ZodiacPlugin(NamingPlugin):
    plugin_id = 'zodiac'
    layer = 2
    dependencies = ('birth-time',)
    required = False
    description = '生肖场景与用字喜忌'

    def process(self, context):
        birth = context.payload('birth-time')
        contexts = tuple(birth.get('zodiac_contexts') or ()) if birth else ()
        if not contexts:
            return self.skip('无法确定生肖')

        dual = len(contexts) > 1
        payload = {
            'contexts': contexts,
            'primary': max(contexts, key=lambda c: c.probability).zodiac,
            'strategy': 'dual-zodiac-synthesis' if dual else 'single-zodiac',
            'rules': {c.zodiac: ZODIAC_RULES[c.zodiac] for c in contexts},
        }
        warnings = []
        if dual:
            relation, description = zodiac_relationship(contexts[0].zodiac, contexts[1].zodiac)
            payload['relationship'] = {'relation': relation, 'description': description}
            warnings.append(f"双生肖评估: {contexts[0].zodiac.value}/{contexts[1].zodiac.value}")
        context.log.add('info', f"生肖场景: {[(c.zodiac.value, c.probability) for c in contexts]}",
                        self.plugin_id)
        confidence = 0.9 if not dual else max(c.probability for c in contexts)
        return self.ok(payload, confidence, warnings)

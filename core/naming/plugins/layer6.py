#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
第六层：综合评分

对每个名字组合做六维评分，排序后给出汇总与前三名推荐。
"""

import logging

from core.naming.errors import ErrorKind
from core.naming.plugins.base import NamingPlugin
from core.naming.scoring import ScoringEngine

logger = logging.getLogger(__name__)


class ComprehensiveScoringPlugin(NamingPlugin):
    plugin_id = 'comprehensive-scoring'
    layer = 6
    dependencies = ('name-combination', 'selection-strategy', 'zodiac', 'gender', 'surname', 'character-filter')
    required = True
    description = '六维综合评分、排名与推荐'

    def __init__(self, engine: ScoringEngine = None):
        self.engine = engine or ScoringEngine()

    def process(self, context):
        combined = context.payload('name-combination')
        combinations = combined['combinations']
        if not combinations:
            return self.fail('没有可评分的名字组合', ErrorKind.DATA_MISS)

        surname = context.payload('surname')
        strategy = context.payload('selection-strategy')
        gender = context.payload('gender')
        zodiac = context.payload('zodiac')
        filtered = context.payload('character-filter')

        candidates = []
        for combination in combinations:
            context.check_deadline()
            candidates.append(self.engine.score(
                combination,
                surname['characters'],
                gender=gender['gender'] if gender else None,
                useful_elements=strategy['preferred_elements'],
                avoid_elements=strategy['avoid_elements'],
                zodiac_contexts=zodiac['contexts'] if zodiac else (),
                poetry_sources=filtered['poetry_sources'] if filtered else None,
            ))
        ranked = self.engine.rank(candidates)
        summary = self.engine.summarize(ranked)
        top = ranked[:context.config.top_n]

        payload = {
            'candidates': tuple(top),
            'summary': summary,
            'final_recommendation': self.engine.final_recommendation(ranked),
        }
        context.log.add('info', f"综合评分完成: {summary['total']}个名字，最高{summary['highest']}分，"
                                f"平均{summary['average']}分", self.plugin_id)
        confidence = min(context.get_result('name-combination').confidence,
                         context.get_result('selection-strategy').confidence)
        return self.ok(payload, confidence)

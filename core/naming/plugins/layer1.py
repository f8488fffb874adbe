#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
第一层：基础信息

- surname: 姓氏校验与字库解析（必需）
- gender: 性别用字倾向（必需）
- birth-time: 出生时间 / 预产期解析（可选）
"""

import logging
from datetime import datetime

from core.calculators.bazi_calculator import BaziCalculator
from core.data.constants import Gender
from core.naming.errors import ErrorKind
from core.naming.models import CertaintyLevel, PredueType, ZodiacContext
from core.naming.plugins.base import NamingPlugin

logger = logging.getLogger(__name__)


def is_ideograph(char: str) -> bool:
    code = ord(char)
    return (0x4E00 <= code <= 0x9FFF or 0x3400 <= code <= 0x4DBF
            or 0x20000 <= code <= 0x2A6DF or 0xF900 <= code <= 0xFAFF)


class SurnamePlugin(NamingPlugin):
    plugin_id = 'surname'
    layer = 1
    required = True
    description = '姓氏校验与笔画、五行解析'

    def process(self, context):
        family_name = context.request.family_name
        if not 1 <= len(family_name) <= 2 or not all(is_ideograph(c) for c in family_name):
            return self.fail(f'姓氏必须是1-2个汉字: {family_name}', ErrorKind.FATAL_INPUT)

        warnings = []
        is_compound = len(family_name) == 2
        if is_compound and family_name not in context.store.compound_surnames:
            warnings.append(f'"{family_name}"不在常见复姓列表中，按复姓处理')

        records = tuple(context.resolver.resolve(c) for c in family_name)
        missing = [r.character for r in records if not r.resolved or r.traditional_strokes is None]
        if missing:
            return self.fail(f'姓氏缺少笔画数据: {"".join(missing)}', ErrorKind.DATA_MISS)

        payload = {
            'family_name': family_name,
            'is_compound': is_compound,
            'is_common': family_name in context.store.common_surnames or family_name in context.store.compound_surnames,
            'characters': records,
            'strokes': tuple(r.traditional_strokes for r in records),
            'elements': tuple(r.element for r in records),
            'pinyins': tuple(r.pinyin for r in records),
        }
        confidence = min(r.confidence for r in records)
        context.log.add('info', f"姓氏解析: {family_name} 笔画{list(payload['strokes'])}", self.plugin_id)
        return self.ok(payload, confidence, warnings)


class GenderPlugin(NamingPlugin):
    plugin_id = 'gender'
    layer = 1
    required = True
    description = '性别用字倾向'

    STYLES = {
        Gender.MALE: ('阳刚大气', ('志向', '品德', '才智')),
        Gender.FEMALE: ('温婉秀丽', ('美好', '品德', '才情')),
    }

    def process(self, context):
        gender = context.request.gender
        if not isinstance(gender, Gender):
            return self.fail(f'未知性别: {gender}', ErrorKind.FATAL_INPUT)
        style, themes = self.STYLES[gender]
        other = Gender.FEMALE if gender == Gender.MALE else Gender.MALE
        payload = {
            'gender': gender,
            'preferred_tendency': gender.value,
            'avoid_tendency': other.value,
            'style': style,
            'themes': themes,
        }
        return self.ok(payload, 1.0)


class BirthTimePlugin(NamingPlugin):
    plugin_id = 'birth-time'
    layer = 1
    required = False
    description = '出生时间解析：精确时间排盘，预产期转生肖场景'

    def process(self, context):
        request = context.request
        if request.birth_info is not None:
            return self._exact(context)
        if context.predue_analysis is not None:
            return self._predue(context)
        return self.skip('未提供出生时间或预产期')

    def _exact(self, context):
        info = context.request.birth_info
        try:
            datetime(info.year, info.month, info.day, info.hour or 0, info.minute or 0)
        except ValueError as e:
            context.downgrade(CertaintyLevel.UNKNOWN, f'出生时间无效: {e}')
            return self.fail(f'出生时间无效: {e}', ErrorKind.DEGRADED_INPUT)

        chart = BaziCalculator(info.year, info.month, info.day, info.hour, info.minute).calculate()
        payload = {
            'source': 'exact',
            'chart': chart,
            'zodiac': chart['zodiac'],
            'zodiac_contexts': (ZodiacContext(zodiac=chart['zodiac'], probability=1.0),),
        }
        confidence = 1.0 if chart['has_hour'] else 0.85
        context.log.add('info', f"出生时间解析完成: {BaziCalculator.format_pillars(chart['pillars'])} "
                                f"生肖{chart['zodiac'].value}", self.plugin_id)
        return self.ok(payload, confidence)

    def _predue(self, context):
        analysis = context.predue_analysis
        if analysis.analysis_type == PredueType.UNCERTAIN:
            context.downgrade(CertaintyLevel.UNKNOWN, '预产期无法确定生肖')
            payload = {'source': 'predue', 'analysis': analysis, 'zodiac': None, 'zodiac_contexts': ()}
            return self.ok(payload, analysis.confidence, analysis.warnings)

        strategy = analysis.recommendation['strategy']
        contexts = tuple(
            ZodiacContext(zodiac=s.zodiac, probability=s.probability, strategy=strategy)
            for s in analysis.scenarios
        )
        payload = {
            'source': 'predue',
            'analysis': analysis,
            'zodiac': analysis.primary_zodiac,
            'zodiac_contexts': contexts,
        }
        context.log.add('info', f"预产期分析: {analysis.analysis_type.value}, "
                                f"场景{[(c.zodiac.value, round(c.probability, 2)) for c in contexts]}",
                        self.plugin_id)
        return self.ok(payload, analysis.confidence, analysis.warnings)

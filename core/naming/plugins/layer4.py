#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
第四层：候选字筛选

筛选顺序：五行 -> 生肖 -> 寓意 -> 笔画数理 -> 音律。
某一阶段会把候选池筛空时，放弃该阶段并记录警告。
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from core.analyzers.phonetic_analyzer import parse_pinyin
from core.calculators.sancai_calculator import SancaiCalculator
from core.data.zodiac_rules import evaluate_radicals
from core.naming.errors import ErrorKind
from core.naming.models import CharacterRecord, ZodiacContext
from core.naming.plugins.base import NamingPlugin

logger = logging.getLogger(__name__)

ZODIAC_FILTER_THRESHOLD = 60
NEUTRAL_ZODIAC_FIT = 60.0
DEFAULT_CULTURAL_LEVEL = 60
POETRY_BONUS = 8


def zodiac_fit(record: CharacterRecord, contexts: Sequence[ZodiacContext]) -> Optional[float]:
    """按场景概率加权的生肖适配分（0-100），无生肖场景返回 None"""
    if not contexts:
        return None
    total = sum(c.probability for c in contexts) or 1.0
    score = sum(c.probability * evaluate_radicals(record.radicals, c.zodiac)[0] * 20 for c in contexts)
    return round(score / total, 1)


class CharacterFilterPlugin(NamingPlugin):
    plugin_id = 'character-filter'
    layer = 4
    dependencies = ('selection-strategy', 'surname', 'gender', 'zodiac')
    required = True
    description = '按五行、生肖、寓意、笔画、音律逐级筛选候选字'

    def process(self, context):
        prefs = context.request.preferences
        surname = context.payload('surname')
        strategy = context.payload('selection-strategy')
        zodiac = context.payload('zodiac')
        contexts = tuple(zodiac['contexts']) if zodiac else ()
        warnings: List[str] = []
        stage_counts: Dict[str, int] = {}

        name_length = prefs.name_length
        if name_length not in (1, 2):
            warnings.append(f'名字长度只支持1或2个字，已按2个字处理: {name_length}')
            name_length = 2

        poetry_sources: Dict[str, str] = {}
        excluded = set(prefs.excluded_characters) | set(surname['family_name'])
        chars = [c for c in self._initial_pool(context, poetry_sources, warnings) if c not in excluded]
        stage_counts['initial'] = len(chars)

        pool = [r for r in context.resolver.resolve_many(chars).values() if self._usable(r)]
        if not pool and poetry_sources:
            message = '诗词候选字在字库中均无可用数据，改用字库候选池'
            warnings.append(message)
            context.log.add('warning', message, self.plugin_id)
            poetry_sources.clear()
            chars = [c for c in context.store.naming_pool() if c not in excluded]
            pool = [r for r in context.resolver.resolve_many(chars).values() if self._usable(r)]
        stage_counts['resolved'] = len(pool)
        if not pool:
            return self.fail('候选字池为空：字库中没有可用的候选字', ErrorKind.DATA_MISS)

        avoid = set(strategy['avoid_elements'])
        pool = self._stage('element', pool, lambda r: r.element not in avoid, warnings, stage_counts, context)
        if contexts:
            pool = self._stage('zodiac', pool,
                               lambda r: zodiac_fit(r, contexts) >= ZODIAC_FILTER_THRESHOLD,
                               warnings, stage_counts, context)
        pool = self._stage('meaning', pool, lambda r: r.polarity != 'negative', warnings, stage_counts, context)

        combos = SancaiCalculator.best_stroke_combinations(surname['strokes'], name_length)
        positions: List[List[CharacterRecord]] = []
        for index in range(name_length):
            allowed = {combo[index] for combo in combos}
            positions.append(self._stage(f'stroke-{index + 1}', pool,
                                         lambda r, allowed=allowed: r.traditional_strokes in allowed,
                                         warnings, stage_counts, context))

        surname_syllable, surname_tone = parse_pinyin(surname['pinyins'][-1])
        for index in range(name_length):
            adjacent = index == 0
            positions[index] = self._stage(
                f'phonetic-{index + 1}', positions[index],
                lambda r, adjacent=adjacent: self._phonetic_ok(r, surname_syllable, surname_tone, adjacent),
                warnings, stage_counts, context)

        # 指定用字不受筛选影响，排在每个字位最前
        required = self._required_records(context, warnings)
        required_chars = {r.character for r in required}
        pools = []
        for index, records in enumerate(positions):
            ranked = sorted(records, key=lambda r, i=index: (-self._rank_score(r, i, strategy, contexts,
                                                                               poetry_sources), r.character))
            kept = required + [r for r in ranked if r.character not in required_chars]
            pools.append(tuple(kept[:max(context.config.max_pool_size, len(required))]))

        payload = {
            'pools': tuple(pools),
            'name_length': name_length,
            'stage_counts': stage_counts,
            'poetry_sources': poetry_sources,
            'stroke_combinations': len(combos),
            'required_characters': tuple(r.character for r in required),
        }
        context.log.add('info', f"候选字筛选完成: {[len(p) for p in pools]} 阶段计数{stage_counts}", self.plugin_id)
        confidence = min((r.confidence for p in pools for r in p), default=0.0)
        return self.ok(payload, confidence, warnings)

    # ==================== 内部方法 ====================

    def _initial_pool(self, context, poetry_sources: Dict[str, str], warnings: List[str]) -> List[str]:
        prefs = context.request.preferences
        if prefs.source == 'poetry':
            candidates = list(prefs.poetry_candidates)
            if not candidates and context.poetry_provider is not None:
                candidates = list(context.poetry_provider.candidate_characters(
                    context.request.family_name, context.request.gender))
            if candidates:
                for candidate in candidates:
                    poetry_sources.setdefault(candidate.character, candidate.source)
                return list(poetry_sources)
            warnings.append('未提供诗词候选字，改用字库候选池')
        return list(context.store.naming_pool())

    @staticmethod
    def _usable(record: CharacterRecord) -> bool:
        return (record.resolved and record.confidence > 0 and bool(record.is_standard)
                and record.element is not None and record.traditional_strokes is not None
                and bool(record.pinyin))

    def _stage(self, name: str, pool: List[CharacterRecord], predicate: Callable[[CharacterRecord], bool],
               warnings: List[str], stage_counts: Dict[str, int], context) -> List[CharacterRecord]:
        filtered = [r for r in pool if predicate(r)]
        if not filtered and pool:
            message = f'{name}阶段会筛空候选池，已放宽该条件'
            warnings.append(message)
            context.log.add('warning', message, self.plugin_id)
            filtered = list(pool)
        stage_counts[name] = len(filtered)
        return filtered

    @staticmethod
    def _phonetic_ok(record: CharacterRecord, surname_syllable: str, surname_tone, adjacent: bool) -> bool:
        syllable, tone = parse_pinyin(record.pinyin)
        if syllable == surname_syllable:
            return False
        # 紧邻姓氏的字避免与姓氏同为上声或去声
        if adjacent and tone == surname_tone and tone in (3, 4):
            return False
        return True

    @staticmethod
    def _required_records(context, warnings: List[str]) -> List[CharacterRecord]:
        records = []
        for char in context.request.preferences.required_characters:
            record = context.resolver.resolve(char)
            if not CharacterFilterPlugin._usable(record):
                warnings.append(f'指定用字"{char}"缺少字库数据，已忽略')
                continue
            records.append(record)
        return records

    @staticmethod
    def _rank_score(record: CharacterRecord, position: int, strategy, contexts, poetry_sources) -> float:
        weights = strategy['position_weights'][min(position, len(strategy['position_weights']) - 1)]
        element_score = weights.get(record.element, 0.5) * 100
        cultural = record.cultural_level if record.cultural_level is not None else DEFAULT_CULTURAL_LEVEL
        fit = zodiac_fit(record, contexts)
        score = element_score * 0.5 + cultural * 0.3 + (fit if fit is not None else NEUTRAL_ZODIAC_FIT) * 0.2
        if record.character in poetry_sources:
            score += POETRY_BONUS
        return score * record.confidence

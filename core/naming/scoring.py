#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
综合评分引擎

六个维度（0-100）：
- 三才五格 25%
- 五行平衡 25%
- 音律 15%
- 寓意 15%
- 文化底蕴 12%
- 生肖适配 8%

没有生肖信息时生肖维度不参与计分，其余权重按比例放大。
评分是纯函数：同样的输入总是得到同样的分数与等级。
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from core.analyzers.phonetic_analyzer import PhoneticAnalyzer
from core.calculators.sancai_calculator import SancaiCalculator
from core.calculators.yijing_calculator import YijingCalculator
from core.data.constants import Element, Gender, pair_harmony_points
from core.data.zodiac_rules import evaluate_radicals
from core.naming.models import (
    CharacterRecord,
    DimensionScores,
    NameCandidate,
    NameCombination,
    ZodiacContext,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: Dict[str, float] = {
    'sancai': 0.25,
    'wuxing': 0.25,
    'phonetic': 0.15,
    'meaning': 0.15,
    'cultural': 0.12,
    'zodiac': 0.08,
}

DIMENSION_LABELS = {
    'sancai': '三才五格',
    'wuxing': '五行平衡',
    'phonetic': '音律',
    'meaning': '寓意',
    'cultural': '文化底蕴',
    'zodiac': '生肖适配',
}

# (下限, 等级, 推荐语)，从高到低
GRADE_BANDS: Tuple[Tuple[float, str, str], ...] = (
    (90, 'S', '强烈推荐，各方面配置俱佳'),
    (85, 'A', '推荐使用，整体配置优良'),
    (80, 'B', '可以考虑，个别方面仍有提升空间'),
    (70, 'C', '表现一般，建议与其他候选对比后选择'),
    (0, 'D', '不推荐，存在明显不足'),
)

WUXING_BASE = 80
USEFUL_BONUS = 8
AVOID_PENALTY = 12
POSITION_FACTORS = (1.0, 0.9)

POLARITY_SCORES = {'positive': 85, 'neutral': 70, 'negative': 30}
GENDER_MATCH_BONUS = 5
GENDER_MISMATCH_PENALTY = 10
MEANING_DIVERSITY_BONUS = 3

DEFAULT_CULTURAL_LEVEL = 60
POETRY_BONUS = 8


def grade_for(score: float) -> str:
    for lower, grade, _ in GRADE_BANDS:
        if score >= lower:
            return grade
    return GRADE_BANDS[-1][1]


def recommendation_for(score: float) -> str:
    for lower, _, text in GRADE_BANDS:
        if score >= lower:
            return text
    return GRADE_BANDS[-1][2]


def _clamp(value: float) -> float:
    return round(max(0.0, min(100.0, value)), 1)


class ScoringEngine:
    """综合评分"""

    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        self.weights = self.normalize_weights(weights or DEFAULT_WEIGHTS)

    @staticmethod
    def normalize_weights(weights: Mapping[str, float]) -> Dict[str, float]:
        """补齐缺失维度并归一化到总和为 1"""
        merged = {key: float(weights.get(key, 0.0)) for key in DEFAULT_WEIGHTS}
        if any(value < 0 for value in merged.values()):
            raise ValueError(f'权重不能为负数: {dict(weights)}')
        total = sum(merged.values())
        if total <= 0:
            raise ValueError('权重总和必须大于 0')
        return {key: value / total for key, value in merged.items()}

    # ==================== 各维度 ====================

    @staticmethod
    def sancai_score(surname: Sequence[CharacterRecord], given: Sequence[CharacterRecord]) -> Tuple[float, dict]:
        evaluation = SancaiCalculator.evaluate(
            [r.traditional_strokes for r in surname],
            [r.traditional_strokes for r in given],
        )
        return evaluation['score'], evaluation

    @staticmethod
    def wuxing_score(surname: Sequence[CharacterRecord], given: Sequence[CharacterRecord],
                     useful: Sequence[Element] = (), avoid: Sequence[Element] = ()) -> float:
        """五行平衡：相邻字相生加分、相克扣分，再按喜用/忌用调整"""
        chain = [r.element for r in list(surname[-1:]) + list(given) if r.element is not None]
        score = WUXING_BASE + sum(pair_harmony_points(a, b) for a, b in zip(chain, chain[1:]))
        for index, record in enumerate(given):
            factor = POSITION_FACTORS[min(index, len(POSITION_FACTORS) - 1)]
            if record.element in useful:
                score += USEFUL_BONUS * factor
            elif record.element in avoid:
                score -= AVOID_PENALTY * factor
        return _clamp(score)

    @staticmethod
    def phonetic_score(surname: Sequence[CharacterRecord], given: Sequence[CharacterRecord]) -> Tuple[float, dict]:
        analysis = PhoneticAnalyzer.analyze([r.pinyin for r in list(surname) + list(given)])
        return analysis['score'], analysis

    @staticmethod
    def meaning_score(given: Sequence[CharacterRecord], gender: Optional[Gender]) -> float:
        if not given:
            return 0.0
        total = 0.0
        for record in given:
            total += POLARITY_SCORES.get(record.polarity, 70)
            if gender is not None and record.gender_tendency != 'neutral':
                if record.gender_tendency == gender.value:
                    total += GENDER_MATCH_BONUS
                else:
                    total -= GENDER_MISMATCH_PENALTY
        score = total / len(given)
        if len(given) > 1:
            meanings = [set(r.meanings) for r in given]
            if meanings[0] and meanings[1] and not meanings[0] & meanings[1]:
                score += MEANING_DIVERSITY_BONUS
        return _clamp(score)

    @staticmethod
    def cultural_score(given: Sequence[CharacterRecord], poetry_sources: Mapping[str, str] = None) -> float:
        if not given:
            return 0.0
        poetry_sources = poetry_sources or {}
        total = 0.0
        for record in given:
            level = record.cultural_level if record.cultural_level is not None else DEFAULT_CULTURAL_LEVEL
            if record.character in poetry_sources:
                level += POETRY_BONUS
            total += min(100, level)
        return _clamp(total / len(given))

    @staticmethod
    def zodiac_scores(given: Sequence[CharacterRecord],
                      contexts: Sequence[ZodiacContext]) -> Tuple[Optional[float], Dict[str, float], List[str]]:
        """
        生肖适配：每个生肖单独评分，再按概率加权

        Returns:
            (加权分或 None, {生肖: 分}, 说明)
        """
        if not contexts or not given:
            return None, {}, []
        breakdown: Dict[str, float] = {}
        reasons: List[str] = []
        weighted = 0.0
        total_probability = sum(c.probability for c in contexts) or 1.0
        for ctx in contexts:
            points = []
            for record in given:
                score, why = evaluate_radicals(record.radicals, ctx.zodiac)
                points.append(score * 20)
                reasons.extend(why)
            zodiac_score = _clamp(sum(points) / len(points))
            breakdown[ctx.zodiac.value] = zodiac_score
            weighted += zodiac_score * ctx.probability
        return _clamp(weighted / total_probability), breakdown, reasons

    # ==================== 汇总 ====================

    def composite(self, scores: DimensionScores) -> float:
        values = scores.as_dict()
        active = {key: value for key, value in values.items() if value is not None}
        weight_total = sum(self.weights[key] for key in active)
        if weight_total <= 0:
            return 0.0
        total = sum(value * self.weights[key] for key, value in active.items()) / weight_total
        return round(total, 1)

    def score(self, combination: NameCombination, surname: Sequence[CharacterRecord], *,
              gender: Optional[Gender] = None,
              useful_elements: Sequence[Element] = (),
              avoid_elements: Sequence[Element] = (),
              zodiac_contexts: Sequence[ZodiacContext] = (),
              poetry_sources: Mapping[str, str] = None) -> NameCandidate:
        """为一个名字组合计算六维评分、综合分与等级"""
        given = combination.characters
        sancai, sancai_detail = self.sancai_score(surname, given)
        phonetic, phonetic_detail = self.phonetic_score(surname, given)
        zodiac, breakdown, zodiac_reasons = self.zodiac_scores(given, zodiac_contexts)

        scores = DimensionScores(
            sancai=sancai,
            wuxing=self.wuxing_score(surname, given, useful_elements, avoid_elements),
            phonetic=phonetic,
            meaning=self.meaning_score(given, gender),
            cultural=self.cultural_score(given, poetry_sources),
            zodiac=zodiac,
        )
        composite = self.composite(scores)
        grade = grade_for(composite)
        highlights = self.highlights(scores, sancai_detail)

        rationale = f"{combination.full_name}综合评分{composite}分（{grade}级）。"
        if highlights:
            rationale += '，'.join(highlights) + '。'
        if zodiac is None:
            rationale += '未提供生肖信息，生肖维度不参与计分。'
        rationale += recommendation_for(composite)

        return NameCandidate(
            family_name=combination.family_name,
            characters=tuple(given),
            scores=scores,
            composite=composite,
            grade=grade,
            rationale=rationale,
            zodiac_breakdown=breakdown,
            highlights=tuple(highlights),
            details={
                'grids': sancai_detail['grids'],
                'sancai': {
                    'combination': sancai_detail['sancai']['combination'],
                    'level': sancai_detail['sancai']['level'].value,
                },
                'sancai_issues': sancai_detail['issues'],
                'tones': phonetic_detail['tones'],
                'phonetic_issues': phonetic_detail['issues'],
                'zodiac_notes': zodiac_reasons,
                'poetry_sources': {r.character: poetry_sources[r.character]
                                   for r in given if poetry_sources and r.character in poetry_sources},
                **YijingCalculator.interpret(sancai_detail['grids'], gender),
            },
        )

    @staticmethod
    def highlights(scores: DimensionScores, sancai_detail: dict) -> List[str]:
        items = []
        if scores.sancai >= 90:
            items.append('三才配置吉利')
        elif sancai_detail['issues']:
            items.append('数理存在' + '、'.join(sancai_detail['issues']))
        if scores.wuxing >= 90:
            items.append('五行搭配和谐')
        if scores.phonetic >= 90:
            items.append('音律优美')
        if scores.meaning >= 85:
            items.append('寓意美好')
        if scores.cultural >= 85:
            items.append('文化底蕴深厚')
        if scores.zodiac is not None and scores.zodiac >= 80:
            items.append('契合生肖喜用')
        return items

    # ==================== 排名与汇总 ====================

    @staticmethod
    def rank(candidates: Sequence[NameCandidate]) -> List[NameCandidate]:
        return sorted(candidates, key=lambda c: (-c.composite, c.full_name))

    @staticmethod
    def summarize(candidates: Sequence[NameCandidate]) -> dict:
        if not candidates:
            return {'total': 0, 'average': 0.0, 'highest': 0.0, 'lowest': 0.0, 'grade_distribution': {}}
        composites = [c.composite for c in candidates]
        distribution: Dict[str, int] = {grade: 0 for _, grade, _ in GRADE_BANDS}
        for candidate in candidates:
            distribution[candidate.grade] += 1
        return {
            'total': len(candidates),
            'average': round(sum(composites) / len(composites), 1),
            'highest': max(composites),
            'lowest': min(composites),
            'grade_distribution': distribution,
        }

    @staticmethod
    def final_recommendation(ranked: Sequence[NameCandidate], top: int = 3) -> dict:
        """前三名：第一名为首选，其余为备选"""
        picks = []
        for index, candidate in enumerate(ranked[:top]):
            picks.append({
                'rank': index + 1,
                'full_name': candidate.full_name,
                'composite': candidate.composite,
                'grade': candidate.grade,
                'priority': 'primary' if index == 0 else 'alternative',
                'reason': candidate.rationale,
            })
        if picks:
            summary = (f"共评估{len(ranked)}个名字，首选「{picks[0]['full_name']}」"
                       f"（{picks[0]['composite']}分，{picks[0]['grade']}级）")
        else:
            summary = '没有可推荐的名字'
        return {'names': picks, 'summary': summary}

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
预产期生肖边界分析器

给定预产期（年、月、误差周数），判断出生窗口是否跨越生肖年，
跨越时按窗口在边界两侧的时间比例给出双生肖概率。

生肖年界两种模式：
- lunar：以农历正月初一为界（lunar_python 计算）
- approximate：跨年窗口以 1 月 1 日为界，同年窗口以 2 月 15 日为界
"""

import calendar
import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

from core.calculators.LunarConverter import LunarConverter
from core.data.constants import Zodiac
from core.data.zodiac_rules import zodiac_relationship
from core.naming.models import (
    PredueAnalysis,
    PredueInfo,
    PredueType,
    RiskLevel,
    ZodiacBoundaryResult,
    ZodiacScenario,
)

logger = logging.getLogger(__name__)

MS_PER_DAY = 24 * 60 * 60 * 1000
DEFAULT_WEEK_OFFSET = 2
MIN_WEEK_OFFSET = 1
MAX_WEEK_OFFSET = 8
MIN_YEAR = 1901
MAX_YEAR = 2099

# 少数一侧概率超过该值才视为跨生肖
CROSS_ZODIAC_THRESHOLD = 0.3
HIGH_RISK_RATIO = 0.3
MEDIUM_RISK_RATIO = 0.1

SINGLE_ZODIAC_CONFIDENCE = 0.9
UNCERTAIN_CONFIDENCE = 0.3

# 年界附近窗口：12 月 25 日之后、1 月 7 日之前
LATE_DECEMBER_DAY = 25
EARLY_JANUARY_DAY = 7
APPROXIMATE_NEW_YEAR = (2, 15)

MODE_LUNAR = 'lunar'
MODE_APPROXIMATE = 'approximate'


def _to_ms(value: date) -> int:
    return int(datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp() * 1000)


def _from_ms(ms: int) -> date:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).date()


class PredueBoundaryAnalyzer:
    """预产期生肖边界分析"""

    def __init__(self, mode: str = MODE_LUNAR):
        if mode not in (MODE_LUNAR, MODE_APPROXIMATE):
            raise ValueError(f'未知的生肖年界模式: {mode}')
        self.mode = mode

    # ==================== 校验 ====================

    @staticmethod
    def validate(info: Optional[PredueInfo]) -> dict:
        """
        校验预产期参数

        Returns:
            dict: valid、errors、warnings
        """
        errors: List[str] = []
        warnings: List[str] = []
        if info is None:
            return {'valid': False, 'errors': ['未提供预产期'], 'warnings': warnings}

        if info.year is None:
            errors.append('预产期年份缺失')
        elif not MIN_YEAR <= info.year <= MAX_YEAR:
            errors.append(f'预产期年份超出范围: {info.year}')

        if info.month is None:
            errors.append('预产期月份缺失')
        elif not 1 <= info.month <= 12:
            errors.append(f'预产期月份必须在1-12之间: {info.month}')

        if info.day is not None and not errors:
            last_day = calendar.monthrange(info.year, info.month)[1]
            if not 1 <= info.day <= last_day:
                errors.append(f'预产期日期无效: {info.month}月{info.day}日')

        if not MIN_WEEK_OFFSET <= info.week_offset <= MAX_WEEK_OFFSET:
            warnings.append(f'误差周数{info.week_offset}超出常见范围({MIN_WEEK_OFFSET}-{MAX_WEEK_OFFSET}周)')

        return {'valid': not errors, 'errors': errors, 'warnings': warnings}

    # ==================== 主流程 ====================

    def analyze(self, info: Optional[PredueInfo]) -> PredueAnalysis:
        """
        分析预产期

        Returns:
            PredueAnalysis: single-zodiac / cross-zodiac / uncertain 三种结果之一
        """
        validation = self.validate(info)
        if not validation['valid']:
            logger.warning(f"⚠️ 预产期无法解析: {validation['errors']}")
            return self._uncertain(validation['errors'], validation['warnings'])

        warnings = list(validation['warnings'])
        week_offset = info.week_offset if info.week_offset > 0 else DEFAULT_WEEK_OFFSET

        center = date(info.year, info.month, info.day or 15)
        center_ms = _to_ms(center)
        half_span_ms = week_offset * 7 * MS_PER_DAY
        start_ms = center_ms - half_span_ms
        end_ms = center_ms + half_span_ms
        start, end = _from_ms(start_ms), _from_ms(end_ms)
        date_range = {'start': start, 'end': end, 'most_likely': center}

        near_boundary = self._is_boundary_candidate(start, end)
        crossover = self._find_crossover(start, end)
        if self.mode == MODE_APPROXIMATE:
            warnings.append('生肖年界按近似规则计算（跨年以1月1日、同年以2月15日为界），结果仅供参考')

        metadata = {
            'boundary_check': near_boundary or crossover is not None,
            'week_offset': week_offset,
            'mode': self.mode,
        }

        if crossover is None:
            zodiac = self.zodiac_for(center)
            boundary = self._next_boundary(zodiac, end)
            logger.info(f"📅 预产期 {start}~{end} 未跨生肖年界: {zodiac.value}")
            return self._single(zodiac, 0.0, start, end, date_range, boundary, near_boundary, warnings, metadata)

        boundary_date, previous_zodiac, next_zodiac = crossover
        previous_p = min(1.0, max(0.0, (_to_ms(boundary_date) - start_ms) / (end_ms - start_ms)))
        next_p = 1.0 - previous_p
        minority = min(previous_p, next_p)
        risk = self._risk_level(minority)

        if minority <= CROSS_ZODIAC_THRESHOLD:
            # 不跨界时 previous 位置记录最终生肖，概率固定为 1.0 / 0.0
            majority, other = ((previous_zodiac, next_zodiac) if previous_p >= next_p
                               else (next_zodiac, previous_zodiac))
            boundary = ZodiacBoundaryResult(
                crosses=False,
                previous_zodiac=majority,
                next_zodiac=other,
                crossover_date=boundary_date,
                previous_probability=1.0,
                next_probability=0.0,
                risk_level=risk,
            )
            logger.info(f"📅 预产期接近生肖年界但偏向一侧: {majority.value} (少数侧概率{minority:.2f})")
            return self._single(majority, minority, start, end, date_range, boundary, True, warnings, metadata)

        previous_p = round(previous_p, 4)
        boundary = ZodiacBoundaryResult(
            crosses=True,
            previous_zodiac=previous_zodiac,
            next_zodiac=next_zodiac,
            crossover_date=boundary_date,
            previous_probability=previous_p,
            next_probability=round(1.0 - previous_p, 4),
            risk_level=risk,
        )
        return self._cross(boundary, start, end, date_range, warnings, metadata)

    # ==================== 年界计算 ====================

    def zodiac_for(self, value: date) -> Zodiac:
        """某一天所属生肖（按当前模式的年界）"""
        if self.mode == MODE_LUNAR:
            return LunarConverter.zodiac_for_date(value)
        approx_new_year = date(value.year, *APPROXIMATE_NEW_YEAR)
        lunar_year = value.year if value >= approx_new_year else value.year - 1
        return LunarConverter.zodiac_of_lunar_year(lunar_year)

    def _find_crossover(self, start: date, end: date) -> Optional[Tuple[date, Zodiac, Zodiac]]:
        """窗口 (start, end] 内的生肖年界，返回 (边界日, 前一生肖, 后一生肖)"""
        if self.mode == MODE_APPROXIMATE:
            if start.year != end.year:
                return (date(end.year, 1, 1),
                        LunarConverter.zodiac_of_lunar_year(start.year),
                        LunarConverter.zodiac_of_lunar_year(end.year))
            boundary = date(start.year, *APPROXIMATE_NEW_YEAR)
            if start < boundary <= end:
                return (boundary,
                        LunarConverter.zodiac_of_lunar_year(start.year - 1),
                        LunarConverter.zodiac_of_lunar_year(start.year))
            return None

        for year in sorted({start.year, end.year}):
            new_year = LunarConverter.lunar_new_year(year)
            if start < new_year <= end:
                return (new_year,
                        LunarConverter.zodiac_of_lunar_year(year - 1),
                        LunarConverter.zodiac_of_lunar_year(year))
        return None

    def _next_boundary(self, zodiac: Zodiac, end: date) -> ZodiacBoundaryResult:
        """窗口之后最近的一个生肖年界，概率全部落在当前生肖"""
        if self.mode == MODE_LUNAR:
            new_year = LunarConverter.lunar_new_year(end.year)
            if new_year <= end:
                new_year = LunarConverter.lunar_new_year(end.year + 1)
        else:
            new_year = date(end.year, *APPROXIMATE_NEW_YEAR)
            if new_year <= end:
                new_year = date(end.year + 1, *APPROXIMATE_NEW_YEAR)
        return ZodiacBoundaryResult(
            crosses=False,
            previous_zodiac=zodiac,
            next_zodiac=self.zodiac_for(new_year),
            crossover_date=new_year,
            previous_probability=1.0,
            next_probability=0.0,
            risk_level=RiskLevel.LOW,
        )

    @staticmethod
    def _in_threshold_window(value: date) -> bool:
        return ((value.month == 12 and value.day >= LATE_DECEMBER_DAY)
                or (value.month == 1 and value.day <= EARLY_JANUARY_DAY))

    def _is_boundary_candidate(self, start: date, end: date) -> bool:
        """跨公历年、包含农历新年、或窗口端点落在年界附近"""
        if start.year != end.year:
            return True
        if self._in_threshold_window(start) or self._in_threshold_window(end):
            return True
        if self.mode == MODE_LUNAR:
            return start < LunarConverter.lunar_new_year(start.year) <= end
        return False

    @staticmethod
    def _risk_level(minority: float) -> RiskLevel:
        if minority > HIGH_RISK_RATIO:
            return RiskLevel.HIGH
        if minority > MEDIUM_RISK_RATIO:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    # ==================== 结果构造 ====================

    @staticmethod
    def _uncertain(errors: List[str], warnings: List[str]) -> PredueAnalysis:
        return PredueAnalysis(
            analysis_type=PredueType.UNCERTAIN,
            scenarios=(),
            recommendation={
                'primary': None,
                'fallback': None,
                'strategy': 'conservative-unknown',
                'reasoning': '预产期信息不完整，无法确定生肖，采用保守策略',
            },
            confidence=UNCERTAIN_CONFIDENCE,
            risk_level=RiskLevel.HIGH,
            risk_factors=tuple(errors),
            mitigations=('补充预产期年份与月份后重新分析', '出生后使用准确出生时间重新起名'),
            warnings=tuple(errors) + tuple(warnings),
            metadata={'boundary_check': False},
        )

    def _single(self, zodiac: Zodiac, minority: float, start: date, end: date, date_range,
                boundary: Optional[ZodiacBoundaryResult], near_boundary: bool,
                warnings: List[str], metadata: dict) -> PredueAnalysis:
        risk = self._risk_level(minority)
        factors: List[str] = []
        mitigations: List[str] = []
        if near_boundary:
            factors.append('预产期接近生肖年界')
            mitigations.append('出生后以准确出生时间复核生肖')
        if risk != RiskLevel.LOW:
            factors.append(f'存在{minority:.0%}的概率落在另一生肖年')
        scenario = ZodiacScenario(zodiac=zodiac, probability=1.0, strategy='single-zodiac',
                                  confidence=SINGLE_ZODIAC_CONFIDENCE, start=start, end=end)
        return PredueAnalysis(
            analysis_type=PredueType.SINGLE_ZODIAC,
            scenarios=(scenario,),
            recommendation={
                'primary': zodiac,
                'fallback': None,
                'strategy': 'single-zodiac',
                'reasoning': f'预产期窗口内生肖确定为{zodiac.value}',
            },
            confidence=SINGLE_ZODIAC_CONFIDENCE,
            date_range=date_range,
            boundary=boundary,
            risk_level=risk,
            risk_factors=tuple(factors),
            mitigations=tuple(mitigations),
            warnings=tuple(warnings),
            metadata=metadata,
        )

    def _cross(self, boundary: ZodiacBoundaryResult, start: date, end: date, date_range,
               warnings: List[str], metadata: dict) -> PredueAnalysis:
        previous_p = boundary.previous_probability
        next_p = boundary.next_probability
        previous_first = previous_p >= next_p
        primary = boundary.previous_zodiac if previous_first else boundary.next_zodiac
        fallback = boundary.next_zodiac if previous_first else boundary.previous_zodiac

        scenarios = (
            ZodiacScenario(zodiac=boundary.previous_zodiac, probability=previous_p,
                           strategy='conservative-previous', confidence=round(previous_p, 2),
                           start=start, end=_from_ms(_to_ms(boundary.crossover_date) - MS_PER_DAY)),
            ZodiacScenario(zodiac=boundary.next_zodiac, probability=next_p,
                           strategy='adaptive-next', confidence=round(next_p, 2),
                           start=boundary.crossover_date, end=end),
        )

        relation, description = zodiac_relationship(boundary.previous_zodiac, boundary.next_zodiac)
        warnings = list(warnings) + [
            '预产期跨越生肖年边界，建议同时考虑两个生肖',
            f'{boundary.previous_zodiac.value}年概率{previous_p:.0%}，{boundary.next_zodiac.value}年概率{next_p:.0%}',
        ]
        logger.info(f"🔀 预产期跨生肖: {boundary.previous_zodiac.value}({previous_p:.2f}) / "
                    f"{boundary.next_zodiac.value}({next_p:.2f})，界于 {boundary.crossover_date}")

        return PredueAnalysis(
            analysis_type=PredueType.CROSS_ZODIAC,
            scenarios=scenarios,
            recommendation={
                'primary': primary,
                'fallback': fallback,
                'strategy': 'dual-zodiac-synthesis',
                'reasoning': (f'出生窗口跨越{boundary.crossover_date.isoformat()}生肖年界，'
                              f'以{primary.value}为主、{fallback.value}为辅综合评估（{description}）'),
                'zodiac_relation': relation,
            },
            confidence=round(max(previous_p, next_p), 2),
            date_range=date_range,
            boundary=boundary,
            risk_level=boundary.risk_level,
            risk_factors=('出生窗口跨越生肖年界', f'两侧概率接近（{min(previous_p, next_p):.0%}）'),
            mitigations=('优先选择对两个生肖都适宜的用字', '出生后以准确出生时间复核生肖'),
            warnings=tuple(warnings),
            metadata=metadata,
        )

    # ==================== 辅助 ====================

    @staticmethod
    def recommendations(analysis: PredueAnalysis) -> List[str]:
        """面向用户的建议"""
        if analysis.analysis_type == PredueType.UNCERTAIN:
            return ['预产期信息不足，当前推荐不考虑生肖因素', '建议补充预产期或出生后重新起名']
        if analysis.analysis_type == PredueType.SINGLE_ZODIAC:
            tips = [f'宝宝生肖预计为{analysis.primary_zodiac.value}，可按该生肖喜忌用字']
            if analysis.risk_level != RiskLevel.LOW:
                tips.append('预产期接近生肖年界，出生后请复核')
            return tips
        primary = analysis.recommendation['primary']
        fallback = analysis.recommendation['fallback']
        return [
            f'优先考虑{primary.value}年的用字喜忌，同时兼顾{fallback.value}年',
            '尽量避开两个生肖中任一方的忌用部首',
            '出生后根据准确时间确认最终生肖',
        ]

    @staticmethod
    def zodiac_compatibility(a: Zodiac, b: Zodiac) -> dict:
        relation, description = zodiac_relationship(a, b)
        return {'relation': relation, 'description': description}

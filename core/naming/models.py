#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名流水线数据模型

请求、字库记录、生肖边界、插件结果、候选名字等值对象。
插件结果与候选名字创建后不可修改（frozen dataclass）。
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.data.constants import Element, Gender, Zodiac, parse_element
from core.naming.errors import ErrorKind, NamingInputError


def to_jsonable(value: Any) -> Any:
    """把模型对象转换为可 JSON 序列化的结构"""
    if hasattr(value, 'to_dict') and not isinstance(value, type):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, (dict, MappingProxyType)):
        return {to_jsonable(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


# ==================== 确定性等级 ====================

class CertaintyLevel(str, Enum):
    """出生信息确定性等级，顺序从高到低"""
    FULLY_DETERMINED = 'FULLY_DETERMINED'          # 出生时间精确到时辰
    PARTIALLY_DETERMINED = 'PARTIALLY_DETERMINED'  # 只知道出生日期
    ESTIMATED = 'ESTIMATED'                        # 只有预产期
    UNKNOWN = 'UNKNOWN'                            # 没有任何时间信息

    @property
    def rank(self) -> int:
        return _CERTAINTY_RANK[self]

    @property
    def confidence_ceiling(self) -> float:
        return _CERTAINTY_CEILING[self]

    def is_at_least(self, other: 'CertaintyLevel') -> bool:
        return self.rank <= other.rank

    def lower_of(self, other: 'CertaintyLevel') -> 'CertaintyLevel':
        return self if self.rank >= other.rank else other


_CERTAINTY_RANK = {
    CertaintyLevel.FULLY_DETERMINED: 0,
    CertaintyLevel.PARTIALLY_DETERMINED: 1,
    CertaintyLevel.ESTIMATED: 2,
    CertaintyLevel.UNKNOWN: 3,
}

_CERTAINTY_CEILING = {
    CertaintyLevel.FULLY_DETERMINED: 1.0,
    CertaintyLevel.PARTIALLY_DETERMINED: 0.85,
    CertaintyLevel.ESTIMATED: 0.7,
    CertaintyLevel.UNKNOWN: 0.5,
}


# ==================== 请求 ====================

def _pick(data: Mapping[str, Any], *keys, default=None):
    """同时兼容 snake_case 与 camelCase 字段"""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class BirthInfo:
    """精确出生时间（公历）"""
    year: int
    month: int
    day: int
    hour: Optional[int] = None
    minute: Optional[int] = None

    @property
    def has_hour(self) -> bool:
        return self.hour is not None

    @property
    def solar_date(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def solar_time(self) -> Optional[str]:
        if self.hour is None:
            return None
        return f"{self.hour:02d}:{(self.minute or 0):02d}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BirthInfo':
        hour = _pick(data, 'hour')
        minute = _pick(data, 'minute')
        return cls(
            year=int(_pick(data, 'year')),
            month=int(_pick(data, 'month')),
            day=int(_pick(data, 'day')),
            hour=int(hour) if hour is not None else None,
            minute=int(minute) if minute is not None else None,
        )


@dataclass(frozen=True)
class PredueInfo:
    """预产期：年、月、误差周数，可选具体日"""
    year: Optional[int]
    month: Optional[int]
    week_offset: int = 2
    day: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PredueInfo':
        year = _pick(data, 'year')
        month = _pick(data, 'month')
        day = _pick(data, 'day')
        return cls(
            year=int(year) if year is not None else None,
            month=int(month) if month is not None else None,
            week_offset=int(_pick(data, 'week_offset', 'weekOffset', default=2)),
            day=int(day) if day is not None else None,
        )


@dataclass(frozen=True)
class PoetryCandidate:
    """诗词出处候选字（已由外部文本处理清洗）"""
    character: str
    source: str
    line: str = ''


@dataclass(frozen=True)
class NamingPreferences:
    excluded_characters: Tuple[str, ...] = ()
    required_characters: Tuple[str, ...] = ()
    preferred_elements: Tuple[Element, ...] = ()
    name_length: int = 2
    source: str = 'combination'
    poetry_candidates: Tuple[PoetryCandidate, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'NamingPreferences':
        if not data:
            return cls()
        poetry = []
        for item in _pick(data, 'poetry_candidates', 'poetryCandidates', default=[]):
            if isinstance(item, str):
                poetry.append(PoetryCandidate(character=item, source='poetry'))
            else:
                poetry.append(PoetryCandidate(
                    character=item['character'],
                    source=item.get('source', 'poetry'),
                    line=item.get('line', ''),
                ))
        return cls(
            excluded_characters=tuple(_pick(data, 'excluded_characters', 'excludedCharacters', default=())),
            required_characters=tuple(_pick(data, 'required_characters', 'requiredCharacters', default=())),
            preferred_elements=tuple(parse_element(e) for e in
                                     _pick(data, 'preferred_elements', 'preferredElements', default=())),
            name_length=int(_pick(data, 'name_length', 'nameLength', default=2)),
            source=_pick(data, 'source', default='combination'),
            poetry_candidates=tuple(poetry),
        )


@dataclass(frozen=True)
class NamingRequest:
    family_name: str
    gender: Gender
    birth_info: Optional[BirthInfo] = None
    predue_info: Optional[PredueInfo] = None
    preferences: NamingPreferences = field(default_factory=NamingPreferences)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'NamingRequest':
        """从字典构造请求，字段缺失或性别非法时抛出 NamingInputError"""
        family_name = _pick(data, 'family_name', 'familyName')
        gender = _pick(data, 'gender')
        if not family_name:
            raise NamingInputError('姓氏不能为空', {'field': 'family_name'})
        try:
            gender = Gender(gender)
        except ValueError:
            raise NamingInputError(f'性别必须是 male 或 female: {gender}', {'field': 'gender'})

        birth = _pick(data, 'birth_info', 'birthInfo')
        predue = _pick(data, 'predue_info', 'predueInfo')
        try:
            return cls(
                family_name=str(family_name).strip(),
                gender=gender,
                birth_info=BirthInfo.from_dict(birth) if birth else None,
                predue_info=PredueInfo.from_dict(predue) if predue else None,
                preferences=NamingPreferences.from_dict(_pick(data, 'preferences')),
            )
        except (TypeError, ValueError, KeyError) as e:
            raise NamingInputError(f'请求参数格式错误: {e}')


# ==================== 字库记录 ====================

@dataclass(frozen=True)
class CharacterRecord:
    """单字属性，附带置信度与数据来源"""
    character: str
    traditional_form: Optional[str] = None
    traditional_strokes: Optional[int] = None
    simplified_strokes: Optional[int] = None
    element: Optional[Element] = None
    pinyin: Optional[str] = None
    tone: Optional[int] = None
    radical: Optional[str] = None
    components: Tuple[str, ...] = ()
    is_standard: Optional[bool] = None
    polarity: str = 'neutral'
    meanings: Tuple[str, ...] = ()
    gender_tendency: str = 'neutral'
    cultural_level: Optional[int] = None
    confidence: float = 0.0
    completeness: float = 0.0
    provenance: Tuple[str, ...] = ()
    resolved: bool = True

    @property
    def is_complete(self) -> bool:
        return self.completeness >= 1.0

    @property
    def radicals(self) -> Tuple[str, ...]:
        """部首与构件，生肖用字判断使用"""
        parts = [self.character]
        if self.radical:
            parts.append(self.radical)
        parts.extend(self.components)
        return tuple(parts)

    def to_dict(self) -> dict:
        return {
            'character': self.character,
            'traditional': self.traditional_form,
            'strokes': {'traditional': self.traditional_strokes, 'simplified': self.simplified_strokes},
            'element': self.element.value if self.element else None,
            'pinyin': self.pinyin,
            'tone': self.tone,
            'radical': self.radical,
            'is_standard': self.is_standard,
            'polarity': self.polarity,
            'meanings': list(self.meanings),
            'gender': self.gender_tendency,
            'cultural_level': self.cultural_level,
            'confidence': round(self.confidence, 3),
            'completeness': round(self.completeness, 3),
            'provenance': list(self.provenance),
            'resolved': self.resolved,
        }


# ==================== 预产期 / 生肖边界 ====================

class PredueType(str, Enum):
    SINGLE_ZODIAC = 'single-zodiac'
    CROSS_ZODIAC = 'cross-zodiac'
    UNCERTAIN = 'uncertain'


class RiskLevel(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


@dataclass(frozen=True)
class ZodiacBoundaryResult:
    crosses: bool
    previous_zodiac: Zodiac
    next_zodiac: Zodiac
    crossover_date: date
    previous_probability: float
    next_probability: float
    risk_level: RiskLevel = RiskLevel.LOW

    @property
    def probability(self) -> Dict[str, float]:
        return {'previous': self.previous_probability, 'next': self.next_probability}

    def to_dict(self) -> dict:
        return {
            'crosses': self.crosses,
            'previous_zodiac': self.previous_zodiac.value,
            'next_zodiac': self.next_zodiac.value,
            'crossover_date': self.crossover_date.isoformat(),
            'probability': self.probability,
            'risk_level': self.risk_level.value,
        }


@dataclass(frozen=True)
class ZodiacScenario:
    zodiac: Zodiac
    probability: float
    strategy: str
    confidence: float
    start: date
    end: date

    def to_dict(self) -> dict:
        return {
            'zodiac': self.zodiac.value,
            'probability': round(self.probability, 4),
            'strategy': self.strategy,
            'confidence': self.confidence,
            'date_range': {'start': self.start.isoformat(), 'end': self.end.isoformat()},
        }


@dataclass(frozen=True)
class PredueAnalysis:
    analysis_type: PredueType
    scenarios: Tuple[ZodiacScenario, ...]
    recommendation: Mapping[str, Any]
    confidence: float
    date_range: Optional[Mapping[str, date]] = None
    boundary: Optional[ZodiacBoundaryResult] = None
    risk_level: RiskLevel = RiskLevel.LOW
    risk_factors: Tuple[str, ...] = ()
    mitigations: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_cross_zodiac(self) -> bool:
        return self.analysis_type == PredueType.CROSS_ZODIAC

    @property
    def primary_zodiac(self) -> Optional[Zodiac]:
        return self.recommendation.get('primary')

    def to_dict(self) -> dict:
        return {
            'type': self.analysis_type.value,
            'scenarios': [s.to_dict() for s in self.scenarios],
            'recommendation': to_jsonable(self.recommendation),
            'confidence': self.confidence,
            'date_range': to_jsonable(self.date_range),
            'boundary': self.boundary.to_dict() if self.boundary else None,
            'risks': {
                'level': self.risk_level.value,
                'factors': list(self.risk_factors),
                'mitigations': list(self.mitigations),
            },
            'warnings': list(self.warnings),
            'metadata': to_jsonable(self.metadata),
        }


@dataclass(frozen=True)
class ZodiacContext:
    """下游评估使用的生肖场景：确定生肖时概率为 1.0，跨界时两个场景概率之和为 1.0"""
    zodiac: Zodiac
    probability: float
    strategy: str = 'single-zodiac'

    def to_dict(self) -> dict:
        return {'zodiac': self.zodiac.value, 'probability': self.probability, 'strategy': self.strategy}


# ==================== 插件结果 ====================

class PluginStatus(str, Enum):
    SUCCESS = 'success'
    SKIPPED = 'skipped'
    FAILED = 'failed'


@dataclass(frozen=True)
class PluginResult:
    """插件执行结果：成功、跳过、失败三种状态"""
    plugin_id: str
    status: PluginStatus
    payload: Any = None
    confidence: float = 0.0
    duration_ms: float = 0.0
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    skip_reason: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.status == PluginStatus.SUCCESS

    @classmethod
    def ok(cls, plugin_id: str, payload: Any, confidence: float,
           warnings: Tuple[str, ...] = ()) -> 'PluginResult':
        return cls(plugin_id=plugin_id, status=PluginStatus.SUCCESS, payload=payload,
                   confidence=confidence, warnings=tuple(warnings))

    @classmethod
    def skipped(cls, plugin_id: str, reason: str) -> 'PluginResult':
        return cls(plugin_id=plugin_id, status=PluginStatus.SKIPPED, skip_reason=reason)

    @classmethod
    def failed(cls, plugin_id: str, error: str,
               kind: ErrorKind = ErrorKind.PLUGIN_EXCEPTION) -> 'PluginResult':
        return cls(plugin_id=plugin_id, status=PluginStatus.FAILED, error=error, error_kind=kind)

    def to_dict(self) -> dict:
        return {
            'plugin_id': self.plugin_id,
            'status': self.status.value,
            'confidence': round(self.confidence, 3),
            'duration_ms': round(self.duration_ms, 2),
            'error': self.error,
            'error_kind': self.error_kind.value if self.error_kind else None,
            'skip_reason': self.skip_reason,
            'warnings': list(self.warnings),
            'payload': to_jsonable(self.payload),
        }


# ==================== 候选名字 ====================

@dataclass(frozen=True)
class DimensionScores:
    """六个评分维度，0-100；zodiac 为 None 表示无生肖信息"""
    sancai: float
    wuxing: float
    phonetic: float
    meaning: float
    cultural: float
    zodiac: Optional[float] = None

    def as_dict(self) -> Dict[str, Optional[float]]:
        return {
            'sancai': self.sancai,
            'wuxing': self.wuxing,
            'phonetic': self.phonetic,
            'meaning': self.meaning,
            'cultural': self.cultural,
            'zodiac': self.zodiac,
        }


@dataclass(frozen=True)
class NameCombination:
    """组合层输出的未评分名字"""
    family_name: str
    characters: Tuple[CharacterRecord, ...]
    pre_score: float = 0.0

    @property
    def given_name(self) -> str:
        return ''.join(c.character for c in self.characters)

    @property
    def full_name(self) -> str:
        return self.family_name + self.given_name

    def to_dict(self) -> dict:
        return {'full_name': self.full_name, 'pre_score': round(self.pre_score, 1)}


@dataclass(frozen=True)
class NameCandidate:
    family_name: str
    characters: Tuple[CharacterRecord, ...]
    scores: DimensionScores
    composite: float
    grade: str
    rationale: str
    zodiac_breakdown: Mapping[str, float] = field(default_factory=dict)
    highlights: Tuple[str, ...] = ()
    details: Mapping[str, Any] = field(default_factory=dict)

    @property
    def given_name(self) -> str:
        return ''.join(c.character for c in self.characters)

    @property
    def full_name(self) -> str:
        return self.family_name + self.given_name

    def to_dict(self) -> dict:
        return {
            'full_name': self.full_name,
            'family_name': self.family_name,
            'given_name': self.given_name,
            'characters': [c.to_dict() for c in self.characters],
            'scores': self.scores.as_dict(),
            'zodiac_breakdown': dict(self.zodiac_breakdown),
            'composite': self.composite,
            'grade': self.grade,
            'rationale': self.rationale,
            'highlights': list(self.highlights),
            'details': to_jsonable(self.details),
        }


# ==================== 执行报告 ====================

@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: str
    plugin_id: Optional[str]
    message: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'timestamp': self.timestamp.isoformat(),
            'level': self.level,
            'plugin_id': self.plugin_id,
            'message': self.message,
            'payload': to_jsonable(self.payload),
        }


@dataclass
class ExecutionReport:
    success: bool
    certainty_level: CertaintyLevel
    execution_time_ms: float
    plugin_results: Dict[str, PluginResult]
    candidates: List[NameCandidate] = field(default_factory=list)
    final_recommendation: Dict[str, Any] = field(default_factory=dict)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    predue_analysis: Optional[PredueAnalysis] = None
    logs: List[LogEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'certainty_level': self.certainty_level.value,
            'execution_time_ms': round(self.execution_time_ms, 2),
            'plugin_results': {k: v.to_dict() for k, v in self.plugin_results.items()},
            'candidates': [c.to_dict() for c in self.candidates],
            'final_recommendation': to_jsonable(self.final_recommendation),
            'errors': to_jsonable(self.errors),
            'warnings': list(self.warnings),
            'predue_analysis': self.predue_analysis.to_dict() if self.predue_analysis else None,
            'logs': [entry.to_dict() for entry in self.logs],
        }

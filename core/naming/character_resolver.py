#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
字库分级解析器

解析顺序：主表 -> 笔画备用表 -> 拼音备用表。
主表完整命中置信度 0.9-1.0；任何备用表参与的记录置信度不超过 0.7，
并按必填字段完整度继续衰减；所有来源都未命中时置信度为 0，不抛异常。
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from core.analyzers.phonetic_analyzer import parse_pinyin
from core.data.constants import parse_element
from core.data.store import (
    DataStore,
    PINYIN_FALLBACK_SOURCE,
    PRIMARY_SOURCE,
    STROKE_FALLBACK_SOURCE,
)
from core.naming.models import CharacterRecord

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('traditional_strokes', 'element', 'pinyin', 'is_standard')
OPTIONAL_FIELDS = ('traditional_form', 'simplified_strokes', 'radical', 'meanings', 'cultural_level')

# 数据源可靠度
SOURCE_RELIABILITY = {
    PRIMARY_SOURCE: 1.0,
    STROKE_FALLBACK_SOURCE: 0.8,
    PINYIN_FALLBACK_SOURCE: 0.8,
}
PRIMARY_FLOOR = 0.9
FALLBACK_CEILING = 0.7
UNRESOLVED_MARKER = 'unresolved'


def _extract_fields(row: Mapping[str, Any]) -> Dict[str, Any]:
    """把原始表行转换为 CharacterRecord 字段，缺失字段不出现在结果中"""
    fields: Dict[str, Any] = {}
    strokes = row.get('strokes') or {}
    if strokes.get('traditional') is not None:
        fields['traditional_strokes'] = int(strokes['traditional'])
    if strokes.get('simplified') is not None:
        fields['simplified_strokes'] = int(strokes['simplified'])
    if row.get('traditional'):
        fields['traditional_form'] = row['traditional']
    if row.get('element'):
        try:
            fields['element'] = parse_element(row['element'])
        except (KeyError, ValueError):
            logger.warning(f"⚠️ 无法识别的五行: {row['element']}")
    if row.get('pinyin'):
        fields['pinyin'] = row['pinyin']
    if row.get('radical'):
        fields['radical'] = row['radical']
    if row.get('components'):
        fields['components'] = tuple(row['components'])
    if row.get('is_standard') is not None:
        fields['is_standard'] = bool(row['is_standard'])
    if row.get('polarity'):
        fields['polarity'] = row['polarity']
    if row.get('meanings'):
        fields['meanings'] = tuple(row['meanings'])
    if row.get('gender'):
        fields['gender_tendency'] = row['gender']
    if row.get('cultural_level') is not None:
        fields['cultural_level'] = int(row['cultural_level'])
    return fields


class CharacterDataResolver:
    """
    单字属性解析器

    同一次流水线执行内按字缓存；不同执行之间不共享实例。
    """

    def __init__(self, store: DataStore):
        self.store = store
        self._cache: Dict[str, CharacterRecord] = {}
        self._hits = {PRIMARY_SOURCE: 0, STROKE_FALLBACK_SOURCE: 0, PINYIN_FALLBACK_SOURCE: 0,
                      UNRESOLVED_MARKER: 0}

    def resolve(self, character: str) -> CharacterRecord:
        if character in self._cache:
            return self._cache[character]
        record = self._resolve(character)
        self._cache[character] = record
        return record

    def resolve_many(self, characters: Iterable[str]) -> Dict[str, CharacterRecord]:
        return {char: self.resolve(char) for char in characters}

    def is_suitable_for_naming(self, character: str) -> bool:
        """已解析、规范字、且寓意不为负面"""
        record = self.resolve(character)
        return (record.resolved and record.confidence > 0 and bool(record.is_standard)
                and record.polarity != 'negative')

    def stats(self) -> dict:
        return {'cached': len(self._cache), 'hits': dict(self._hits)}

    def _resolve(self, character: str) -> CharacterRecord:
        fields: Dict[str, Any] = {}
        provenance = []

        primary = self.store.lookup(PRIMARY_SOURCE, character)
        if primary is not None:
            fields.update(_extract_fields(primary))
            provenance.append(PRIMARY_SOURCE)
            if self._required_completeness(fields) >= 1.0:
                self._hits[PRIMARY_SOURCE] += 1
                return self._build(character, fields, provenance, self._primary_confidence(fields))

        # 备用表只补充缺失字段
        for source in (STROKE_FALLBACK_SOURCE, PINYIN_FALLBACK_SOURCE):
            row = self.store.lookup(source, character)
            if row is None:
                continue
            contributed = False
            for key, value in _extract_fields(row).items():
                if key not in fields:
                    fields[key] = value
                    contributed = True
            if contributed:
                provenance.append(source)
                self._hits[source] += 1

        if not provenance:
            self._hits[UNRESOLVED_MARKER] += 1
            logger.debug(f"🔍 字库未命中: {character}")
            return CharacterRecord(character=character, confidence=0.0, completeness=0.0,
                                   provenance=(), resolved=False)

        completeness = self._required_completeness(fields)
        # 主表不完整同样视为降级结果
        weakest = min(SOURCE_RELIABILITY[s] for s in provenance)
        confidence = min(weakest, FALLBACK_CEILING) * completeness
        return self._build(character, fields, provenance, confidence)

    @staticmethod
    def _required_completeness(fields: Mapping[str, Any]) -> float:
        present = sum(1 for key in REQUIRED_FIELDS if fields.get(key) is not None)
        return present / len(REQUIRED_FIELDS)

    @staticmethod
    def _primary_confidence(fields: Mapping[str, Any]) -> float:
        present = sum(1 for key in OPTIONAL_FIELDS if fields.get(key))
        return PRIMARY_FLOOR + (1.0 - PRIMARY_FLOOR) * present / len(OPTIONAL_FIELDS)

    @staticmethod
    def _build(character: str, fields: Dict[str, Any], provenance, confidence: float) -> CharacterRecord:
        tone: Optional[int] = None
        if fields.get('pinyin'):
            _, tone = parse_pinyin(fields['pinyin'])
        return CharacterRecord(
            character=character,
            tone=tone,
            confidence=round(confidence, 4),
            completeness=CharacterDataResolver._required_completeness(fields),
            provenance=tuple(provenance),
            resolved=True,
            **fields,
        )

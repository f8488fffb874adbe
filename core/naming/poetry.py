#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
诗词候选字接口

诗词文本的清洗与分词由外部处理，这里只接收清洗后的候选字及其出处。
"""

from typing import Iterable, List, Protocol, Sequence

from core.data.constants import Gender
from core.naming.models import PoetryCandidate


class PoetryCandidateProvider(Protocol):

    def candidate_characters(self, family_name: str, gender: Gender) -> Sequence[PoetryCandidate]:
        ...


class StaticPoetryProvider:
    """固定候选列表，重复字只保留第一次出现的出处"""

    def __init__(self, candidates: Iterable[PoetryCandidate]):
        seen = set()
        self._candidates: List[PoetryCandidate] = []
        for candidate in candidates:
            if candidate.character in seen:
                continue
            seen.add(candidate.character)
            self._candidates.append(candidate)

    def candidate_characters(self, family_name: str, gender: Gender) -> Sequence[PoetryCandidate]:
        return [c for c in self._candidates if c.character not in family_name]

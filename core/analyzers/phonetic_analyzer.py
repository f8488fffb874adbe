#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
音律分析器

解析带声调的拼音，计算姓名的声调搭配、双声叠韵与同音问题。
"""

import logging
import unicodedata
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# 声调符号 -> (无调元音, 声调)
_TONE_MARKS = {
    'ā': ('a', 1), 'á': ('a', 2), 'ǎ': ('a', 3), 'à': ('a', 4),
    'ē': ('e', 1), 'é': ('e', 2), 'ě': ('e', 3), 'è': ('e', 4),
    'ī': ('i', 1), 'í': ('i', 2), 'ǐ': ('i', 3), 'ì': ('i', 4),
    'ō': ('o', 1), 'ó': ('o', 2), 'ǒ': ('o', 3), 'ò': ('o', 4),
    'ū': ('u', 1), 'ú': ('u', 2), 'ǔ': ('u', 3), 'ù': ('u', 4),
    'ǖ': ('ü', 1), 'ǘ': ('ü', 2), 'ǚ': ('ü', 3), 'ǜ': ('ü', 4),
}

_INITIALS = ['zh', 'ch', 'sh', 'b', 'p', 'm', 'f', 'd', 't', 'n', 'l', 'g', 'k', 'h',
             'j', 'q', 'x', 'r', 'z', 'c', 's', 'y', 'w']

# 优美声调组合（前字, 后字）
GOOD_TONE_COMBINATIONS = frozenset([(4, 2), (4, 1), (4, 3), (3, 2), (3, 4), (1, 4), (1, 3)])


def parse_pinyin(pinyin: Optional[str]) -> Tuple[str, Optional[int]]:
    """
    解析拼音

    支持声调符号（'rùn'）与数字声调（'run4'）两种写法。

    Returns:
        (无调拼音, 声调)，无法识别声调时声调为 None，轻声记为 5
    """
    if not pinyin:
        return '', None
    text = unicodedata.normalize('NFC', pinyin.strip().lower())
    if text[-1].isdigit():
        tone = int(text[-1])
        return text[:-1], tone if 1 <= tone <= 5 else None

    base = []
    tone = None
    for ch in text:
        if ch in _TONE_MARKS:
            vowel, tone = _TONE_MARKS[ch]
            base.append(vowel)
        else:
            base.append(ch)
    return ''.join(base), tone or 5


def split_syllable(syllable: str) -> Tuple[str, str]:
    """拆分声母与韵母"""
    for initial in _INITIALS:
        if syllable.startswith(initial) and len(syllable) > len(initial):
            return initial, syllable[len(initial):]
    return '', syllable


class PhoneticAnalyzer:
    """音律评分"""

    @staticmethod
    def tone_pair_score(first: Optional[int], second: Optional[int]) -> float:
        """两字声调搭配分（0-100）"""
        if first is None or second is None:
            return 70.0
        if (first, second) in GOOD_TONE_COMBINATIONS:
            return 100.0
        if first == second:
            # 上上连读变调，去去过于急促
            return 50.0 if first in (3, 4) else 65.0
        return 80.0

    @staticmethod
    def analyze(pinyins: Sequence[Optional[str]]) -> dict:
        """
        分析完整姓名的音律

        Args:
            pinyins: 姓氏在前、名字在后的拼音序列

        Returns:
            dict: score、tones、issues
        """
        parsed = [parse_pinyin(p) for p in pinyins]
        syllables = [p[0] for p in parsed]
        tones = [p[1] for p in parsed]
        issues: List[str] = []

        if len(parsed) < 2:
            return {'score': 70.0, 'tones': tones, 'issues': issues}

        pair_scores = [PhoneticAnalyzer.tone_pair_score(tones[i], tones[i + 1])
                       for i in range(len(tones) - 1)]
        score = sum(pair_scores) / len(pair_scores)

        known_tones = [t for t in tones if t is not None]
        if len(known_tones) == len(tones) and len(set(known_tones)) == 1:
            score -= 15
            issues.append('全名声调相同，读来平板')
        if len(tones) >= 3 and len(set(known_tones)) == len(known_tones) == len(tones):
            score += 5

        for i in range(len(syllables) - 1):
            a, b = syllables[i], syllables[i + 1]
            if not a or not b:
                continue
            if a == b:
                score -= 20
                issues.append(f'第{i + 1}、{i + 2}字同音')
                continue
            ia, fa = split_syllable(a)
            ib, fb = split_syllable(b)
            if ia and ia == ib:
                score -= 8
                issues.append(f'第{i + 1}、{i + 2}字双声')
            if fa and fa == fb:
                score -= 8
                issues.append(f'第{i + 1}、{i + 2}字叠韵')

        score = max(0.0, min(100.0, score))
        return {'score': round(score, 1), 'tones': tones, 'issues': issues}

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名用八字排盘

只关心天干地支的五行分布，不涉及十神、大运等完整命盘内容。
"""

import logging
from typing import Dict, Optional

from core.calculators.LunarConverter import LunarConverter
from core.data.constants import ALL_ELEMENTS, BRANCH_ELEMENTS, STEM_ELEMENTS, Element

logger = logging.getLogger(__name__)

PILLAR_NAMES = ('year', 'month', 'day', 'hour')


class BaziCalculator:
    """八字排盘与五行计数"""

    def __init__(self, year: int, month: int, day: int,
                 hour: Optional[int] = None, minute: Optional[int] = None):
        self.year = year
        self.month = month
        self.day = day
        self.hour = hour
        self.minute = minute
        self._result = None

    def calculate(self) -> dict:
        """
        排盘

        Returns:
            dict: pillars、lunar_date、zodiac、day_master、element_counts、has_hour
        """
        if self._result is not None:
            return self._result

        converted = LunarConverter.solar_to_lunar(self.year, self.month, self.day, self.hour, self.minute)
        pillars = converted['pillars']
        day_master = pillars['day']['stem']

        self._result = {
            'pillars': pillars,
            'lunar_date': converted['lunar_date'],
            'zodiac': converted['zodiac'],
            'has_hour': converted['has_hour'],
            'day_master': day_master,
            'day_master_element': STEM_ELEMENTS[day_master],
            'month_branch': pillars['month']['branch'],
            'element_counts': self.count_elements(pillars),
        }
        logger.debug(f"🧮 排盘完成: {self.format_pillars(pillars)}")
        return self._result

    @staticmethod
    def count_elements(pillars: Dict[str, Optional[dict]]) -> Dict[Element, int]:
        """统计各柱天干地支的五行个数，缺失的柱不计"""
        counts = {element: 0 for element in ALL_ELEMENTS}
        for name in PILLAR_NAMES:
            pillar = pillars.get(name)
            if not pillar:
                continue
            counts[STEM_ELEMENTS[pillar['stem']]] += 1
            counts[BRANCH_ELEMENTS[pillar['branch']]] += 1
        return counts

    @staticmethod
    def format_pillars(pillars: Dict[str, Optional[dict]]) -> str:
        return ' '.join(f"{p['stem']}{p['branch']}" for p in
                        (pillars.get(name) for name in PILLAR_NAMES) if p)

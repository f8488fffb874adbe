#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
第三层：选字策略

把喜用神与用户偏好合并为每个字位的五行权重。
没有命理信息时所有五行权重相同（不施加约束）。
"""

import logging
from typing import Dict, List

from core.data.constants import ALL_ELEMENTS, Element
from core.naming.plugins.base import NamingPlugin

logger = logging.getLogger(__name__)

# 字位权重：名字第一个字 1.0，第二个字 0.9
POSITION_WEIGHTS = (1.0, 0.9)

PREFERRED_TOP_WEIGHT = 1.0
PREFERRED_STEP = 0.1
PREFERRED_MIN_WEIGHT = 0.7
NEUTRAL_WEIGHT = 0.5
AVOID_WEIGHT = 0.1


class SelectionStrategyPlugin(NamingPlugin):
    plugin_id = 'selection-strategy'
    layer = 3
    dependencies = ('destiny', 'zodiac', 'gender')
    required = True
    description = '字位五行权重与选字灵活度'

    def process(self, context):
        destiny = context.payload('destiny')
        user_preferred = list(context.request.preferences.preferred_elements)
        warnings: List[str] = []

        preferred: List[Element] = []
        avoid: List[Element] = []
        if destiny:
            preferred = list(destiny['useful_elements'])
            avoid = list(destiny['avoid_elements'])
            source = 'destiny'
        elif user_preferred:
            source = 'preference'
        else:
            source = 'neutral'

        for element in reversed(user_preferred):
            if element in avoid:
                warnings.append(f"偏好五行{element.value}与喜用神冲突，按用户偏好处理")
                avoid.remove(element)
            if element in preferred:
                preferred.remove(element)
            preferred.insert(0, element)

        position_weights = {
            position: self._weights(preferred, avoid, factor)
            for position, factor in enumerate(POSITION_WEIGHTS)
        }

        if destiny and not destiny['simplified'] and avoid:
            flexibility = 'strict'
        elif preferred:
            flexibility = 'moderate'
        else:
            flexibility = 'open'

        payload = {
            'preferred_elements': tuple(preferred),
            'avoid_elements': tuple(avoid),
            'position_weights': position_weights,
            'flexibility': flexibility,
            'source': source,
        }
        context.log.add('info', f"选字策略: 喜{[e.value for e in preferred]} 忌{[e.value for e in avoid]} "
                                f"({flexibility})", self.plugin_id)
        confidence = context.get_result('destiny').confidence if destiny else 0.6
        return self.ok(payload, confidence, warnings)

    @staticmethod
    def _weights(preferred: List[Element], avoid: List[Element], factor: float) -> Dict[Element, float]:
        weights = {}
        for element in ALL_ELEMENTS:
            if element in preferred:
                rank = preferred.index(element)
                base = max(PREFERRED_MIN_WEIGHT, PREFERRED_TOP_WEIGHT - PREFERRED_STEP * rank)
            elif element in avoid:
                base = AVOID_WEIGHT
            else:
                base = NEUTRAL_WEIGHT
            weights[element] = round(base * factor, 3)
        return weights

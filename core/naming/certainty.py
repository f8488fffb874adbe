#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
确定性等级管理

根据请求中的出生信息判断确定性等级，并给出每个等级的处理配置。
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet

from core.naming.models import CertaintyLevel, NamingRequest

logger = logging.getLogger(__name__)

ALL_PLUGINS = frozenset([
    'surname', 'gender', 'birth-time', 'destiny', 'zodiac',
    'selection-strategy', 'character-filter', 'name-combination', 'comprehensive-scoring',
])


@dataclass(frozen=True)
class LevelConfig:
    """等级处理配置"""
    strategy: str
    disabled_plugins: FrozenSet[str]
    timeout_ms: int
    parallel: bool
    description: str

    @property
    def enabled_plugins(self) -> FrozenSet[str]:
        return ALL_PLUGINS - self.disabled_plugins


LEVEL_CONFIGS: Dict[CertaintyLevel, LevelConfig] = {
    CertaintyLevel.FULLY_DETERMINED: LevelConfig(
        strategy='full-analysis',
        disabled_plugins=frozenset(),
        timeout_ms=10000,
        parallel=True,
        description='出生时间精确，执行完整八字与生肖分析',
    ),
    CertaintyLevel.PARTIALLY_DETERMINED: LevelConfig(
        strategy='simplified-analysis',
        disabled_plugins=frozenset(),
        timeout_ms=8000,
        parallel=True,
        description='缺少时辰，按三柱简化分析',
    ),
    CertaintyLevel.ESTIMATED: LevelConfig(
        strategy='probabilistic-analysis',
        disabled_plugins=frozenset(['destiny']),
        timeout_ms=6000,
        parallel=True,
        description='仅有预产期，跳过八字分析，生肖按概率评估',
    ),
    CertaintyLevel.UNKNOWN: LevelConfig(
        strategy='basic-analysis',
        disabled_plugins=frozenset(['destiny', 'zodiac']),
        timeout_ms=5000,
        parallel=False,
        description='无出生信息，只做基础起名分析',
    ),
}


class CertaintyLevelManager:
    """确定性等级判断"""

    @staticmethod
    def determine(request: NamingRequest) -> CertaintyLevel:
        if request.birth_info is not None:
            if request.birth_info.has_hour:
                return CertaintyLevel.FULLY_DETERMINED
            return CertaintyLevel.PARTIALLY_DETERMINED
        if request.predue_info is not None:
            return CertaintyLevel.ESTIMATED
        return CertaintyLevel.UNKNOWN

    @staticmethod
    def config_for(level: CertaintyLevel) -> LevelConfig:
        return LEVEL_CONFIGS[level]

    @staticmethod
    def is_plugin_enabled(level: CertaintyLevel, plugin_id: str) -> bool:
        return plugin_id not in LEVEL_CONFIGS[level].disabled_plugins

    @staticmethod
    def clamp_confidence(level: CertaintyLevel, confidence: float) -> float:
        """插件置信度不得超过当前等级上限"""
        return max(0.0, min(confidence, level.confidence_ceiling))

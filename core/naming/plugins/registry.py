#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
默认插件集合
"""

from typing import List

from core.naming.plugins.base import NamingPlugin
from core.naming.plugins.layer1 import BirthTimePlugin, GenderPlugin, SurnamePlugin
from core.naming.plugins.layer2 import DestinyPlugin, ZodiacPlugin
from core.naming.plugins.layer3 import SelectionStrategyPlugin
from core.naming.plugins.layer4 import CharacterFilterPlugin
from core.naming.plugins.layer5 import NameCombinationPlugin
from core.naming.plugins.layer6 import ComprehensiveScoringPlugin


def default_plugins() -> List[NamingPlugin]:
    """六层九个插件，每次调用返回新实例"""
    return [
        SurnamePlugin(),
        GenderPlugin(),
        BirthTimePlugin(),
        DestinyPlugin(),
        ZodiacPlugin(),
        SelectionStrategyPlugin(),
        CharacterFilterPlugin(),
        NameCombinationPlugin(),
        ComprehensiveScoringPlugin(),
    ]

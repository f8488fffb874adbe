#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名数据模块

提供：
- 五行、生肖、天干地支常量
- 三才五格数理表
- 生肖用字规则
- 只读字库 DataStore
"""

from .constants import Element, Gender, Relation, Zodiac, get_element_relation
from .store import DataStore, load_default_store

__all__ = [
    'Element',
    'Gender',
    'Relation',
    'Zodiac',
    'get_element_relation',
    'DataStore',
    'load_default_store',
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
字库数据仓库

进程启动时加载一次，加载后只读。多个请求共享同一份快照，不存在可变的全局状态。
"""

import json
import logging
import os
from functools import lru_cache
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'tables')

PRIMARY_SOURCE = 'primary'
STROKE_FALLBACK_SOURCE = 'stroke-fallback'
PINYIN_FALLBACK_SOURCE = 'pinyin-fallback'


def _freeze(value: Any) -> Any:
    """递归转为只读结构：dict -> MappingProxyType，list -> tuple"""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _read_json(path: str) -> dict:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


class DataStore:
    """只读字库快照"""

    __slots__ = ('_primary', '_stroke_fallback', '_pinyin_fallback',
                 '_compound_surnames', '_common_surnames', '_data_dir')

    def __init__(self,
                 primary: Mapping[str, Any],
                 stroke_fallback: Mapping[str, Any],
                 pinyin_fallback: Mapping[str, Any],
                 compound_surnames: FrozenSet[str] = frozenset(),
                 common_surnames: FrozenSet[str] = frozenset(),
                 data_dir: Optional[str] = None):
        object.__setattr__(self, '_primary', _freeze(dict(primary)))
        object.__setattr__(self, '_stroke_fallback', _freeze(dict(stroke_fallback)))
        object.__setattr__(self, '_pinyin_fallback', _freeze(dict(pinyin_fallback)))
        object.__setattr__(self, '_compound_surnames', frozenset(compound_surnames))
        object.__setattr__(self, '_common_surnames', frozenset(common_surnames))
        object.__setattr__(self, '_data_dir', data_dir)

    def __setattr__(self, name, value):
        raise AttributeError('DataStore 为只读快照，不允许修改')

    @classmethod
    def load(cls, data_dir: Optional[str] = None) -> 'DataStore':
        """从目录加载三张字表和姓氏表"""
        data_dir = data_dir or DEFAULT_DATA_DIR
        primary = _read_json(os.path.join(data_dir, 'primary.json'))
        stroke_fallback = _read_json(os.path.join(data_dir, 'stroke_fallback.json'))
        pinyin_fallback = _read_json(os.path.join(data_dir, 'pinyin_fallback.json'))

        surnames_path = os.path.join(data_dir, 'surnames.json')
        surnames = _read_json(surnames_path) if os.path.exists(surnames_path) else {}

        logger.info(f"📚 字库加载完成: 主表{len(primary)}字, 笔画表{len(stroke_fallback)}字, "
                    f"拼音表{len(pinyin_fallback)}字 ({data_dir})")
        return cls(
            primary=primary,
            stroke_fallback=stroke_fallback,
            pinyin_fallback=pinyin_fallback,
            compound_surnames=frozenset(surnames.get('compound', [])),
            common_surnames=frozenset(surnames.get('common', [])),
            data_dir=data_dir,
        )

    def lookup(self, source: str, character: str) -> Optional[Mapping[str, Any]]:
        """按数据源查询单字，未命中返回 None"""
        table = {
            PRIMARY_SOURCE: self._primary,
            STROKE_FALLBACK_SOURCE: self._stroke_fallback,
            PINYIN_FALLBACK_SOURCE: self._pinyin_fallback,
        }[source]
        return table.get(character)

    @property
    def primary(self) -> Mapping[str, Any]:
        return self._primary

    @property
    def compound_surnames(self) -> FrozenSet[str]:
        return self._compound_surnames

    @property
    def common_surnames(self) -> FrozenSet[str]:
        return self._common_surnames

    @property
    def data_dir(self) -> Optional[str]:
        return self._data_dir

    def naming_pool(self) -> Tuple[str, ...]:
        """候选用字池：主表中可用于起名的字，加上只在备用表出现的字"""
        pool = [char for char, row in self._primary.items() if row.get('naming', True)]
        for char in self._stroke_fallback:
            if char not in self._primary:
                pool.append(char)
        return tuple(pool)

    def stats(self) -> dict:
        return {
            'primary': len(self._primary),
            'stroke_fallback': len(self._stroke_fallback),
            'pinyin_fallback': len(self._pinyin_fallback),
            'pool': len(self.naming_pool()),
        }


@lru_cache(maxsize=4)
def load_default_store(data_dir: Optional[str] = None) -> DataStore:
    """进程级只加载一次"""
    return DataStore.load(data_dir)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
只读字库单元测试
"""

import json
import pytest
import os
import sys

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from core.data.store import DataStore, PRIMARY_SOURCE, STROKE_FALLBACK_SOURCE, load_default_store


class TestImmutability:
    """加载后只读"""

    def test_cannot_set_attribute(self, store):
        with pytest.raises(AttributeError):
            store.extra = 1

    def test_tables_are_read_only(self, store):
        with pytest.raises(TypeError):
            store.primary['浩'] = {}

    def test_nested_rows_are_read_only(self, store):
        row = store.lookup(PRIMARY_SOURCE, '浩')
        with pytest.raises(TypeError):
            row['strokes']['traditional'] = 99
        assert isinstance(row['meanings'], tuple)

    def test_default_store_loaded_once(self):
        assert load_default_store() is load_default_store()


class TestLookup:

    def test_lookup_miss_returns_none(self, store):
        assert store.lookup(PRIMARY_SOURCE, '龘') is None

    def test_naming_pool(self, store):
        """候选池不含姓氏字，包含只在笔画表出现的字"""
        pool = store.naming_pool()
        assert '吴' not in pool
        assert '浩' in pool
        assert '钦' in pool
        assert len(pool) == len(set(pool))

    def test_surnames(self, store):
        assert '欧阳' in store.compound_surnames
        assert '吴' in store.common_surnames

    def test_stats(self, store):
        stats = store.stats()
        assert stats['primary'] == len(store.primary)
        assert stats['pool'] == len(store.naming_pool())


class TestLoad:

    def test_load_custom_directory(self, tmp_path):
        """自定义目录，姓氏表可选"""
        (tmp_path / 'primary.json').write_text(json.dumps({
            '安': {'strokes': {'traditional': 6}, 'element': '土', 'pinyin': 'ān', 'is_standard': True},
        }, ensure_ascii=False), encoding='utf-8')
        (tmp_path / 'stroke_fallback.json').write_text(json.dumps({
            '翊': {'strokes': {'traditional': 11}, 'element': '土'},
        }, ensure_ascii=False), encoding='utf-8')
        (tmp_path / 'pinyin_fallback.json').write_text('{}', encoding='utf-8')

        store = DataStore.load(str(tmp_path))
        assert store.data_dir == str(tmp_path)
        assert store.lookup(STROKE_FALLBACK_SOURCE, '翊')['element'] == '土'
        assert store.compound_surnames == frozenset()
        assert store.naming_pool() == ('安', '翊')

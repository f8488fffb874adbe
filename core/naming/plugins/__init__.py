#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名流水线插件（六层）
"""

from core.naming.plugins.base import NamingPlugin
from core.naming.plugins.registry import default_plugins

__all__ = ['NamingPlugin', 'default_plugins']

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
分层起名引擎

执行器在 core.naming.executor 中，这里只导出值对象与异常。
"""

from .errors import ErrorKind, NamingError, NamingInputError
from .models import CertaintyLevel, CharacterRecord, ExecutionReport, NameCandidate, NamingRequest

__all__ = [
    'ErrorKind',
    'NamingError',
    'NamingInputError',
    'CertaintyLevel',
    'CharacterRecord',
    'ExecutionReport',
    'NameCandidate',
    'NamingRequest',
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名流水线配置
从环境变量读取，未设置时使用默认值
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class NamingConfig:
    """起名流水线配置"""
    pipeline_timeout: float = 15.0      # 秒
    max_pool_size: int = 12             # 每个位置保留的候选字数
    max_combinations: int = 40          # 进入评分层的组合数上限
    top_n: int = 10                     # 返回的候选名字数
    zodiac_boundary_mode: str = 'lunar'
    data_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'NamingConfig':
        """从环境变量创建配置"""
        return cls(
            pipeline_timeout=float(os.getenv('NAMING_PIPELINE_TIMEOUT', '15')),
            max_pool_size=int(os.getenv('NAMING_MAX_POOL_SIZE', '12')),
            max_combinations=int(os.getenv('NAMING_MAX_COMBINATIONS', '40')),
            top_n=int(os.getenv('NAMING_TOP_N', '10')),
            zodiac_boundary_mode=os.getenv('NAMING_ZODIAC_BOUNDARY_MODE', 'lunar').lower(),
            data_dir=os.getenv('NAMING_DATA_DIR') or None,
        )

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名API接口

- POST /naming/generate          生成并排序候选名字
- POST /naming/predue/analyze    预产期生肖边界分析
- GET  /naming/characters/{char} 查询单字字库数据
"""

import sys
import os
import logging
from functools import lru_cache
from fastapi import APIRouter, HTTPException

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
sys.path.insert(0, project_root)

from core.analyzers.predue_boundary_analyzer import PredueBoundaryAnalyzer
from core.data.store import load_default_store
from core.naming.character_resolver import CharacterDataResolver
from core.naming.errors import ErrorKind
from core.naming.executor import PipelineExecutor
from core.naming.models import PredueInfo
from server.api.v1.models.base_response import NamingBaseResponse, error_response, success_response
from server.api.v1.models.naming_models import NamingGenerateRequest, PredueAnalyzeRequest
from server.config.app_config import get_config

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_executor() -> PipelineExecutor:
    """进程内共享的执行器（字库只加载一次）"""
    naming = get_config().naming
    return PipelineExecutor(store=load_default_store(naming.data_dir), config=naming)


@router.post("/naming/generate", response_model=NamingBaseResponse, summary="生成候选名字")
async def generate_names(request: NamingGenerateRequest):
    """
    生成候选名字

    根据姓氏、性别与出生信息（精确时间或预产期）执行六层起名流水线，返回排序后的候选名字。

    - **familyName**: 姓氏（1-2个汉字）
    - **gender**: male / female
    - **birthInfo**: 精确出生时间（可选）
    - **predueInfo**: 预产期（可选，同时提供 birthInfo 时以精确时间为准）
    - **preferences**: 排除/指定用字、偏好五行、名字字数、候选来源
    """
    try:
        report = await get_executor().execute(request.to_request_dict())
    except Exception as e:
        logger.error(f"❌ 起名流水线异常: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"起名失败: {str(e)}")

    fatal = [err for err in report.errors if err['kind'] == ErrorKind.FATAL_INPUT.value]
    if fatal:
        raise HTTPException(status_code=400, detail=fatal[0]['message'])

    data = report.to_dict()
    if not report.success:
        message = report.errors[0]['message'] if report.errors else '没有生成候选名字'
        return error_response(error=message, data=data)
    return success_response(data=data, message=report.final_recommendation.get('summary'))


@router.post("/naming/predue/analyze", response_model=NamingBaseResponse, summary="预产期生肖边界分析")
async def analyze_predue(request: PredueAnalyzeRequest):
    """
    预产期生肖边界分析

    计算出生窗口，判断是否跨越生肖年界，给出各生肖概率与起名建议。
    """
    try:
        analyzer = PredueBoundaryAnalyzer(request.mode or get_config().naming.zodiac_boundary_mode)
        analysis = analyzer.analyze(PredueInfo(
            year=request.year,
            month=request.month,
            week_offset=request.week_offset,
            day=request.day,
        ))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = analysis.to_dict()
    data['recommendations'] = PredueBoundaryAnalyzer.recommendations(analysis)
    if analysis.is_cross_zodiac:
        previous = analysis.boundary.previous_zodiac
        following = analysis.boundary.next_zodiac
        data['compatibility'] = PredueBoundaryAnalyzer.zodiac_compatibility(previous, following)
    return success_response(data=data)


@router.get("/naming/characters/{char}", response_model=NamingBaseResponse, summary="查询单字数据")
async def get_character(char: str):
    """
    查询单字字库数据

    按主字库 -> 笔画补充库 -> 拼音补充库的顺序合并，返回字段来源与置信度。
    """
    if len(char) != 1:
        raise HTTPException(status_code=400, detail="一次只能查询一个汉字")

    resolver = CharacterDataResolver(get_executor().store)
    record = resolver.resolve(char)
    if not record.resolved:
        raise HTTPException(status_code=404, detail=f"字库中没有该字: {char}")

    data = record.to_dict()
    data['suitable_for_naming'] = resolver.is_suitable_for_naming(char)
    return success_response(data=data)

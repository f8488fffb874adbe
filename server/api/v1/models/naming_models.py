#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
起名请求模型 - 同时接受 snake_case 与 camelCase 字段
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from core.data.constants import parse_element


class BirthInfoModel(BaseModel):
    """精确出生时间（公历）"""
    model_config = ConfigDict(populate_by_name=True)

    year: int = Field(..., ge=1901, le=2099, description="出生年", example=2025)
    month: int = Field(..., ge=1, le=12, description="出生月", example=10)
    day: int = Field(..., ge=1, le=31, description="出生日", example=31)
    hour: Optional[int] = Field(None, ge=0, le=23, description="出生小时（可选，缺失时按三柱简化分析）", example=10)
    minute: Optional[int] = Field(None, ge=0, le=59, description="出生分钟", example=0)


class PredueInfoModel(BaseModel):
    """预产期"""
    model_config = ConfigDict(populate_by_name=True)

    year: int = Field(..., description="预产年", example=2026)
    month: int = Field(..., ge=1, le=12, description="预产月", example=2)
    week_offset: int = Field(2, alias="weekOffset", ge=0, le=12, description="误差周数，默认2周", example=2)
    day: Optional[int] = Field(None, ge=1, le=31, description="预产日（可选，默认按15日计算）", example=17)


class PoetryCandidateModel(BaseModel):
    """诗词候选字"""
    character: str = Field(..., min_length=1, max_length=1, description="候选字", example="清")
    source: str = Field("poetry", description="出处", example="《诗经》")
    line: str = Field("", description="原句")


class PreferencesModel(BaseModel):
    """起名偏好"""
    model_config = ConfigDict(populate_by_name=True)

    excluded_characters: List[str] = Field(default_factory=list, alias="excludedCharacters", description="排除用字")
    required_characters: List[str] = Field(default_factory=list, alias="requiredCharacters", description="指定用字")
    preferred_elements: List[str] = Field(default_factory=list, alias="preferredElements",
                                          description="偏好五行：木火土金水", example=["木", "水"])
    name_length: int = Field(2, alias="nameLength", ge=1, le=2, description="名字字数：1或2")
    source: str = Field("combination", description="候选来源：combination(字库) 或 poetry(诗词)")
    poetry_candidates: List[PoetryCandidateModel] = Field(default_factory=list, alias="poetryCandidates")

    @field_validator('preferred_elements')
    @classmethod
    def validate_elements(cls, v):
        """验证五行名称"""
        for item in v:
            parse_element(item)
        return v

    @field_validator('source')
    @classmethod
    def validate_source(cls, v):
        if v not in ('combination', 'poetry'):
            raise ValueError('候选来源必须为 combination 或 poetry')
        return v


class NamingGenerateRequest(BaseModel):
    """起名请求"""
    model_config = ConfigDict(populate_by_name=True)

    family_name: str = Field(..., alias="familyName", description="姓氏（1-2个汉字）", example="吴")
    gender: str = Field(..., description="性别：male(男) 或 female(女)", example="male")
    birth_info: Optional[BirthInfoModel] = Field(None, alias="birthInfo", description="精确出生时间")
    predue_info: Optional[PredueInfoModel] = Field(None, alias="predueInfo",
                                                   description="预产期（同时提供出生时间时忽略）")
    preferences: Optional[PreferencesModel] = Field(None, description="起名偏好")

    @field_validator('family_name')
    @classmethod
    def validate_family_name(cls, v):
        """只做非空校验，汉字校验由流水线完成"""
        v = (v or '').strip()
        if not v:
            raise ValueError('姓氏不能为空')
        return v

    @field_validator('gender')
    @classmethod
    def validate_gender(cls, v):
        """验证性别"""
        if v not in ['male', 'female']:
            raise ValueError('性别必须为 male 或 female')
        return v

    def to_request_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class PredueAnalyzeRequest(PredueInfoModel):
    """预产期生肖边界分析请求"""
    mode: Optional[str] = Field(None, description="生肖年界模式：lunar(农历新年) 或 approximate(近似)")

    @field_validator('mode')
    @classmethod
    def validate_mode(cls, v):
        if v is not None and v not in ('lunar', 'approximate'):
            raise ValueError('模式必须为 lunar 或 approximate')
        return v

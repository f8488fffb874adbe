#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from datetime import date

from lunar_python import Lunar, Solar

from core.data.constants import Zodiac


class LunarConverter:
    """农历转换工具类 - 出生时间转四柱、农历新年与生肖年界"""

    @staticmethod
    def _wu_shu_dun(day_stem: str) -> str:
        """五鼠遁日起时法：根据日干推算子时天干"""
        mapping = {
            '甲': '甲', '己': '甲',  # 甲己还加甲
            '乙': '丙', '庚': '丙',  # 乙庚丙作初
            '丙': '戊', '辛': '戊',  # 丙辛从戊起
            '丁': '庚', '壬': '庚',  # 丁壬庚子居
            '戊': '壬', '癸': '壬',  # 戊癸壬子途
        }
        return mapping[day_stem]

    @staticmethod
    def solar_to_lunar(year, month, day, hour=None, minute=None):
        """
        将公历出生时间转换为农历信息与四柱
        未提供时辰时只返回年、月、日三柱，hour 为 None。
        23:00-23:59 不换日柱，时柱天干按当天日干五鼠遁推算。
        Args:
            year, month, day: 公历日期
            hour, minute: 公历时间，可选
        Returns:
            dict: lunar_date、pillars、zodiac、has_hour
        """
        has_hour = hour is not None
        calc_hour = hour if has_hour else 12
        calc_minute = minute or 0

        solar = Solar.fromYmdHms(year, month, day, calc_hour, calc_minute, 0)
        lunar = solar.getLunar()
        bazi = lunar.getBaZi()

        pillars = {
            'year': {'stem': bazi[0][0], 'branch': bazi[0][1]},
            'month': {'stem': bazi[1][0], 'branch': bazi[1][1]},
            'day': {'stem': bazi[2][0], 'branch': bazi[2][1]},
            'hour': None,
        }
        if has_hour:
            if calc_hour >= 23:
                pillars['hour'] = {'stem': LunarConverter._wu_shu_dun(bazi[2][0]), 'branch': '子'}
            else:
                pillars['hour'] = {'stem': bazi[3][0], 'branch': bazi[3][1]}

        lunar_date = {
            'year': lunar.getYear(),
            'month': abs(lunar.getMonth()),
            'day': lunar.getDay(),
            'month_name': lunar.getMonthInChinese(),
            'day_name': lunar.getDayInChinese(),
            'is_leap_month': lunar.getMonth() < 0,
        }

        return {
            'lunar_date': lunar_date,
            'pillars': pillars,
            'zodiac': Zodiac(lunar.getYearShengXiao()),
            'has_hour': has_hour,
            'solar_date': f"{year:04d}-{month:02d}-{day:02d}",
            'solar_time': f"{calc_hour:02d}:{calc_minute:02d}" if has_hour else None,
        }

    @staticmethod
    def lunar_new_year(year: int) -> date:
        """农历正月初一对应的公历日期"""
        solar = Lunar.fromYmd(year, 1, 1).getSolar()
        return date(solar.getYear(), solar.getMonth(), solar.getDay())

    @staticmethod
    def zodiac_of_lunar_year(year: int) -> Zodiac:
        """农历年的生肖"""
        return Zodiac(Lunar.fromYmd(year, 1, 1).getYearShengXiao())

    @staticmethod
    def zodiac_for_date(value: date) -> Zodiac:
        """公历日期所属生肖（以农历新年为界）"""
        lunar = Solar.fromYmd(value.year, value.month, value.day).getLunar()
        return Zodiac(lunar.getYearShengXiao())

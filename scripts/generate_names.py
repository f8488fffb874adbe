#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命令行起名

用法:
  python3 scripts/generate_names.py 吴 male --birth 2025-10-31T10:00
  python3 scripts/generate_names.py 欧阳 female --predue 2026-02 --week-offset 3
  python3 scripts/generate_names.py 李 male --elements 木 水 --exclude 浩 --json
"""

import sys
import os
import json
import argparse
import logging
from datetime import datetime

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from core.config.naming_config import NamingConfig
from core.naming.executor import PipelineExecutor

BIRTH_FORMATS = ('%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M', '%Y-%m-%d')


def parse_birth(value: str) -> dict:
    for fmt in BIRTH_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        info = {'year': parsed.year, 'month': parsed.month, 'day': parsed.day}
        if '%H' in fmt:
            info.update(hour=parsed.hour, minute=parsed.minute)
        return info
    raise argparse.ArgumentTypeError(f"出生时间格式错误: {value}（应为 YYYY-MM-DD 或 YYYY-MM-DDTHH:MM）")


def parse_predue(value: str) -> dict:
    parts = value.split('-')
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"预产期格式错误: {value}（应为 YYYY-MM 或 YYYY-MM-DD）")
    if len(numbers) not in (2, 3):
        raise argparse.ArgumentTypeError(f"预产期格式错误: {value}（应为 YYYY-MM 或 YYYY-MM-DD）")
    info = {'year': numbers[0], 'month': numbers[1]}
    if len(numbers) == 3:
        info['day'] = numbers[2]
    return info


def build_request(args) -> dict:
    request = {
        'family_name': args.family_name,
        'gender': args.gender,
        'preferences': {
            'excluded_characters': args.exclude,
            'required_characters': args.require,
            'preferred_elements': args.elements,
            'name_length': args.length,
        },
    }
    if args.birth:
        request['birth_info'] = args.birth
    elif args.predue:
        request['predue_info'] = dict(args.predue, week_offset=args.week_offset)
    return request


def print_report(report):
    print(f"确定性等级: {report.certainty_level.value}  耗时: {report.execution_time_ms:.1f}ms")
    if report.predue_analysis is not None:
        scenarios = ', '.join(f"{s.zodiac.value}{s.probability:.0%}" for s in report.predue_analysis.scenarios)
        print(f"预产期分析: {report.predue_analysis.analysis_type.value} ({scenarios})")
    for warning in report.warnings:
        print(f"⚠️  {warning}")
    for error in report.errors:
        print(f"❌ [{error['kind']}] {error['message']}")

    if not report.candidates:
        print("没有生成候选名字")
        return
    print()
    print(f"{'排名':<4}{'姓名':<8}{'综合':>6}{'等级':>4}  三才  五行  音律  寓意  文化  生肖")
    for index, candidate in enumerate(report.candidates, 1):
        s = candidate.scores
        zodiac = f"{s.zodiac:5.1f}" if s.zodiac is not None else '    -'
        print(f"{index:<4}{candidate.full_name:<8}{candidate.composite:>6.1f}{candidate.grade:>4}  "
              f"{s.sancai:5.1f} {s.wuxing:5.1f} {s.phonetic:5.1f} {s.meaning:5.1f} {s.cultural:5.1f} {zodiac}")
    print()
    print(report.final_recommendation.get('summary', ''))


def main():
    parser = argparse.ArgumentParser(description="分层起名推荐")
    parser.add_argument("family_name", help="姓氏（1-2个汉字）")
    parser.add_argument("gender", choices=["male", "female"], help="性别")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--birth", type=parse_birth, help="出生时间 YYYY-MM-DD[THH:MM]")
    group.add_argument("--predue", type=parse_predue, help="预产期 YYYY-MM[-DD]")
    parser.add_argument("--week-offset", type=int, default=2, help="预产期误差周数，默认2")
    parser.add_argument("--length", type=int, choices=[1, 2], default=2, help="名字字数")
    parser.add_argument("--exclude", nargs="*", default=[], help="排除用字")
    parser.add_argument("--require", nargs="*", default=[], help="指定用字")
    parser.add_argument("--elements", nargs="*", default=[], help="偏好五行，如 木 水")
    parser.add_argument("--top", type=int, default=None, help="返回候选数（默认读取 NAMING_TOP_N）")
    parser.add_argument("--json", action="store_true", help="输出完整 JSON 报告")
    parser.add_argument("--verbose", action="store_true", help="输出流水线日志")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = NamingConfig.from_env()
    if args.top is not None:
        config.top_n = args.top
    executor = PipelineExecutor(config=config)
    try:
        report = executor.execute_sync(build_request(args))
    finally:
        executor.shutdown()

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_report(report)
    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(main())

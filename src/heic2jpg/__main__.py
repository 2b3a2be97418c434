#!/usr/bin/env python3
"""
HEIC 批量转 JPG
用法：uv run python -m heic2jpg [-o 输出目录] [-q 质量] [-v] <文件或目录...>
"""

import argparse
import logging
import sys
from pathlib import Path

from .batch import BatchScheduler
from .config_data import ConvertConfig
from .converter import DEFAULT_OUTPUT_DIR, filter_heic_files
from .errors import AccessError, ConfigError
from .log import setup_logging
from .models import ConversionOutcome

logger = logging.getLogger("heic2jpg")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="heic2jpg",
        description="HEIC 批量转 JPG",
    )
    p.add_argument("paths", nargs="*", help="输入文件或目录")
    p.add_argument("-o", "--output", dest="output_dir", help=f"输出目录 (默认：{DEFAULT_OUTPUT_DIR})")
    p.add_argument("-v", "--verbose", action="store_true", default=None, help="输出详细日志")
    p.add_argument("-q", "--quality", type=int, help="JPEG 质量 (1-100，默认：100)")
    p.add_argument("-j", "--workers", dest="max_workers", type=int, help="并发数 (默认：CPU 核数 x 2)")
    p.add_argument("-c", "--config", type=Path, help="JSON 配置文件")
    return p


def load_config(args: argparse.Namespace) -> ConvertConfig:
    """读取配置文件（可选），命令行参数优先"""
    cfg = ConvertConfig.from_file(args.config) if args.config else ConvertConfig()

    if args.output_dir is not None:
        cfg.output_dir = args.output_dir
    if args.quality is not None:
        cfg.quality = args.quality
    if args.verbose is not None:
        cfg.verbose = args.verbose
    if args.max_workers is not None:
        cfg.max_workers = args.max_workers
    return cfg


def _print_outcome(outcome: ConversionOutcome) -> None:
    if outcome.ok:
        print(f"✓ {outcome.source_path} → {outcome.output_path}", flush=True)


def main(argv=None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    if not args.paths:
        print("❌ 未指定输入文件或目录", file=sys.stderr, flush=True)
        p.print_usage(sys.stderr)
        return 1

    try:
        cfg = load_config(args)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr, flush=True)
        return 1

    setup_logging(cfg.verbose)

    # 命令行与配置文件合并后再校验
    try:
        max_workers = cfg.resolve_max_workers()
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr, flush=True)
        return 1

    try:
        cfg.ensure_output_dir()
    except OSError as e:
        print(f"❌ creating output directory: {e}", file=sys.stderr, flush=True)
        return 1
    if cfg.output_dir != DEFAULT_OUTPUT_DIR:
        logger.debug("Output directory set to: %s", cfg.output_dir)

    try:
        files = filter_heic_files(args.paths)
    except AccessError as e:
        print(f"❌ filtering .heic files: {e}", file=sys.stderr, flush=True)
        return 1

    if not files:
        logger.debug("No .heic files found to convert.")
        return 0

    scheduler = BatchScheduler(
        max_workers,
        on_outcome=_print_outcome if cfg.verbose else None,
    )
    report = scheduler.run_files(files, cfg.output_dir, cfg.quality)

    for failure in report.failures:
        print(f"✗ {failure.message}", file=sys.stderr, flush=True)

    if not report.ok:
        print(f"⚠️  Completed with {report.failure_count} errors.", file=sys.stderr, flush=True)
        return 1

    print(f"✅ 成功:{report.success_count}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())

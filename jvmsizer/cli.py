"""Command entry point: size memory, run every analysis and print the reports."""

from __future__ import annotations

import logging
import sys

from jvmsizer.args import parse_args
from jvmsizer.config import get_disk_config
from jvmsizer.console import (
    print_configuration,
    print_performance_report,
    print_safety_report,
    print_scenarios,
    print_system_limits,
)
from jvmsizer.jvm import print_jvm_recommendations
from jvmsizer.metaspace import calculate_metaspace
from jvmsizer.performance import calculate_performance
from jvmsizer.report import DEFAULT_REPORT_PATH, ReportContext, generate_markdown_report
from jvmsizer.safety import calculate_safety

logger = logging.getLogger("jvmsizer")

_MEMORY_RATIOS = {"low": (0.06, 0.4), "high": (0.12, 0.3)}
_DEFAULT_RATIOS = (0.08, 0.35)
_MIN_DIRECT_GB = 1.0
_MIN_HEAP_GB = 4.0


def allocate_memory(total_ram, complexity):
    """Return ``(direct_mem_gb, heap_mem_gb)`` for the server memory and complexity."""
    direct_ratio, heap_ratio = _MEMORY_RATIOS.get(complexity, _DEFAULT_RATIOS)
    direct = max(total_ram * direct_ratio, _MIN_DIRECT_GB)
    heap = max(total_ram * heap_ratio, _MIN_HEAP_GB)
    return direct, heap


def _configure_logging():
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s %(levelname)s %(name)s] %(message)s")
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)


def main(argv=None):
    """Run the analysis; return the process exit status."""
    _configure_logging()
    logger.info("启动文件传输系统分析工具")
    args = parse_args(argv)

    try:
        disk_config = get_disk_config(args.disk_type)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    direct_mem_gb, heap_mem_gb = allocate_memory(args.total_ram, args.complexity)
    logger.debug(
        "内存分配计算: 总内存=%sGB, 直接内存=%.1fGB, 堆内存=%.1fGB",
        args.total_ram,
        direct_mem_gb,
        heap_mem_gb,
    )

    metaspace_size_mb = calculate_metaspace(args)
    safety = calculate_safety(args, direct_mem_gb, heap_mem_gb)

    print_configuration(
        args,
        direct_mem_gb,
        heap_mem_gb,
        metaspace_size_mb,
        disk_config.read_speed,
        disk_config.write_speed,
    )
    print_system_limits(safety)
    print_scenarios(safety)
    print_safety_report(safety)

    performance = calculate_performance(args, disk_config, direct_mem_gb, heap_mem_gb)
    print_performance_report(performance)

    print_jvm_recommendations(
        args, direct_mem_gb, heap_mem_gb, metaspace_size_mb, safety, performance
    )

    if args.generate_markdown:
        ctx = ReportContext(
            args=args,
            direct_mem_gb=direct_mem_gb,
            heap_mem_gb=heap_mem_gb,
            metaspace_size_mb=metaspace_size_mb,
            disk_read_speed=disk_config.read_speed,
            disk_write_speed=disk_config.write_speed,
            safety=safety,
            performance=performance,
        )
        try:
            generate_markdown_report(ctx, DEFAULT_REPORT_PATH)
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        logger.info("Markdown报告已生成: %s", DEFAULT_REPORT_PATH)

    return 0


if __name__ == "__main__":
    sys.exit(main())
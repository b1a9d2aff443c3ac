"""Command-line options for the file-transfer system analyser."""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass

from jvmsizer.config import get_disk_configs
from jvmsizer.style import _display_float

VERSION = "3.2"

_USIZE_RE = re.compile(r"\+?[0-9]+")


class AnalysisError(ValueError):
    """An option value that the analysis cannot work with."""


@dataclass
class Args:
    """Server and workload parameters for the analysis."""

    total_ram: float = 32.0
    cpu_cores: int = 16
    net_gbps: float = 1.0
    disk_type: str = "sata_ssd"
    avg_file_size: float = 10.0
    expected_connections: int = 1000
    burst_factor: float = 3.0
    enable_memory_guard: bool = True
    enable_memory_mapping: bool = False
    complexity: str = "medium"
    generate_markdown: bool = False


def _parse_float(text):
    if text != text.strip() or "_" in text:
        raise AnalysisError(f"`{text}` 不是有效的浮点数")
    try:
        return float(text)
    except ValueError:
        raise AnalysisError(f"`{text}` 不是有效的浮点数") from None


def _parse_usize(text):
    if not _USIZE_RE.fullmatch(text):
        raise AnalysisError(f"`{text}` 不是有效的非负整数")
    return int(text)


def validate_positive_float(text):
    """Parse a float that must be greater than zero."""
    value = _parse_float(text)
    if value > 0.0:
        return value
    raise AnalysisError(f"值必须大于0, 但得到 {_display_float(value)}")


def validate_burst_factor(text):
    """Parse a burst multiplier that must be greater than one."""
    value = _parse_float(text)
    if value > 1.0:
        return value
    raise AnalysisError(f"突发流量倍数必须大于1, 但得到 {_display_float(value)}")


def validate_disk_type(text):
    """Accept only the known disk types."""
    if text in get_disk_configs():
        return text
    raise AnalysisError(f"不支持的磁盘类型: {text}. 可用选项: sata_hdd, sata_ssd, nvme")


def parse_bool(text):
    """Parse ``true`` or ``false``."""
    if text == "true":
        return True
    if text == "false":
        return False
    raise AnalysisError(f"无效的布尔值: {text}. 可用选项: true, false")


def _arg_type(func, name):
    def convert(text):
        try:
            return func(text)
        except AnalysisError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None

    convert.__name__ = name
    return convert


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="jvmsizer",
        description="文件上传下载系统性能与安全性分析工具",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-r", "--total-ram", dest="total_ram", default=32.0,
        type=_arg_type(validate_positive_float, "float"),
        help="服务器总内存(GB) [必须大于0]",
    )
    parser.add_argument(
        "-c", "--cpu-cores", dest="cpu_cores", default=16,
        type=_arg_type(_parse_usize, "integer"), help="CPU核心数",
    )
    parser.add_argument(
        "-w", "--net-gbps", dest="net_gbps", default=1.0,
        type=_arg_type(_parse_float, "float"), help="网络带宽(Gbps)",
    )
    parser.add_argument(
        "-d", "--disk-type", dest="disk_type", default="sata_ssd",
        type=_arg_type(validate_disk_type, "disk type"),
        help="磁盘类型 [sata_hdd, sata_ssd, nvme]",
    )
    parser.add_argument(
        "-f", "--avg-file-size", dest="avg_file_size", default=10.0,
        type=_arg_type(_parse_float, "float"), help="平均文件大小(MB)",
    )
    parser.add_argument(
        "-n", "--expected-connections", dest="expected_connections", default=1000,
        type=_arg_type(_parse_usize, "integer"), help="预期最大并发连接数",
    )
    parser.add_argument(
        "-b", "--burst-factor", dest="burst_factor", default=3.0,
        type=_arg_type(validate_burst_factor, "float"),
        help="最大突发流量倍数 [必须大于1]",
    )
    parser.add_argument(
        "-p", "--enable-memory-guard", dest="enable_memory_guard",
        nargs="?", const=True, default=True,
        type=_arg_type(parse_bool, "boolean"),
        help="是否启用内存防护 [true, false]",
    )
    parser.add_argument(
        "-m", "--enable-memory-mapping", dest="enable_memory_mapping",
        nargs="?", const=True, default=False,
        type=_arg_type(parse_bool, "boolean"),
        help="是否启用内存映射文件优化(大文件场景) [true, false]",
    )
    parser.add_argument(
        "-l", "--complexity", dest="complexity", default="medium",
        help="应用复杂度级别 [low, medium, high]",
    )
    parser.add_argument(
        "-g", "--generate-markdown", dest="generate_markdown",
        action="store_true", help="是否生成markdown报告",
    )
    return parser


def parse_args(argv=None):
    """Parse ``argv`` (or the process arguments) into an :class:`Args`."""
    namespace = build_parser().parse_args(argv)
    return Args(**vars(namespace))
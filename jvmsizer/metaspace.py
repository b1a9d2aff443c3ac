"""Metaspace sizing model driven by complexity, connections and file size."""

from __future__ import annotations

import math

BASE_METASPACE = 256.0
CONNECTION_FACTOR = 30.0
FILE_SIZE_FACTOR = 20.0
THREAD_FACTOR = 1.0
MIN_METASPACE = 128.0
MAX_METASPACE = 3072.0
CONNECTIONS_BASE = 1000.0


def _round_half_away(value):
    return math.copysign(math.floor(abs(value) + 0.5), value)


def complexity_factor(args):
    """Multiplier for the base metaspace by application complexity."""
    if args.complexity == "high":
        return 1.5
    if args.complexity == "low":
        return 0.8
    if args.avg_file_size > 50.0:
        return 1.3
    return 1.0


def safety_margin(args):
    """Safety multiplier that grows with file size."""
    if args.avg_file_size > 100.0:
        return 1.5
    if args.avg_file_size > 50.0:
        return 1.4
    return 1.3


def base_metaspace(args):
    """Base metaspace in MB, including one MB per I/O thread (two per core)."""
    threads = float(args.cpu_cores * 2)
    return BASE_METASPACE * complexity_factor(args) + threads * THREAD_FACTOR


def connection_factor(args):
    """Extra metaspace in MB for each full thousand connections."""
    return math.floor(args.expected_connections / CONNECTIONS_BASE) * CONNECTION_FACTOR


def file_size_factor(args):
    """Extra metaspace in MB that grows sub-linearly with file size."""
    size = args.avg_file_size
    if size <= 10.0:
        return 20.0
    if size <= 100.0:
        return _round_half_away(math.log(size) * 10.0)
    return math.floor(size / 100.0) * FILE_SIZE_FACTOR


def calculate_metaspace(args):
    """Recommended metaspace size in MB, kept within the model's bounds."""
    raw_total = base_metaspace(args) + connection_factor(args) + file_size_factor(args)
    margin = safety_margin(args)
    adjusted = max(raw_total * margin, MIN_METASPACE * margin)
    return int(math.ceil(min(adjusted, MAX_METASPACE)))
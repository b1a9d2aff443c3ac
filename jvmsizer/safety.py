"""Memory safety analysis, load scenarios and long-term capacity limits."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from jvmsizer.metaspace import calculate_metaspace
from jvmsizer.performance import _as_usize
from jvmsizer.style import _display_float, style

HEAP_PER_CONN = 384.0 / 1024.0 / 1024.0
METASPACE_PER_CONN = 64.0 / 1024.0
CPU_PER_CONN = 0.0005
NET_PER_CONN = 0.2
DISK_IO_PER_CONN = 0.15
STABILITY_FACTOR = 0.6
SAFE_MEM_USAGE = 0.7
JVM_NATIVE_RATIO = 0.15

_DISK_IOPS = {"nvme": 500_000.0, "sata_ssd": 100_000.0}
_HDD_IOPS = 200.0


def _fdiv(numerator, denominator):
    """Divide with IEEE semantics: zero denominators give inf or NaN."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _fmin(a, b):
    """Minimum that ignores a NaN operand."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return min(a, b)


def _fmax(a, b):
    """Maximum that ignores a NaN operand."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


@dataclass
class Scenario:
    """Memory use of one simulated load situation."""

    name: str
    connections: int
    file_size: float
    heap_usage: float
    direct_mem_usage: float
    status: str


@dataclass
class TheoreticalLimits:
    """Capacity limits for six to twelve months of stable operation."""

    max_connections: int
    max_throughput: float
    estimated_uptime: str
    limiting_factor: str
    burst_capacity: int
    resource_breakdown: str


@dataclass
class SafetyAnalysis:
    """Safety coefficients, risk level, scenarios and recommendations."""

    heap_safety: float
    direct_mem_safety: float
    risk_level: str
    scenarios: list[Scenario] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    theoretical_limits: TheoreticalLimits | None = None


def direct_mem_per_conn(file_size):
    """Return the (read, write) direct-memory need of one connection in GB."""
    if file_size <= 10.0:
        read_buffer = 128.0
    elif file_size <= 100.0:
        read_buffer = 512.0
    else:
        read_buffer = min(1024.0, file_size * 0.01)
    write_buffer = read_buffer * 1.5
    overhead = 100.0
    return (
        read_buffer / 1024.0 / 1024.0,
        (write_buffer + overhead) / 1024.0 / 1024.0,
    )


def status_label(heap_usage, heap_max, direct_usage, direct_max):
    """Coloured safe / warning / danger label for the given memory use."""
    heap_ratio = _fdiv(heap_usage, heap_max * 0.7)
    direct_ratio = _fdiv(direct_usage, direct_max * 0.7)
    if heap_ratio < 0.6 and direct_ratio < 0.6:
        return style("✅ 安全", "green")
    if heap_ratio < 0.8 or direct_ratio < 0.8:
        return style("⚠️ 警告", "yellow")
    return style("🔥 危险", "red")


def _percent(numerator, denominator):
    return _fmin(_fdiv(numerator, denominator) * 100.0, 100.0)


def calculate_theoretical_limits(
    args, direct_mem_gb, heap_mem_gb, normal_direct_usage, normal_heap_usage
):
    """Work out the sustainable connection limit and its bottleneck."""
    connections = args.expected_connections
    burst_connections = _as_usize(connections * args.burst_factor)

    read_buffer, write_buffer = direct_mem_per_conn(args.avg_file_size)
    per_conn = read_buffer + write_buffer

    if args.enable_memory_mapping and args.avg_file_size > 100.0:
        max_by_direct = _as_usize(
            (direct_mem_gb * SAFE_MEM_USAGE) / (per_conn * 0.7) * STABILITY_FACTOR
        )
    else:
        max_by_direct = _as_usize(
            (direct_mem_gb * SAFE_MEM_USAGE) / per_conn * STABILITY_FACTOR
        )
    max_by_heap = _as_usize((heap_mem_gb * SAFE_MEM_USAGE) / HEAP_PER_CONN * STABILITY_FACTOR)

    metaspace_size_mb = float(calculate_metaspace(args))
    max_by_metaspace = _as_usize(
        _fdiv(metaspace_size_mb * 1024.0 * 1024.0, METASPACE_PER_CONN * connections)
        * STABILITY_FACTOR
    )
    max_by_cpu = _as_usize((args.cpu_cores / CPU_PER_CONN) * STABILITY_FACTOR)
    max_by_net = _as_usize((args.net_gbps * 1000.0 / NET_PER_CONN) * STABILITY_FACTOR)

    disk_iops = _DISK_IOPS.get(args.disk_type, _HDD_IOPS)
    max_by_disk = _as_usize((disk_iops / DISK_IO_PER_CONN) * STABILITY_FACTOR)

    max_connections = min(
        max_by_direct,
        max_by_heap,
        max_by_metaspace,
        max_by_cpu,
        max_by_net,
        max_by_disk,
        burst_connections,
    )

    sustainable_throughput = (args.cpu_cores * STABILITY_FACTOR) / 0.15

    if max_connections >= burst_connections * 2:
        uptime = "12个月+ (弹性充足)"
    elif max_connections >= burst_connections:
        uptime = "6-12个月 (满足需求)"
    else:
        uptime = "<6个月 (需扩容)"

    bottlenecks = [
        (max_by_direct, "直接内存"),
        (max_by_heap, "堆内存"),
        (max_by_cpu, "CPU资源"),
        (max_by_net, "网络带宽"),
        (max_by_disk, "磁盘IO"),
    ]
    limiting_factor = next(
        (label for limit, label in bottlenecks if limit == max_connections),
        "突发流量需求",
    )

    heap_pct = _percent(normal_heap_usage, heap_mem_gb * SAFE_MEM_USAGE)
    direct_pct = _percent(normal_direct_usage, direct_mem_gb * SAFE_MEM_USAGE)
    meta_pct = _fmin(
        _fdiv(connections * METASPACE_PER_CONN * 100.0, metaspace_size_mb * 1024.0 * 1024.0),
        100.0,
    )
    cpu_pct = _percent(float(connections), float(max_by_cpu))
    net_pct = _percent(float(connections), float(max_by_net))
    disk_pct = _percent(float(connections), float(max_by_disk))
    resource_breakdown = (
        f"    * JVM内存: {heap_pct:.0f}% (堆), {direct_pct:.0f}% (直接), "
        f"{meta_pct:.0f}% (元空间)\n"
        f"    * CPU: {cpu_pct:.0f}%\n"
        f"    * 网络: {net_pct:.0f}%\n"
        f"    * 磁盘IO: {disk_pct:.0f}%"
    )

    return TheoreticalLimits(
        max_connections=max_connections,
        max_throughput=sustainable_throughput,
        estimated_uptime=uptime,
        limiting_factor=limiting_factor,
        burst_capacity=_as_usize(max_connections / STABILITY_FACTOR),
        resource_breakdown=resource_breakdown,
    )


def _risk_level(heap_safety, direct_mem_safety):
    if heap_safety > 0.4 and direct_mem_safety > 0.4:
        return "低风险"
    if heap_safety > 0.2 or direct_mem_safety > 0.2:
        return "中风险"
    return "高风险"


def calculate_safety(args, direct_mem_gb, heap_mem_gb):
    """Analyse memory safety of the configuration under several load scenarios."""
    connections = args.expected_connections
    read_per_conn, write_per_conn = direct_mem_per_conn(args.avg_file_size)
    per_conn = read_per_conn + write_per_conn

    mem_map_reduction = (
        0.5 if args.avg_file_size > 100.0 and args.enable_memory_mapping else 1.0
    )
    normal_direct = connections * per_conn * mem_map_reduction
    normal_heap = connections * HEAP_PER_CONN

    burst_connections = _as_usize(connections * args.burst_factor)
    burst_direct = burst_connections * per_conn
    burst_heap = burst_connections * HEAP_PER_CONN

    available_heap = heap_mem_gb * (1.0 - JVM_NATIVE_RATIO)
    available_direct = direct_mem_gb * (1.0 - JVM_NATIVE_RATIO)
    heap_safety = 1.0 - _fmin(_fdiv(normal_heap, available_heap * 0.7), 1.0)
    direct_mem_safety = 1.0 - _fmin(_fdiv(normal_direct, available_direct * 0.7), 1.0)

    def scenario(name, conns, file_size, heap_usage, direct_usage):
        return Scenario(
            name=name,
            connections=conns,
            file_size=file_size,
            heap_usage=heap_usage,
            direct_mem_usage=direct_usage,
            status=status_label(heap_usage, heap_mem_gb, direct_usage, direct_mem_gb),
        )

    size = args.avg_file_size
    scenarios = [
        scenario("长期运行(24h)", connections, size, normal_heap * 1.5, normal_direct * 1.2),
        scenario("正常负载", connections, size, normal_heap, normal_direct),
        scenario(
            f"突发流量 ({_display_float(args.burst_factor)}x)",
            burst_connections,
            size,
            burst_heap,
            burst_direct,
        ),
        scenario(
            "大文件处理",
            _as_usize(connections * 0.5),
            size * 5.0,
            normal_heap * 0.5,
            normal_direct * 0.5,
        ),
        scenario(
            "小文件高并发",
            connections * 3,
            size / 10.0,
            normal_heap * 1.5,
            normal_direct * 1.5,
        ),
    ]

    recommendations = []
    if direct_mem_safety < 0.3:
        recommendations.append(
            f"- 增加直接内存: {direct_mem_gb:.1f}GB -> {direct_mem_gb * 1.3:.1f}GB"
        )
    if heap_safety < 0.3:
        recommendations.append(
            f"- 增加堆内存: {heap_mem_gb:.1f}GB -> {heap_mem_gb * 1.2:.1f}GB"
        )
    if args.enable_memory_guard:
        recommendations.append("- 启用内存防护系统: 当内存使用>85%时自动限流")
    if args.avg_file_size > 50.0:
        recommendations.append("- 优化大文件处理: 使用分块上传和内存映射文件")

    heap_growth_rate = normal_heap * 0.05
    oom_hours = _fmax(_fdiv(heap_mem_gb * 0.9 - normal_heap, heap_growth_rate), 0.0)

    recommendations.append(f"- 内存泄漏评估: 当前配置可能在{oom_hours:.1f}小时后发生OOM")
    recommendations.append("- 添加内存监控: 实时监控堆/直接内存的增长率")
    recommendations.append("- 启用GC日志分析: 建议使用Prometheus+Grafana监控")
    recommendations.append("- 启用堆转储: 设置-XX:+HeapDumpOnOutOfMemoryError")
    if oom_hours < 24.0:
        recommendations.append(style("❗ 紧急: 内存泄漏风险高，需要立即优化", "red"))

    limits = calculate_theoretical_limits(
        args, direct_mem_gb, heap_mem_gb, normal_direct, normal_heap
    )

    return SafetyAnalysis(
        heap_safety=heap_safety,
        direct_mem_safety=direct_mem_safety,
        risk_level=_risk_level(heap_safety, direct_mem_safety),
        scenarios=scenarios,
        recommendations=recommendations,
        theoretical_limits=limits,
    )
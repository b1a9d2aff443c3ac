"""Markdown report of the full analysis."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from jvmsizer.jvm import _as_i32
from jvmsizer.safety import _fdiv
from jvmsizer.style import _display_float, strip_ansi, text_bar

DEFAULT_REPORT_PATH = "sa_report.md"

_GC_LINES = {
    "high": ("-XX:+UseZGC  # 低延迟GC，适合高复杂度应用", "-XX:ZCollectionInterval=5  # 每5秒一次ZGC"),
    "low": ("-XX:+UseG1GC  # 平衡型GC", "-XX:MaxGCPauseMillis=200"),
}
_DEFAULT_GC_LINES = ("-XX:+UseShenandoahGC  # 并发GC", "-XX:ShenandoahGCHeuristics=adaptive")

_STATUS_SYMBOLS = (("✅", "✔️"), ("⚠️", "⚠"), ("🔥", "✖️"))


@dataclass
class ReportContext:
    """Everything the markdown report is rendered from."""

    args: object
    direct_mem_gb: float
    heap_mem_gb: float
    metaspace_size_mb: int
    disk_read_speed: float
    disk_write_speed: float
    safety: object
    performance: object


def _ceil_i32(value):
    if math.isfinite(value):
        return _as_i32(math.ceil(value))
    return _as_i32(value)


def _plain_status(status):
    text = strip_ansi(status)
    for old, new in _STATUS_SYMBOLS:
        text = text.replace(old, new)
    return text


def _performance_section(performance):
    lines = ["## 性能分析"]
    for scenario in performance.scenarios:
        lines.append(
            f"### {scenario.name} (平均文件大小: {_display_float(scenario.avg_file_size)}MB)"
        )
        lines.append("\n#### 资源限制分析")
        lines.append("| 资源类型 | 限制因素 | 最大并发量 | QPS |")
        lines.append("|----------|----------|------------|-----|")
        for resource in scenario.resources:
            mark = "✓" if resource.limiting_factor else ""
            qps = "-" if resource.qps is None else str(resource.qps)
            lines.append(f"| {resource.name} | {mark} | {resource.max_connections} | {qps} |")
        final = scenario.final_capacity
        lines.append(f"\n**最终能力:** {final.max_connections}并发 {final.qps or 0} QPS")
        lines.append("\n**关键发现:**")
        lines.extend(f"- {finding}" for finding in scenario.key_findings)
        lines.append("")
    return lines


def _jvm_section(ctx):
    args = ctx.args
    heap = _as_i32(ctx.heap_mem_gb)
    lines = [
        "## JVM配置建议",
        "```ini",
        "# 基础配置",
        f"-Xms{heap}g -Xmx{heap}g",
        f"-XX:MaxDirectMemorySize={_as_i32(ctx.direct_mem_gb)}g",
        f"-XX:MaxMetaspaceSize={ctx.metaspace_size_mb}m",
        "-XX:ReservedCodeCacheSize=256m",
        "",
        "# GC配置",
        *_GC_LINES.get(args.complexity, _DEFAULT_GC_LINES),
        f"-XX:ParallelGCThreads={_ceil_i32(args.cpu_cores * 0.5)}",
        f"-XX:ConcGCThreads={_ceil_i32(args.cpu_cores * 0.25)}",
        "",
        "# 内存优化",
    ]
    if ctx.safety.direct_mem_safety < 0.4:
        lines.append("-Djdk.nio.maxCachedBufferSize=131072  # 降低缓存阈值至128KB")
    else:
        lines.append("-Djdk.nio.maxCachedBufferSize=262144  # 256KB缓存阈值")
    if args.enable_memory_guard:
        lines.append("-Dapp.memory.guard.enabled=true")
        lines.append(f"-Dapp.memory.guard.direct.threshold={ctx.direct_mem_gb * 0.85:.1f}g")
        lines.append(f"-Dapp.memory.guard.heap.threshold={ctx.heap_mem_gb * 0.8:.1f}g")
    lines.append("")

    if args.complexity == "high":
        class_space = _as_i32(max(ctx.metaspace_size_mb * 0.4, 256.0))
        lines += [
            "# 元空间优化",
            "-XX:+UseCompressedClassPointers",
            f"-XX:CompressedClassSpaceSize={class_space}m",
            "-XX:+UnlockExperimentalVMOptions",
            "",
        ]

    lines += [
        "# 监控与诊断",
        "-XX:NativeMemoryTracking=detail",
        "-XX:+PrintGCDetails -XX:+PrintGCDateStamps",
        "-XX:+HeapDumpOnOutOfMemoryError",
        "-XX:HeapDumpPath=/var/log/jvm_dumps",
        "",
    ]

    if args.avg_file_size > 50.0:
        lines += [
            "# 大文件优化",
            "-Djdk.nio.enableFastFileTransfer=true",
            "-Dapp.file.maxChunkSize=2097152  # 2MB分块",
            "-Dapp.file.useDirectIO=true",
            "",
        ]

    lines.append("# JDK版本建议")
    if args.complexity == "high":
        lines.append("- 建议使用JDK 17+ (包含ZGC和元空间优化)")
    else:
        lines.append("- 最低要求: JDK 11")
        lines.append("- 推荐版本: JDK 17+ (更好的性能与内存管理)")
    lines.append("```\n")

    lines += [
        "## 参数兼容性详情",
        "- 基础配置:",
        "  - -Xms/-Xmx: 所有版本支持",
        "  - -XX:MaxDirectMemorySize: JDK 6+ 支持",
        "  - -XX:MaxMetaspaceSize: JDK 8+ 支持 (JDK 7及以下使用-XX:MaxPermSize)",
        "  - -XX:ReservedCodeCacheSize: JDK 6+ 支持",
        "- GC配置:",
        "  - -XX:+UseG1GC: JDK 7u4+ 完全支持",
        "  - -XX:+UseZGC: JDK 11+ 支持 (JDK 15+ 生产可用)",
        "  - -XX:+UseShenandoahGC: JDK 12+ 支持",
        "  - -XX:MaxGCPauseMillis: JDK 6u14+ 支持",
        "- 监控配置:",
        "  - -XX:NativeMemoryTracking: JDK 8+ 支持",
        "  - -XX:+HeapDumpOnOutOfMemoryError: JDK 6+ 支持",
    ]
    return lines


def _capacity_section(ctx):
    args = ctx.args
    limits = ctx.safety.theoretical_limits
    target_conn = args.expected_connections
    max_conn = limits.max_connections

    if target_conn <= max_conn:
        return [
            "## 容量评估",
            "- 当前配置满足目标连接数要求",
            f"- 理论最大连接数: {max_conn}",
            f"- 稳定运行预期: {limits.estimated_uptime}",
        ]

    scale_factor = _fdiv(float(target_conn), float(max_conn))
    ram_needed = _ceil_i32(args.total_ram * scale_factor)
    lines = [
        "## 服务器扩容建议",
        "\n❗ **警告**: 当前配置无法满足目标连接数要求",
        "⚠️ **注意**: 目标连接数超过理论最大值",
        "\n- **当前配置**:",
        f"  - 当前配置理论最大连接数: {max_conn}",
        f"  - 目标连接数: {target_conn}",
        f"  - 稳定运行预期: {limits.estimated_uptime}",
        f"  - 主要瓶颈资源: {limits.limiting_factor}",
        "\n- **扩容建议**:",
        f"  - 需要额外 {(scale_factor - 1.0) * 100.0:.0f}% 资源以达到目标连接数",
        f"  - 建议服务器内存至少 {ram_needed}GB (当前 {_display_float(args.total_ram)}GB)",
    ]

    suggested_cores = _ceil_i32(target_conn / 1000.0)
    if suggested_cores > args.cpu_cores:
        lines.append(f"  - 建议CPU核心数 {suggested_cores} (当前 {args.cpu_cores})")

    suggested_bandwidth = _ceil_i32(target_conn * 0.2 / 1000.0)
    if suggested_bandwidth > _as_i32(args.net_gbps):
        lines.append(
            f"  - 建议网络带宽 {suggested_bandwidth}Gbps (当前 {_display_float(args.net_gbps)}Gbps)"
        )

    if args.disk_type == "sata_hdd":
        lines.append("  - 必须升级到SSD")
    elif args.disk_type == "sata_ssd" and target_conn > 50_000:
        lines.append("  - 考虑升级到NVMe SSD")
    return lines


def render_markdown_report(ctx, now=None):
    """Render the whole analysis as markdown text, stamped with ``now``."""
    if now is None:
        now = datetime.now()
    args = ctx.args
    safety = ctx.safety
    limits = safety.theoretical_limits
    test_config = ctx.performance.test_config

    lines = [
        "# 文件传输系统分析报告",
        f"> 生成时间: {now.strftime('%Y-%m-%d %H:%M:%S')}\n",
        "## 系统配置",
        "| 配置项 | 值 |",
        "|--------|----|",
        f"| 服务器内存 | {args.total_ram:.1f} GB |",
        f"| CPU核心数 | {args.cpu_cores} |",
        f"| 网络带宽 | {args.net_gbps:.1f} Gbps |",
        f"| 磁盘类型 | {args.disk_type} (读: {ctx.disk_read_speed:.0f} MB/s, "
        f"写: {ctx.disk_write_speed:.0f} MB/s) |",
        f"| 平均文件大小 | {args.avg_file_size:.1f} MB |",
        f"| 预期并发连接 | {args.expected_connections} |",
        f"| 突发流量倍数 | {_display_float(args.burst_factor)}x |",
        f"| 应用复杂度 | {args.complexity} |\n",
        "## 内存配置建议",
        f"- 推荐堆内存: {ctx.heap_mem_gb:.1f} GB",
        f"- 推荐直接内存: {ctx.direct_mem_gb:.1f} GB",
        f"- 元空间大小: {ctx.metaspace_size_mb} MB\n",
        "## 系统极限评估",
        "### 容量评估",
        f"- 理论最大连接数: {limits.max_connections}",
        f"- 突发容量: {limits.burst_capacity} 连接",
        f"- 推荐吞吐量: {limits.max_throughput:.1f} MB/s",
        f"- 稳定运行预期: {limits.estimated_uptime}\n",
        "### 瓶颈分析",
        f"- 主要限制因素: {limits.limiting_factor}",
        "```",
        limits.resource_breakdown,
        "```\n",
        "## 负载场景模拟",
        "| 场景 | 连接数 | 文件大小(MB) | 堆内存(GB) | 直接内存(GB) | 状态 |",
        "|------|--------|--------------|------------|--------------|------|",
    ]
    for scenario in safety.scenarios:
        lines.append(
            f"| {scenario.name} | {scenario.connections} | {scenario.file_size:.1f} | "
            f"{scenario.heap_usage:.2f} | {scenario.direct_mem_usage:.2f} | "
            f"{_plain_status(scenario.status)} |"
        )

    lines += [
        "\n**状态说明:**",
        "- ✔️ 安全: <70% 内存使用",
        "- ⚠ 警告: 70-85% 内存使用",
        "- ✖️ 危险: >85% 内存使用\n",
        "## 内存安全分析",
        f"- 整体风险等级: **{safety.risk_level}**",
        f"- 堆内存安全系数: {safety.heap_safety * 100.0:.0f}%",
        f"- 直接内存安全系数: {safety.direct_mem_safety * 100.0:.0f}%",
        "\n### 内存安全系数图表",
        "```",
        f"堆内存安全: {text_bar(safety.heap_safety)}",
        f"直接内存安全: {text_bar(safety.direct_mem_safety)}",
        "```\n",
    ]

    lines += _jvm_section(ctx)
    lines += _performance_section(ctx.performance)
    lines += _capacity_section(ctx)
    lines += _performance_section(ctx.performance)

    lines += [
        "## 性能测试建议",
        f"- 线程数: {test_config.threads}",
        f"- 测试时长: {test_config.duration}",
        f"- 加压时间: {test_config.ramp_up}",
        f"- 目标吞吐量: {test_config.throughput_goal:.1f} QPS",
        "\n### 测试脚本示例",
    ]
    for number, script in enumerate(test_config.script_examples, start=1):
        lines += [f"#### 示例 {number}:", "```bash", script, "```"]

    if safety.recommendations:
        lines.append("\n## 优化建议")
        lines.extend(safety.recommendations)

    return "\n".join(lines) + "\n"


def generate_markdown_report(ctx, path=DEFAULT_REPORT_PATH):
    """Write the markdown report to ``path`` and return the path written."""
    target = Path(path)
    target.write_text(render_markdown_report(ctx), encoding="utf-8")
    return target
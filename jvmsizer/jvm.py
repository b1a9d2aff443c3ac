"""Final JVM option recommendations printed from the combined analysis."""

from __future__ import annotations

import math

from jvmsizer.safety import _fdiv
from jvmsizer.style import _display_float, banner, style

_I32_MAX = 2**31 - 1
_I32_MIN = -(2**31)

_COMPAT_MATRIX = [
    ("-Xms/-Xmx", "JDK 1.0", "JDK 8+"),
    ("-XX:MaxDirectMemorySize", "JDK 1.4", "JDK 11+"),
    ("-XX:MaxMetaspaceSize", "JDK 8", "JDK 11+"),
    ("-XX:+UseG1GC", "JDK 7u4", "JDK 11+"),
    ("-XX:+UseZGC", "JDK 11", "JDK 17+"),
    ("-XX:+UseShenandoahGC", "JDK 12", "JDK 17+"),
    ("-XX:NativeMemoryTracking", "JDK 8", "JDK 11+"),
    ("-Djdk.nio.enableFastFileTransfer", "JDK 9", "JDK 17+"),
    ("-XX:+UnlockExperimentalVMOptions", "JDK 7", "JDK 11+"),
    ("-XX:+UseCompressedClassPointers", "JDK 6", "JDK 11+"),
]

_COMPAT_DETAILS = [
    "  - 基础配置:",
    "    - -Xms/-Xmx: 所有版本支持",
    "    - -XX:MaxDirectMemorySize: JDK 6+ 支持",
    "    - -XX:MaxMetaspaceSize: JDK 8+ 支持 (JDK 7及以下使用-XX:MaxPermSize)",
    "    - -XX:ReservedCodeCacheSize: JDK 6+ 支持",
    "  - 内存防护增强:",
    "    - -XX:+UseG1GC: JDK 7u4+ 完全支持",
    "    - -XX:MaxGCPauseMillis: JDK 6u14+ 支持",
    "    - -XX:ParallelGCThreads/-XX:ConcGCThreads: JDK 6+ 支持",
    "    - -Djdk.nio.maxCachedBufferSize: JDK 7+ 支持",
    "  - 元空间优化:",
    "    - -XX:+UseCompressedClassPointers: JDK 6+ 支持64位系统",
    "    - -XX:CompressedClassSpaceSize: JDK 8+ 支持",
    "    - -XX:+UnlockExperimentalVMOptions: JDK 7+ 支持",
    "    - -XX:+UseZGC: JDK 11+ 支持 (JDK 15+ 生产可用)",
    "  - 监控配置:",
    "    - -XX:NativeMemoryTracking: JDK 8+ 支持",
    "    - -XX:+PrintGCDetails: JDK 6+ 支持 (JDK 9+ 使用-Xlog:gc*)",
    "    - -XX:+HeapDumpOnOutOfMemoryError: JDK 6+ 支持",
    "  - 大文件优化:",
    "    - -Djdk.nio.enableFastFileTransfer: JDK 9+ 支持",
    "    - DirectIO相关参数: 需要特定JDK实现或第三方库",
]

_GC_OPTIONS = {
    "high": ("-XX:+UseZGC  # 低延迟GC，适合高复杂度应用", "-XX:ZCollectionInterval=5  # 每5秒一次ZGC"),
    "low": ("-XX:+UseG1GC  # 平衡型GC", "-XX:MaxGCPauseMillis=200"),
}
_DEFAULT_GC = ("-XX:+UseShenandoahGC  # 并发GC", "-XX:ShenandoahGCHeuristics=adaptive")

_MONITORING = [
    "-XX:NativeMemoryTracking=detail",
    "-XX:+PrintGCDetails -XX:+PrintGCDateStamps",
    "-XX:+HeapDumpOnOutOfMemoryError",
    "-XX:HeapDumpPath=/var/log/jvm_dumps",
    "-XX:+PrintClassHistogramBeforeFullGC",
    "-XX:+PrintClassHistogramAfterFullGC",
    "-XX:+PrintReferenceGC",
    "-XX:+PrintTenuringDistribution",
    "-XX:+UnlockDiagnosticVMOptions",
    "-XX:+LogCompilation",
    "-XX:LogFile=/var/log/jvm_compilation.log",
]


def _as_i32(value):
    """Convert like a saturating float-to-i32 cast: truncate, clamp, NaN to zero."""
    if value != value:
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return int(value)


def _heading(text):
    print("\n" + style(text, bold=True))


def print_jvm_recommendations(
    args, direct_mem_gb, heap_mem_gb, metaspace_size_mb, safety, performance
):
    """Print the capacity verdict, JDK compatibility and recommended JVM options."""
    limits = safety.theoretical_limits
    uptime = limits.estimated_uptime
    meets_requirements = "6-12个月" in uptime or "12个月+" in uptime

    max_conn = limits.max_connections
    target_conn = args.expected_connections
    needs_scaling = target_conn > max_conn

    print(banner("JVM配置建议", "green"))
    _heading("  # 系统能力评估")
    print(f"  - 当前配置理论最大连接数: {max_conn}")
    print(f"  - 目标连接数: {target_conn}")
    print(f"  - 稳定运行预期: {uptime}")
    print(f"  - 主要瓶颈资源: {limits.limiting_factor}")

    if not meets_requirements:
        print("\n" + style("  ❗ 警告: 当前配置无法满足6个月稳定运行要求", "red", bold=True))

    if needs_scaling:
        print("\n" + style("  ⚠️ 注意: 目标连接数超过理论最大值", "yellow", bold=True))
        print("  - 需要调整资源配置或优化应用")
        print(f"  - 理论可达到连接数: {max_conn}")

    _heading("  # 最终JVM配置建议")
    print(banner("JVM配置建议", "green"))

    _heading("  ## JDK版本兼容矩阵")
    print(
        f"  {style(format('参数', '<45'), 'cyan')} {style(format('最低JDK', '<15'), 'cyan')} "
        f"{style(format('生产推荐', '<15'), 'cyan')}"
    )
    print("  " + "-" * 80)
    for option, minimum, recommended in _COMPAT_MATRIX:
        print(f"  {option:<45} {minimum:<15} {recommended:<15}")

    _heading("  ## JDK版本建议")
    if args.complexity == "high":
        print("  - 建议使用JDK 17+ (包含ZGC和元空间优化)")
    else:
        print("  - 最低要求: JDK 11")
        print("  - 推荐版本: JDK 17+ (更好的性能与内存管理)")

    _heading("  ## 参数兼容性详情")
    for line in _COMPAT_DETAILS:
        print(line)

    scale_factor = _fdiv(float(target_conn), float(max_conn))
    if needs_scaling:
        new_heap = max(heap_mem_gb * scale_factor, heap_mem_gb * 1.2)
        new_direct = max(direct_mem_gb * scale_factor, direct_mem_gb * 1.3)
        ram_needed = _as_i32(math.ceil((new_heap + new_direct) / 0.85)) if math.isfinite(
            new_heap + new_direct
        ) else _as_i32((new_heap + new_direct) / 0.85)
        final_heap = _as_i32(new_heap)
        final_direct = _as_i32(new_direct)
        basis = "已按目标调整"
    else:
        ram_needed = None
        final_heap = _as_i32(heap_mem_gb)
        final_direct = _as_i32(direct_mem_gb)
        basis = "基于当前负载"

    print(style("  ## 基础配置", bold=True))
    print(f"  -Xms{final_heap}g -Xmx{final_heap}g  # {basis}")
    print(f"  -XX:MaxDirectMemorySize={final_direct}g  # {basis}")
    capped_direct = min(final_direct, _as_i32(args.total_ram) - 2)
    print(f"  -XX:MaxDirectMemorySize={capped_direct}g  # 必须显式设置且小于物理内存")
    print(f"  -XX:MaxMetaspaceSize={metaspace_size_mb}m  # 动态计算值")
    print("  -XX:ReservedCodeCacheSize=256m  # 固定值")

    _heading("  ## 容量说明")
    print(f"  - 配置支持最大连接数: {max_conn}")
    if needs_scaling:
        gap = _as_i32((scale_factor - 1.0) * 100.0)
        print(f"  - {style('资源缺口', 'red')}: 需要额外 {gap}% 资源以达到目标连接数")
        if ram_needed is not None:
            print(
                f"  - {style('内存扩容建议', 'yellow')}: 建议服务器内存至少 "
                f"{ram_needed}GB (当前 {_as_i32(args.total_ram)}GB)"
            )
            suggested_cores = _as_i32(math.ceil(target_conn / 1000.0))
            if suggested_cores > args.cpu_cores:
                print(
                    f"  - {style('CPU扩容建议', 'yellow')}: 建议CPU核心数 "
                    f"{suggested_cores} (当前 {args.cpu_cores})"
                )
            suggested_bandwidth = _as_i32(math.ceil(target_conn * 0.2 / 1000.0))
            if suggested_bandwidth > _as_i32(args.net_gbps):
                print(
                    f"  - {style('网络扩容建议', 'yellow')}: 建议网络带宽 "
                    f"{suggested_bandwidth}Gbps (当前 {_display_float(args.net_gbps)}Gbps)"
                )

    _heading("  # 内存防护增强")
    for line in _GC_OPTIONS.get(args.complexity, _DEFAULT_GC):
        print(f"  {line}")
    print(f"  -XX:ParallelGCThreads={_as_i32(math.ceil(args.cpu_cores * 0.5))}")
    print(f"  -XX:ConcGCThreads={_as_i32(math.ceil(args.cpu_cores * 0.25))}")

    if safety.direct_mem_safety < 0.4:
        print("  -Djdk.nio.maxCachedBufferSize=131072  # 降低缓存阈值至128KB")
    else:
        print("  -Djdk.nio.maxCachedBufferSize=262144  # 256KB缓存阈值")

    if args.enable_memory_guard:
        print("  -Dapp.memory.guard.enabled=true")
        print(f"  -Dapp.memory.guard.direct.threshold={direct_mem_gb * 0.85:.1f}g")
        print(f"  -Dapp.memory.guard.heap.threshold={heap_mem_gb * 0.8:.1f}g")

    if args.complexity == "high":
        _heading("  # 元空间优化（高复杂度应用）")
        print("  -XX:+UseCompressedClassPointers")
        class_space = _as_i32(max(metaspace_size_mb * 0.4, 256.0))
        print(f"  -XX:CompressedClassSpaceSize={class_space}m")
        print("  -XX:+UnlockExperimentalVMOptions")
        print("  -XX:+UseZGC  # 可选：针对大堆内存使用ZGC")

    _heading("  # 监控与诊断")
    for line in _MONITORING:
        print(f"  {line}")

    if args.avg_file_size > 50.0:
        _heading("  # 大文件优化")
        print("  -Djdk.nio.enableFastFileTransfer=true")
        print("  -Dapp.file.maxChunkSize=2097152  # 2MB分块")
        print("  -Dapp.file.useDirectIO=true")

    _heading("  # 启动命令示例")
    heap_gb = _as_i32(heap_mem_gb)
    print("  java \\")
    print(f"    -Xms{heap_gb}g -Xmx{heap_gb}g \\")
    print(f"    -XX:MaxDirectMemorySize={_as_i32(direct_mem_gb)}g \\")
    print(f"    -XX:MaxMetaspaceSize={metaspace_size_mb}m \\")
    print("    -XX:ReservedCodeCacheSize=256m \\")
    print("    -jar your-application.jar")
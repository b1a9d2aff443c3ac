from dataclasses import replace

import pytest

from jvmsizer.args import Args
from jvmsizer.config import get_disk_config
from jvmsizer.jvm import print_jvm_recommendations
from jvmsizer.metaspace import calculate_metaspace
from jvmsizer.performance import calculate_performance
from jvmsizer.safety import calculate_safety
from jvmsizer.style import strip_ansi


def _analyse(args, direct=4.0, heap=12.0):
    safety = calculate_safety(args, direct, heap)
    performance = calculate_performance(args, get_disk_config(args.disk_type), direct, heap)
    return safety, performance


def _run(capsys, args, direct=4.0, heap=12.0, safety=None):
    computed, performance = _analyse(args, direct, heap)
    safety = computed if safety is None else safety
    metaspace = calculate_metaspace(args)
    print_jvm_recommendations(args, direct, heap, metaspace, safety, performance)
    return strip_ansi(capsys.readouterr().out), safety, metaspace


def test_without_scaling(capsys):
    args = Args()
    out, safety, metaspace = _run(capsys, args)
    assert safety.theoretical_limits.max_connections >= args.expected_connections
    assert "-Xms12g -Xmx12g  # 基于当前负载" in out
    assert "-XX:MaxDirectMemorySize=4g  # 基于当前负载" in out
    assert f"-XX:MaxMetaspaceSize={metaspace}m  # 动态计算值" in out
    assert "资源缺口" not in out
    assert "目标连接数超过理论最大值" not in out
    assert "❗ 警告" not in out


def test_with_scaling(capsys):
    args = Args(expected_connections=1_000_000)
    out, safety, _ = _run(capsys, args)
    assert safety.theoretical_limits.max_connections < args.expected_connections
    assert "⚠️ 注意: 目标连接数超过理论最大值" in out
    assert "需要调整资源配置或优化应用" in out
    assert "# 已按目标调整" in out
    assert "资源缺口: 需要额外" in out
    assert "建议服务器内存至少" in out
    assert "建议CPU核心数" in out
    assert "建议网络带宽" in out


def test_zero_capacity_does_not_fail(capsys):
    args = Args()
    safety, _ = _analyse(args)
    broken = replace(
        safety,
        theoretical_limits=replace(
            safety.theoretical_limits, max_connections=0, estimated_uptime="<6个月 (需扩容)"
        ),
    )
    out, _, _ = _run(capsys, args, safety=broken)
    assert "资源缺口" in out
    assert "❗ 警告: 当前配置无法满足6个月稳定运行要求" in out


@pytest.mark.parametrize(
    "complexity, expected, absent",
    [
        ("high", "-XX:+UseZGC  # 低延迟GC，适合高复杂度应用", "-XX:+UseG1GC  # 平衡型GC"),
        ("low", "-XX:+UseG1GC  # 平衡型GC", "-XX:+UseShenandoahGC  # 并发GC"),
        ("medium", "-XX:+UseShenandoahGC  # 并发GC", "-XX:ZCollectionInterval=5"),
    ],
)
def test_gc_choice_by_complexity(capsys, complexity, expected, absent):
    out, _, _ = _run(capsys, Args(complexity=complexity))
    assert expected in out
    assert absent not in out
    assert ("# 元空间优化（高复杂度应用）" in out) == (complexity == "high")


def test_memory_guard_toggle(capsys):
    out_on, _, _ = _run(capsys, Args(enable_memory_guard=True))
    out_off, _, _ = _run(capsys, Args(enable_memory_guard=False))
    assert "-Dapp.memory.guard.enabled=true" in out_on
    assert "-Dapp.memory.guard.enabled=true" not in out_off


def test_large_file_section(capsys):
    large, _, _ = _run(capsys, Args(avg_file_size=60.0))
    small, _, _ = _run(capsys, Args(avg_file_size=10.0))
    assert "-Dapp.file.maxChunkSize=2097152  # 2MB分块" in large
    assert "# 大文件优化" not in small


def test_direct_memory_capped_by_physical_ram(capsys):
    out, _, _ = _run(capsys, Args(total_ram=2.0), direct=1.0, heap=4.0)
    assert "-XX:MaxDirectMemorySize=0g  # 必须显式设置且小于物理内存" in out


def test_compatibility_matrix(capsys):
    out, _, _ = _run(capsys, Args())
    assert "  " + "-" * 80 in out
    row = next(l for l in out.splitlines() if l.startswith("  -XX:+UseShenandoahGC "))
    assert row.split() == ["-XX:+UseShenandoahGC", "JDK", "12", "JDK", "17+"]
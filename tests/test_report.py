from datetime import datetime

import pytest

from jvmsizer.args import Args
from jvmsizer.config import get_disk_config
from jvmsizer.metaspace import calculate_metaspace
from jvmsizer.performance import calculate_performance
from jvmsizer.report import ReportContext, generate_markdown_report, render_markdown_report
from jvmsizer.safety import calculate_safety

NOW = datetime(2024, 1, 2, 3, 4, 5)


def make_ctx(**overrides):
    args = Args(**overrides)
    disk = get_disk_config(args.disk_type)
    direct = max(args.total_ram * 0.08, 1.0)
    heap = max(args.total_ram * 0.35, 4.0)
    return ReportContext(
        args=args,
        direct_mem_gb=direct,
        heap_mem_gb=heap,
        metaspace_size_mb=calculate_metaspace(args),
        disk_read_speed=disk.read_speed,
        disk_write_speed=disk.write_speed,
        safety=calculate_safety(args, direct, heap),
        performance=calculate_performance(args, disk, direct, heap),
    )


def test_header_and_timestamp():
    text = render_markdown_report(make_ctx(), NOW)
    lines = text.splitlines()
    assert lines[0] == "# 文件传输系统分析报告"
    assert lines[1] == "> 生成时间: 2024-01-02 03:04:05"


def test_disk_row_uses_profile_speeds():
    text = render_markdown_report(make_ctx(disk_type="nvme"), NOW)
    assert "| 磁盘类型 | nvme (读: 1500 MB/s, 写: 1200 MB/s) |" in text


def test_performance_section_appears_twice():
    text = render_markdown_report(make_ctx(), NOW)
    assert text.count("## 性能分析\n") == 2


def test_scenario_rows_have_no_ansi_codes():
    ctx = make_ctx()
    text = render_markdown_report(ctx, NOW)
    rows = [line for line in text.splitlines() if line.startswith("| ") and "|" in line[2:]]
    for scenario in ctx.safety.scenarios:
        row = next(line for line in rows if line.startswith(f"| {scenario.name} |"))
        assert "\x1b[" not in row
        assert row.split(" | ")[-1].rstrip(" |")[-2:] in ("安全", "警告", "危险")


@pytest.mark.parametrize(
    "complexity, expected",
    [("high", "-XX:+UseZGC"), ("low", "-XX:+UseG1GC"), ("medium", "-XX:+UseShenandoahGC")],
)
def test_gc_choice_follows_complexity(complexity, expected):
    text = render_markdown_report(make_ctx(complexity=complexity), NOW)
    assert expected in text


def test_large_files_add_section():
    assert "# 大文件优化" in render_markdown_report(make_ctx(avg_file_size=60.0), NOW)
    assert "# 大文件优化" not in render_markdown_report(make_ctx(avg_file_size=5.0), NOW)


def test_scaling_advice_when_target_exceeds_limit():
    ctx = make_ctx(expected_connections=1_000_000, disk_type="sata_hdd")
    assert ctx.args.expected_connections > ctx.safety.theoretical_limits.max_connections
    text = render_markdown_report(ctx, NOW)
    assert "## 服务器扩容建议" in text
    assert "  - 必须升级到SSD" in text
    assert "- 当前配置满足目标连接数要求" not in text


def test_capacity_section_when_target_fits():
    ctx = make_ctx(expected_connections=10)
    assert ctx.args.expected_connections <= ctx.safety.theoretical_limits.max_connections
    text = render_markdown_report(ctx, NOW)
    assert "- 当前配置满足目标连接数要求" in text
    assert "## 服务器扩容建议" not in text


def test_recommendations_listed():
    ctx = make_ctx()
    text = render_markdown_report(ctx, NOW)
    assert "\n## 优化建议\n" in text
    assert text.rstrip("\n").endswith(ctx.safety.recommendations[-1])


def test_generate_writes_file(tmp_path):
    ctx = make_ctx()
    path = generate_markdown_report(ctx, tmp_path / "report.md")
    written = path.read_text(encoding="utf-8").splitlines()
    expected = render_markdown_report(ctx, NOW).splitlines()
    assert written[0] == expected[0]
    assert written[2:] == expected[2:]
"""Console rendering of the configuration, limits, scenarios and reports."""

from __future__ import annotations

from jvmsizer.style import BAR_CHAR, RULE_CHAR, RULE_WIDTH, _display_float, banner, style

BAR_WIDTH = 30

_RISK_COLORS = {"低风险": "green", "中风险": "yellow"}


def _cyan(text, spec=""):
    """Pad ``text`` to ``spec`` and colour it cyan (padding sits inside the colour)."""
    return style(format(text, spec), "cyan")


def _bar_fill(value, width):
    if value != value:
        return 0
    return max(0, min(width, int(value * width)))


def safety_bar(label, value):
    """Return one labelled safety bar line with a green fill."""
    fill = _bar_fill(value, BAR_WIDTH)
    empty = BAR_WIDTH - fill
    bar = f"[{style(BAR_CHAR, 'green') * fill}{' ' * empty}] {value * 100:.0f}%"
    return f"  {_cyan(label, '>18')}: {bar}"


def print_configuration(
    args, direct_mem_gb, heap_mem_gb, metaspace_size_mb, disk_read_speed, disk_write_speed
):
    """Print the system configuration and the memory sizing summary."""
    print(banner("系统配置", "cyan"))

    table = [
        ("服务器内存", f"{args.total_ram:.1f} GB"),
        ("CPU核心数", str(args.cpu_cores)),
        ("网络带宽", f"{args.net_gbps:.1f} Gbps"),
        (
            "磁盘类型",
            f"{args.disk_type} (读: {disk_read_speed:.0f} MB/s, 写: {disk_write_speed:.0f} MB/s)",
        ),
        ("平均文件大小", f"{args.avg_file_size:.1f} MB"),
        ("预期并发连接", str(args.expected_connections)),
        ("突发流量倍数", f"{_display_float(args.burst_factor)}x"),
        ("内存防护", "true" if args.enable_memory_guard else "false"),
        ("应用复杂度", args.complexity),
    ]
    for label, value in table:
        print(f"  {_cyan(label, '>20')}: {value}")

    print(f"\n  {_cyan('推荐堆内存', '>20')}: {heap_mem_gb:.1f} GB")
    print(f"  {_cyan('推荐直接内存', '>20')}: {direct_mem_gb:.1f} GB")
    print(f"  {_cyan('元空间', '>20')}: {metaspace_size_mb} MB (动态计算)")


def print_system_limits(safety):
    """Print the long-term capacity assessment and bottleneck analysis."""
    limits = safety.theoretical_limits
    print(banner("系统极限评估(6-12个月稳定标准)", "blue"))

    print(f"\n  {style('容量评估', 'cyan', bold=True)}:")
    print(f"    - {_cyan('理论最大连接数')}: {limits.max_connections} 连接")
    print(f"    - {_cyan('突发容量')}: {limits.burst_capacity} 连接")
    print(f"    - {_cyan('推荐吞吐量')}: {limits.max_throughput:.1f} MB/s")
    print(f"    - {_cyan('稳定运行预期')}: {limits.estimated_uptime}")

    print(f"\n  {style('瓶颈分析', 'cyan', bold=True)}:")
    print(f"    - {_cyan('主要限制因素')}: {limits.limiting_factor}")
    print(f"    - {_cyan('资源利用率')}: \n{limits.resource_breakdown}")


def print_scenarios(safety):
    """Print the simulated load scenarios as a table with a status legend."""
    head = style(RULE_CHAR, "magenta", bold=True, reverse=True) + style(
        " 负载场景模拟 ", "magenta", bold=True, reverse=True
    )
    print(f"\n{head}")
    print(style(RULE_CHAR, "blue", bold=True) * RULE_WIDTH)

    print(
        f"  {_cyan('场景', '<18')} {_cyan('连接数', '<12')} {_cyan('文件大小', '<12')} "
        f"{_cyan('堆内存', '<12')} {_cyan('直接内存', '<12')} {_cyan('状态', '<10')}"
    )
    for scenario in safety.scenarios:
        print(
            f"  {scenario.name:<18} {scenario.connections:<12} "
            f"{scenario.file_size:<12.1f} {scenario.heap_usage:<12.2f} "
            f"{scenario.direct_mem_usage:<12.2f} {scenario.status}"
        )

    print(f"\n  {style('✅ 安全', 'green')}: <70% 内存使用")
    print(f"  {style('⚠️ 警告', 'yellow')}: 70-85% 内存使用")
    print(f"  {style('🔥 危险', 'red')}: >85% 内存使用")


def print_safety_report(safety):
    """Print the risk level, safety bars and recommendations."""
    print(banner("内存安全分析", "yellow"))

    print(f"\n  {style('风险评估', 'cyan', bold=True)}:")
    risk_color = _RISK_COLORS.get(safety.risk_level, "red")
    print(
        f"  {_cyan('整体风险等级', '>20')}: "
        f"{style(safety.risk_level, risk_color, bold=True)}"
    )

    print(f"\n  {_cyan('内存安全系数')}(0-1,越高越安全):")
    print(safety_bar("堆内存安全", safety.heap_safety))
    print(safety_bar("直接内存安全", safety.direct_mem_safety))

    if safety.recommendations:
        print(f"\n  {_cyan('优化建议')}:")
        for rec in safety.recommendations:
            print(f"    - {rec}")


def _qps_text(qps):
    return "-" if qps is None else str(qps)


def print_performance_report(report):
    """Print per-scenario resource limits and the load-test suggestions."""
    print(banner("全链路性能分析报告", "magenta"))

    for scenario in report.scenarios:
        print(
            f"\n  {style(scenario.name, bold=True)} "
            f"(平均文件大小: {_display_float(scenario.avg_file_size)}MB)"
        )
        print(
            f"  {_cyan('资源类型', '<12')} {_cyan('限制因素', '<12')} "
            f"{_cyan('最大并发量', '<12')} {_cyan('QPS', '<12')}"
        )
        for resource in scenario.resources:
            mark = "✓" if resource.limiting_factor else ""
            print(
                f"  {resource.name:<12} {mark:<12} {resource.max_connections:<12} "
                f"{_qps_text(resource.qps):<12}"
            )

        final = scenario.final_capacity
        print(
            f"\n  {style('最终能力', 'cyan', bold=True)}: "
            f"{final.max_connections}并发 {final.qps or 0} QPS"
        )

        print(f"\n  {_cyan('关键发现')}:")
        for finding in scenario.key_findings:
            print(f"    - {finding}")

    config = report.test_config
    print(f"\n  {style('性能测试建议', 'cyan', bold=True)}:")
    print(f"    - {_cyan('线程数')}: {config.threads}")
    print(f"    - {_cyan('测试时长')}: {config.duration}")
    print(f"    - {_cyan('加压时间')}: {config.ramp_up}")
    print(f"    - {_cyan('目标吞吐量')}: {config.throughput_goal:.1f} QPS")

    print(f"\n  {style('测试脚本示例', 'cyan', bold=True)}:")
    for number, script in enumerate(config.script_examples, start=1):
        print(f"    {number}. {script}")
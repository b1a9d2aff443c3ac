"""End-to-end throughput model and load-test suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from jvmsizer.style import _display_float

_USIZE_MAX = 2**64 - 1
_MEM_PER_CONN_MB = 0.5


def _as_usize(value):
    """Convert like an unsigned saturating cast: truncate, clamp, NaN to zero."""
    if value != value or value <= 0:
        return 0
    if value >= _USIZE_MAX:
        return _USIZE_MAX
    return int(value)


@dataclass
class ResourceLimit:
    """Concurrency ceiling imposed by one resource."""

    name: str
    limiting_factor: bool
    max_connections: int
    qps: int | None = None


@dataclass
class ScenarioAnalysis:
    """Resource limits and conclusions for one file-size scenario."""

    name: str
    avg_file_size: float
    resources: list[ResourceLimit]
    final_capacity: ResourceLimit
    key_findings: list[str] = field(default_factory=list)


@dataclass
class TestScenario:
    """A suggested load test for one file-size range."""

    __test__ = False

    name: str
    file_size_range: str
    suggested_threads: int
    test_duration: str
    success_criteria: str


@dataclass
class TestConfig:
    """Suggested load-test parameters and example scripts."""

    __test__ = False

    threads: int
    duration: str
    ramp_up: str
    throughput_goal: float
    script_examples: list[str]
    test_scenarios: list[TestScenario]


@dataclass
class PerformanceReport:
    """Scenario analyses together with the load-test suggestions."""

    scenarios: list[ScenarioAnalysis]
    test_config: TestConfig


def analyze_scenario(name, avg_file_size, args, disk_config, mem_connections):
    """Work out which resource limits concurrency for a given average file size."""
    network_conn = _as_usize((args.net_gbps * 125.0 * 0.97) / (avg_file_size * 1.05))
    disk_conn = _as_usize((disk_config.read_speed * 0.75) / (avg_file_size * 1.1))
    effective_size = max(avg_file_size, 1.0)
    cpu_conn = _as_usize(args.cpu_cores * (850.0 / effective_size))
    cpu_qps = cpu_conn * (1000 // _as_usize(effective_size))

    resources = [
        ResourceLimit("网络带宽", False, network_conn, network_conn),
        ResourceLimit("磁盘IO", False, disk_conn, disk_conn),
        ResourceLimit("直接内存", False, mem_connections, None),
        ResourceLimit("CPU线程", False, cpu_conn, cpu_qps),
    ]

    final_cap = replace(
        min((r for r in resources if r.qps is not None), key=lambda r: r.max_connections)
    )
    for resource in resources:
        resource.limiting_factor = resource.max_connections == final_cap.max_connections

    key_findings = []
    limiting = next((r for r in resources if r.limiting_factor), None)
    if limiting is not None:
        kind = "大文件" if avg_file_size > 10.0 else "小文件"
        key_findings.append(
            f"{kind}场景({_display_float(avg_file_size)}MB): "
            f"{limiting.name}是主要瓶颈 ({final_cap.qps or 0} QPS)"
        )
    key_findings.append(
        f"直接内存配置: {args.total_ram * 0.08:.1f}GB满足{mem_connections}级并发需求"
    )

    return ScenarioAnalysis(
        name=name,
        avg_file_size=avg_file_size,
        resources=resources,
        final_capacity=final_cap,
        key_findings=key_findings,
    )


def _wrk_script(threads, connections, duration):
    lines = [
        "# 使用wrk进行混合文件测试",
        f"wrk -t{threads} -c{connections} -d{duration} -s upload_script.lua "
        "http://your-server/upload",
        "",
        "# upload_script.lua",
        "function init()",
        "math.randomseed(os.time())",
        "sizes = {1, 5, 10, 30, 100} -- MB",
        "end",
        "",
        "function request()",
        "-- 随机选择文件大小",
        "size = sizes[math.random(#sizes)]",
        'file_path = "test_files/" .. size .. "mb.dat"',
        "",
        "-- 读取文件内容",
        'local file = io.open(file_path, "rb")',
        'local content = file:read("*all")',
        "file:close()",
        "",
        "-- 构造请求",
        'wrk.headers["Content-Type"] = "application/octet-stream"',
        'wrk.headers["Content-Length"] = #content',
        'return wrk.format("POST", "/upload", wrk.headers, content)',
        "end",
    ]
    return "\n".join(lines)


def _ab_script(requests, connections):
    return (
        "# 使用ab进行固定大小文件测试\n"
        f'ab -n {requests} -c {connections} -T "application/octet-stream" '
        "-p test_files/10mb.dat http://your-server/upload"
    )


def calculate_performance(args, disk_config, direct_mem_gb, heap_mem_gb):
    """Build the performance report for the mixed and small-file scenarios."""
    mem_connections = _as_usize((direct_mem_gb + heap_mem_gb) * 1024.0 / _MEM_PER_CONN_MB)

    scenarios = [
        analyze_scenario("混合文件大小", 30.0, args, disk_config, mem_connections),
        analyze_scenario("小文件为主", 5.0, args, disk_config, mem_connections),
    ]

    script_examples = [
        _wrk_script(args.cpu_cores, args.expected_connections, "10m"),
        _ab_script(args.expected_connections * 100, args.expected_connections),
    ]

    test_scenarios = [
        TestScenario("小文件高并发", "1KB-10MB", args.cpu_cores * 4, "30m", "P99延迟<100ms"),
        TestScenario("中等文件", "10MB-100MB", args.cpu_cores * 2, "60m", "吞吐量波动<10%"),
        TestScenario("大文件流式", "100MB-1GB", args.cpu_cores, "120m", "内存使用稳定"),
    ]

    throughput_goal = min(
        (float(s.final_capacity.qps or 0) for s in scenarios), default=float("inf")
    )

    test_config = TestConfig(
        threads=args.cpu_cores * 2,
        duration="60m",
        ramp_up="5m",
        throughput_goal=throughput_goal,
        script_examples=script_examples,
        test_scenarios=test_scenarios,
    )
    return PerformanceReport(scenarios=scenarios, test_config=test_config)
import pytest

from jvmsizer.cli import allocate_memory, main


def test_allocate_memory_applies_minimums():
    assert allocate_memory(8.0, "medium") == (1.0, 4.0)


@pytest.mark.parametrize(
    "complexity, ratios",
    [("low", (0.06, 0.4)), ("high", (0.12, 0.3)), ("medium", (0.08, 0.35)), ("other", (0.08, 0.35))],
)
def test_allocate_memory_ratios(complexity, ratios):
    direct, heap = allocate_memory(100.0, complexity)
    assert direct == pytest.approx(100.0 * ratios[0])
    assert heap == pytest.approx(100.0 * ratios[1])


def test_main_prints_all_sections(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 0
    out = capsys.readouterr().out
    for title in ("系统配置", "负载场景模拟", "内存安全分析", "全链路性能分析报告", "JVM配置建议"):
        assert title in out
    assert not (tmp_path / "sa_report.md").exists()


def test_main_writes_markdown_report(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["-g", "-d", "nvme", "-l", "high"]) == 0
    report = (tmp_path / "sa_report.md").read_text(encoding="utf-8")
    assert report.startswith("# 文件传输系统分析报告\n")
    assert "-XX:+UseZGC" in report


def test_main_rejects_bad_disk_type(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["-d", "floppy"])
    assert excinfo.value.code == 2
    assert "floppy" in capsys.readouterr().err


def test_main_rejects_small_burst_factor():
    with pytest.raises(SystemExit) as excinfo:
        main(["-b", "1"])
    assert excinfo.value.code == 2
import pytest

from jvmsizer.args import (
    AnalysisError,
    Args,
    build_parser,
    parse_args,
    parse_bool,
    validate_burst_factor,
    validate_disk_type,
    validate_positive_float,
)


def test_defaults_match_dataclass():
    args = parse_args([])
    assert args == Args()
    assert args.total_ram == 32.0
    assert args.disk_type == "sata_ssd"
    assert args.enable_memory_guard is True
    assert args.generate_markdown is False


def test_short_options():
    args = parse_args(
        ["-r", "64", "-c", "8", "-w", "10", "-d", "nvme", "-f", "250",
         "-n", "5000", "-b", "2.5", "-l", "high", "-g"]
    )
    assert args.total_ram == 64.0
    assert args.cpu_cores == 8
    assert args.net_gbps == 10.0
    assert args.disk_type == "nvme"
    assert args.avg_file_size == 250.0
    assert args.expected_connections == 5000
    assert args.burst_factor == 2.5
    assert args.complexity == "high"
    assert args.generate_markdown is True


def test_long_options():
    args = parse_args(["--total-ram", "16", "--disk-type", "sata_hdd"])
    assert args.total_ram == 16.0
    assert args.disk_type == "sata_hdd"


def test_boolean_options_take_values():
    args = parse_args(["-p", "false", "-m", "true"])
    assert args.enable_memory_guard is False
    assert args.enable_memory_mapping is True


def test_boolean_flag_without_value():
    assert parse_args(["-m"]).enable_memory_mapping is True


@pytest.mark.parametrize("text", ["0", "-1", "abc", "", " 5"])
def test_positive_float_rejects(text):
    with pytest.raises(AnalysisError):
        validate_positive_float(text)


def test_positive_float_accepts():
    assert validate_positive_float("0.5") == 0.5


def test_positive_float_message():
    with pytest.raises(AnalysisError, match="值必须大于0"):
        validate_positive_float("-2")


@pytest.mark.parametrize("text", ["1", "0.5", "x"])
def test_burst_factor_rejects(text):
    with pytest.raises(AnalysisError):
        validate_burst_factor(text)


def test_burst_factor_accepts():
    assert validate_burst_factor("1.5") == 1.5


@pytest.mark.parametrize("disk", ["sata_hdd", "sata_ssd", "nvme"])
def test_disk_type_accepts(disk):
    assert validate_disk_type(disk) == disk


def test_disk_type_rejects_with_choices():
    with pytest.raises(AnalysisError) as info:
        validate_disk_type("floppy")
    assert "sata_hdd, sata_ssd, nvme" in str(info.value)


def test_parse_bool():
    assert parse_bool("true") is True
    assert parse_bool("false") is False
    with pytest.raises(AnalysisError):
        parse_bool("yes")


@pytest.mark.parametrize(
    "argv",
    [["-d", "floppy"], ["-r", "0"], ["-b", "1"], ["-c", "-3"], ["-p", "maybe"]],
)
def test_invalid_command_lines_exit(argv):
    with pytest.raises(SystemExit) as info:
        parse_args(argv)
    assert info.value.code == 2


def test_parser_program_name():
    assert build_parser().prog == "jvmsizer"
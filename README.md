# jvmsizer

A command-line tool that estimates how a Java file upload/download server
should be sized and tuned. You describe the machine and the expected load.
It prints an analysis to the terminal, with Chinese labels and ANSI colours:

- heap, direct memory and metaspace sizes;
- theoretical connection limits, burst capacity and the resource that bounds
  them;
- simulated load scenarios (long-running, normal, burst, large files, many
  small files), each marked safe, warning or danger;
- memory-safety factors, a risk level and optimisation advice;
- a per-resource performance breakdown (network, disk, direct memory, CPU)
  for a mixed-size and a small-file workload, with load-testing suggestions
  and example `wrk` / `ab` scripts;
- a JDK compatibility matrix and recommended JVM flags, with a sample
  start-up command.

The tool has no dependencies beyond the Python standard library. It needs
Python 3.10 or later.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```
jvmsizer [options]
```

| Option | Long form | Default | Meaning |
|--------|-----------|---------|---------|
| `-r` | `--total-ram` | `32` | Server memory in GB (must be greater than 0) |
| `-c` | `--cpu-cores` | `16` | Number of CPU cores |
| `-w` | `--net-gbps` | `1` | Network bandwidth in Gbps |
| `-d` | `--disk-type` | `sata_ssd` | One of `sata_hdd`, `sata_ssd`, `nvme` |
| `-f` | `--avg-file-size` | `10` | Average file size in MB |
| `-n` | `--expected-connections` | `1000` | Expected peak concurrent connections |
| `-b` | `--burst-factor` | `3` | Maximum burst multiplier (must be greater than 1) |
| `-p` | `--enable-memory-guard` | `true` | Memory guard: `true` or `false`; the option alone means `true` |
| `-m` | `--enable-memory-mapping` | `false` | Memory-mapped files for large files: `true` or `false`; the option alone means `true` |
| `-l` | `--complexity` | `medium` | Application complexity: `low`, `medium` or `high`; any other value is treated as `medium` |
| `-g` | `--generate-markdown` | off | Also write the report to `sa_report.md` in the current directory |
| `-V` | `--version` | | Print the version and exit |

Example: a 64 GB, 32-core machine with NVMe disks serving 20,000
connections of 50 MB files, with a Markdown report:

```
jvmsizer -r 64 -c 32 -w 10 -d nvme -f 50 -n 20000 -l high -g
```

Invalid values are rejected with an error message and exit status 2. Such
values include a memory size of 0 or less, a burst factor of 1 or less, an
unknown disk type, a negative or non-integer core or connection count, and a
boolean other than `true` / `false`. If the Markdown report cannot be
written, the command prints the error and exits with status 1. Otherwise it
exits with 0. Progress messages are logged to standard error.

## Using it as a library

The calculations can be used without the command line:

```python
from jvmsizer.args import Args
from jvmsizer.cli import allocate_memory
from jvmsizer.config import get_disk_config
from jvmsizer.metaspace import calculate_metaspace
from jvmsizer.performance import calculate_performance
from jvmsizer.safety import calculate_safety

args = Args(total_ram=64.0, cpu_cores=32, disk_type="nvme")
direct_gb, heap_gb = allocate_memory(args.total_ram, args.complexity)

metaspace_mb = calculate_metaspace(args)
safety = calculate_safety(args, direct_gb, heap_gb)
performance = calculate_performance(
    args, get_disk_config(args.disk_type), direct_gb, heap_gb
)

print(safety.risk_level, safety.theoretical_limits.max_connections)
```

- `jvmsizer.args`: the `Args` dataclass, `parse_args(argv)`,
  `build_parser()` and the validators. The validators raise
  `AnalysisError`, a `ValueError`.
- `jvmsizer.config`: `DiskConfig` and the read/write speeds of each disk
  type. `get_disk_config` raises `ValueError` for an unknown type.
- `jvmsizer.metaspace`: the metaspace sizing model.
- `jvmsizer.safety`: `calculate_safety`, which returns a `SafetyAnalysis`
  with scenarios, recommendations and `TheoreticalLimits`.
- `jvmsizer.performance`: `calculate_performance`, which returns a
  `PerformanceReport`.
- `jvmsizer.console` and `jvmsizer.jvm`: the functions that print each
  section to standard output.
- `jvmsizer.report`: `ReportContext`, `render_markdown_report(ctx, now=None)`,
  which returns the Markdown report as a string, and
  `generate_markdown_report(ctx, path="sa_report.md")`, which writes it and
  returns the path.

## What it does not do

jvmsizer works only from the numbers you give it. It does not inspect the
host, a running JVM or a live server. It does not run the load tests it
suggests: the `wrk` and `ab` scripts are printed as examples only. The
figures come from fixed rules of thumb, such as per-connection buffer sizes,
IOPS per disk type and stability margins. They are not measurements.
"""Remote shell probes.

All scalar probes run in one round trip. Each one prints a single
``key=value`` line and the outputs are separated by a sentinel line, so the
stdout can be split on the sentinel and still be read by key.
"""

from __future__ import annotations

SENTINEL = "---"

# Order matters: untagged output is resolved by position.
SCALAR_PROBES: tuple[tuple[str, str], ...] = (
    # cpu
    ("cpu_usage", "grep 'cpu ' /proc/stat | awk '{usage=($2+$4)*100/($2+$4+$5)} END {print usage}'"),
    ("cpu_cores", "nproc"),
    ("cpu_model", "lscpu | grep 'Model name' | cut -d':' -f2 | xargs"),
    # memory
    ("mem_total", "free -b | grep Mem | awk '{print $2}'"),
    ("mem_used", "free -b | grep Mem | awk '{print $3}'"),
    ("mem_free", "free -b | grep Mem | awk '{print $4}'"),
    # disk
    ("disk_total", "df -B1 / | tail -1 | awk '{print $2}'"),
    ("disk_used", "df -B1 / | tail -1 | awk '{print $3}'"),
    ("disk_available", "df -B1 / | tail -1 | awk '{print $4}'"),
    ("disk_use_percent", "df -h / | tail -1 | awk '{print $5}' | sed 's/%//'"),
    # system
    ("platform", "uname -s"),
    ("distro", "cat /etc/os-release | grep PRETTY_NAME | cut -d'\"' -f2"),
    ("arch", "uname -m"),
    ("hostname", "hostname"),
    ("uptime", "cat /proc/uptime | awk '{print $1}'"),
    # processes
    ("proc_all", "ps aux | wc -l"),
    ("proc_running", "ps aux | grep -v 'Z' | wc -l"),
)

FIELD_ORDER: tuple[str, ...] = tuple(key for key, _ in SCALAR_PROBES)

DEFAULT_PROCESS_LIMIT = 20


def build_scalar_command() -> str:
    probes = [f'echo "{key}=$({expr})"' for key, expr in SCALAR_PROBES]
    return "export LC_ALL=C; " + f'; echo "{SENTINEL}"; '.join(probes)


def build_process_command(limit: int = DEFAULT_PROCESS_LIMIT) -> str:
    """Top ``limit`` processes by CPU, header line skipped."""
    return f"ps aux --sort=-%cpu | head -n {limit + 1} | tail -n +2"

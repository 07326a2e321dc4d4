from .commands import SENTINEL, build_process_command, build_scalar_command
from .executor import run_probes
from .parser import (
    build_remote_snapshot,
    parse_process_line,
    parse_process_table,
    parse_scalar_output,
)

__all__ = [
    "SENTINEL",
    "build_process_command",
    "build_scalar_command",
    "run_probes",
    "build_remote_snapshot",
    "parse_process_line",
    "parse_process_table",
    "parse_scalar_output",
]

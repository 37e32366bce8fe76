"""Mac system fingerprint."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.table import Table

from .errors import CommandError
from .runner import CommandRunner

NOT_AVAILABLE = "N/A"


@dataclass
class SystemInfo:
    """Hardware summary of the current machine."""

    model: str
    ram_gb: Optional[int]
    cpu_model: str
    cpu_cores: str
    gpu_cores: str
    disk_total: str
    disk_used: str
    disk_free: str


def human_size(num_bytes: int) -> str:
    """Format a byte count with SI units, like ``df -H``."""
    size = float(num_bytes)
    for unit in ("B", "K", "M", "G", "T"):
        if size < 1000 or unit == "T":
            break
        size /= 1000
    if unit == "B":
        return f"{int(size)}B"
    return f"{size:.0f}{unit}" if size >= 10 else f"{size:.1f}{unit}"


def _sysctl(runner: CommandRunner, key: str) -> str:
    try:
        return runner.run("sysctl", "-n", key) or NOT_AVAILABLE
    except CommandError:
        return NOT_AVAILABLE


def _gpu_cores(runner: CommandRunner) -> str:
    try:
        output = runner.run("system_profiler", "SPDisplaysDataType")
    except CommandError:
        return NOT_AVAILABLE
    for line in output.splitlines():
        key, _, value = line.strip().partition(": ")
        if key == "Total Number of Cores" and value:
            return value.strip()
    return NOT_AVAILABLE


def collect(runner: CommandRunner, disk_path: str = "/") -> SystemInfo:
    """Gather the system fingerprint. Unavailable values become ``N/A``."""
    memsize = _sysctl(runner, "hw.memsize")
    ram_gb = int(memsize) // 1024**3 if memsize.isdigit() else None

    usage = shutil.disk_usage(disk_path)
    return SystemInfo(
        model=_sysctl(runner, "hw.model"),
        ram_gb=ram_gb,
        cpu_model=_sysctl(runner, "machdep.cpu.brand_string"),
        cpu_cores=_sysctl(runner, "hw.ncpu"),
        gpu_cores=_gpu_cores(runner),
        disk_total=human_size(usage.total),
        disk_used=human_size(usage.used),
        disk_free=human_size(usage.free),
    )


def render(info: SystemInfo, console: Console) -> None:
    """Print the fingerprint as a table."""
    table = Table(title="🖥️  Mac System Information", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Mac Model", info.model)
    table.add_row("RAM", f"{info.ram_gb} GB" if info.ram_gb is not None else NOT_AVAILABLE)
    table.add_row("CPU", info.cpu_model)
    table.add_row("CPU Cores", info.cpu_cores)
    table.add_row("GPU Cores", info.gpu_cores)
    table.add_row("Disk Total", info.disk_total)
    table.add_row("Disk Used", info.disk_used)
    table.add_row("Disk Free", info.disk_free)

    console.print(table)

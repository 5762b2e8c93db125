"""
Renders scan results for people (rich) and machines (JSON).
"""
from __future__ import annotations
import json
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .models import ScanResult, TargetResult, STATUS_DOWN, STATUS_PARTIAL, STATUS_UP

RULE = "━" * 45

STATUS_ICONS = {
    STATUS_UP: "✅",
    STATUS_DOWN: "❌",
    STATUS_PARTIAL: "⚠️",
}


def render_json(scan: ScanResult) -> str:
    return json.dumps(scan.to_dict(), indent=2, ensure_ascii=False)


def format_result_line(result: TargetResult) -> str:
    """Builds the rich-markup summary line for one target."""
    icon = STATUS_ICONS.get(result.status, "❓")
    if result.port is not None:
        host_port = f"[blue]{escape(result.host)}[/]:[yellow]{result.port}[/]"
    else:
        host_port = f"[blue]{escape(result.host)}[/] (ICMP)"

    line = f"{icon} {host_port} → {result.successful}/{result.attempts} successful"
    if result.avg_response_time_ms is not None:
        return f"{line} (Avg: {result.avg_response_time_ms:.2f} ms) [cyan]\\[{result.test_type}][/]"
    line = f"{line} [cyan]\\[{result.test_type}][/]"
    if result.error:
        line += f" ([red]{escape(result.error)}[/])"
    return line


def render_summary(results: List[TargetResult], console: Console):
    console.print("\n📊 Summary", soft_wrap=True)
    console.print(f"[dim]{RULE}[/]", soft_wrap=True)
    for result in results:
        console.print(format_result_line(result), highlight=False, soft_wrap=True)


def print_banner(hosts: List[str], ports: List[int], ping: bool, console: Console):
    """Announces what is about to be scanned."""
    line = f"\n[bold]🔍 Scanning[/] Hosts: [[green]{escape(', '.join(hosts))}[/]]"
    if ports:
        line += f", Ports: [[yellow]{', '.join(str(p) for p in ports)}[/]]"
    if ping:
        line += "[magenta], ICMP Ping: enabled[/]"
    console.print(line, highlight=False, soft_wrap=True)
    console.print(f"[dim]{RULE}[/]", soft_wrap=True)


def print_waiting(interval: float, console: Console):
    console.print(f"\n⏱️  Waiting {interval:g} seconds before next scan...\n", highlight=False, soft_wrap=True)


class ScanPrinter:
    """Output sink that writes each cycle's ScanResult in the configured format."""

    def __init__(self, as_json: bool = False, console: Optional[Console] = None):
        self.as_json = as_json
        self.console = console or Console()

    def __call__(self, scan: ScanResult):
        if self.as_json:
            self.console.file.write(render_json(scan) + "\n")
            self.console.file.flush()
        else:
            render_summary(scan.results, self.console)

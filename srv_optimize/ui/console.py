"""
ConsoleUI - Rich-based menu interface.
"""

from typing import List, Optional, TextIO, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box


MENU_OPTIONS: List[Tuple[str, str]] = [
    ("1", "Manual Backup (All Critical Files)"),
    ("2", "Optimize CPU Configuration (Basic)"),
    ("3", "Optimize Memory Usage (Basic)"),
    ("4", "Optimize Disk I/O (Basic)"),
    ("5", "Configure Network for Low Latency (Basic)"),
    ("6", "Apply Kernel Tuning (Basic)"),
    ("7", "Apply All Basic Optimizations"),
    ("8", "Super-Optimization for AI/ML Workloads"),
    ("9", "Restore Previous Backups"),
    ("10", "Exit"),
]

AFFIRMATIVE = ("y", "yes")


class ConsoleUI:
    """
    Rich console interface for srv_optimize.
    """

    def __init__(self, console: Optional[Console] = None, input_stream: Optional[TextIO] = None):
        """
        Args:
            console: Rich console to draw on (default: stdout)
            input_stream: Where answers are read from (default: stdin)
        """
        self.console = console or Console()
        self.input_stream = input_stream

    def print_banner(self, version: str):
        banner = (
            f"[bold cyan]Server Optimization[/] [dim]v{version}[/]\n"
            "[dim]OS tuning for AI/ML and compute workloads[/]"
        )
        self.console.print(Panel(banner, border_style="cyan"))

    def print_config(self, summary: str):
        self.console.print(Panel(summary, title="Configuration", border_style="dim"))

    def show_menu(self):
        table = Table(title="Optimization Options", show_header=False, box=box.SIMPLE)
        table.add_column("Option", style="bold cyan", justify="right")
        table.add_column("Action")
        for key, label in MENU_OPTIONS:
            table.add_row(f"{key}.", label)

        self.console.print()
        self.console.print(table)

    def _ask(self, prompt: str) -> str:
        """
        Read one line of input.

        Raises:
            EOFError: When the input stream is exhausted
        """
        line = self.console.input(f"{prompt} ", stream=self.input_stream)
        if self.input_stream is not None and line == "":
            raise EOFError
        return line.strip()

    def ask_choice(self) -> str:
        """Read one menu selection."""
        return self._ask("[bold]Select an option [1-10]:[/]")

    def confirm_super(self) -> bool:
        """Ask before applying everything. Only y/yes counts as consent."""
        answer = self._ask(
            "[bold yellow]Super-Optimization applies ALL enhancements. Proceed? [Y/N][/]"
        )
        return answer.lower() in AFFIRMATIVE

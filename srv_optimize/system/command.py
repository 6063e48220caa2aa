"""
CommandRunner - the one place external utilities are invoked.

Blocking, no timeouts. Output is appended to the detailed log.
"""

import os
import shutil
import subprocess
from typing import List, Optional

from ..logs import get_logger

logger = get_logger("command")


class CommandRunner:
    """Runs host utilities locally."""

    def run(self, args: List[str]) -> subprocess.CompletedProcess:
        """
        Run a command and log its output.

        Args:
            args: Command and arguments (no shell)

        Returns:
            The completed process with text stdout/stderr
        """
        logger.debug("$ " + " ".join(args))
        result = self._execute(args)

        for stream in (result.stdout, result.stderr):
            if stream and stream.strip():
                logger.debug(stream.rstrip())

        return result

    def _execute(self, args: List[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(args, capture_output=True, text=True)
        except FileNotFoundError:
            return subprocess.CompletedProcess(args, 127, "", f"{args[0]}: command not found")

    def cpu_count(self) -> int:
        return os.cpu_count() or 1

    def which(self, name: str) -> Optional[str]:
        """Path of an executable, or None if it is not installed."""
        return shutil.which(name)

    def read_text(self, path: str) -> Optional[str]:
        """Read a small host file such as a sysfs attribute."""
        try:
            with open(path) as f:
                return f.read().strip()
        except OSError:
            return None

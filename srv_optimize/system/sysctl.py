"""
Kernel parameters: the live sysctl interface and the sysctl.conf file.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional

from ..logs import get_logger
from .command import CommandRunner

logger = get_logger("sysctl")

_LINE_RE = re.compile(r'^\s*([^#;=\s][^=]*?)\s*=\s*(.*?)\s*$')


def normalize(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace the way `sysctl -n` prints multi-field values."""
    if value is None:
        return None
    return ' '.join(str(value).split())


class SysctlFile:
    """
    Line-preserving view of a sysctl configuration file.

    Comments, blank lines and unrelated keys are kept verbatim.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _read_lines(self) -> List[str]:
        if not self.path.exists():
            return []
        return self.path.read_text().splitlines()

    def parse(self) -> Dict[str, str]:
        """Return key -> value; the last assignment of a key wins."""
        tunables = {}
        for line in self._read_lines():
            match = _LINE_RE.match(line)
            if match:
                tunables[match.group(1).strip()] = match.group(2).strip()
        return tunables

    def get(self, key: str) -> Optional[str]:
        return normalize(self.parse().get(key))

    def count(self, key: str) -> int:
        """Number of active lines assigning `key`."""
        count = 0
        for line in self._read_lines():
            match = _LINE_RE.match(line)
            if match and match.group(1).strip() == key:
                count += 1
        return count

    def upsert(self, key: str, value: str) -> bool:
        """
        Set `key=value`, replacing any existing assignment.

        The file ends up with exactly one active line for the key.

        Returns:
            True if the file content changed
        """
        lines = self._read_lines()
        new_line = f"{key}={value}"
        out = []
        replaced = False

        for line in lines:
            match = _LINE_RE.match(line)
            if match and match.group(1).strip() == key:
                if not replaced:
                    out.append(new_line)
                    replaced = True
                continue
            out.append(line)

        if not replaced:
            out.append(new_line)

        if out == lines:
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("\n".join(out) + "\n")
        return True


class Sysctl:
    """Live kernel parameters through the sysctl utility."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def get(self, key: str) -> Optional[str]:
        """Current kernel value, or None if the key is unknown."""
        result = self.runner.run(["sysctl", "-n", key])
        if result.returncode == 0:
            return normalize(result.stdout)
        return None

    def set(self, key: str, value: str) -> bool:
        result = self.runner.run(["sysctl", "-w", f"{key}={value}"])
        if result.returncode == 0:
            logger.info(f"{key} = {value}")
            return True
        logger.warning(f"sysctl -w {key}={value} failed (exit {result.returncode}).")
        return False

    def reload(self, path: str) -> bool:
        """Apply every setting of a sysctl file (`sysctl -p`)."""
        result = self.runner.run(["sysctl", "-p", path])
        if result.returncode != 0:
            logger.warning(f"sysctl -p {path} exited with status {result.returncode}.")
        return result.returncode == 0

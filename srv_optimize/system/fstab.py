"""
Structured view of the mount table.

Each non-comment line becomes an FstabEntry; comments and blank lines are
kept as-is so a rewrite only touches the record whose options changed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union


@dataclass
class FstabEntry:
    """One mount table record."""
    device: str
    mountpoint: str
    fstype: str
    options: List[str] = field(default_factory=lambda: ["defaults"])
    dump: str = "0"
    passno: str = "0"

    @classmethod
    def parse(cls, line: str) -> "FstabEntry":
        """
        Parse a record line.

        Raises:
            ValueError: If the line has fewer than three fields
        """
        fields = line.split()
        if len(fields) < 3:
            raise ValueError(f"Malformed fstab line: {line!r}")

        return cls(
            device=fields[0],
            mountpoint=fields[1],
            fstype=fields[2],
            options=fields[3].split(",") if len(fields) > 3 else ["defaults"],
            dump=fields[4] if len(fields) > 4 else "0",
            passno=fields[5] if len(fields) > 5 else "0",
        )

    def render(self) -> str:
        return "\t".join([
            self.device,
            self.mountpoint,
            self.fstype,
            ",".join(self.options),
            self.dump,
            self.passno,
        ])

    def add_options(self, options: List[str]) -> bool:
        """Append options that are not present yet. Returns True if any were added."""
        missing = [opt for opt in options if opt not in self.options]
        self.options.extend(missing)
        return bool(missing)


class FstabFile:
    """Mount table file parsed into entries and raw lines."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.lines: List[Union[str, FstabEntry]] = []
        self._dirty = set()
        self.load()

    def load(self):
        self.lines = []
        self._dirty = set()
        for line in self.path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                self.lines.append(line)
                continue
            try:
                self.lines.append(FstabEntry.parse(stripped))
            except ValueError:
                # findmnt reports it; keep the text untouched
                self.lines.append(line)

    @property
    def entries(self) -> List[FstabEntry]:
        return [line for line in self.lines if isinstance(line, FstabEntry)]

    def find(self, mountpoint: str) -> Optional[FstabEntry]:
        """Last record mounted at `mountpoint` (later lines override earlier ones)."""
        match = None
        for entry in self.entries:
            if entry.mountpoint == mountpoint:
                match = entry
        return match

    def add_options(self, mountpoint: str, options: List[str]) -> bool:
        """
        Add mount options to the record mounted at `mountpoint`.

        Returns:
            True if the record changed, False if already present

        Raises:
            KeyError: If no record is mounted there
        """
        entry = self.find(mountpoint)
        if entry is None:
            raise KeyError(f"No fstab entry for mount point {mountpoint}")

        changed = entry.add_options(options)
        if changed:
            self._dirty.add(id(entry))
        return changed

    def save(self):
        """Write back; untouched records keep their original formatting."""
        original = self.path.read_text().splitlines()
        out = []
        for raw, line in zip(original, self.lines):
            if isinstance(line, FstabEntry) and id(line) in self._dirty:
                out.append(line.render())
            else:
                out.append(raw)
        self.path.write_text("\n".join(out) + "\n")
        self._dirty = set()

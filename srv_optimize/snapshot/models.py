"""
Data models for the backup/restore system.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional, Any
from pathlib import Path
import json


MANIFEST_NAME = "manifest.json"
SNAPSHOT_PREFIX = "server_optimization_"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


@dataclass
class BackupSnapshot:
    """A directory of configuration file copies taken at one point in time."""

    path: str                              # Snapshot directory
    created_at: str                        # ISO timestamp
    files: Dict[str, str] = field(default_factory=dict)   # backup name -> host path
    failed: List[str] = field(default_factory=list)       # backup names that did not copy

    @property
    def directory(self) -> Path:
        return Path(self.path)

    @property
    def name(self) -> str:
        return self.directory.name

    @property
    def complete(self) -> bool:
        return not self.failed

    def exists(self) -> bool:
        return self.directory.is_dir()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BackupSnapshot':
        """Create from dictionary (JSON deserialization)."""
        return cls(**data)

    def save(self) -> None:
        """Write the manifest into the snapshot directory."""
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self.directory / MANIFEST_NAME, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, directory: Path, default_files: Optional[Dict[str, str]] = None) -> 'BackupSnapshot':
        """
        Load a snapshot from its directory.

        Directories without a manifest (older backups) fall back to
        `default_files` and the directory's modification time.

        Raises:
            ValueError: If the manifest is not valid JSON or lacks the
                expected fields
        """
        manifest = directory / MANIFEST_NAME
        if manifest.exists():
            with open(manifest) as f:
                data = json.load(f)
            if not (
                isinstance(data, dict)
                and isinstance(data.get("created_at"), str)
                and isinstance(data.get("files", {}), dict)
                and isinstance(data.get("failed", []), list)
            ):
                raise ValueError(f"Malformed manifest in {directory}")
            snapshot = cls.from_dict(data)
            snapshot.path = str(directory)
            return snapshot

        return cls(
            path=str(directory),
            created_at=datetime.fromtimestamp(directory.stat().st_mtime).isoformat(),
            files=dict(default_files or {}),
        )


@dataclass
class RestoreResult:
    """Result of a restore operation."""
    snapshot: str
    restored: List[str] = field(default_factory=list)   # host paths written
    missing: List[str] = field(default_factory=list)    # backup names not found
    failed: List[str] = field(default_factory=list)     # backup names that did not copy

    @property
    def success(self) -> bool:
        return not self.missing and not self.failed

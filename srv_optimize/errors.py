"""
Error types for srv_optimize.

FatalError subclasses stop the whole run with exit status 1.
BackupError subclasses are reported and the menu continues.
"""

from typing import List, Optional


class OptimizeError(Exception):
    """Base class for all srv_optimize errors."""
    pass


class FatalError(OptimizeError):
    """Environment error that terminates the process."""
    exit_code = 1


class PrivilegeError(FatalError):
    """Not running with root privileges."""

    def __init__(self, message: str = "This script must be run as root. Please re-run it using 'sudo' or as the root user."):
        super().__init__(message)


class DependencyInstallError(FatalError):
    """A required host package could not be installed."""

    def __init__(self, package: str, output: str = ""):
        self.package = package
        self.output = output
        super().__init__(f"Failed to install {package}. Exiting.")


class FstabValidationError(FatalError):
    """Mount table failed `findmnt --verify`."""

    def __init__(self, path: str, restored: bool, details: str = ""):
        self.path = path
        self.restored = restored
        self.details = details
        suffix = "Reverted changes." if restored else "No pre-edit copy to revert to."
        super().__init__(f"fstab validation failed for {path}. {suffix}")


class ConfigError(FatalError):
    """Configuration file is missing or invalid."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid configuration: " + "; ".join(errors))


class BackupError(OptimizeError):
    """Backup or restore could not be carried out."""
    pass


class BackupNotFoundError(BackupError):
    """A snapshot directory no longer exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Backup directory not found: {path}")


class NoBackupError(BackupError):
    """Restore requested but no snapshot exists."""

    def __init__(self, backup_root: Optional[str] = None):
        self.backup_root = backup_root
        where = f" under {backup_root}" if backup_root else ""
        super().__init__(f"No backup found{where}. Run a manual backup first.")


class BackupWriteError(BackupError):
    """The snapshot directory or its manifest could not be written."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot write backup to {path}{detail}")

"""
Backup/Restore system for srv_optimize.

Copies /etc/default/grub, /etc/fstab and /etc/sysctl.conf into a
timestamped directory before tuning, and copies them back on request.
Snapshots are never deleted automatically.
"""

from .models import BackupSnapshot, RestoreResult
from .manager import BackupManager

__all__ = [
    'BackupSnapshot',
    'RestoreResult',
    'BackupManager',
]

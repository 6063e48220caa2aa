"""
FstabValidator - guards mount table edits.

A mount table that fails `findmnt --verify` can leave the host unable to
boot, so a failed check puts the pre-edit copy back and stops the run.
"""

import shutil
from pathlib import Path

from ..errors import FstabValidationError
from ..logs import get_logger
from ..system.command import CommandRunner

logger = get_logger("validator")


class FstabValidator:
    """Syntax checks for the mount table, with revert on failure."""

    def __init__(self, runner: CommandRunner, fstab_path: str, tmp_backup_path: str):
        """
        Initialize validator.

        Args:
            runner: Command runner used for findmnt
            fstab_path: Mount table to check
            tmp_backup_path: Where the pre-edit copy is kept
        """
        self.runner = runner
        self.fstab_path = Path(fstab_path)
        self.tmp_backup_path = Path(tmp_backup_path)

    def save_pre_edit_copy(self):
        """Copy the current mount table to the temporary backup path."""
        self.tmp_backup_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(self.fstab_path, self.tmp_backup_path)

    def validate_fstab(self):
        """
        Verify the mount table.

        Raises:
            FstabValidationError: If verification fails; the pre-edit copy
                has been restored when one exists
        """
        logger.info(f"Validating {self.fstab_path} syntax...")
        result = self.runner.run(["findmnt", "--verify", "--tab-file", str(self.fstab_path)])

        if result.returncode == 0:
            logger.info("fstab syntax is valid.")
            return

        restored = False
        if self.tmp_backup_path.exists():
            shutil.copy2(self.tmp_backup_path, self.fstab_path)
            restored = True

        details = "\n".join(s.strip() for s in (result.stdout, result.stderr) if s and s.strip())
        raise FstabValidationError(str(self.fstab_path), restored=restored, details=details)

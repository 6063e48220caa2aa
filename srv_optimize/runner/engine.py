"""
Orchestrator - interactive menu driving backups and tuning.

Strictly sequential: each action blocks until done, then the menu is shown
again. Fatal errors propagate to the caller, which exits the process.
"""

from typing import Callable, Dict, List, Optional

from ..config import Config
from ..errors import BackupError
from ..logs import get_logger
from ..snapshot.manager import BackupManager
from ..snapshot.models import BackupSnapshot, RestoreResult
from ..tuning.operations import TuningOperations, OperationReport
from ..ui.console import ConsoleUI
from .state import StateMachine, State

logger = get_logger("menu")

EXIT_CHOICE = "10"
SUPER_CHOICE = "8"


class Orchestrator:
    """
    Menu dispatcher.

    State machine:
    MENU → ACTION → MENU
    MENU → SUPER_CONFIRM → (ACTION) → MENU
    MENU → EXIT
    """

    def __init__(
        self,
        config: Config,
        ui: ConsoleUI,
        operations: Optional[TuningOperations] = None,
        backups: Optional[BackupManager] = None,
    ):
        self.config = config
        self.ui = ui
        self.operations = operations or TuningOperations(config)
        self.backups = backups or BackupManager(
            config.paths.backup_root,
            config.paths.managed_files(),
        )
        self.state_machine = StateMachine()

        # Snapshot taken in this session, handed to restore explicitly
        self.last_backup: Optional[BackupSnapshot] = None

        self._actions: Dict[str, Callable[[], object]] = {
            "1": self.manual_backup,
            "2": self.operations.optimize_cpu,
            "3": self.operations.optimize_memory,
            "4": self.operations.optimize_disk_io,
            "5": self.operations.configure_network,
            "6": self.operations.apply_kernel_tuning,
            "7": self.apply_all_basic,
            "9": self.restore_backups,
        }

    # =========================================================================
    # Actions
    # =========================================================================

    def manual_backup(self) -> Optional[BackupSnapshot]:
        """Take a snapshot and remember it for restore. Backup errors are logged."""
        try:
            self.last_backup = self.backups.manual_backup()
        except BackupError as e:
            logger.error(str(e))
            return None
        return self.last_backup

    def restore_backups(self, snapshot: Optional[BackupSnapshot] = None) -> Optional[RestoreResult]:
        """
        Restore the given snapshot, this session's backup, or the newest on disk.

        Backup errors are logged; the menu carries on.
        """
        try:
            target = self.backups.resolve(snapshot or self.last_backup)
            return self.backups.restore_backups(target)
        except BackupError as e:
            logger.error(str(e))
            return None

    def apply_all_basic(self) -> List[OperationReport]:
        reports = self.operations.run_all()
        logger.info("Basic optimizations applied successfully.")
        return reports

    def optimize_super(self) -> Optional[List[OperationReport]]:
        """Run every operation after confirmation. Declining changes nothing."""
        self.state_machine.transition(State.SUPER_CONFIRM)
        logger.info("Confirming: Super-Optimization applies ALL enhancements.")

        if not self.ui.confirm_super():
            logger.info("Super-optimization cancelled by user.")
            self.state_machine.transition(State.MENU, {"confirmed": False})
            return None

        self.state_machine.transition(State.ACTION, {"choice": SUPER_CHOICE})
        reports = self.operations.run_all()
        logger.info("Super-optimization completed successfully.")
        self.state_machine.transition(State.MENU)
        return reports

    # =========================================================================
    # Loop
    # =========================================================================

    def dispatch(self, choice: str) -> bool:
        """
        Handle one menu selection.

        Returns:
            False once the user chose to exit
        """
        if choice == EXIT_CHOICE:
            self.state_machine.transition(State.EXIT)
            logger.info(f"Exiting. Logs saved at {self.config.paths.log_file}.")
            logger.debug(self.state_machine.format_history())
            return False

        if choice == SUPER_CHOICE:
            self.optimize_super()
            return True

        action = self._actions.get(choice)
        if action is None:
            logger.error("Invalid option. Please try again.")
            return True

        self.state_machine.transition(State.ACTION, {"choice": choice})
        action()
        self.state_machine.transition(State.MENU)
        return True

    def run(self):
        """
        Show the menu until the user exits.

        Raises:
            FatalError: From any action that must stop the process
            EOFError: If input ends before the user exits
        """
        while not self.state_machine.is_terminal():
            self.ui.show_menu()
            choice = self.ui.ask_choice()
            if not self.dispatch(choice):
                break

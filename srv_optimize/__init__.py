"""
srv_optimize - Interactive OS tuning for AI/ML and compute servers

Applies CPU governor, memory, disk I/O, network and kernel limit tuning on
Ubuntu hosts, with timestamped backups of the files it edits.

Usage:
    # As a module
    sudo python -m srv_optimize

    # Programmatically
    from srv_optimize import Config, TuningOperations

    config = Config.load()
    ops = TuningOperations(config)
    ops.optimize_memory()
"""

__version__ = "1.0.0"

# Main exports
from .config import Config
from .runner.engine import Orchestrator
from .runner.state import StateMachine, State

# Backup exports
from .snapshot.manager import BackupManager
from .snapshot.models import BackupSnapshot, RestoreResult

# Tuning exports
from .tuning.operations import TuningOperations, OperationReport
from .tuning.parameters import TuningParameter
from .tuning.executor import TuningExecutor

__all__ = [
    # Version
    "__version__",
    # Engine
    "Config",
    "Orchestrator",
    "StateMachine",
    "State",
    # Backup
    "BackupManager",
    "BackupSnapshot",
    "RestoreResult",
    # Tuning
    "TuningOperations",
    "OperationReport",
    "TuningParameter",
    "TuningExecutor",
]

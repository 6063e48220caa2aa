"""
The five basic tuning operations.

Each one applies its rows from the parameter table, does any extra work
that is not a simple key/value (NUMA report, mount options), and ends with
one SUMMARY line.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..config import Config
from ..logs import get_logger, summary
from ..system.command import CommandRunner
from ..system.fstab import FstabFile
from ..system.sysctl import Sysctl, SysctlFile
from .executor import Outcome, ParameterResult, TuningExecutor
from .parameters import ParameterKind, ParameterTable, TuningParameter, build_parameter_table
from .verifier import FstabValidator

logger = get_logger("tuning")


@dataclass
class OperationReport:
    """What one operation did."""
    name: str
    results: List[ParameterResult] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return any(r.changed for r in self.results)


class TuningOperations:
    """
    CPU, memory, disk I/O, network and kernel tuning.

    Usage:
        ops = TuningOperations(config)
        ops.optimize_memory()
        ops.run_all()
    """

    def __init__(
        self,
        config: Config,
        runner: Optional[CommandRunner] = None,
        executor: Optional[TuningExecutor] = None,
    ):
        self.config = config
        self.runner = runner or CommandRunner()
        self.executor = executor or TuningExecutor()

        self.sysctl = Sysctl(self.runner)
        self.sysctl_file = SysctlFile(config.paths.sysctl_conf)
        self.validator = FstabValidator(
            self.runner,
            config.paths.fstab,
            config.paths.fstab_tmp_backup,
        )
        self.table: ParameterTable = build_parameter_table(
            config, self.runner, self.sysctl, self.sysctl_file
        )

    def _apply_sysctl_rows(self, report: OperationReport, rows: List[TuningParameter]):
        """Apply rows, then reload sysctl.conf if any of them was written."""
        results = self.executor.apply_all(rows)
        report.results.extend(results)
        if any(r.outcome == Outcome.APPLIED and r.kind == ParameterKind.SYSCTL for r in results):
            self.sysctl.reload(self.config.paths.sysctl_conf)

    # =========================================================================
    # Operations
    # =========================================================================

    def optimize_cpu(self) -> OperationReport:
        logger.info("Optimizing CPU configuration (Basic)...")
        report = OperationReport(name="cpu")

        if self.runner.which("cpufreq-set"):
            report.results.extend(self.executor.apply_all(self.table.cpu))
        else:
            logger.warning("cpufreq-set not found. Skipping CPU governor setting.")
            report.notes.append("governor skipped")

        if self.runner.which("numactl"):
            logger.info("Enabling NUMA awareness for optimized memory access.")
            result = self.runner.run(["numactl", "--hardware"])
            if result.returncode != 0:
                logger.warning(f"numactl --hardware exited with status {result.returncode}.")
        else:
            logger.warning("numactl not found. Skipping NUMA topology report.")
            report.notes.append("numa skipped")

        summary("CPU optimization completed.")
        return report

    def optimize_memory(self) -> OperationReport:
        logger.info("Optimizing memory usage (Basic)...")
        report = OperationReport(name="memory")
        self._apply_sysctl_rows(report, self.table.memory)
        summary("Memory optimization completed.")
        return report

    def optimize_disk_io(self) -> OperationReport:
        """
        Read-ahead and root filesystem mount options.

        Raises:
            FstabValidationError: If the mount table is invalid before or
                after the edit (fatal)
        """
        logger.info("Optimizing disk I/O (Basic)...")
        report = OperationReport(name="disk")
        disk = self.config.disk

        self.validator.save_pre_edit_copy()
        self.validator.validate_fstab()

        report.results.extend(self.executor.apply_all(self.table.disk))

        options = ",".join(disk.mount_options)
        logger.info(f"Updating {self.config.paths.fstab} to include '{options}'.")
        fstab = FstabFile(self.config.paths.fstab)
        try:
            changed = fstab.add_options(disk.root_mountpoint, disk.mount_options)
        except KeyError as e:
            logger.warning(f"{e.args[0]}. Skipping mount options.")
            changed = False
            report.notes.append("no root entry")

        if changed:
            fstab.save()
            report.notes.append("mount options updated")
            self.validator.validate_fstab()
            result = self.runner.run(["mount", "-a"])
            if result.returncode == 0:
                logger.info("Disk I/O optimization applied successfully.")
            else:
                logger.warning(f"mount -a exited with status {result.returncode}.")
        elif "no root entry" not in report.notes:
            logger.info(f"{disk.root_mountpoint} is already mounted with {options}.")

        summary("Disk I/O optimization completed.")
        return report

    def configure_network(self) -> OperationReport:
        logger.info("Configuring network for low latency...")
        report = OperationReport(name="network")
        self._apply_sysctl_rows(report, self.table.network)
        summary("Network optimization completed.")
        return report

    def apply_kernel_tuning(self) -> OperationReport:
        logger.info("Applying kernel tuning...")
        report = OperationReport(name="kernel")
        self._apply_sysctl_rows(report, self.table.kernel)
        summary("Kernel tuning completed.")
        return report

    def sequence(self) -> List[Callable[[], OperationReport]]:
        """Operations in the order they run for the 'all' and super paths."""
        return [
            self.optimize_cpu,
            self.optimize_memory,
            self.optimize_disk_io,
            self.configure_network,
            self.apply_kernel_tuning,
        ]

    def run_all(self) -> List[OperationReport]:
        return [operation() for operation in self.sequence()]

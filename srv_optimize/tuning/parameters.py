"""
Declarative tuning table.

Each TuningParameter knows how to read its current value and how to write
the desired one; TuningExecutor applies any row the same way.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from ..config import Config
from ..logs import get_logger
from ..system.command import CommandRunner
from ..system.sysctl import Sysctl, SysctlFile, normalize

logger = get_logger("tuning")

GOVERNOR_PATH = "/sys/devices/system/cpu/cpu{n}/cpufreq/scaling_governor"


class ParameterKind(str, Enum):
    """How a parameter is applied live."""
    SYSCTL = "SYSCTL"
    GOVERNOR = "GOVERNOR"
    BLOCKDEV = "BLOCKDEV"


class ValueSource(str, Enum):
    """Where a sysctl row reads its current value from."""
    LIVE = "LIVE"      # sysctl -n
    FILE = "FILE"      # sysctl.conf, matched against the live value


@dataclass
class TuningParameter:
    """A key, its target value and the functions that read and write it."""
    name: str
    key: str
    desired: str
    read: Callable[[], Optional[str]]
    write: Callable[[str], bool]
    kind: ParameterKind = ParameterKind.SYSCTL
    already_message: str = ""

    def matches(self, current: Optional[str]) -> bool:
        return current is not None and normalize(current) == normalize(self.desired)

    @property
    def skip_message(self) -> str:
        return self.already_message or f"{self.key} is already set to {self.desired}."


@dataclass
class ParameterTable:
    """Tuning rows grouped by operation."""
    cpu: List[TuningParameter] = field(default_factory=list)
    memory: List[TuningParameter] = field(default_factory=list)
    disk: List[TuningParameter] = field(default_factory=list)
    network: List[TuningParameter] = field(default_factory=list)
    kernel: List[TuningParameter] = field(default_factory=list)

    def all(self) -> List[TuningParameter]:
        return self.cpu + self.memory + self.disk + self.network + self.kernel


def sysctl_parameter(
    name: str,
    key: str,
    desired,
    sysctl: Sysctl,
    conf: SysctlFile,
    source: ValueSource = ValueSource.LIVE,
    already_message: str = "",
) -> TuningParameter:
    """
    Row for a kernel parameter persisted in sysctl.conf.

    Writing upserts the file line and applies the value with `sysctl -w`.
    """
    def read() -> Optional[str]:
        if source == ValueSource.LIVE:
            return sysctl.get(key)
        # a file value only counts once the kernel carries it too
        saved = conf.get(key)
        if saved is None:
            return None
        live = sysctl.get(key)
        return saved if live == saved else live

    def write(value: str) -> bool:
        conf.upsert(key, value)
        return sysctl.set(key, value)

    return TuningParameter(
        name=name,
        key=key,
        desired=str(desired),
        read=read,
        write=write,
        kind=ParameterKind.SYSCTL,
        already_message=already_message,
    )


def governor_parameter(governor: str, runner: CommandRunner) -> TuningParameter:
    """Row for the CPU frequency governor of every CPU."""
    def read() -> Optional[str]:
        governors = set()
        for n in range(runner.cpu_count()):
            value = runner.read_text(GOVERNOR_PATH.format(n=n))
            if value:
                governors.add(value)
        if not governors:
            return None
        return ",".join(sorted(governors))

    def write(value: str) -> bool:
        ok = True
        for n in range(runner.cpu_count()):
            result = runner.run(["cpufreq-set", "-c", str(n), "-g", value])
            if result.returncode != 0:
                logger.warning(f"cpufreq-set failed on CPU {n} (exit {result.returncode}).")
                ok = False
        if ok:
            logger.info(f"CPU governor set to '{value}'.")
        return ok

    return TuningParameter(
        name="CPU governor",
        key="scaling_governor",
        desired=governor,
        read=read,
        write=write,
        kind=ParameterKind.GOVERNOR,
        already_message=f"CPU governor is already '{governor}'.",
    )


def read_ahead_parameter(device: str, sectors: int, runner: CommandRunner) -> TuningParameter:
    """Row for the read-ahead (in 512-byte sectors) of a block device."""
    def read() -> Optional[str]:
        result = runner.run(["blockdev", "--getra", device])
        if result.returncode == 0:
            return result.stdout.strip()
        return None

    def write(value: str) -> bool:
        result = runner.run(["blockdev", "--setra", value, device])
        if result.returncode != 0:
            logger.warning(f"blockdev --setra {value} {device} failed (exit {result.returncode}).")
            return False
        logger.info(f"Read-ahead on {device} set to {value} sectors.")
        return True

    return TuningParameter(
        name="Read-ahead",
        key=f"read_ahead:{device}",
        desired=str(sectors),
        read=read,
        write=write,
        kind=ParameterKind.BLOCKDEV,
    )


def build_parameter_table(
    config: Config,
    runner: CommandRunner,
    sysctl: Sysctl,
    conf: SysctlFile,
) -> ParameterTable:
    """The full set of tunables, with targets taken from `config`."""
    return ParameterTable(
        cpu=[
            governor_parameter(config.cpu.governor, runner),
        ],
        memory=[
            sysctl_parameter(
                "Swappiness", "vm.swappiness", config.memory.swappiness,
                sysctl, conf, source=ValueSource.LIVE,
                already_message=f"vm.swappiness is already set to {config.memory.swappiness}.",
            ),
            sysctl_parameter(
                "HugePages", "vm.nr_hugepages", config.memory.hugepages,
                sysctl, conf, source=ValueSource.FILE,
                already_message="HugePages already configured.",
            ),
        ],
        disk=[
            read_ahead_parameter(config.disk.device, config.disk.read_ahead, runner),
        ],
        network=[
            sysctl_parameter(
                "Socket backlog", "net.core.somaxconn", config.network.somaxconn,
                sysctl, conf, source=ValueSource.LIVE,
                already_message="Network parameters already optimized.",
            ),
            sysctl_parameter(
                "TIME_WAIT reuse", "net.ipv4.tcp_tw_reuse", config.network.tcp_tw_reuse,
                sysctl, conf, source=ValueSource.LIVE,
            ),
        ],
        kernel=[
            sysctl_parameter(
                "File handles", "fs.file-max", config.kernel.file_max,
                sysctl, conf, source=ValueSource.FILE,
                already_message="Kernel parameters already configured.",
            ),
        ],
    )


"""
Configuration management for srv_optimize.

Supports:
- TOML config files
- Command-line overrides
- Sensible defaults (Ubuntu 22.04 compute server)

Priority (highest to lowest):
1. Command-line arguments
2. Config file
3. Defaults
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib


# Default config file locations (searched in order)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / "srv_optimize.toml",
    Path("/etc/srv_optimize/config.toml"),
    Path.home() / ".config" / "srv_optimize" / "config.toml",
]

SECTIONS = ("paths", "dependencies", "cpu", "memory", "disk", "network", "kernel")


@dataclass
class PathsConfig:
    """Host files touched by the optimizer."""
    grub: str = "/etc/default/grub"
    fstab: str = "/etc/fstab"
    sysctl_conf: str = "/etc/sysctl.conf"
    fstab_tmp_backup: str = "/tmp/fstab.backup"
    backup_root: str = "/var/backups"
    log_file: str = "/var/log/server_optimization.log"
    summary_file: str = "/var/log/server_optimization_summary.log"

    def managed_files(self) -> Dict[str, str]:
        """Backup file name -> host path for the files covered by backups."""
        return {
            "grub.bak": self.grub,
            "fstab.bak": self.fstab,
            "sysctl.conf.bak": self.sysctl_conf,
        }


@dataclass
class DependenciesConfig:
    """Host packages required before any tuning."""
    packages: List[str] = field(default_factory=lambda: ["cpufrequtils", "numactl"])


@dataclass
class CpuConfig:
    governor: str = "performance"


@dataclass
class MemoryConfig:
    swappiness: int = 10
    hugepages: int = 512


@dataclass
class DiskConfig:
    """Disk I/O targets."""
    device: str = "/dev/sda"
    read_ahead: int = 2048
    root_mountpoint: str = "/"
    mount_options: List[str] = field(default_factory=lambda: ["noatime", "nodiratime"])


@dataclass
class NetworkConfig:
    somaxconn: int = 4096
    tcp_tw_reuse: int = 1


@dataclass
class KernelConfig:
    file_max: int = 2097152


@dataclass
class Config:
    """Main configuration container."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    dependencies: DependenciesConfig = field(default_factory=DependenciesConfig)
    cpu: CpuConfig = field(default_factory=CpuConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    disk: DiskConfig = field(default_factory=DiskConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    kernel: KernelConfig = field(default_factory=KernelConfig)

    # Source tracking
    _config_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load configuration from file.

        Args:
            config_path: Explicit path to config file. If None, searches default locations.

        Returns:
            Config instance with loaded values
        """
        config = cls()

        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            path = cls._find_config_file()

        if path:
            config = cls._load_from_file(path)
            config._config_file = path

        return config

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file in default locations."""
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load config from TOML file."""
        with open(path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        for section in SECTIONS:
            if section in data and not isinstance(data[section], dict):
                raise ValueError(f"[{section}] must be a table")

        config = cls()

        # Paths
        if "paths" in data:
            p = data["paths"]
            config.paths = PathsConfig(
                grub=p.get("grub", config.paths.grub),
                fstab=p.get("fstab", config.paths.fstab),
                sysctl_conf=p.get("sysctl_conf", config.paths.sysctl_conf),
                fstab_tmp_backup=p.get("fstab_tmp_backup", config.paths.fstab_tmp_backup),
                backup_root=p.get("backup_root", config.paths.backup_root),
                log_file=p.get("log_file", config.paths.log_file),
                summary_file=p.get("summary_file", config.paths.summary_file),
            )

        # Dependencies
        if "dependencies" in data:
            deps = data["dependencies"]
            config.dependencies = DependenciesConfig(
                packages=deps.get("packages", config.dependencies.packages),
            )

        if "cpu" in data:
            config.cpu = CpuConfig(
                governor=data["cpu"].get("governor", config.cpu.governor),
            )

        if "memory" in data:
            mem = data["memory"]
            config.memory = MemoryConfig(
                swappiness=mem.get("swappiness", config.memory.swappiness),
                hugepages=mem.get("hugepages", config.memory.hugepages),
            )

        if "disk" in data:
            disk = data["disk"]
            config.disk = DiskConfig(
                device=disk.get("device", config.disk.device),
                read_ahead=disk.get("read_ahead", config.disk.read_ahead),
                root_mountpoint=disk.get("root_mountpoint", config.disk.root_mountpoint),
                mount_options=disk.get("mount_options", config.disk.mount_options),
            )

        if "network" in data:
            net = data["network"]
            config.network = NetworkConfig(
                somaxconn=net.get("somaxconn", config.network.somaxconn),
                tcp_tw_reuse=net.get("tcp_tw_reuse", config.network.tcp_tw_reuse),
            )

        if "kernel" in data:
            config.kernel = KernelConfig(
                file_max=data["kernel"].get("file_max", config.kernel.file_max),
            )

        return config

    def override_from_args(self, args) -> "Config":
        """
        Override config values from argparse namespace.

        Args with value None are ignored (keeping config file values).
        """
        if getattr(args, "log_file", None):
            self.paths.log_file = args.log_file
        if getattr(args, "summary_file", None):
            self.paths.summary_file = args.summary_file
        if getattr(args, "backup_root", None):
            self.paths.backup_root = args.backup_root

        return self

    def _type_errors(self) -> List[str]:
        """Values that do not have the type their section expects."""
        errors = []

        strings = [
            ("paths.grub", self.paths.grub),
            ("paths.fstab", self.paths.fstab),
            ("paths.sysctl_conf", self.paths.sysctl_conf),
            ("paths.fstab_tmp_backup", self.paths.fstab_tmp_backup),
            ("paths.backup_root", self.paths.backup_root),
            ("paths.log_file", self.paths.log_file),
            ("paths.summary_file", self.paths.summary_file),
            ("cpu.governor", self.cpu.governor),
            ("disk.device", self.disk.device),
            ("disk.root_mountpoint", self.disk.root_mountpoint),
        ]
        integers = [
            ("memory.swappiness", self.memory.swappiness),
            ("memory.hugepages", self.memory.hugepages),
            ("disk.read_ahead", self.disk.read_ahead),
            ("network.somaxconn", self.network.somaxconn),
            ("network.tcp_tw_reuse", self.network.tcp_tw_reuse),
            ("kernel.file_max", self.kernel.file_max),
        ]
        string_lists = [
            ("dependencies.packages", self.dependencies.packages),
            ("disk.mount_options", self.disk.mount_options),
        ]

        for name, value in strings:
            if not isinstance(value, str):
                errors.append(f"{name} must be a string")
        for name, value in integers:
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer")
        for name, value in string_lists:
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                errors.append(f"{name} must be a list of strings")

        return errors

    def validate(self) -> list:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = self._type_errors()
        if errors:
            # range checks below assume the right types
            return errors

        for name, value in (
            ("paths.fstab", self.paths.fstab),
            ("paths.sysctl_conf", self.paths.sysctl_conf),
            ("paths.backup_root", self.paths.backup_root),
            ("paths.log_file", self.paths.log_file),
            ("paths.summary_file", self.paths.summary_file),
        ):
            if not value:
                errors.append(f"{name} is required")

        if not 0 <= self.memory.swappiness <= 200:
            errors.append("memory.swappiness must be between 0 and 200")
        if self.memory.hugepages < 0:
            errors.append("memory.hugepages must not be negative")
        if self.disk.read_ahead < 0:
            errors.append("disk.read_ahead must not be negative")
        if not self.disk.device:
            errors.append("disk.device is required")
        if not self.disk.root_mountpoint:
            errors.append("disk.root_mountpoint is required")
        if self.network.somaxconn < 1:
            errors.append("network.somaxconn must be at least 1")
        if self.network.tcp_tw_reuse not in (0, 1, 2):
            errors.append("network.tcp_tw_reuse must be 0, 1 or 2")
        if self.kernel.file_max < 1:
            errors.append("kernel.file_max must be at least 1")

        return errors

    def summary(self, include_config_path: bool = True) -> str:
        """Generate human-readable config summary."""
        lines = []

        if include_config_path:
            if self._config_file:
                lines.append(f"Config: {self._config_file}")
            else:
                lines.append("Config: (defaults)")

        lines.append(f"Logs: {self.paths.log_file} (summary: {self.paths.summary_file})")
        lines.append(f"Backups: {self.paths.backup_root}")
        lines.append(f"CPU: governor {self.cpu.governor}")
        lines.append(f"Memory: swappiness {self.memory.swappiness}, hugepages {self.memory.hugepages}")
        lines.append(
            f"Disk: read-ahead {self.disk.read_ahead} on {self.disk.device}, "
            f"{','.join(self.disk.mount_options)} on {self.disk.root_mountpoint}"
        )
        lines.append(f"Network: somaxconn {self.network.somaxconn}, tcp_tw_reuse {self.network.tcp_tw_reuse}")
        lines.append(f"Kernel: file-max {self.kernel.file_max}")

        return "\n".join(lines)


def create_example_config(path: str = "srv_optimize.toml"):
    """Create example config file."""
    example = Path(__file__).parent / "config.example.toml"
    target = Path(path)

    if target.exists():
        raise FileExistsError(f"Config file already exists: {path}")

    target.write_text(example.read_text())
    return target

"""
Shared fixtures: a throwaway /etc under tmp_path, a FakeHost and logging
routed to temporary files.
"""

import io

import pytest
from rich.console import Console

from srv_optimize.config import Config
from srv_optimize.logs import configure_logging, reset_logging
from srv_optimize.tuning.operations import TuningOperations

from mocks import FakeHost


GRUB = """GRUB_DEFAULT=0
GRUB_TIMEOUT_STYLE=hidden
GRUB_TIMEOUT=0
GRUB_CMDLINE_LINUX_DEFAULT="console=tty1 console=ttyS0"
"""

FSTAB = """# /etc/fstab: static file system information.
LABEL=cloudimg-rootfs\t/\t ext4\tdiscard,errors=remount-ro\t0 1
LABEL=UEFI\t/boot/efi\tvfat\tumask=0077\t0 1
"""

SYSCTL_CONF = """#
# /etc/sysctl.conf - Configuration file for setting system variables
#
#kernel.domainname = example.com
net.ipv4.ip_forward=1
vm.swappiness = 60
"""


@pytest.fixture
def config(tmp_path) -> Config:
    etc = tmp_path / "etc"
    (etc / "default").mkdir(parents=True)
    (etc / "default" / "grub").write_text(GRUB)
    (etc / "fstab").write_text(FSTAB)
    (etc / "sysctl.conf").write_text(SYSCTL_CONF)

    config = Config()
    config.paths.grub = str(etc / "default" / "grub")
    config.paths.fstab = str(etc / "fstab")
    config.paths.sysctl_conf = str(etc / "sysctl.conf")
    config.paths.fstab_tmp_backup = str(tmp_path / "tmp" / "fstab.backup")
    config.paths.backup_root = str(tmp_path / "backups")
    config.paths.log_file = str(tmp_path / "log" / "server_optimization.log")
    config.paths.summary_file = str(tmp_path / "log" / "server_optimization_summary.log")
    return config


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def ops(config, host) -> TuningOperations:
    return TuningOperations(config, runner=host)


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture(autouse=True)
def logging_to_tmp(config, console_output):
    console = Console(file=console_output, width=200, color_system=None)
    configure_logging(config.paths.log_file, config.paths.summary_file, console=console)
    yield
    reset_logging()


@pytest.fixture
def summary_lines(config):
    """Messages written to the summary log so far."""
    def read():
        with open(config.paths.summary_file) as f:
            return [line.rstrip("\n").split("[SUMMARY] ", 1)[1] for line in f if line.strip()]
    return read

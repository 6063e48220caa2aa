"""
Tests for the five tuning operations against a FakeHost.
"""

from pathlib import Path

import pytest

from srv_optimize.errors import FstabValidationError
from srv_optimize.system.fstab import FstabFile
from srv_optimize.system.sysctl import SysctlFile
from srv_optimize.tuning.executor import Outcome
from srv_optimize.tuning.operations import TuningOperations

from mocks import FakeHost


def _sysctl_text(config):
    return open(config.paths.sysctl_conf).read()


# =============================================================================
# CPU
# =============================================================================

def test_cpu_sets_governor_and_reports_numa(ops, host, config, summary_lines):
    report = ops.optimize_cpu()

    assert report.changed
    assert set(host.governors.values()) == {"performance"}
    assert host.commands("numactl") == [["numactl", "--hardware"]]
    assert summary_lines() == ["CPU optimization completed."]
    assert "node 0 cpus: 0 1" in open(config.paths.log_file).read()


def test_cpu_without_cpufreq_set_warns_and_continues(config, summary_lines, console_output):
    host = FakeHost(tools={"numactl"})
    report = TuningOperations(config, runner=host).optimize_cpu()

    assert report.results == []
    assert "governor skipped" in report.notes
    assert host.commands("cpufreq-set") == []
    assert host.commands("numactl")
    assert "[WARNING] cpufreq-set not found. Skipping CPU governor setting." in console_output.getvalue()
    assert summary_lines() == ["CPU optimization completed."]


# =============================================================================
# Memory
# =============================================================================

def test_memory_writes_swappiness_and_hugepages(ops, host, config):
    report = ops.optimize_memory()

    conf = SysctlFile(config.paths.sysctl_conf)
    assert conf.get("vm.swappiness") == "10"
    assert conf.get("vm.nr_hugepages") == "512"
    assert host.sysctl["vm.swappiness"] == "10"
    assert host.sysctl["vm.nr_hugepages"] == "512"
    assert [r.outcome for r in report.results] == [Outcome.APPLIED, Outcome.APPLIED]
    assert host.commands("sysctl")[-1] == ["sysctl", "-p", config.paths.sysctl_conf]


def test_memory_twice_leaves_one_line_per_key(ops, host, config):
    ops.optimize_memory()
    before = _sysctl_text(config)
    calls_before = len(host.calls)

    report = ops.optimize_memory()

    assert _sysctl_text(config) == before
    assert not report.changed
    conf = SysctlFile(config.paths.sysctl_conf)
    assert conf.count("vm.swappiness") == 1
    assert conf.count("vm.nr_hugepages") == 1
    # only the reads: no -w and no -p on the second pass
    assert all(c[:2] == ["sysctl", "-n"] for c in host.calls[calls_before:])


def test_swappiness_already_at_target_writes_nothing(config):
    host = FakeHost()
    host.sysctl["vm.swappiness"] = "10"
    ops = TuningOperations(config, runner=host)

    ops.optimize_memory()

    assert host.sysctl_writes("vm.swappiness") == []
    conf = SysctlFile(config.paths.sysctl_conf)
    assert conf.count("vm.swappiness") == 1
    assert conf.get("vm.swappiness") == "60"


# =============================================================================
# Disk I/O
# =============================================================================

def test_disk_sets_read_ahead_and_mount_options(ops, host, config, summary_lines):
    report = ops.optimize_disk_io()

    assert host.read_ahead["/dev/sda"] == "2048"
    root = FstabFile(config.paths.fstab).find("/")
    assert root.options[-2:] == ["noatime", "nodiratime"]
    assert len(host.commands("findmnt")) == 2
    assert host.commands("mount") == [["mount", "-a"]]
    assert "mount options updated" in report.notes
    assert summary_lines() == ["Disk I/O optimization completed."]


def test_disk_twice_does_not_touch_fstab_again(ops, host, config):
    ops.optimize_disk_io()
    after_first = open(config.paths.fstab).read()

    ops.optimize_disk_io()

    assert open(config.paths.fstab).read() == after_first
    assert host.commands("mount") == [["mount", "-a"]]
    assert len(host.commands("blockdev")) == 3  # getra, setra, getra


def test_disk_keeps_pre_edit_copy(ops, config):
    original = open(config.paths.fstab).read()

    ops.optimize_disk_io()

    assert open(config.paths.fstab_tmp_backup).read() == original


def test_invalid_fstab_before_edit_is_fatal(ops, host, config):
    original = open(config.paths.fstab).read()
    host.findmnt_default = 1

    with pytest.raises(FstabValidationError) as exc_info:
        ops.optimize_disk_io()

    assert exc_info.value.exit_code == 1
    assert exc_info.value.restored
    assert open(config.paths.fstab).read() == original
    assert host.commands("blockdev") == []
    assert host.commands("mount") == []


def test_invalid_fstab_after_edit_restores_original(ops, host, config, summary_lines):
    original = open(config.paths.fstab).read()
    host.findmnt_returncodes = [0, 1]

    with pytest.raises(FstabValidationError):
        ops.optimize_disk_io()

    assert open(config.paths.fstab).read() == original
    assert host.commands("mount") == []
    assert summary_lines() == []


def test_disk_without_root_entry_warns(config, console_output):
    Path(config.paths.fstab).write_text("LABEL=UEFI\t/boot/efi\tvfat\tumask=0077\t0 1\n")
    host = FakeHost()

    report = TuningOperations(config, runner=host).optimize_disk_io()

    assert "no root entry" in report.notes
    assert host.commands("mount") == []
    assert "No fstab entry for mount point /" in console_output.getvalue()


# =============================================================================
# Network and kernel
# =============================================================================

def test_network_writes_backlog_and_tw_reuse(config, summary_lines):
    host = FakeHost()
    host.sysctl["net.core.somaxconn"] = "128"
    ops = TuningOperations(config, runner=host)

    ops.configure_network()

    conf = SysctlFile(config.paths.sysctl_conf)
    assert conf.get("net.core.somaxconn") == "4096"
    assert conf.get("net.ipv4.tcp_tw_reuse") == "1"
    assert host.sysctl["net.core.somaxconn"] == "4096"
    assert host.sysctl["net.ipv4.tcp_tw_reuse"] == "1"
    assert summary_lines() == ["Network optimization completed."]


def test_kernel_file_max_is_idempotent(ops, host, config, summary_lines):
    ops.apply_kernel_tuning()
    ops.apply_kernel_tuning()

    conf = SysctlFile(config.paths.sysctl_conf)
    assert conf.count("fs.file-max") == 1
    assert host.sysctl["fs.file-max"] == "2097152"
    assert len(host.sysctl_writes("fs.file-max")) == 1
    assert summary_lines() == ["Kernel tuning completed.", "Kernel tuning completed."]


# =============================================================================
# All
# =============================================================================

def test_run_all_order_and_summaries(ops, summary_lines):
    reports = ops.run_all()

    assert [r.name for r in reports] == ["cpu", "memory", "disk", "network", "kernel"]
    assert summary_lines() == [
        "CPU optimization completed.",
        "Memory optimization completed.",
        "Disk I/O optimization completed.",
        "Network optimization completed.",
        "Kernel tuning completed.",
    ]


def test_run_all_twice_is_stable(ops, host, config):
    ops.run_all()
    sysctl_after = _sysctl_text(config)
    fstab_after = open(config.paths.fstab).read()

    reports = ops.run_all()

    assert not any(r.changed for r in reports)
    assert _sysctl_text(config) == sysctl_after
    assert open(config.paths.fstab).read() == fstab_after


# =============================================================================
# Saved but not live
# =============================================================================

def test_saved_value_not_yet_live_is_applied(config):
    Path(config.paths.sysctl_conf).write_text("fs.file-max=2097152\nvm.nr_hugepages=512\n")
    host = FakeHost()
    ops = TuningOperations(config, runner=host)

    ops.apply_kernel_tuning()
    ops.optimize_memory()

    assert host.sysctl["fs.file-max"] == "2097152"
    assert host.sysctl["vm.nr_hugepages"] == "512"
    conf = SysctlFile(config.paths.sysctl_conf)
    assert conf.count("fs.file-max") == 1
    assert conf.count("vm.nr_hugepages") == 1


def test_saved_and_live_value_is_left_alone(config):
    Path(config.paths.sysctl_conf).write_text("fs.file-max=2097152\n")
    host = FakeHost()
    host.sysctl["fs.file-max"] = "2097152"

    TuningOperations(config, runner=host).apply_kernel_tuning()

    assert host.sysctl_writes("fs.file-max") == []
    assert ["sysctl", "-p", config.paths.sysctl_conf] not in host.calls


def test_failed_write_does_not_reload(config, console_output):
    host = FakeHost()
    host.sysctl_readonly.add("fs.file-max")

    report = TuningOperations(config, runner=host).apply_kernel_tuning()

    assert [r.outcome for r in report.results] == [Outcome.FAILED]
    assert ["sysctl", "-p", config.paths.sysctl_conf] not in host.calls
    assert "sysctl -w fs.file-max=2097152 failed (exit 255)." in console_output.getvalue()

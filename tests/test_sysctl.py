"""
Tests for sysctl.conf parsing/upserts and the live sysctl wrapper.
"""

from srv_optimize.system.sysctl import Sysctl, SysctlFile, normalize

from mocks import FakeHost


def test_parse_skips_comments_and_trims_spaces(config):
    values = SysctlFile(config.paths.sysctl_conf).parse()

    assert values == {"net.ipv4.ip_forward": "1", "vm.swappiness": "60"}
    assert "kernel.domainname" not in values


def test_upsert_replaces_existing_line_in_place(config):
    conf = SysctlFile(config.paths.sysctl_conf)

    assert conf.upsert("vm.swappiness", "10") is True

    lines = conf.path.read_text().splitlines()
    assert "vm.swappiness=10" in lines
    assert "vm.swappiness = 60" not in lines
    assert lines.index("vm.swappiness=10") == lines.index("net.ipv4.ip_forward=1") + 1
    assert conf.count("vm.swappiness") == 1


def test_upsert_appends_new_key_and_keeps_comments(config):
    conf = SysctlFile(config.paths.sysctl_conf)

    conf.upsert("fs.file-max", "2097152")

    text = conf.path.read_text()
    assert text.endswith("fs.file-max=2097152\n")
    assert "#kernel.domainname = example.com" in text


def test_upsert_collapses_duplicate_assignments(tmp_path):
    path = tmp_path / "sysctl.conf"
    path.write_text("vm.swappiness=30\nnet.core.somaxconn=128\nvm.swappiness=40\n")
    conf = SysctlFile(str(path))

    conf.upsert("vm.swappiness", "10")

    assert path.read_text() == "vm.swappiness=10\nnet.core.somaxconn=128\n"


def test_upsert_is_a_no_op_when_line_already_matches(tmp_path):
    path = tmp_path / "sysctl.conf"
    path.write_text("vm.swappiness=10\n")

    assert SysctlFile(str(path)).upsert("vm.swappiness", "10") is False


def test_upsert_creates_missing_file(tmp_path):
    conf = SysctlFile(str(tmp_path / "sysctl.d" / "99-tuning.conf"))

    assert conf.get("vm.swappiness") is None
    conf.upsert("vm.swappiness", "10")

    assert conf.get("vm.swappiness") == "10"


def test_live_get_set_and_reload(config):
    host = FakeHost()
    sysctl = Sysctl(host)

    assert sysctl.get("vm.swappiness") == "60"
    assert sysctl.get("no.such.key") is None

    assert sysctl.set("vm.swappiness", "10") is True
    assert host.sysctl["vm.swappiness"] == "10"

    SysctlFile(config.paths.sysctl_conf).upsert("net.core.somaxconn", "8192")
    assert sysctl.reload(config.paths.sysctl_conf) is True
    assert host.sysctl["net.core.somaxconn"] == "8192"


def test_normalize_collapses_tabs():
    assert normalize("4096\t87380   6291456\n") == "4096 87380 6291456"
    assert normalize(None) is None

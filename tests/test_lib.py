from __future__ import annotations

import pytest

from pi_setup.lib.command import CommandError, SubprocessExecutor, run_cmd
from pi_setup.lib.hwdetect import is_raspberry_pi, read_board_model, read_os_release
from pi_setup.lib.manifests import load_manifest
from pi_setup.lib.net import NetworkFetchError, download, run_remote_installer
from pi_setup.lib.pkg import apt_install, dpkg_missing, read_dpkg_status

from .conftest import write_dpkg_status


def test_run_cmd_dry_run_does_not_execute():
    r = run_cmd(["definitely-not-a-real-binary"], dry_run=True)
    assert r.returncode == 0
    assert r.argv == ["definitely-not-a-real-binary"]


def test_subprocess_executor_raises_with_stderr(tmp_path):
    ex = SubprocessExecutor()
    with pytest.raises(CommandError) as exc:
        ex.run(["sh", "-c", "echo nope >&2; exit 3"])
    assert exc.value.result.returncode == 3
    assert "nope" in str(exc.value)


def test_subprocess_executor_check_false_returns_result():
    r = SubprocessExecutor().run(["sh", "-c", "echo hi; exit 4"], check=False)
    assert r.returncode == 4
    assert r.stdout.strip() == "hi"


def test_apt_install_uses_sudo_when_not_root(executor):
    apt_install(executor, ["git", "tmux"], sudo=True)
    apt_install(executor, ["zsh"], sudo=False)
    apt_install(executor, [], sudo=True)
    assert executor.calls == [
        ["sudo", "apt-get", "install", "-y", "git", "tmux"],
        ["apt-get", "install", "-y", "zsh"],
    ]


def test_dpkg_status_parsing(tmp_path):
    status = tmp_path / "status"
    status.write_text(
        "Package: git\nStatus: install ok installed\n\n"
        "Package: tmux\nStatus: deinstall ok config-files\n\n"
        "Package: htop\nStatus: install ok installed\n",
        encoding="utf-8",
    )
    assert read_dpkg_status(str(status))["tmux"] == "deinstall ok config-files"
    assert dpkg_missing(["git", "tmux", "tree", "htop"], status_path=str(status)) == ["tmux", "tree"]


def test_dpkg_missing_without_database(tmp_path):
    assert dpkg_missing(["git"], status_path=str(tmp_path / "nope")) == ["git"]


def test_download_failure_is_a_network_fetch_error(executor):
    executor.fail_when = lambda argv: "curl" in argv
    with pytest.raises(NetworkFetchError):
        download(executor, "https://example.invalid/key.gpg", "/tmp/key.gpg", sudo=True)
    assert executor.calls[0][:2] == ["sudo", "curl"]


def test_remote_installer_fetches_then_runs(executor):
    run_remote_installer(executor, "https://sh.rustup.rs", ["-y"])

    fetch, run = executor.calls
    assert fetch[0] == "curl" and fetch[-1] == "https://sh.rustup.rs"
    script = fetch[fetch.index("-o") + 1]
    assert run == ["sh", script, "-y"]


def test_remote_installer_does_not_run_after_fetch_failure(executor):
    executor.fail_when = lambda argv: argv[0] == "curl"
    with pytest.raises(NetworkFetchError):
        run_remote_installer(executor, "https://astral.sh/uv/install.sh")
    assert len(executor.calls) == 1


def test_board_model_from_device_tree(tmp_path):
    dt = tmp_path / "model"
    dt.write_bytes(b"Raspberry Pi 4 Model B Rev 1.4\x00")
    cpuinfo = tmp_path / "cpuinfo"
    cpuinfo.write_text("processor\t: 0\n", encoding="utf-8")

    assert read_board_model(cpuinfo_path=str(cpuinfo), dt_model_path=str(dt)) == "Raspberry Pi 4 Model B Rev 1.4"
    assert is_raspberry_pi(cpuinfo_path=str(cpuinfo), dt_model_path=str(dt))


def test_board_model_from_cpuinfo(tmp_path):
    cpuinfo = tmp_path / "cpuinfo"
    cpuinfo.write_text("Hardware\t: BCM2835\nModel\t\t: Raspberry Pi Zero 2 W Rev 1.0\n", encoding="utf-8")
    missing_dt = str(tmp_path / "no-model")

    assert read_board_model(cpuinfo_path=str(cpuinfo), dt_model_path=missing_dt) == "Raspberry Pi Zero 2 W Rev 1.0"
    assert is_raspberry_pi(cpuinfo_path=str(cpuinfo), dt_model_path=missing_dt)


def test_not_a_pi(tmp_path):
    cpuinfo = tmp_path / "cpuinfo"
    cpuinfo.write_text("model name\t: Intel(R) Core(TM) i7\n", encoding="utf-8")
    assert not is_raspberry_pi(cpuinfo_path=str(cpuinfo), dt_model_path=str(tmp_path / "none"))


def test_os_release_parsing(tmp_path):
    p = tmp_path / "os-release"
    p.write_text('# comment\nID=raspbian\nVERSION_CODENAME=bookworm\nPRETTY_NAME="Raspbian GNU/Linux 12"\n', encoding="utf-8")
    data = read_os_release(str(p))
    assert data["ID"] == "raspbian"
    assert data["PRETTY_NAME"] == "Raspbian GNU/Linux 12"
    assert read_os_release(str(tmp_path / "missing")) == {}


def test_bundled_manifest_loads():
    m = load_manifest()
    assert "build-essential" in m.packages
    assert m.term_marker == "export TERM=xterm-256color"
    assert m.installer("rust") == {"url": "https://sh.rustup.rs", "args": ["-y"]}
    assert m.aliases_block.startswith(m.aliases_marker)
    assert m.apt_refresh_max_age_hours > 0


def test_manifest_must_be_a_mapping(tmp_path):
    p = tmp_path / "m.yaml"
    p.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_manifest(str(p))


def test_manifest_rejects_non_positive_refresh_window(tmp_path):
    p = tmp_path / "m.yaml"
    p.write_text("apt:\n  refresh_max_age_hours: 0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_manifest(str(p)).apt_refresh_max_age_hours


def test_dpkg_missing_reports_each_package_once(tmp_path):
    status = tmp_path / "status"
    write_dpkg_status(status, ["git"])
    assert dpkg_missing(["git", "git", "curl"], status_path=str(status)) == ["curl"]


def test_dpkg_multiarch_any_installed_stanza_counts(tmp_path):
    status = tmp_path / "status"
    status.write_text(
        "Package: libc6\nStatus: install ok installed\nArchitecture: arm64\n\n"
        "Package: libc6\nStatus: deinstall ok config-files\nArchitecture: armhf\n\n"
        "Package: zlib1g\nStatus: deinstall ok config-files\nArchitecture: armhf\n\n"
        "Package: zlib1g\nStatus: install ok installed\nArchitecture: arm64\n",
        encoding="utf-8",
    )
    assert dpkg_missing(["libc6", "zlib1g"], status_path=str(status)) == []


def test_configure_logging_falls_back_and_is_idempotent(tmp_path, monkeypatch):
    import logging

    from pi_setup.logging_utils import configure_logging

    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.delattr(root, "_pi_setup_log_path", raising=False)
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    fallback = tmp_path / "state"

    try:
        actual = configure_logging(log_path=str(blocker / "pi-setup.log"), fallback_dir=str(fallback))
        again = configure_logging(log_path="/elsewhere.log")

        assert actual == str(fallback / "pi-setup.log")
        assert again == actual
        assert len(root.handlers) == 2
    finally:
        for h in root.handlers:
            h.close()
        if hasattr(root, "_pi_setup_log_path"):
            delattr(root, "_pi_setup_log_path")

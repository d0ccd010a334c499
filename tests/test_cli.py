"""End-to-end runs of the command line against fake cargo/rustup executables."""
import os
import sys

import pytest

from conftest import COMPONENT
from release_build.config import CONFIG_ENV_VAR
from release_build.main import main

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="fake toolchain uses /bin/sh")

FAKE_CARGO = """#!/bin/sh
component=""
target=""
while [ $# -gt 0 ]; do
  case "$1" in
    -p) component="$2"; shift ;;
    --target) target="$2"; shift ;;
  esac
  shift
done
case "$target" in
  {ok_targets})
    mkdir -p "target/$target/release"
    printf 'fake binary' > "target/$target/release/$component"
    exit 0 ;;
esac
exit {fail_code}
"""


def _install_fake_toolchain(tmp_path, monkeypatch, ok_targets="x86_64-unknown-linux-musl", fail_code=101):
    bin_dir = tmp_path / "fakebin"
    bin_dir.mkdir()

    cargo = bin_dir / "cargo"
    cargo.write_text(FAKE_CARGO.format(ok_targets=ok_targets, fail_code=fail_code))
    cargo.chmod(0o755)

    rustup = bin_dir / "rustup"
    rustup.write_text("#!/bin/sh\nexit 1\n")
    rustup.chmod(0o755)

    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    root = tmp_path / "workspace"
    root.mkdir()
    return root


def test_linux_only_release_exits_zero(tmp_path, monkeypatch, capsys):
    root = _install_fake_toolchain(tmp_path, monkeypatch)

    assert main(["--root", str(root)]) == 0

    dist = root / "dist"
    assert sorted(p.name for p in dist.iterdir()) == [f"{COMPONENT}-linux-x86_64"]
    out = capsys.readouterr().out
    assert "WARN:" in out
    assert "ERROR: Windows build did not produce an .exe." in out
    assert f"{COMPONENT}-linux-x86_64" in out


def test_linux_binary_not_found_exits_one(tmp_path, monkeypatch, capsys):
    # Every cargo invocation "succeeds" without writing anything
    root = _install_fake_toolchain(tmp_path, monkeypatch, ok_targets="no-such-triple", fail_code=0)

    assert main(["--root", str(root)]) == 1

    assert "ERROR: Linux binary not found" in capsys.readouterr().out
    assert list((root / "dist").iterdir()) == []


def test_fallback_failure_exits_with_build_code(tmp_path, monkeypatch, capsys):
    root = _install_fake_toolchain(tmp_path, monkeypatch, ok_targets="no-such-triple", fail_code=3)

    assert main(["--root", str(root)]) == 3

    out = capsys.readouterr().out
    assert "falling back to host default target build" in out
    assert "ERROR:" in out


def test_custom_dist_dir_and_component(tmp_path, monkeypatch, capsys):
    root = _install_fake_toolchain(tmp_path, monkeypatch)
    dist = tmp_path / "out"

    assert main(["--root", str(root), "--dist-dir", str(dist), "--component", "other-app"]) == 0

    assert (dist / "other-app-linux-x86_64").is_file()


def test_dry_run_reports_missing_linux_binary(tmp_path, monkeypatch, capsys):
    root = _install_fake_toolchain(tmp_path, monkeypatch)

    assert main(["--root", str(root), "--dry-run"]) == 1

    out = capsys.readouterr().out
    assert "[DRY RUN] Would run: cargo build --release" in out
    assert not (root / "target").exists()
    assert not (root / "dist").exists()


def test_bad_config_exits_one(tmp_path, monkeypatch, capsys):
    root = _install_fake_toolchain(tmp_path, monkeypatch)

    assert main(["--root", str(root), "--config", str(tmp_path / "missing.yaml")]) == 1

    assert "Targets config not found" in capsys.readouterr().err


def test_dry_run_leaves_dist_untouched_with_leftover_output(tmp_path, monkeypatch, capsys):
    root = _install_fake_toolchain(tmp_path, monkeypatch)
    leftover = root / "target" / "x86_64-unknown-linux-musl" / "release" / COMPONENT
    leftover.parent.mkdir(parents=True)
    leftover.write_bytes(b"from an earlier build")

    assert main(["--root", str(root), "--dry-run"]) == 0

    assert not (root / "dist").exists()
    out = capsys.readouterr().out
    assert f"[DRY RUN] Would copy {leftover}" in out
    assert leftover.read_bytes() == b"from an earlier build"

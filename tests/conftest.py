import subprocess
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from release_build.toolchain import ToolProbe
from release_build.utils import Logger

COMPONENT = "rtxlauncher-ui-egui"
MUSL = "x86_64-unknown-linux-musl"
WINDOWS = "x86_64-pc-windows-gnu"


class FakeRunner:
    """Records commands and answers them through a handler."""

    def __init__(self, handler=None):
        self.calls = []
        self.handler = handler or (lambda cmd, cwd, env: 0)

    def run(self, cmd, cwd=None, env=None, capture_output=False):
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": dict(env) if env is not None else None})
        returncode = self.handler(list(cmd), cwd, env)
        return subprocess.CompletedProcess(cmd, returncode, "", "")

    def commands(self, tool):
        return [c["cmd"] for c in self.calls if c["cmd"][0] == tool]

    def builds(self):
        return [c for c in self.calls if c["cmd"][:2] == ["cargo", "build"]]


class FakeCargo:
    """Handler emulating cargo: writes outputs for the triples that succeed."""

    def __init__(self, root: Path, succeed=(), host_ok=True, strip_rc=0, component=COMPONENT):
        self.root = Path(root)
        self.succeed = set(succeed)
        self.host_ok = host_ok
        self.strip_rc = strip_rc
        self.component = component

    def __call__(self, cmd, cwd, env):
        tool = cmd[0]
        if tool == "rustup":
            return 1
        if tool.endswith("strip"):
            return self.strip_rc
        if tool != "cargo":
            return 127

        if "--target" in cmd:
            triple = cmd[cmd.index("--target") + 1]
            if triple not in self.succeed:
                return 101
            ext = ".exe" if "windows" in triple else ""
            out = self.root / "target" / triple / "release" / f"{self.component}{ext}"
        else:
            if not self.host_ok:
                return 101
            out = self.root / "target" / "release" / self.component

        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(b"\x7fELF" + b"\0" * 64)
        return 0


def make_probe(*present):
    """ToolProbe that only finds the named tools."""
    def which(tool, path=None):
        return f"/usr/bin/{tool}" if tool in present else None
    return ToolProbe(which=which)


@pytest.fixture
def logger():
    return Logger(verbose=True)

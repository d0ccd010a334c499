import pytest

from conftest import COMPONENT, MUSL, FakeRunner
from release_build.builders import CargoBuilder, compose_rustflags
from release_build.config import TargetSpec
from release_build.exceptions import BuildStepError

CRT_STATIC = "-C target-feature=+crt-static"

LINUX = TargetSpec(
    name="linux",
    triple=MUSL,
    suffix="linux-x86_64",
    fallback_to_host=True,
)
WINDOWS = TargetSpec(
    name="windows",
    triple="x86_64-pc-windows-gnu",
    suffix="windows-x86_64",
    extension=".exe",
    required=False,
    rustflags=(CRT_STATIC,),
)


def _make_builder(tmp_path, logger, handler=None, base_env=None, profile="release"):
    runner = FakeRunner(handler)
    builder = CargoBuilder(
        component=COMPONENT,
        root_dir=tmp_path,
        target_dir=tmp_path / "target",
        profile=profile,
        runner=runner,
        logger=logger,
        build_tool="cargo",
        base_env=base_env if base_env is not None else {},
    )
    return builder, runner


@pytest.mark.parametrize(
    "prior, expected",
    [
        ("", CRT_STATIC),
        (None, CRT_STATIC),
        ("-C opt-level=3", f"-C opt-level=3 {CRT_STATIC}"),
        ("  -C lto  ", f"  -C lto   {CRT_STATIC}"),
    ],
)
def test_compose_rustflags(prior, expected):
    assert compose_rustflags(prior, [CRT_STATIC]) == expected


def test_build_command_for_target_and_host(tmp_path, logger):
    builder, _ = _make_builder(tmp_path, logger)

    assert builder.build_command(LINUX) == [
        "cargo", "build", "--release", "-p", COMPONENT, "--target", MUSL
    ]
    assert builder.build_command(None) == ["cargo", "build", "--release", "-p", COMPONENT]


def test_build_command_custom_profile(tmp_path, logger):
    builder, _ = _make_builder(tmp_path, logger, profile="dist")

    assert builder.build_command(None) == [
        "cargo", "build", "--profile", "dist", "-p", COMPONENT
    ]


def test_build_runs_in_root_dir(tmp_path, logger):
    builder, runner = _make_builder(tmp_path, logger)

    outcome = builder.build(LINUX)

    assert outcome.succeeded
    assert len(runner.calls) == 1
    assert runner.calls[0]["cwd"] == tmp_path


def test_fallback_only_after_primary_failure(tmp_path, logger):
    builder, runner = _make_builder(
        tmp_path, logger, handler=lambda cmd, cwd, env: 1 if "--target" in cmd else 0
    )

    outcome = builder.build(LINUX)

    assert outcome.succeeded
    assert outcome.used_fallback
    assert [c["cmd"] for c in runner.calls] == [
        builder.build_command(LINUX),
        builder.build_command(None),
    ]


def test_fallback_failure_raises(tmp_path, logger):
    builder, _ = _make_builder(tmp_path, logger, handler=lambda cmd, cwd, env: 7)

    with pytest.raises(BuildStepError) as excinfo:
        builder.build(LINUX)

    assert excinfo.value.returncode == 7


def test_no_fallback_returns_failed_outcome(tmp_path, logger):
    builder, runner = _make_builder(tmp_path, logger, handler=lambda cmd, cwd, env: 101)

    outcome = builder.build(WINDOWS)

    assert not outcome.succeeded
    assert outcome.returncode == 101
    assert len(runner.calls) == 1


def test_rustflags_not_duplicated_across_invocations(tmp_path, logger):
    base_env = {"RUSTFLAGS": "-C debuginfo=0"}
    builder, runner = _make_builder(tmp_path, logger, base_env=base_env)

    builder.build(WINDOWS)
    builder.build(WINDOWS)

    flags = [c["env"]["RUSTFLAGS"] for c in runner.calls]
    assert flags == [f"-C debuginfo=0 {CRT_STATIC}"] * 2
    assert base_env == {"RUSTFLAGS": "-C debuginfo=0"}
    assert builder.base_env["RUSTFLAGS"] == "-C debuginfo=0"


def test_target_without_rustflags_keeps_environment(tmp_path, logger):
    builder, runner = _make_builder(tmp_path, logger, base_env={"HOME": "/home/build"})

    builder.build(LINUX)

    assert runner.calls[0]["env"] == {"HOME": "/home/build"}

"""
Cargo builder implementation
"""

from typing import Dict, Iterable, List, Optional

from ..build_types import BuildOutcome
from ..config import TargetSpec
from ..exceptions import BuildStepError
from .base_builder import BaseBuilder


def compose_rustflags(prior: Optional[str], extra: Iterable[str]) -> str:
    """
    Append extra compiler flags to a previously set value

    Args:
        prior: Existing flag string, possibly empty or unset
        extra: Flags to add after it

    Returns:
        The prior value followed by the extra flags, space separated
    """
    parts = [prior] if prior else []
    parts.extend(flag for flag in extra if flag)
    return " ".join(parts)


class CargoBuilder(BaseBuilder):
    """Builder for Cargo workspaces"""

    def __init__(self, *args, rustflags_env: str = "RUSTFLAGS", **kwargs):
        super().__init__(*args, **kwargs)
        self.rustflags_env = rustflags_env

    def build_command(self, target: Optional[TargetSpec]) -> List[str]:
        """Build the cargo command line for a target"""
        cmd = [self.build_tool, "build"]

        if self.profile == "release":
            cmd.append("--release")
        else:
            cmd.extend(["--profile", self.profile])

        cmd.extend(["-p", self.component])

        if target is not None:
            cmd.extend(["--target", target.triple])

        return cmd

    def target_env(self, target: TargetSpec) -> Dict[str, str]:
        if not target.rustflags:
            return {}
        prior = self.base_env.get(self.rustflags_env, "")
        return {self.rustflags_env: compose_rustflags(prior, target.rustflags)}

    def build(self, target: TargetSpec) -> BuildOutcome:
        """
        Build the component for a target

        When the target allows it, a failed build is retried once for the
        host default target. A failure of that retry is not recoverable.

        Returns:
            BuildOutcome of the last attempt

        Raises:
            BuildStepError: if the host fallback build fails
        """
        env = self.target_env(target)

        returncode = self.run_command(self.build_command(target), env)
        if returncode == 0:
            return BuildOutcome(returncode=0)

        if not target.fallback_to_host:
            return BuildOutcome(returncode=returncode)

        self.logger.warning(
            f"{target.name} static build failed; falling back to host default target build"
        )
        returncode = self.run_command(self.build_command(None), env)
        if returncode != 0:
            raise BuildStepError(f"{target.label} host fallback build", returncode)

        return BuildOutcome(returncode=0, used_fallback=True)

"""
Base builder class that all builders inherit from
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..build_types import BuildOutcome
from ..config import TargetSpec


class BaseBuilder(ABC):
    """Abstract base class for all builders"""

    def __init__(self,
                 component: str,
                 root_dir: Path,
                 target_dir: Path,
                 profile: str,
                 runner: Any,
                 logger: Any,
                 build_tool: str,
                 base_env: Optional[Mapping[str, str]] = None):
        """
        Initialize base builder

        Args:
            component: Name of the package being built
            root_dir: Workspace root the build tool runs in
            target_dir: Directory the build tool writes outputs to
            profile: Build profile (release)
            runner: CommandRunner instance
            logger: Logger instance
            build_tool: Build tool executable
            base_env: Environment snapshot; defaults to a copy of os.environ
        """
        self.component = component
        self.root_dir = Path(root_dir)
        self.target_dir = Path(target_dir)
        self.profile = profile
        self.runner = runner
        self.logger = logger
        self.build_tool = build_tool

        # Read once; per-target overrides are layered on copies of this
        self.base_env: Dict[str, str] = dict(os.environ if base_env is None else base_env)

    def build_env(self, overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Get the environment for a build invocation

        Args:
            overrides: Variables to set on top of the snapshot

        Returns:
            A new dictionary; the snapshot is never modified
        """
        env = dict(self.base_env)
        if overrides:
            env.update(overrides)
        return env

    def run_command(self,
                    cmd: List[str],
                    env_overrides: Optional[Mapping[str, str]] = None) -> int:
        """
        Run a build command from the workspace root

        Returns:
            The command's exit code
        """
        for key, value in (env_overrides or {}).items():
            self.logger.debug(f"  {key}={value}")
        result = self.runner.run(
            cmd,
            cwd=self.root_dir,
            env=self.build_env(env_overrides)
        )
        return result.returncode

    def output_candidates(self, target: TargetSpec) -> List[Path]:
        """Possible output locations for a target, most preferred first"""
        return target.candidate_outputs(self.target_dir, self.component, self.profile)

    @abstractmethod
    def build_command(self, target: Optional[TargetSpec]) -> List[str]:
        """Command that builds the component; ``None`` means the host default target"""
        pass

    @abstractmethod
    def target_env(self, target: TargetSpec) -> Dict[str, str]:
        """Environment overrides for building a target"""
        pass

    @abstractmethod
    def build(self, target: TargetSpec) -> BuildOutcome:
        """Build the component for a target"""
        pass

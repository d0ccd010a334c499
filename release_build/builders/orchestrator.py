"""
Release orchestrator that drives each target through build, copy and strip
"""

from pathlib import Path
from typing import Any, List, Optional

from ..build_types import Artifact, TargetResult
from ..config import TargetSpec
from ..exceptions import ArtifactNotFoundError, BuildStepError
from ..toolchain import ProbeResult, TargetInstaller, ToolProbe
from ..utils import copy_artifact, format_size, list_artifacts
from .base_builder import BaseBuilder


class ReleaseOrchestrator:
    """Orchestrates the release of a component for every configured target"""

    def __init__(self,
                 builder: BaseBuilder,
                 targets: List[TargetSpec],
                 dist_dir: Path,
                 probe: ToolProbe,
                 installer: TargetInstaller,
                 runner: Any,
                 logger: Any,
                 dry_run: bool = False):
        """
        Initialize release orchestrator

        Args:
            builder: Builder used for every target
            targets: Targets in build order
            dist_dir: Distribution directory
            probe: Tool probe for optional compilers and strippers
            installer: Registers target triples with the toolchain
            runner: CommandRunner used for stripping
            logger: Logger instance
            dry_run: If True, leave the distribution directory untouched
        """
        self.builder = builder
        self.targets = targets
        self.dist_dir = Path(dist_dir)
        self.probe = probe
        self.installer = installer
        self.runner = runner
        self.logger = logger
        self.dry_run = dry_run

    @property
    def component(self) -> str:
        return self.builder.component

    def prepare(self) -> None:
        """Create the distribution directory and register target triples"""
        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would create {self.dist_dir}")
        else:
            self.dist_dir.mkdir(parents=True, exist_ok=True)

        self.logger.step("Ensuring Rust targets are installed")
        self.installer.ensure_targets(
            [target.triple for target in self.targets],
            cwd=self.builder.root_dir,
            env=self.builder.build_env()
        )

    def release_all(self) -> List[TargetResult]:
        """Release every target in order"""
        return [self.release_target(target) for target in self.targets]

    def release_target(self, target: TargetSpec) -> TargetResult:
        """
        Build, copy and strip one target

        Raises:
            BuildStepError: if a required target's build fails
            ArtifactNotFoundError: if a required target produced no binary
        """
        heading = f"Building {target.label} {self.builder.profile}"
        if target.rustflags:
            heading += f" (extra flags: {' '.join(target.rustflags)})"
        self.logger.step(heading)

        if target.cross_compiler:
            self._check_cross_compiler(target)

        outcome = self.builder.build(target)
        if not outcome.succeeded:
            if target.required:
                raise BuildStepError(f"{target.label} build", outcome.returncode)
            self.logger.warning(
                f"{target.name} build failed (exit {outcome.returncode}); continuing"
            )

        result = TargetResult(target=target, outcome=outcome)

        source = self.resolve_output(target)
        if source is None:
            message = self._missing_message(target)
            if target.required:
                raise ArtifactNotFoundError(target.name, message)
            self.logger.error(message)
            return result

        result.artifact = self.package(target, source)
        self.logger.success(
            f"{target.label}: {result.artifact.destination.name}"
            + (" (host fallback)" if outcome.used_fallback else "")
        )
        return result

    def _check_cross_compiler(self, target: TargetSpec) -> None:
        status = self.probe.probe(target.cross_compiler)
        if status is ProbeResult.PRESENT:
            return
        if status is ProbeResult.ABSENT:
            self.logger.warning(
                f"{target.cross_compiler} not found; attempting build anyway (may fail)."
            )
        else:
            self.logger.warning(
                f"Could not check for {target.cross_compiler}; attempting build anyway (may fail)."
            )

    def _missing_message(self, target: TargetSpec) -> str:
        platform_name = target.name.capitalize()
        if target.required:
            return f"{platform_name} binary not found"

        what = f"an {target.extension}" if target.extension else "a binary"
        message = f"{platform_name} build did not produce {what}."
        if target.missing_hint:
            message += f" {target.missing_hint}"
        return message

    def resolve_output(self, target: TargetSpec) -> Optional[Path]:
        """
        Find the binary the build produced

        The target-specific output wins over the host default output even
        when both exist.
        """
        for candidate in self.builder.output_candidates(target):
            if candidate.is_file():
                self.logger.debug(f"Using build output {candidate}")
                return candidate
            self.logger.debug(f"No build output at {candidate}")
        return None

    def package(self, target: TargetSpec, source: Path) -> Artifact:
        """Copy a build output into the distribution directory and strip it"""
        destination = self.dist_dir / target.artifact_name(self.component)

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would copy {source} -> {destination}")
            if target.strip_tool:
                self.logger.info(f"[DRY RUN] Would strip {destination.name} with {target.strip_tool}")
            return Artifact(target=target.name, source=source, destination=destination)

        copy_artifact(source, destination)
        self.logger.debug(f"Copied {source} -> {destination}")

        stripped = False
        if target.strip_tool:
            stripped = self.strip(target.strip_tool, destination)

        return Artifact(
            target=target.name,
            source=source,
            destination=destination,
            stripped=stripped
        )

    def strip(self, tool: str, path: Path) -> bool:
        """
        Strip symbols from a binary if the stripper is available

        Returns:
            True if the stripper ran and succeeded; failures are ignored
        """
        if self.probe.probe(tool) is not ProbeResult.PRESENT:
            self.logger.debug(f"{tool} not available, leaving {path.name} unstripped")
            return False

        try:
            result = self.runner.run([tool, str(path)], capture_output=True)
        except OSError as e:
            self.logger.debug(f"{tool} could not run on {path.name}: {e}")
            return False

        if result.returncode != 0:
            self.logger.debug(f"{tool} exited with {result.returncode} on {path.name}; ignoring")
            return False
        return True

    def report(self) -> List[tuple]:
        """
        Print the distribution directory contents

        Returns:
            The listing, or an empty list if it could not be read
        """
        self.logger.step(f"Artifacts in {self.dist_dir}:")
        if self.dry_run and not self.dist_dir.exists():
            self.logger.info(f"[DRY RUN] {self.dist_dir} was not created")
            return []

        try:
            listing = list_artifacts(self.dist_dir)
        except OSError as e:
            self.logger.warning(f"Could not list {self.dist_dir}: {e}")
            return []

        for name, size in listing:
            self.logger.raw(f"  {format_size(size):>6}  {name}")
        return listing

#!/usr/bin/env python3
"""
Main entry point for the release build
Builds the component for Linux (musl) and Windows (gnu) and collects the
binaries in the distribution directory
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

from .build_types import ReleaseReport
from .builders import CargoBuilder, ReleaseOrchestrator
from .config import ConfigLoader
from .exceptions import ArtifactNotFoundError, BuildStepError, ReleaseBuildError
from .toolchain import TargetInstaller, ToolProbe
from .utils import CommandRunner, Logger


class ReleaseBuildSystem:
    """Main release build class"""

    def __init__(self,
                 root_dir: Optional[Path] = None,
                 config_file: Optional[Path] = None,
                 dist_dir: Optional[Path] = None,
                 component: Optional[str] = None,
                 verbose: bool = False,
                 log_file: Optional[str] = None,
                 dry_run: bool = False,
                 environ: Optional[Mapping[str, str]] = None,
                 runner: Any = None,
                 probe: Optional[ToolProbe] = None,
                 logger: Optional[Logger] = None):
        """
        Initialize the release build

        Args:
            root_dir: Workspace root (defaults to the current directory)
            config_file: Targets YAML file (defaults to the packaged one)
            dist_dir: Distribution directory override
            component: Component name override
            verbose: Enable verbose output
            log_file: Also write a debug log to this file
            dry_run: Log commands without running them
            environ: Environment snapshot (defaults to os.environ)
            runner: Command runner (defaults to CommandRunner)
            probe: Tool probe (defaults to a PATH lookup)
            logger: Logger (defaults to a console logger)
        """
        self.root_dir = Path(root_dir or Path.cwd()).resolve()
        self.logger = logger or Logger(verbose=verbose, log_file=log_file)
        self.dry_run = dry_run

        self.environ = dict(os.environ if environ is None else environ)

        self.config = ConfigLoader(config_file, environ=self.environ)
        self.component = component or self.config.get_component()
        self.profile = self.config.get_option("profile", "release")
        self.dist_dir = Path(dist_dir) if dist_dir else self.root_dir / self.config.get_option("dist_dir", "dist")
        self.target_dir = self.root_dir / self.config.get_option("target_dir", "target")

        self.runner = runner or CommandRunner(self.logger, dry_run=dry_run)
        self.probe = probe or ToolProbe(path=self.environ.get("PATH"), logger=self.logger)

        self.builder = CargoBuilder(
            component=self.component,
            root_dir=self.root_dir,
            target_dir=self.target_dir,
            profile=self.profile,
            runner=self.runner,
            logger=self.logger,
            build_tool=self.config.get_toolchain("build_tool", "cargo"),
            base_env=self.environ,
            rustflags_env=self.config.get_toolchain("rustflags_env", "RUSTFLAGS")
        )

        self.orchestrator = ReleaseOrchestrator(
            builder=self.builder,
            targets=self.config.get_targets(),
            dist_dir=self.dist_dir,
            probe=self.probe,
            installer=TargetInstaller(
                self.runner,
                self.logger,
                target_manager=self.config.get_toolchain("target_manager", "rustup")
            ),
            runner=self.runner,
            logger=self.logger,
            dry_run=dry_run
        )

    def run(self) -> ReleaseReport:
        """
        Run the full release pipeline

        Returns:
            ReleaseReport describing every target

        Raises:
            BuildStepError: if a required build fails past its fallback
            ArtifactNotFoundError: if a required target produced no binary
        """
        self.logger.debug(f"Root: {self.root_dir}")
        self.logger.debug(f"Component: {self.component} ({self.profile})")

        report = ReleaseReport(dist_dir=self.dist_dir)

        self.orchestrator.prepare()
        report.results = self.orchestrator.release_all()
        report.listing = self.orchestrator.report()

        self.logger.raw("Done.")
        return report


def main(argv=None) -> int:
    """Command-line interface"""
    parser = argparse.ArgumentParser(
        description="Release build - compile the component for Linux and Windows and collect the binaries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Build all targets into ./dist
  %(prog)s --dist-dir out -v        # Custom output directory, verbose
  %(prog)s --dry-run                # Show the commands that would run
        """
    )

    parser.add_argument(
        "--root",
        type=Path,
        help="Workspace root (default: current directory)"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Targets configuration file"
    )

    parser.add_argument(
        "--dist-dir",
        type=Path,
        help="Distribution directory (default: <root>/dist)"
    )

    parser.add_argument(
        "--component",
        help="Component to build (default: from configuration)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--log-file",
        help="Also write a debug log to this file"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands without running them"
    )

    args = parser.parse_args(argv)

    try:
        system = ReleaseBuildSystem(
            root_dir=args.root,
            config_file=args.config,
            dist_dir=args.dist_dir,
            component=args.component,
            verbose=args.verbose,
            log_file=args.log_file,
            dry_run=args.dry_run
        )
    except (ReleaseBuildError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        system.run()
    except KeyboardInterrupt:
        print("\nBuild interrupted by user", file=sys.stderr)
        return 130
    except ArtifactNotFoundError as e:
        system.logger.error(str(e))
        return 1
    except BuildStepError as e:
        system.logger.error(str(e))
        return e.returncode if e.returncode > 0 else 1
    except (ReleaseBuildError, OSError) as e:
        system.logger.error(f"Release build error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

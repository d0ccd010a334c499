"""
Toolchain detection and target registration
"""

import shutil
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional


class ProbeResult(Enum):
    """Outcome of looking up an external tool"""

    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"

    @property
    def available(self) -> bool:
        return self is ProbeResult.PRESENT


class ToolProbe:
    """Detects optional external tools on the search path"""

    def __init__(self,
                 path: Optional[str] = None,
                 which: Callable[..., Optional[str]] = shutil.which,
                 logger: Any = None):
        """
        Initialize tool probe

        Args:
            path: Search path to use instead of the process PATH
            which: Lookup function with the ``shutil.which`` signature
            logger: Optional logger instance
        """
        self.path = path
        self._which = which
        self.logger = logger
        self._results: Dict[str, ProbeResult] = {}

    def probe(self, tool: str) -> ProbeResult:
        """
        Check whether a tool is available

        Args:
            tool: Executable name

        Returns:
            PRESENT when found, ABSENT when not found, UNKNOWN when the
            lookup itself failed
        """
        if tool in self._results:
            return self._results[tool]

        try:
            location = self._which(tool, path=self.path)
        except OSError as e:
            if self.logger:
                self.logger.debug(f"Could not probe {tool}: {e}")
            result = ProbeResult.UNKNOWN
        else:
            result = ProbeResult.PRESENT if location else ProbeResult.ABSENT
            if self.logger and location:
                self.logger.debug(f"Found {tool}: {location}")

        self._results[tool] = result
        return result


class TargetInstaller:
    """Registers compilation targets with the toolchain manager"""

    def __init__(self, runner: Any, logger: Any, target_manager: str = "rustup"):
        self.runner = runner
        self.logger = logger
        self.target_manager = target_manager

    def ensure_targets(self, triples: Iterable[str], cwd=None, env=None) -> None:
        """
        Register each target triple, ignoring any failure

        A missing target surfaces later when the build for it fails.
        """
        for triple in triples:
            try:
                result = self.runner.run(
                    [self.target_manager, "target", "add", triple],
                    cwd=cwd,
                    env=env,
                    capture_output=True
                )
            except OSError as e:
                self.logger.debug(f"Could not register target {triple}: {e}")
                continue

            if result.returncode != 0:
                self.logger.debug(
                    f"{self.target_manager} target add {triple} exited with {result.returncode}; ignoring"
                )


__all__ = ["ProbeResult", "ToolProbe", "TargetInstaller"]

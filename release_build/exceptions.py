"""Holds exceptions used by the release build"""

from typing import Optional


class ReleaseBuildError(Exception):
    """Base class for release build failures"""


class ConfigurationError(ReleaseBuildError):
    """Raised when the target configuration is missing or malformed"""


class BuildStepError(ReleaseBuildError):
    """Raised when an unguarded build invocation exits non-zero"""

    def __init__(self, step: str, returncode: int):
        super().__init__(f"{step} failed with exit code {returncode}")
        self.step = step
        self.returncode = returncode


class ArtifactNotFoundError(ReleaseBuildError):
    """Raised when a required target produced no binary"""

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__(message or f"{target} binary not found")
        self.target = target

"""Value types passed between the release build stages"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .config import TargetSpec


@dataclass(frozen=True)
class BuildOutcome:
    """Result of invoking the build tool for one target"""
    returncode: int
    used_fallback: bool = False

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class Artifact:
    """A binary copied into the distribution directory"""
    target: str
    source: Path
    destination: Path
    stripped: bool = False


@dataclass
class TargetResult:
    """What happened to one target during a release run"""
    target: TargetSpec
    outcome: Optional[BuildOutcome] = None
    artifact: Optional[Artifact] = None

    @property
    def produced(self) -> bool:
        return self.artifact is not None


@dataclass
class ReleaseReport:
    """Summary of a complete release run"""
    dist_dir: Path
    results: List[TargetResult] = field(default_factory=list)
    listing: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def artifacts(self) -> List[Artifact]:
        return [r.artifact for r in self.results if r.artifact is not None]

    def result_for(self, name: str) -> Optional[TargetResult]:
        for result in self.results:
            if result.target.name == name:
                return result
        return None

"""
Builder components for the release targets
"""

from .base_builder import BaseBuilder
from .cargo_builder import CargoBuilder, compose_rustflags
from .orchestrator import ReleaseOrchestrator

__all__ = [
    "BaseBuilder",
    "CargoBuilder",
    "ReleaseOrchestrator",
    "compose_rustflags",
]

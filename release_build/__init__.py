"""
Release Build
Builds one Cargo component for Linux (musl) and Windows (gnu)
and collects the binaries in a distribution directory
"""

__version__ = "1.0.0"
__supported_platforms__ = ["linux", "windows"]

from .main import ReleaseBuildSystem, main

__all__ = ["ReleaseBuildSystem", "main", "__version__", "__supported_platforms__"]

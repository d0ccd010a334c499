"""
setup.py for the release build

Runtime Requirements:
- Rust toolchain (cargo, rustup) on PATH
- Optional: strip for Linux binaries
- Optional: MinGW-w64 (x86_64-w64-mingw32-gcc / -strip) for Windows binaries

Configuration:
- Targets are defined in release_build/config/targets.yaml
- Point RELEASE_BUILD_CONFIG at another YAML file to override it
"""

from pathlib import Path

from setuptools import find_packages, setup

# Read README for long description
readme_path = Path("README.md")
long_description = ""
if readme_path.exists():
    with open(readme_path, "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="release-build",
    version="1.0.0",
    description="Multi-target release build for a Cargo component (Linux musl, Windows gnu)",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["release_build", "release_build.*"]),
    package_data={
        "release_build": [
            "config/*.yaml",
        ]
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "compile-release=release_build.main:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: POSIX :: Linux",
        "Topic :: Software Development :: Build Tools",
    ],
)

"""
Configuration management for the release build
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from ..exceptions import ConfigurationError

CONFIG_ENV_VAR = "RELEASE_BUILD_CONFIG"
DEFAULT_CONFIG_FILE = Path(__file__).parent / "targets.yaml"


@dataclass(frozen=True)
class TargetSpec:
    """Describes one platform the component is released for"""

    name: str
    triple: str
    suffix: str
    extension: str = ""
    display_name: str = ""
    fallback_to_host: bool = False
    required: bool = True
    strip_tool: Optional[str] = None
    cross_compiler: Optional[str] = None
    rustflags: Tuple[str, ...] = ()
    missing_hint: str = ""

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def artifact_name(self, component: str) -> str:
        """Distribution filename, e.g. ``app-linux-x86_64`` or ``app-windows-x86_64.exe``"""
        return f"{component}-{self.suffix}{self.extension}"

    def output_path(self, target_dir: Path, component: str, profile: str) -> Path:
        """Where the build tool writes the binary for this triple"""
        return Path(target_dir) / self.triple / profile / f"{component}{self.extension}"

    def host_output_path(self, target_dir: Path, component: str, profile: str) -> Path:
        """Where the build tool writes the binary for the host default target"""
        return Path(target_dir) / profile / f"{component}{self.extension}"

    def candidate_outputs(self, target_dir: Path, component: str, profile: str) -> List[Path]:
        """Possible output locations, most preferred first"""
        candidates = [self.output_path(target_dir, component, profile)]
        if self.fallback_to_host:
            candidates.append(self.host_output_path(target_dir, component, profile))
        return candidates


class ConfigLoader:
    """Loads and manages the release target configuration"""

    def __init__(self,
                 config_file: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initialize configuration loader

        Args:
            config_file: YAML file to load; falls back to $RELEASE_BUILD_CONFIG
                and then to the packaged targets.yaml
            environ: Environment snapshot to read RELEASE_BUILD_CONFIG from;
                defaults to os.environ
        """
        if config_file is None:
            env = os.environ if environ is None else environ
            env_file = env.get(CONFIG_ENV_VAR)
            config_file = Path(env_file) if env_file else DEFAULT_CONFIG_FILE
        self.config_file = Path(config_file)

        if not self.config_file.exists():
            raise ConfigurationError(f"Targets config not found: {self.config_file}")

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                self.config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_file}: {e}") from e

        if not isinstance(self.config, dict):
            raise ConfigurationError(f"Targets config must be a mapping: {self.config_file}")

        self._targets = self._parse_targets()
        self.get_build_order()

    def _parse_targets(self) -> Dict[str, TargetSpec]:
        raw_targets = self.config.get("targets")
        if not isinstance(raw_targets, dict) or not raw_targets:
            raise ConfigurationError("No targets defined in configuration")

        targets = {}
        for name, raw in raw_targets.items():
            if not isinstance(raw, dict):
                raise ConfigurationError(f"Target {name} must be a mapping")
            for key in ("triple", "suffix"):
                if not raw.get(key):
                    raise ConfigurationError(f"Target {name} is missing '{key}'")

            rustflags = raw.get("rustflags") or []
            if isinstance(rustflags, str):
                rustflags = [rustflags]

            targets[name] = TargetSpec(
                name=name,
                triple=raw["triple"],
                suffix=raw["suffix"],
                extension=raw.get("extension") or "",
                display_name=raw.get("display_name", ""),
                fallback_to_host=bool(raw.get("fallback_to_host", False)),
                required=bool(raw.get("required", True)),
                strip_tool=raw.get("strip_tool"),
                cross_compiler=raw.get("cross_compiler"),
                rustflags=tuple(rustflags),
                missing_hint=raw.get("missing_hint", ""),
            )
        return targets

    def get_component(self) -> str:
        """Get the name of the component being released"""
        component = self.config.get("component")
        if not component:
            raise ConfigurationError("No component defined in configuration")
        return component

    def get_option(self, key: str, default: Any = None) -> Any:
        """
        Get a build option

        Args:
            key: Option key
            default: Default value if not found

        Returns:
            Option value
        """
        options = self.config.get("build_options", {}) or {}
        return options.get(key, default)

    def get_toolchain(self, key: str, default: Any = None) -> Any:
        """Get a toolchain setting such as the build tool executable"""
        toolchain = self.config.get("toolchain", {}) or {}
        return toolchain.get(key, default)

    def get_build_order(self) -> List[str]:
        """Get build order for targets"""
        order = self.config.get("build_order") or list(self._targets)
        for name in order:
            if name not in self._targets:
                raise ConfigurationError(f"Unknown target in build_order: {name}")
        return list(order)

    def get_target(self, name: str) -> TargetSpec:
        """
        Get a target by name

        Raises:
            ConfigurationError: if the target is not defined
        """
        if name not in self._targets:
            raise ConfigurationError(f"Unknown target: {name}")
        return self._targets[name]

    def get_targets(self) -> List[TargetSpec]:
        """Get all targets in build order"""
        return [self._targets[name] for name in self.get_build_order()]


__all__ = ["ConfigLoader", "TargetSpec", "CONFIG_ENV_VAR", "DEFAULT_CONFIG_FILE"]

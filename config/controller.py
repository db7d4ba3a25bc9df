"""Configuration controller for YAML-based settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

APP_DIR_NAME = "why-no-sound"
OUTPUT_FORMATS = ("text", "json")


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be read or parsed."""


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    config_dir: Path
    config_file: Path
    override_file: Path | None


def default_override_path() -> Path:
    """Return the per-user override file location."""

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / APP_DIR_NAME / "config.yaml"


class ConfigController:
    """Singleton controller for loading configuration."""

    _instance: "ConfigController | None" = None

    def __init__(
        self,
        config_file: str = "default.yaml",
        override_file: Path | None = None,
        config_dir: Path | None = None,
    ) -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        config_dir = config_dir if config_dir is not None else Path(__file__).resolve().parent
        self.paths = ConfigPaths(
            config_dir=config_dir,
            config_file=config_dir / config_file,
            override_file=override_file,
        )
        self.config: dict[str, Any] = {}
        self.load_config()

    @classmethod
    def get_instance(cls, override_file: Path | None = None) -> "ConfigController":
        """Return the singleton instance of the controller."""

        if cls._instance is None:
            cls._instance = cls(override_file=override_file)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    def load_config(self) -> None:
        """Load configuration from default and override YAML files."""

        config = self._read_yaml(self.paths.config_file)

        override_file = self.paths.override_file
        if override_file is None:
            candidate = default_override_path()
            override_file = candidate if candidate.exists() else None
        elif not override_file.exists():
            raise ConfigError(f"Config override not found at {override_file}")

        if override_file is not None:
            override_config = self._read_yaml(override_file)
            if override_config:
                config = self._deep_merge(config, override_config)

        self.config = self._normalize_config(config)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as file:
                loaded = yaml.safe_load(file) or {}
        except OSError as exc:
            raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config at {path} must be a mapping")
        return loaded

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge dictionaries, overriding base values with override values."""

        merged = dict(base)
        for key, value in override.items():
            if (
                key in merged
                and isinstance(merged[key], dict)
                and isinstance(value, dict)
            ):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _normalize_config(self, config: dict[str, Any]) -> dict[str, Any]:
        """Coerce known keys to their expected types."""

        normalized = dict(config)
        probes_cfg = dict(normalized.get("probes") or {})
        output_cfg = dict(normalized.get("output") or {})
        logging_cfg = dict(normalized.get("logging") or {})

        try:
            probes_cfg["timeout_s"] = float(probes_cfg.get("timeout_s", 5.0))
            probes_cfg["low_volume_percent"] = int(probes_cfg.get("low_volume_percent", 5))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid probes configuration: {exc}") from exc
        if probes_cfg["timeout_s"] <= 0:
            raise ConfigError("probes.timeout_s must be positive")

        output_format = str(output_cfg.get("format", "text")).lower()
        if output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}"
            )
        output_cfg["format"] = output_format
        output_cfg["debug"] = bool(output_cfg.get("debug", False))

        logging_cfg["level"] = str(logging_cfg.get("level", "WARNING")).upper()
        log_file = logging_cfg.get("file")
        logging_cfg["file"] = str(log_file) if log_file else None

        normalized["probes"] = probes_cfg
        normalized["output"] = output_cfg
        normalized["logging"] = logging_cfg
        return normalized

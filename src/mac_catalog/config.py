"""YAML-backed configuration for the catalog builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from mac_catalog.exceptions import ConfigError


@dataclass
class ParserConfig:
    """Parser selection and structural policy."""

    engine: str = "awesome-mac"
    # False: orphan items/subheadings are dropped with a warning instead of aborting
    strict_structure: bool = True


@dataclass
class LoaderConfig:
    """Data-loading settings."""

    catalog_suffix: str = ".catalog.json"
    report_suffix: str = ".report.json"
    fallback_to_cache: bool = False


@dataclass
class Config:
    """Top-level configuration."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Load configuration from a YAML file."""
        try:
            text = path.read_text(encoding="utf-8")
            data = yaml.safe_load(text) or {}
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}")

        return cls._from_dict(data)

    @classmethod
    def from_yaml_string(cls, text: str) -> Config:
        """Load configuration from a YAML string."""
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> Config:
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        parser_data = data.get("parser") or {}
        loader_data = data.get("loader") or {}

        return cls(
            parser=ParserConfig(**{k: v for k, v in parser_data.items() if k in ParserConfig.__dataclass_fields__}),
            loader=LoaderConfig(**{k: v for k, v in loader_data.items() if k in LoaderConfig.__dataclass_fields__}),
            verbose=data.get("verbose", False),
        )

    @classmethod
    def default(cls) -> Config:
        """Return the default configuration."""
        return cls()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Config:
        """Load config from path, or return defaults if path is None."""
        if path is None:
            return cls.default()
        return cls.from_yaml(path)

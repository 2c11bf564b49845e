"""Tests for Config loading and defaults."""

import pytest

from mac_catalog.config import Config, LoaderConfig, ParserConfig
from mac_catalog.exceptions import ConfigError


class TestConfigDefaults:
    def test_default_config(self):
        cfg = Config.default()
        assert cfg.verbose is False
        assert cfg.parser.engine == "awesome-mac"
        assert cfg.parser.strict_structure is True
        assert cfg.loader.catalog_suffix == ".catalog.json"
        assert cfg.loader.fallback_to_cache is False

    def test_load_none_returns_default(self):
        cfg = Config.load(None)
        assert cfg.parser.engine == "awesome-mac"

    def test_sections_are_independent_instances(self):
        assert Config().parser is not Config().parser
        assert isinstance(Config().loader, LoaderConfig)
        assert isinstance(Config().parser, ParserConfig)


class TestConfigFromYAML:
    def test_full_yaml(self):
        yaml_text = """\
verbose: true
parser:
  engine: awesome-list
  strict_structure: false
loader:
  catalog_suffix: ".data.json"
  report_suffix: ".diag.json"
  fallback_to_cache: true
"""
        cfg = Config.from_yaml_string(yaml_text)
        assert cfg.verbose is True
        assert cfg.parser.engine == "awesome-list"
        assert cfg.parser.strict_structure is False
        assert cfg.loader.catalog_suffix == ".data.json"
        assert cfg.loader.report_suffix == ".diag.json"
        assert cfg.loader.fallback_to_cache is True

    def test_partial_yaml_uses_defaults(self):
        cfg = Config.from_yaml_string("parser:\n  strict_structure: false\n")
        assert cfg.parser.strict_structure is False
        assert cfg.parser.engine == "awesome-mac"
        assert cfg.loader.fallback_to_cache is False
        assert cfg.verbose is False

    def test_empty_yaml(self):
        cfg = Config.from_yaml_string("")
        assert cfg.parser.strict_structure is True

    def test_empty_section(self):
        cfg = Config.from_yaml_string("parser:\nloader:\n")
        assert cfg.parser.engine == "awesome-mac"

    def test_invalid_yaml_raises(self):
        with pytest.raises(ConfigError):
            Config.from_yaml_string("{{invalid yaml::")

    def test_non_mapping_root_raises(self):
        with pytest.raises(ConfigError, match="mapping"):
            Config.from_yaml_string("- a\n- b\n")

    def test_unknown_keys_ignored(self):
        yaml_text = """\
parser:
  engine: awesome-mac
  future_setting: true
loader:
  unknown_key: 1
"""
        cfg = Config.from_yaml_string(yaml_text)
        assert cfg.parser.engine == "awesome-mac"


class TestConfigFromFile:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            Config.from_yaml(tmp_path / "nonexistent.yaml")

    def test_load_from_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("verbose: true\nloader:\n  fallback_to_cache: true\n")
        cfg = Config.load(config_file)
        assert cfg.verbose is True
        assert cfg.loader.fallback_to_cache is True

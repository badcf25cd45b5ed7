"""Unit tests for configuration management."""

import json
from pathlib import Path

import pytest

from svglinter.config import (
    DEFAULT_RULES,
    LintConfig,
    LogLevel,
    coerce_config,
    find_config_file,
    load_config,
)
from svglinter.errors import ConfigError


class TestLintConfig:
    """Test the LintConfig model."""

    def test_defaults(self):
        """Test an empty config."""
        config = LintConfig()
        assert config.rules == {}
        assert config.ignore == []
        assert config.fixtures is None
        assert config.logging.level == LogLevel.INFO
        assert DEFAULT_RULES == {"valid": True}

    def test_ignore_coercion(self):
        """Test a single ignore pattern becomes a list."""
        assert LintConfig(ignore="*.min.svg").ignore == ["*.min.svg"]
        assert LintConfig(ignore=None).ignore == []

    def test_extra_fields_ignored(self):
        """Test unknown top-level options are dropped."""
        config = LintConfig(rules={"elm": {"svg": 1}}, unknown="value")
        assert config.rules == {"elm": {"svg": 1}}
        assert not hasattr(config, "unknown")

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LintConfig(logging={"level": "loud"})


class TestCoerceConfig:
    """Test coerce_config."""

    def test_accepts_none_dict_and_model(self):
        config = LintConfig(ignore=["a"])
        assert coerce_config(config) is config
        assert coerce_config(None).rules == {}
        assert coerce_config({"ignore": ["b"]}).ignore == ["b"]

    def test_rejects_other_types(self):
        with pytest.raises(ConfigError):
            coerce_config(["rules"])

    def test_invalid_mapping(self):
        with pytest.raises(ConfigError) as exc_info:
            coerce_config({"rules": "elm"})
        assert "Invalid configuration" in str(exc_info.value)


class TestConfigFiles:
    """Test configuration file loading and discovery."""

    def test_load_json(self, tmp_path):
        """Test loading a JSON config file."""
        config_file = tmp_path / ".svglintrc.json"
        config_file.write_text(json.dumps({
            "rules": {"elm": {"svg": 1}, "attr": {"role": {"pattern": "^img$"}}},
            "ignore": ["vendor/*"],
            "logging": {"level": "debug"},
        }), encoding="utf-8")

        config = load_config(config_file)
        assert config.rules["elm"] == {"svg": 1}
        assert config.ignore == ["vendor/*"]
        assert config.logging.level == LogLevel.DEBUG

    def test_load_python(self, tmp_path):
        """Test loading a Python config module with callables."""
        config_file = tmp_path / ".svglintrc.py"
        config_file.write_text(
            "import re\n"
            "def fixtures(reporter, document, ast, info):\n"
            "    return 1\n"
            "config = {'rules': {'attr': {'role': re.compile('^img$')}}, 'fixtures': fixtures}\n",
            encoding="utf-8",
        )

        config = load_config(config_file)
        assert config.rules["attr"]["role"].pattern == "^img$"
        assert callable(config.fixtures)

    def test_python_without_config(self, tmp_path):
        config_file = tmp_path / ".svglintrc.py"
        config_file.write_text("rules = {}\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_python_that_raises(self, tmp_path):
        config_file = tmp_path / ".svglintrc.py"
        config_file.write_text("raise RuntimeError('bad config')\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / ".svglintrc.json"
        config_file.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.json")

    def test_relative_to_start_dir(self, tmp_path):
        (tmp_path / "custom.json").write_text('{"ignore": ["x"]}', encoding="utf-8")
        config = load_config("custom.json", start_dir=tmp_path)
        assert config.ignore == ["x"]

    def test_find_config_walks_up(self, tmp_path):
        """Test discovery from a nested directory."""
        config_file = tmp_path / ".svglintrc.json"
        config_file.write_text("{}", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config_file.resolve()
        assert load_config(start_dir=nested).rules == {}

    def test_python_preferred_over_json(self, tmp_path):
        (tmp_path / ".svglintrc.json").write_text("{}", encoding="utf-8")
        (tmp_path / ".svglintrc.py").write_text("config = {}\n", encoding="utf-8")

        assert find_config_file(tmp_path).name == ".svglintrc.py"

    def test_nearest_wins(self, tmp_path):
        (tmp_path / ".svglintrc.json").write_text('{"ignore": ["outer"]}', encoding="utf-8")
        inner = tmp_path / "inner"
        inner.mkdir()
        (inner / ".svglintrc.json").write_text('{"ignore": ["inner"]}', encoding="utf-8")

        assert load_config(start_dir=Path(inner)).ignore == ["inner"]

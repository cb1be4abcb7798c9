"""
Tests for configuration loading (config.py).
"""

import json
import logging

import pytest

from lineage.config import ConfigLoader, LineageConfig, configure_logging, load_config
from lineage.faults import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("LINEAGE_"):
            monkeypatch.delenv(key)


# ============================================================================
# Defaults
# ============================================================================

class TestDefaults:

    def test_defaults(self):
        config = load_config()
        assert config == LineageConfig()
        assert config.max_chain_depth == 128
        assert config.enforce_interfaces is True
        assert config.log_level == "WARNING"

    def test_frozen(self):
        with pytest.raises(Exception):
            LineageConfig().max_chain_depth = 3

    def test_to_dict(self):
        assert LineageConfig().to_dict()["apply_mixins"] is True


# ============================================================================
# Sources
# ============================================================================

class TestSources:

    def test_json_file(self, tmp_path):
        path = tmp_path / "lineage.json"
        path.write_text(json.dumps({"max_chain_depth": 16, "apply_mixins": False}))
        config = load_config(paths=[str(path)])
        assert config.max_chain_depth == 16
        assert config.apply_mixins is False

    def test_yaml_file_with_section(self, tmp_path):
        path = tmp_path / "lineage.yaml"
        path.write_text("lineage:\n  enforce_contracts: false\n  log_level: DEBUG\n")
        config = load_config(paths=[str(path)])
        assert config.enforce_contracts is False
        assert config.log_level == "DEBUG"

    def test_glob_pattern_later_files_win(self, tmp_path):
        (tmp_path / "a.json").write_text(json.dumps({"max_chain_depth": 4}))
        (tmp_path / "b.json").write_text(json.dumps({"max_chain_depth": 8}))
        config = load_config(paths=[str(tmp_path / "*.json")])
        assert config.max_chain_depth == 8

    def test_missing_file_ignored(self, tmp_path):
        assert load_config(paths=[str(tmp_path / "nope.json")]) == LineageConfig()

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LINEAGE_APPLY_MIXINS=off\nOTHER_SETTING=1\n")
        config = load_config(env_file=str(env_file))
        assert config.apply_mixins is False

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("LINEAGE_MAX_CHAIN_DEPTH", "5")
        monkeypatch.setenv("LINEAGE_ENFORCE_INTERFACES", "no")
        config = load_config()
        assert config.max_chain_depth == 5
        assert config.enforce_interfaces is False

    def test_unknown_environment_key_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("LINEAGE_HOME", "/opt/lineage")
        monkeypatch.setenv("LINEAGE_MAX_CHAIN_DEPTH", "9")
        with caplog.at_level(logging.WARNING, logger="lineage.config"):
            config = load_config()
        assert config.max_chain_depth == 9
        assert "LINEAGE_HOME" in caplog.text

    def test_unknown_env_file_key_ignored(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LINEAGE_PROFILE=dev\n")
        assert load_config(env_file=str(env_file)) == LineageConfig()

    def test_unknown_file_key_still_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LINEAGE_HOME", "/opt/lineage")
        path = tmp_path / "lineage.json"
        path.write_text(json.dumps({"home": "/srv"}))
        with pytest.raises(ConfigError) as exc_info:
            load_config(paths=[str(path)])
        assert "home" in str(exc_info.value)

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_MAX_CHAIN_DEPTH", "7")
        assert load_config(env_prefix="APP_").max_chain_depth == 7

    def test_precedence(self, tmp_path, monkeypatch):
        path = tmp_path / "lineage.json"
        path.write_text(json.dumps({"max_chain_depth": 10}))
        env_file = tmp_path / ".env"
        env_file.write_text("LINEAGE_MAX_CHAIN_DEPTH=20\n")

        loader = ConfigLoader.load(paths=[str(path)], env_file=str(env_file))
        assert loader.get("max_chain_depth") == 20

        monkeypatch.setenv("LINEAGE_MAX_CHAIN_DEPTH", "30")
        loader = ConfigLoader.load(paths=[str(path)], env_file=str(env_file))
        assert loader.get("max_chain_depth") == 30

        loader = ConfigLoader.load(
            paths=[str(path)], env_file=str(env_file), overrides={"max_chain_depth": 40}
        )
        assert loader.to_config().max_chain_depth == 40


# ============================================================================
# Parsing & validation
# ============================================================================

class TestValidation:

    @pytest.mark.parametrize("raw, expected", [
        ("true", True),
        ("On", True),
        ("false", False),
        ("12", 12),
        ("1.5", 1.5),
        ('["a"]', ["a"]),
        ("plain", "plain"),
    ])
    def test_parse_value(self, raw, expected):
        assert ConfigLoader()._parse_value(raw) == expected

    def test_unknown_key(self):
        with pytest.raises(ConfigError) as exc_info:
            load_config(overrides={"max_depth": 3})
        assert "max_depth" in str(exc_info.value)

    def test_wrong_type(self):
        with pytest.raises(ConfigError):
            load_config(overrides={"max_chain_depth": "deep"})

    def test_bool_is_not_int(self):
        with pytest.raises(ConfigError):
            load_config(overrides={"max_chain_depth": True})

    def test_depth_must_be_positive(self):
        with pytest.raises(ConfigError):
            load_config(overrides={"max_chain_depth": 0})

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError):
            load_config(overrides={"log_level": "LOUD"})

    def test_file_must_hold_mapping(self, tmp_path):
        path = tmp_path / "lineage.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(paths=[str(path)])

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_config(overrides={"apply_mixins": "maybe"})


class TestConfigureLogging:

    def test_sets_package_logger_level(self):
        logger = logging.getLogger("lineage")
        previous = logger.level
        try:
            configure_logging(LineageConfig(log_level="debug"))
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)

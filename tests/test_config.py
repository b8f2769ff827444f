"""Tests for configuration loading and logging setup."""

import logging

import pytest
import yaml

from adhoc_filters.classifier import UnresolvedPolicy, classify
from adhoc_filters.config import (
    AdhocFiltersConfig,
    ClassifierConfig,
    LoggingConfig,
    configure_logging,
    load_config,
    resolve_env_vars,
)
from adhoc_filters.errors.domain import ConfigError


@pytest.fixture(autouse=True)
def _clear_env_overrides(monkeypatch):
    """Keep ADHOC_FILTERS_* variables from the host out of these tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ADHOC_FILTERS_"):
            monkeypatch.delenv(key)


class TestDefaults:
    """Tests for config defaults."""

    def test_classifier_defaults_reject(self):
        cfg = ClassifierConfig()
        assert cfg.on_unresolved is UnresolvedPolicy.REJECT
        assert cfg.dedupe is False
        assert cfg.as_kwargs() == {
            "on_unresolved": UnresolvedPolicy.REJECT,
            "dedupe": False,
        }

    def test_logging_defaults(self):
        cfg = LoggingConfig()
        assert cfg.level == "info"
        assert cfg.format == "%(levelname)s:%(name)s:%(message)s"

    def test_level_case_insensitive(self):
        assert LoggingConfig(level="DEBUG").level == "debug"


class TestResolveEnvVars:
    """Tests for ${VAR} resolution in config values."""

    def test_resolves_env_var(self, monkeypatch):
        monkeypatch.setenv("FILTER_POLICY", "skip")
        assert resolve_env_vars("${FILTER_POLICY}") == "skip"

    def test_passthrough_no_vars(self):
        assert resolve_env_vars("plain-value") == "plain-value"

    def test_missing_env_var_returns_empty(self):
        assert resolve_env_vars("${DEFINITELY_NOT_SET_XYZ}") == ""


class TestLoadConfig:
    """Tests for YAML config file loading."""

    def test_load_from_explicit_path(self, tmp_path):
        config_file = tmp_path / "adhoc_filters.yaml"
        config_file.write_text(
            yaml.dump({"classifier": {"on_unresolved": "skip", "dedupe": True}})
        )
        cfg = load_config(config_path=str(config_file))
        assert cfg is not None
        assert cfg.classifier.on_unresolved is UnresolvedPolicy.SKIP
        assert cfg.classifier.dedupe is True
        assert cfg.logging.level == "info"

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(config_path=str(tmp_path / "nope.yaml"))

    def test_returns_none_when_no_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert load_config() is None

    def test_found_in_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "adhoc_filters.yml").write_text(yaml.dump({"logging": {"level": "debug"}}))
        cfg = load_config()
        assert cfg is not None
        assert cfg.logging.level == "debug"

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "adhoc_filters.yaml"
        config_file.write_text("")
        assert load_config(config_path=str(config_file)) == AdhocFiltersConfig()

    def test_env_var_override(self, tmp_path, monkeypatch):
        config_file = tmp_path / "adhoc_filters.yaml"
        config_file.write_text(yaml.dump({"classifier": {"on_unresolved": "reject"}}))
        monkeypatch.setenv("ADHOC_FILTERS_CLASSIFIER_ON_UNRESOLVED", "skip")
        monkeypatch.setenv("ADHOC_FILTERS_CLASSIFIER_DEDUPE", "true")

        cfg = load_config(config_path=str(config_file))
        assert cfg.classifier.on_unresolved is UnresolvedPolicy.SKIP
        assert cfg.classifier.dedupe is True

    def test_dollar_var_resolution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MY_LOG_LEVEL", "warning")
        config_file = tmp_path / "adhoc_filters.yaml"
        config_file.write_text(yaml.dump({"logging": {"level": "${MY_LOG_LEVEL}"}}))
        cfg = load_config(config_path=str(config_file))
        assert cfg.logging.level == "warning"

    def test_invalid_policy_raises_config_error(self, tmp_path):
        config_file = tmp_path / "adhoc_filters.yaml"
        config_file.write_text(yaml.dump({"classifier": {"on_unresolved": "ignore"}}))
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=str(config_file))
        assert exc_info.value.code == "E-4002"
        assert "classifier.on_unresolved" in exc_info.value.message

    def test_config_drives_classify(self, tmp_path, context):
        config_file = tmp_path / "adhoc_filters.yaml"
        config_file.write_text(yaml.dump({"classifier": {"on_unresolved": "skip"}}))
        cfg = load_config(config_path=str(config_file))
        result = classify(
            [{"saved_metric_name": "missing"}, {"column_name": "target"}],
            context,
            **cfg.classifier.as_kwargs(),
        )
        assert [f.subject for f in result] == ["target"]


class TestConfigureLogging:
    def test_sets_package_logger_level(self):
        configure_logging(AdhocFiltersConfig(logging=LoggingConfig(level="debug")))
        assert logging.getLogger("adhoc_filters").level == logging.DEBUG
        configure_logging()
        assert logging.getLogger("adhoc_filters").level == logging.INFO

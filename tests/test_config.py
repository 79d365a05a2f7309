"""Tests for configuration loading."""

import os

import pytest
import yaml

from job_monitor.config import Config, load_config, load_yaml_config
from job_monitor.matcher import DuplicateStartPolicy, Thresholds


class TestConfig:
    def test_defaults(self):
        config = load_config()
        assert config.logs_folder == "Logs"
        assert config.log_file_name == "logs.log"
        assert config.warning_minutes == 5.0
        assert config.error_minutes == 10.0
        assert config.interval_hours == 10.0
        assert config.policy is DuplicateStartPolicy.LAST_WINS
        assert config.output_format == "text"

    def test_thresholds(self):
        assert Config().thresholds() == Thresholds()

    def test_relative_log_path(self):
        config = Config(logs_folder="Logs", log_file_name="x.log", base_dir="/srv/app")
        assert config.log_path == os.path.join("/srv/app", "Logs", "x.log")

    def test_absolute_log_path(self, tmp_path):
        config = Config(logs_folder=str(tmp_path), log_file_name="x.log", base_dir="/ignored")
        assert config.log_path == os.path.join(str(tmp_path), "x.log")

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            "log_monitor": {"warning_minutes": 2, "error_minutes": 4, "log_file_name": "jobs.log"},
        }))
        config = load_config(load_yaml_config(str(path)))
        assert config.warning_minutes == 2.0
        assert config.error_minutes == 4.0
        assert config.log_file_name == "jobs.log"
        assert config.logs_folder == "Logs"  # default preserved

    def test_yaml_without_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("interval_hours: 1\n")
        assert load_yaml_config(str(path)) == {"interval_hours": 1}

    def test_missing_yaml_uses_defaults(self):
        assert load_yaml_config("/nonexistent/path/config.yaml") == {}
        assert load_yaml_config(None) == {}

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("log_monitor: [unclosed\n")
        assert load_yaml_config(str(path)) == {}

    def test_non_mapping_section_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("log_monitor: 5\n")
        assert load_yaml_config(str(path)) == {}
        assert load_config(load_yaml_config(str(path))) == Config()

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("LOG_MONITOR_WARNING_MINUTES", "3")
        monkeypatch.setenv("LOG_MONITOR_DUPLICATE_POLICY", "KEEP_FIRST")
        config = load_config({"warning_minutes": 1})
        assert config.warning_minutes == 3.0
        assert config.policy is DuplicateStartPolicy.KEEP_FIRST

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("LOG_MONITOR_LOG_FILE", "env.log")
        config = load_config({}, {"log_file_name": "cli.log", "error_minutes": None})
        assert config.log_file_name == "cli.log"
        assert config.error_minutes == 10.0

    def test_unknown_yaml_key_ignored(self):
        assert load_config({"colour": "blue"}) == Config()

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            load_config({"warning_minutes": 20, "error_minutes": 10})
        with pytest.raises(ValueError):
            load_config({"interval_hours": 0})
        with pytest.raises(ValueError):
            load_config({"duplicate_start_policy": "first_wins"})
        with pytest.raises(ValueError):
            load_config({"warning_minutes": "soon"})
        with pytest.raises(ValueError):
            load_config({}, {"output_format": "xml"})

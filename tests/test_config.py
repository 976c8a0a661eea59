"""
Tests for configuration loading and logging setup.
"""

import json
import logging
import os
from unittest.mock import patch

from trials_query.config import DEFAULT_CONFIG, load_config
from trials_query.utils.logging_setup import setup_logging
from trials_query.utils.paths import create_directories, get_config_path, get_exports_dir, get_project_root


def write_config(tmp_path, data):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(data))
    return str(config_path)


class TestLoadConfig:

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "missing.json"))

        assert config["clinicaltrials"] == DEFAULT_CONFIG["clinicaltrials"]
        assert config["logging"]["level"] == "INFO"
        assert config["exports"]["output_dir"] == get_exports_dir()

    def test_invalid_json_uses_defaults(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")

        config = load_config(str(config_path))

        assert config["clinicaltrials"]["timeout"] == 30

    def test_file_values_merge_with_defaults(self, tmp_path):
        config = load_config(write_config(tmp_path, {"clinicaltrials": {"timeout": 10}}))

        assert config["clinicaltrials"]["timeout"] == 10
        assert config["clinicaltrials"]["api_url"] == DEFAULT_CONFIG["clinicaltrials"]["api_url"]
        assert config["logging"] == DEFAULT_CONFIG["logging"]

    def test_defaults_are_not_mutated(self, tmp_path):
        load_config(write_config(tmp_path, {"clinicaltrials": {"timeout": 10}}))
        assert DEFAULT_CONFIG["clinicaltrials"]["timeout"] == 30
        assert DEFAULT_CONFIG["exports"]["output_dir"] is None

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CT_API_URL", "http://localhost:9000/studies")
        monkeypatch.setenv("CT_REQUEST_TIMEOUT", "2.5")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CT_EXPORT_DIR", str(tmp_path / "out"))

        config = load_config(write_config(tmp_path, {"clinicaltrials": {"timeout": 10}}))

        assert config["clinicaltrials"]["api_url"] == "http://localhost:9000/studies"
        assert config["clinicaltrials"]["timeout"] == 2.5
        assert config["logging"]["level"] == "DEBUG"
        assert config["exports"]["output_dir"] == str(tmp_path / "out")

    def test_invalid_override_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CT_REQUEST_TIMEOUT", "soon")
        config = load_config(str(tmp_path / "missing.json"))
        assert config["clinicaltrials"]["timeout"] == 30

    def test_reads_dotenv(self, tmp_path):
        with patch("trials_query.config.load_dotenv") as mock_load_dotenv:
            load_config(str(tmp_path / "missing.json"))
        mock_load_dotenv.assert_called_once_with()


class TestSetupLogging:

    def test_configures_level_and_format(self):
        with patch("logging.basicConfig") as mock_basic_config:
            setup_logging({"logging": {"level": "debug", "format": "%(message)s"}})

        kwargs = mock_basic_config.call_args[1]
        assert kwargs["level"] == logging.DEBUG
        assert kwargs["format"] == "%(message)s"

    def test_unknown_level_falls_back_to_info(self):
        with patch("logging.basicConfig") as mock_basic_config:
            setup_logging({"logging": {"level": "chatty"}})
        assert mock_basic_config.call_args[1]["level"] == logging.INFO


class TestPaths:

    def test_create_directories(self, tmp_path):
        with patch("trials_query.utils.paths.get_project_root", return_value=str(tmp_path)):
            create_directories()
            exports_dir = get_exports_dir()

        assert exports_dir == str(tmp_path / "data" / "outputs" / "exports")
        assert (tmp_path / "data" / "outputs" / "exports").is_dir()

    def test_config_path_is_under_project_root(self):
        assert get_config_path() == os.path.join(get_project_root(), "config", "config.json")

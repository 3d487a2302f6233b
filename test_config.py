"""
Tests for the JSON configuration loader.

Run with: pytest test_config.py -v
"""

import json

from fleet_dispatch.config import DEFAULT_LOG_FORMAT, ConfigLoader, get_config_loader


class TestConfigLoader:
    """Loading and defaulting."""

    def test_missing_file_uses_defaults(self, tmp_path):
        loader = ConfigLoader(tmp_path / "absent.json")

        assert loader.get_output_config().line_ending == "lf"
        assert loader.get_logging_config().level == "INFO"
        assert loader.get_logging_config().format == DEFAULT_LOG_FORMAT
        assert loader.get_engine_config().trace_events is False

    def test_partial_file_falls_back(self, tmp_path):
        path = tmp_path / "dispatch.json"
        path.write_text(json.dumps({"logging": {"level": "DEBUG"}}))
        loader = ConfigLoader(path)

        assert loader.get_logging_config().level == "DEBUG"
        assert loader.get_logging_config().format == DEFAULT_LOG_FORMAT
        assert loader.get_output_config().line_ending == "lf"

    def test_full_file(self, tmp_path):
        path = tmp_path / "dispatch.json"
        path.write_text(json.dumps({
            "output": {"line_ending": "legacy"},
            "engine": {"trace_events": True},
        }))
        loader = ConfigLoader(path)

        assert loader.get_output_config().line_ending == "legacy"
        assert loader.get_engine_config().trace_events is True

    def test_loaded_config_is_cached(self, tmp_path):
        path = tmp_path / "dispatch.json"
        path.write_text(json.dumps({"output": {"line_ending": "crlf"}}))
        loader = ConfigLoader(path)
        loader.load()

        path.write_text(json.dumps({"output": {"line_ending": "lf"}}))
        assert loader.get_output_config().line_ending == "crlf"

    def test_bundled_config(self):
        loader = ConfigLoader()
        assert loader.get_output_config().line_ending == "lf"

    def test_global_loader_is_shared(self):
        assert get_config_loader() is get_config_loader()

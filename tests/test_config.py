"""
Tests for configuration loading.
"""

import json
import pytest

from smooth_sse.utils.config import (
    ConfigLoader,
    SmoothSSEConfig,
    get_config,
    load_config,
)
from smooth_sse.utils.errors import ConfigurationError


@pytest.mark.usefixtures("clean_env")
class TestConfigLoader:
    """Test configuration sources and validation."""

    def test_defaults(self):
        config = ConfigLoader().load()

        assert config.streaming.smooth_streaming is False
        assert config.streaming.pacing.default_delay_ms == 20
        assert config.streaming.pacing.punctuation_delay_ms == 500
        assert config.logging.level == "INFO"

    def test_dict_source(self):
        loader = ConfigLoader()
        loader.add_source({"streaming": {"smooth_streaming": True}})

        assert loader.load().streaming.smooth_streaming is True

    def test_yaml_source(self, tmp_path):
        path = tmp_path / "smooth-sse.yaml"
        path.write_text(
            "streaming:\n"
            "  smooth_streaming: true\n"
            "  pacing:\n"
            "    default_delay_ms: 5\n"
        )
        loader = ConfigLoader()
        loader.add_source(path)

        config = loader.load()
        assert config.streaming.smooth_streaming is True
        assert config.streaming.pacing.default_delay_ms == 5
        assert config.streaming.pacing.punctuation_delay_ms == 500

    def test_toml_source(self, tmp_path):
        path = tmp_path / "smooth-sse.toml"
        path.write_text("[streaming.pacing]\npunctuation_delay_ms = 300\n")
        loader = ConfigLoader()
        loader.add_source(path)

        assert loader.load().streaming.pacing.punctuation_delay_ms == 300

    def test_priority(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"streaming": {"pacing": {"default_delay_ms": 1}}}))

        loader = ConfigLoader()
        loader.add_source({"streaming": {"pacing": {"default_delay_ms": 2}}}, priority=50)
        loader.add_source(path, priority=10)

        assert loader.load().streaming.pacing.default_delay_ms == 2

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SMOOTH_SSE_STREAMING__SMOOTH_STREAMING", "true")
        monkeypatch.setenv("SMOOTH_SSE_STREAMING__PACING__DEFAULT_DELAY_MS", "12.5")
        monkeypatch.setenv("SMOOTH_SSE_LOGGING__LEVEL", "debug")

        loader = ConfigLoader()
        loader.add_source({"streaming": {"smooth_streaming": False}}, priority=100)
        config = loader.load()

        assert config.streaming.smooth_streaming is True
        assert config.streaming.pacing.default_delay_ms == 12.5
        assert config.logging.level == "DEBUG"

    def test_missing_file_is_skipped(self, tmp_path):
        loader = ConfigLoader()
        loader.add_source(tmp_path / "absent.yaml")

        assert loader.load() == SmoothSSEConfig()

    def test_unknown_file_type(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigLoader().add_source(tmp_path / "config.ini")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        loader = ConfigLoader()
        loader.add_source(path)

        with pytest.raises(ConfigurationError):
            loader.load()

    @pytest.mark.parametrize("data, field", [
        ({"streaming": {"pacing": {"default_delay_ms": -1}}}, "streaming.pacing.default_delay_ms"),
        ({"streaming": {"encoding": "no-such-codec"}}, "streaming.encoding"),
        ({"logging": {"level": "LOUD"}}, "logging.level"),
        ({"logging": {"format": "xml"}}, "logging.format"),
    ])
    def test_validation_errors(self, data, field):
        loader = ConfigLoader()
        loader.add_source(data)

        with pytest.raises(ConfigurationError) as exc_info:
            loader.load()

        assert field in str(exc_info.value)

    def test_get_config_before_load(self):
        with pytest.raises(ConfigurationError):
            ConfigLoader().get_config()


@pytest.mark.usefixtures("clean_env")
class TestGlobalConfig:
    """Test the process-wide loader helpers."""

    def test_load_config_with_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config(extra_config={"streaming": {"smooth_streaming": True}})

        assert config.streaming.smooth_streaming is True
        assert get_config() is config

    def test_get_config_requires_load(self):
        with pytest.raises(ConfigurationError):
            get_config()

"""
Config Source Validation Tests

Tests for YAML loading, key lookup, scalar coercion and error handling.
Uses temp config files to test various scenarios.
"""

from pathlib import Path

import pytest

from config.config_loader import ConfigSource, as_int, as_text, resolve_config_path
from tests.factories.config_factories import make_config, temp_config_file
from utils.errors import ConfigError


class TestConfigSourceBasics:
    """Test basic config loading functionality."""

    def test_load_valid_config(self):
        """Test loading a valid configuration file."""
        with temp_config_file(make_config(encipher="abc123")) as path:
            source = ConfigSource.load(path)

            assert source.get("Encipher") == "abc123"
            assert source.path == path

    def test_dotted_lookup(self):
        """Test nested keys are reachable with dotted paths."""
        with temp_config_file(make_config(emby_url="http://emby", emby_port=8920)) as path:
            source = ConfigSource.load(path)

            assert source.get("Emby.url") == "http://emby"
            assert source.get("Emby.port") == 8920

    def test_lookup_ignores_case(self):
        """Test that key lookup is case-insensitive at every level."""
        source = ConfigSource({"Emby": {"apiKey": "secret"}})

        assert source.get("emby.apikey") == "secret"
        assert source.get("EMBY.APIKEY") == "secret"

    def test_get_returns_default_for_missing_key(self):
        """Test get() returns default for missing key."""
        source = ConfigSource({"Emby": {"url": "http://emby"}})

        assert source.get("Emby.port") is None
        assert source.get("Backend.url", "fallback") == "fallback"
        assert source.get("Emby.url.deeper") is None

    def test_contains(self):
        source = ConfigSource({"Server": {"port": 1}})

        assert "Server.port" in source
        assert "Server.host" not in source

    def test_empty_file_loads_as_empty_document(self):
        """Test that an empty YAML file is a successful, empty load."""
        with temp_config_file(content="") as path:
            source = ConfigSource.load(path)

            assert source.get("Encipher") is None
            assert source.get_string("Encipher") == ""
            assert source.get_int("Server.port") == 0


class TestConfigSourceErrors:
    """Test config source handling of unusable files."""

    def test_missing_file_raises_config_error(self, missing_config_path):
        with pytest.raises(ConfigError) as exc_info:
            ConfigSource.load(missing_config_path)

        assert exc_info.value.path == missing_config_path
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_invalid_yaml_raises_config_error(self):
        with temp_config_file(content="invalid: yaml: content: [broken") as path:
            with pytest.raises(ConfigError):
                ConfigSource.load(path)

    def test_non_dict_yaml_raises_config_error(self):
        """Test that YAML that isn't a mapping is rejected."""
        with temp_config_file(content="- just\n- a\n- list") as path:
            with pytest.raises(ConfigError, match="mapping"):
                ConfigSource.load(path)

    def test_directory_raises_config_error(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigSource.load(str(tmp_path))


class TestScalarCoercion:
    """Test text and integer coercion of YAML scalars."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("link", "link"),
            (b"link", "link"),
            (True, "true"),
            (False, "false"),
            (8096, "8096"),
            (1.5, "1.5"),
        ],
    )
    def test_as_text(self, value, expected):
        assert as_text(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, 0),
            (8096, 8096),
            ("8096", 8096),
            (" 42 ", 42),
            ("0x10", 16),
            (True, 1),
            (21600.9, 21600),
            (float("inf"), 0),
            (float("-inf"), 0),
            (float("nan"), 0),
            ("not a number", 0),
            ([1, 2], 0),
            ({"a": 1}, 0),
        ],
    )
    def test_as_int(self, value, expected):
        assert as_int(value) == expected

    def test_binary_scalar_from_yaml(self):
        """Test a !!binary YAML value reads back as text."""
        with temp_config_file(content="StreamSourceType: !!binary bGluaw==\n") as path:
            source = ConfigSource.load(path)

            assert source.get_string("StreamSourceType") == "link"


class TestConfigPathResolution:
    """Test config path discovery order."""

    def test_explicit_path_wins(self, monkeypatch):
        monkeypatch.setenv("CONFIG_PATH", "/from/env.yaml")

        assert resolve_config_path("/explicit.yaml") == "/explicit.yaml"

    def test_env_path_used_without_explicit(self, monkeypatch):
        monkeypatch.setenv("CONFIG_PATH", "/from/env.yaml")

        assert resolve_config_path(None) == "/from/env.yaml"
        assert resolve_config_path("") == "/from/env.yaml"

    def test_default_path(self):
        resolved = Path(resolve_config_path())

        assert resolved.name == "config.yaml"
        assert resolved.parent.name == "config"

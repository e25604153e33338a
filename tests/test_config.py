"""Configuration module unit tests"""

import os
import tempfile
from pathlib import Path

import pytest

from formrules.config import EngineConfig
from formrules.errors import ConfigException


@pytest.fixture
def temp_config_file():
    """Create a temporary config file"""
    fd, path = tempfile.mkstemp(suffix=".toml")
    os.close(fd)
    yield path
    # Cleanup
    os.unlink(path)


# ========== Test Cases ==========


def test_defaults():
    """Test: Config without any source uses the built-in defaults"""
    config = EngineConfig()

    assert config.language == "en"
    assert config.alt_language == "fr"
    assert config.resolver.timeout == 10.0
    assert config.resolver.concurrency == 8
    assert config.metrics.fields == 1.0
    assert config.metrics.links == 2.0
    assert config.metrics.conditional_fields == 3.0
    assert config.metrics.depth_squared == 1.5


def test_load_from_file(temp_config_file):
    """Test: Load config from a TOML file"""
    content = """
language = "fr"
alt_language = "en"

[resolver]
timeout = 2.5
concurrency = 2

[metrics]
depth_squared = 3.0
"""
    Path(temp_config_file).write_text(content)

    config = EngineConfig.load_from_file(temp_config_file)

    assert config.language == "fr"
    assert config.alt_language == "en"
    assert config.resolver.timeout == 2.5
    assert config.resolver.concurrency == 2
    assert config.metrics.depth_squared == 3.0
    # Untouched sections keep their defaults
    assert config.metrics.links == 2.0


def test_env_overrides_file_config(temp_config_file, monkeypatch):
    """Test: Environment variables override file config values"""
    content = """
[resolver]
timeout = 2.5
concurrency = 2
"""
    Path(temp_config_file).write_text(content)

    monkeypatch.setenv("FORMRULES_RESOLVER__CONCURRENCY", "16")
    monkeypatch.setenv("FORMRULES_LANGUAGE", "de")

    config = EngineConfig.load_from_file(temp_config_file)

    assert config.resolver.concurrency == 16
    assert config.resolver.timeout == 2.5
    assert config.language == "de"


def test_missing_file_raises():
    """Test: A missing config file raises ConfigException"""
    with pytest.raises(ConfigException, match="not found"):
        EngineConfig.load_from_file("/nonexistent/formrules.toml")


def test_invalid_values_raise_with_one_line_per_error(temp_config_file):
    """Test: Validation failures are reported line by line"""
    content = """
[resolver]
timeout = 0
concurrency = 0
"""
    Path(temp_config_file).write_text(content)

    with pytest.raises(ConfigException) as exc_info:
        EngineConfig.load_from_file(temp_config_file)

    message = str(exc_info.value)
    assert message.startswith("Configuration validation failed:")
    assert "resolver -> timeout" in message
    assert "resolver -> concurrency" in message


def test_invalid_toml_raises(temp_config_file):
    """Test: Malformed TOML raises ConfigException"""
    Path(temp_config_file).write_text("[resolver\ntimeout = ")

    with pytest.raises(ConfigException):
        EngineConfig.load_from_file(temp_config_file)


def test_invalid_email_pattern_rejected():
    """Test: An email pattern that does not compile is rejected"""
    with pytest.raises(ValueError, match="Invalid email pattern"):
        EngineConfig(validation={"email_pattern": "[unclosed"})


def test_alt_language_same_as_language_is_dropped():
    config = EngineConfig(language="fr", alt_language="fr")
    assert config.alt_language is None


def test_blank_alt_language_disables_alternate_messages():
    config = EngineConfig(alt_language="  ")
    assert config.alt_language is None

"""Tests for config loader and API config precedence."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.core.config.loader import (
    BASE_URL_ENV,
    TIMEOUT_ENV,
    deep_merge,
    get_config,
    load_api_config,
)


@pytest.fixture(autouse=True)
def _clear_config_cache() -> None:
    """Clear lru_cache before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture()
def tmp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory with an api example file."""
    api_example = tmp_path / "api.example.yaml"
    api_example.write_text(
        "api:\n"
        "  base_url: https://catalog.example.com/api/v1\n"
        "  timeout: 15\n"
        "  headers:\n"
        "    X-Client: catalog\n"
        "fetcher:\n"
        "  endpoint: /catalog\n"
    )
    return tmp_path


def _clean_env() -> dict[str, str]:
    """Environment without the catalog variables."""
    return {k: v for k, v in os.environ.items() if k not in (BASE_URL_ENV, TIMEOUT_ENV)}


def test_api_config_loaded(tmp_config_dir: Path) -> None:
    """get_config should include the 'api' section from api.example.yaml."""
    config = get_config(config_dir=str(tmp_config_dir))

    assert config["api"]["base_url"] == "https://catalog.example.com/api/v1"
    assert config["fetcher"]["endpoint"] == "/catalog"


def test_api_yaml_overrides_example(tmp_config_dir: Path) -> None:
    """api.yaml should deep-merge over api.example.yaml."""
    (tmp_config_dir / "api.yaml").write_text(
        "api:\n"
        "  base_url: http://localhost:9000/api/v1\n"
    )

    config = get_config(config_dir=str(tmp_config_dir))

    # Overridden value
    assert config["api"]["base_url"] == "http://localhost:9000/api/v1"
    # Values from example that were NOT overridden should survive
    assert config["api"]["timeout"] == 15
    assert config["api"]["headers"]["X-Client"] == "catalog"


def test_env_substitution(tmp_path: Path) -> None:
    """${VAR:-default} placeholders are resolved from the environment."""
    (tmp_path / "api.example.yaml").write_text(
        "api:\n"
        "  base_url: ${TEST_CATALOG_URL:-/fallback}\n"
    )

    with patch.dict(os.environ, {"TEST_CATALOG_URL": "https://env.example.com"}):
        config = get_config(config_dir=str(tmp_path))

    assert config["api"]["base_url"] == "https://env.example.com"


def test_env_substitution_default(tmp_path: Path) -> None:
    """Unset variables fall back to the inline default."""
    (tmp_path / "api.example.yaml").write_text(
        "api:\n"
        "  base_url: ${TEST_CATALOG_URL_UNSET:-/fallback}\n"
    )

    with patch.dict(os.environ, _clean_env(), clear=True):
        config = get_config(config_dir=str(tmp_path))

    assert config["api"]["base_url"] == "/fallback"


def test_missing_config_dir_gives_empty_config(tmp_path: Path) -> None:
    """A directory without config files yields an empty config."""
    assert get_config(config_dir=str(tmp_path / "missing")) == {}


def test_deep_merge() -> None:
    """Nested dicts merge; scalars are replaced."""
    merged = deep_merge({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"b": 3}, "d": 2})

    assert merged == {"a": {"b": 3, "c": 2}, "d": 2}


class TestLoadApiConfig:
    """Tests for load_api_config precedence."""

    def test_from_config_file(self, tmp_config_dir: Path) -> None:
        """Config file values are used when no env var is set."""
        with patch.dict(os.environ, _clean_env(), clear=True):
            config = load_api_config(config_dir=str(tmp_config_dir))

        assert config.base_url == "https://catalog.example.com/api/v1"
        assert config.timeout == 15.0
        assert config.default_headers["X-Client"] == "catalog"
        assert config.default_headers["Accept"] == "application/json"

    def test_env_overrides_config_file(self, tmp_config_dir: Path) -> None:
        """The environment variable wins over the config file."""
        env = {**_clean_env(), BASE_URL_ENV: "https://env.example.com/v2", TIMEOUT_ENV: "2.5"}
        with patch.dict(os.environ, env, clear=True):
            config = load_api_config(config_dir=str(tmp_config_dir))

        assert config.base_url == "https://env.example.com/v2"
        assert config.timeout == 2.5

    def test_fallback_default(self, tmp_path: Path) -> None:
        """Without env or config the fixed prefix is used and no timeout is set."""
        with patch.dict(os.environ, _clean_env(), clear=True):
            config = load_api_config(config_dir=str(tmp_path))

        assert config.base_url == "/api/v1"
        assert config.timeout is None

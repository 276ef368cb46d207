"""Shared test fixtures for the recordkit test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from recordkit.normalization import FieldNormalizer
from recordkit.records import RecordOrchestrator
from recordkit.rules import LocaleRuleTable, load_packaged_rules
from recordkit.validation import FieldValidator


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "[pipeline]\\nmax_workers = 2",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"RECORDKIT_PIPELINE__MAX_WORKERS": "2"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    from recordkit.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def rule_table() -> LocaleRuleTable:
    """The packaged rule table, loaded once per test session."""
    return load_packaged_rules()


@pytest.fixture
def normalizer(rule_table: LocaleRuleTable) -> FieldNormalizer:
    return FieldNormalizer(rule_table)


@pytest.fixture
def validator(rule_table: LocaleRuleTable) -> FieldValidator:
    return FieldValidator(rule_table)


@pytest.fixture
def orchestrator(normalizer: FieldNormalizer, validator: FieldValidator) -> RecordOrchestrator:
    return RecordOrchestrator(normalizer, validator)

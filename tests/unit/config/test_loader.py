"""Unit tests for TOML configuration loader."""

from pathlib import Path

import pytest

from recordkit.config.loader import (
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
    resolve_paths,
)
from recordkit.errors import ConfigFileError


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"pipeline": {"max_workers": 4, "mandatory_fields": []}, "app_name": "x"}
        override = {"pipeline": {"max_workers": 8}}
        result = deep_merge(base, override)
        assert result == {
            "pipeline": {"max_workers": 8, "mandatory_fields": []},
            "app_name": "x",
        }

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict values in override replace base values."""
        result = deep_merge({"rules": {"include_defaults": True}}, {"rules": "off"})
        assert result == {"rules": "off"}

    def test_base_unmodified(self) -> None:
        """Original base dictionary is not modified."""
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_toml(self, tmp_path: Path) -> None:
        """Valid TOML file is loaded correctly."""
        toml_file = tmp_path / "test.toml"
        toml_file.write_text("[dedup]\nreview_threshold = 0.9")

        assert load_toml(toml_file) == {"dedup": {"review_threshold": 0.9}}

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        """Missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml_raises(self, tmp_path: Path) -> None:
        """Invalid TOML syntax raises ConfigFileError naming the file."""
        invalid_file = tmp_path / "invalid.toml"
        invalid_file.write_text("invalid = [unclosed")

        with pytest.raises(ConfigFileError) as exc_info:
            load_toml(invalid_file)
        assert exc_info.value.path == invalid_file

    def test_relative_rule_path_anchored_at_file(self, tmp_path: Path) -> None:
        """A relative extra_rules_path resolves against the declaring file."""
        toml_file = tmp_path / "default.toml"
        toml_file.write_text('[rules]\nextra_rules_path = "rules/site.toml"')

        data = load_toml(toml_file)
        assert data["rules"]["extra_rules_path"] == str(tmp_path / "rules" / "site.toml")


class TestResolvePaths:
    """Tests for resolve_paths function."""

    def test_absolute_path_untouched(self, tmp_path: Path) -> None:
        absolute = str(tmp_path / "site.toml")
        data = resolve_paths({"rules": {"extra_rules_path": absolute}}, Path("/elsewhere"))
        assert data["rules"]["extra_rules_path"] == absolute

    def test_other_sections_untouched(self) -> None:
        data = {"pipeline": {"max_workers": 2}, "rules": {"include_defaults": False}}
        assert resolve_paths(dict(data), Path("/elsewhere")) == data


class TestGetEnvironment:
    """Tests for get_environment function."""

    def test_returns_env_var_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Returns RECORDKIT_ENV value when set."""
        monkeypatch.setenv("RECORDKIT_ENV", "production")
        assert get_environment() == "production"

    def test_defaults_to_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults to 'development' when RECORDKIT_ENV not set."""
        monkeypatch.delenv("RECORDKIT_ENV", raising=False)
        assert get_environment() == "development"


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_uses_env_var_when_set(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Uses RECORDKIT_CONFIG_DIR when set."""
        monkeypatch.setenv("RECORDKIT_CONFIG_DIR", str(test_config_dir))
        assert get_config_dir() == test_config_dir

    def test_raises_for_missing_env_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Raises error when RECORDKIT_CONFIG_DIR doesn't exist."""
        monkeypatch.setenv("RECORDKIT_CONFIG_DIR", str(tmp_path / "missing"))

        with pytest.raises(FileNotFoundError):
            get_config_dir()

    def test_searches_parent_directories(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Finds config/ with a default.toml from a nested working directory."""
        (test_config_dir / "default.toml").write_text("")
        nested = test_config_dir.parent / "jobs" / "daily"
        nested.mkdir(parents=True)
        monkeypatch.delenv("RECORDKIT_CONFIG_DIR", raising=False)
        monkeypatch.chdir(nested)

        assert get_config_dir() == test_config_dir

    def test_ignores_config_dir_without_default(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An unrelated config/ directory is not picked up."""
        monkeypatch.delenv("RECORDKIT_CONFIG_DIR", raising=False)
        monkeypatch.chdir(test_config_dir.parent)

        assert get_config_dir() is None


class TestLoadConfig:
    """Tests for load_config function."""

    def test_merges_environment_config(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment config overrides default config."""
        mock_toml_files({
            "default.toml": "app_name = 'test'\n[pipeline]\nmax_workers = 4",
            "staging.toml": "[pipeline]\nmax_workers = 2",
        })
        monkeypatch.setenv("RECORDKIT_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("RECORDKIT_ENV", "staging")

        assert load_config() == {"app_name": "test", "pipeline": {"max_workers": 2}}

    def test_missing_environment_file_ignored(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Only default.toml is used when no environment file exists."""
        mock_toml_files({"default.toml": "app_name = 'test'"})
        monkeypatch.setenv("RECORDKIT_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("RECORDKIT_ENV", "nonexistent")

        assert load_config() == {"app_name": "test"}

    def test_missing_default_tolerated(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Missing default.toml falls back to model defaults."""
        monkeypatch.setenv("RECORDKIT_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("RECORDKIT_ENV", "nonexistent")

        assert load_config() == {}

    def test_no_config_dir_gives_empty_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Embedded use without any config/ directory relies on model defaults."""
        monkeypatch.delenv("RECORDKIT_CONFIG_DIR", raising=False)
        monkeypatch.chdir(tmp_path)

        assert load_config() == {}

    def test_environment_layer_resolves_its_own_paths(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        mock_toml_files({
            "default.toml": "[rules]\ninclude_defaults = true",
            "production.toml": '[rules]\nextra_rules_path = "rules/prod.toml"',
        })
        monkeypatch.setenv("RECORDKIT_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("RECORDKIT_ENV", "production")

        assert load_config() == {
            "rules": {
                "include_defaults": True,
                "extra_rules_path": str(test_config_dir / "rules" / "prod.toml"),
            }
        }

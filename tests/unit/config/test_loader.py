"""Unit tests for the layered TOML configuration."""

import tomllib
from pathlib import Path

import pytest

from scout.config.loader import (
    current_environment,
    find_config_dir,
    layer_paths,
    load_config,
    merge_layers,
    read_layer,
)


class TestMergeLayers:
    """Tests for merge_layers."""

    def test_later_layer_wins(self) -> None:
        assert merge_layers({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_tables_merge_recursively(self) -> None:
        base = {"conversation": {"sustained_turns": 3, "strong_signal_threshold": 0.7}}
        override = {"conversation": {"sustained_turns": 4}}

        assert merge_layers(base, override) == {
            "conversation": {"sustained_turns": 4, "strong_signal_threshold": 0.7}
        }

    def test_scalar_replaces_table(self) -> None:
        assert merge_layers({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_three_layers_leave_inputs_untouched(self) -> None:
        default = {"sessions": {"default_ttl_seconds": 86400, "lock_timeout": 5.0}}
        env = {"sessions": {"lock_timeout": 1.0}}
        local = {"sessions": {"default_ttl_seconds": 60}}

        merged = merge_layers(default, env, local)

        assert merged == {"sessions": {"default_ttl_seconds": 60, "lock_timeout": 1.0}}
        assert default == {"sessions": {"default_ttl_seconds": 86400, "lock_timeout": 5.0}}
        assert env == {"sessions": {"lock_timeout": 1.0}}

    def test_no_layers(self) -> None:
        assert merge_layers() == {}


class TestReadLayer:
    """Tests for read_layer."""

    def test_reads_tables(self, tmp_path: Path) -> None:
        layer = tmp_path / "test.toml"
        layer.write_text('[sessions]\ndefault_ttl_seconds = 60\nkey = "value"')

        assert read_layer(layer) == {"sessions": {"default_ttl_seconds": 60, "key": "value"}}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="nonexistent.toml"):
            read_layer(tmp_path / "nonexistent.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        layer = tmp_path / "invalid.toml"
        layer.write_text("invalid = [unclosed")

        with pytest.raises(tomllib.TOMLDecodeError):
            read_layer(layer)


class TestEnvironment:
    """Tests for current_environment."""

    def test_reads_scout_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCOUT_ENV", "production")
        assert current_environment() == "production"

    @pytest.mark.parametrize("value", [None, ""])
    def test_defaults_to_development(self, monkeypatch: pytest.MonkeyPatch, value) -> None:
        if value is None:
            monkeypatch.delenv("SCOUT_ENV", raising=False)
        else:
            monkeypatch.setenv("SCOUT_ENV", value)
        assert current_environment() == "development"


class TestFindConfigDir:
    """Tests for find_config_dir."""

    def test_uses_env_var_when_set(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_dir = tmp_path / "custom_config"
        config_dir.mkdir()
        monkeypatch.setenv("SCOUT_CONFIG_DIR", str(config_dir))

        assert find_config_dir() == config_dir

    def test_missing_env_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCOUT_CONFIG_DIR", str(tmp_path / "missing"))

        with pytest.raises(FileNotFoundError, match="SCOUT_CONFIG_DIR"):
            find_config_dir()

    def test_searches_upward_for_default_layer(
        self, tmp_path: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A config/ without default.toml on the way up is skipped."""
        mock_toml_files({"default.toml": "debug = false"})
        nested = tmp_path / "services" / "scout"
        (nested / "config").mkdir(parents=True)
        monkeypatch.delenv("SCOUT_CONFIG_DIR", raising=False)

        assert find_config_dir(nested) == (tmp_path / "config").resolve()


class TestLayerPaths:
    """Tests for layer_paths."""

    def test_environment_and_extra_file(
        self,
        tmp_path: Path,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "", "staging.toml": ""})
        extra = tmp_path / "local.toml"
        monkeypatch.setenv("SCOUT_CONFIG_FILE", str(extra))

        assert layer_paths(test_config_dir, "staging") == [
            test_config_dir / "default.toml",
            test_config_dir / "staging.toml",
            extra,
        ]

    def test_missing_environment_layer_skipped(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        mock_toml_files({"default.toml": ""})
        monkeypatch.delenv("SCOUT_CONFIG_FILE", raising=False)

        assert layer_paths(test_config_dir, "production") == [test_config_dir / "default.toml"]


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_default_config(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "app_name = 'test'\ndebug = false"})
        monkeypatch.setenv("SCOUT_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("SCOUT_ENV", "nonexistent")

        assert load_config() == {"app_name": "test", "debug": False}

    def test_merges_environment_then_extra_file(
        self,
        tmp_path: Path,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({
            "default.toml": "[profile]\nbatch_limit = 10\nmin_confidence = 0.6",
            "staging.toml": "[profile]\nbatch_limit = 5",
        })
        extra = tmp_path / "local.toml"
        extra.write_text("[profile]\nmin_confidence = 0.8")
        monkeypatch.setenv("SCOUT_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("SCOUT_ENV", "staging")
        monkeypatch.setenv("SCOUT_CONFIG_FILE", str(extra))

        assert load_config() == {"profile": {"batch_limit": 5, "min_confidence": 0.8}}

    def test_missing_extra_file_raises(
        self,
        tmp_path: Path,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": ""})
        monkeypatch.setenv("SCOUT_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("SCOUT_CONFIG_FILE", str(tmp_path / "absent.toml"))

        with pytest.raises(FileNotFoundError, match="absent.toml"):
            load_config()

    def test_missing_default_raises(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SCOUT_CONFIG_DIR", str(test_config_dir))

        with pytest.raises(FileNotFoundError, match="default.toml"):
            load_config()

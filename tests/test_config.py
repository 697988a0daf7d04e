"""Tests for ootw_decoder.toml loading."""

from pathlib import Path

import pytest

from ootw_decoder.config import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    DecoderConfig,
    load_config,
    resolve_config_path,
)

SAMPLE = """
[output]
full_suffix = "_stored"
write_logical = false

[decode]
mirror = false
"""


class TestResolveConfigPath:
    def test_no_file(self) -> None:
        assert resolve_config_path() is None

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text(SAMPLE)
        assert resolve_config_path(path) == path

    def test_explicit_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            resolve_config_path(tmp_path / "missing.toml")

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_path = tmp_path / "env.toml"
        env_path.write_text(SAMPLE)
        other = tmp_path / "other.toml"
        other.write_text(SAMPLE)
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))

        assert resolve_config_path(other) == env_path

    def test_env_var_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "gone.toml"))
        with pytest.raises(FileNotFoundError):
            resolve_config_path()

    def test_working_directory(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(SAMPLE)
        assert resolve_config_path() == Path(CONFIG_FILENAME)

    def test_home_directory(self) -> None:
        home = Path.home()
        home.mkdir(parents=True, exist_ok=True)
        (home / CONFIG_FILENAME).write_text(SAMPLE)
        assert resolve_config_path() == home / CONFIG_FILENAME


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config()
        assert config == DecoderConfig()
        assert config.output.full_suffix == "-full"
        assert config.output.logical_suffix == "-logical"
        assert config.output.write_full and config.output.write_logical
        assert config.decode.mirror is True
        assert config.decode.strict_size is False

    def test_partial_file(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text(SAMPLE)

        config = load_config(path)

        assert config.output.full_suffix == "_stored"
        assert config.output.logical_suffix == "-logical"
        assert config.output.write_logical is False
        assert config.decode.mirror is False

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[output\nfull_suffix = ")
        with pytest.raises(ValueError, match="Failed to parse config"):
            load_config(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = tmp_path / "typo.toml"
        path.write_text("[output]\nful_suffix = '-x'\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config(path)

    def test_wrong_type(self, tmp_path: Path) -> None:
        path = tmp_path / "type.toml"
        path.write_text("[decode]\nmirror = 'sometimes'\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config(path)

    def test_empty_suffix_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.toml"
        path.write_text("[output]\nfull_suffix = ''\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config(path)

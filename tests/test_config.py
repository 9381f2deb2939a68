"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from histdiff.config.loader import ConfigError, load_config


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.display.short_hash_length == 7
        assert cfg.diff.context_lines == 3
        assert cfg.diff.preview is True
        assert cfg.viewer.mode == "terminal"
        assert cfg.git.timeout == 30

    def test_custom_toml(self, tmp_path: Path):
        toml_path = tmp_path / ".histdiff.toml"
        toml_path.write_text(
            'version = "1.0"\n'
            '[display]\n'
            'short_hash_length = 10\n'
            '[viewer]\n'
            'mode = "external"\n'
            'diff_command = "meld $LOCAL $REMOTE"\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.display.short_hash_length == 10
        assert cfg.viewer.mode == "external"
        assert cfg.viewer.diff_command == "meld $LOCAL $REMOTE"

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".histdiff.toml").write_text('[diff]\ncontext_lines = 5\ncolour = "red"\n')
        cfg = load_config(tmp_path)
        assert cfg.diff.context_lines == 5

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text("[history]\nlimit = 5\n")
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.history.limit == 5

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        bad_toml = tmp_path / ".histdiff.toml"
        bad_toml.write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_invalid_viewer_raises(self, tmp_path: Path):
        (tmp_path / ".histdiff.toml").write_text('[viewer]\nmode = "popup"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_short_hash_length_out_of_range(self, tmp_path: Path):
        (tmp_path / ".histdiff.toml").write_text("[display]\nshort_hash_length = 2\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / ".histdiff.toml").write_text('diff = "unified"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_viewer_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HISTDIFF_VIEWER", "external")
        cfg = load_config(tmp_path)
        assert cfg.viewer.mode == "external"

    def test_diff_command_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HISTDIFF_DIFF_COMMAND", "vimdiff $LOCAL $REMOTE")
        cfg = load_config(tmp_path)
        assert cfg.viewer.diff_command == "vimdiff $LOCAL $REMOTE"

    def test_short_hash_length_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HISTDIFF_SHORT_HASH_LENGTH", "12")
        cfg = load_config(tmp_path)
        assert cfg.display.short_hash_length == 12

    def test_git_timeout_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HISTDIFF_GIT_TIMEOUT", "90")
        cfg = load_config(tmp_path)
        assert cfg.git.timeout == 90

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HISTDIFF_VIEWER", "popup")
        monkeypatch.setenv("HISTDIFF_SHORT_HASH_LENGTH", "lots")
        monkeypatch.setenv("HISTDIFF_GIT_TIMEOUT", "-1")
        cfg = load_config(tmp_path)
        assert cfg.viewer.mode == "terminal"  # default unchanged
        assert cfg.display.short_hash_length == 7
        assert cfg.git.timeout == 30

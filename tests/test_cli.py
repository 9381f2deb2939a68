"""Tests for the CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from histdiff.cli import app

runner = CliRunner()


@pytest.fixture
def in_repo(history_repo, monkeypatch):
    monkeypatch.chdir(history_repo.root)
    monkeypatch.delenv("HISTDIFF_VIEWER", raising=False)
    return history_repo


def _short(full: str) -> str:
    return full[:7]


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "histdiff" in result.output


class TestInit:
    def test_creates_config(self, tmp_git_repo: Path, monkeypatch):
        monkeypatch.chdir(tmp_git_repo)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_git_repo / ".histdiff.toml").exists()

    def test_refuses_overwrite(self, tmp_git_repo: Path, monkeypatch):
        monkeypatch.chdir(tmp_git_repo)
        (tmp_git_repo / ".histdiff.toml").write_text("existing")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1


class TestView:
    def test_shows_file(self, in_repo):
        result = runner.invoke(app, ["view", in_repo.modified, "a.txt"])
        assert result.exit_code == 0
        assert "two" in result.output

    def test_deleted_file(self, in_repo):
        result = runner.invoke(app, ["view", in_repo.deleted, "a.txt"])
        assert result.exit_code == 1
        assert "File cannot be viewed as it was deleted" in result.output

    def test_path_relative_to_subdirectory(self, in_repo, monkeypatch):
        sub = in_repo.root / "sub"
        sub.mkdir()
        monkeypatch.chdir(sub)
        result = runner.invoke(app, ["view", in_repo.modified, "../a.txt"])
        assert result.exit_code == 0
        assert "two" in result.output

    def test_file_not_in_commit(self, in_repo):
        result = runner.invoke(app, ["view", in_repo.modified, "c.txt"])
        assert result.exit_code == 2
        assert "Git error" in result.output

    def test_unknown_revision(self, in_repo):
        result = runner.invoke(app, ["view", "no-such-branch", "a.txt"])
        assert result.exit_code == 2
        assert "Unknown revision" in result.output


class TestComparePrevious:
    def test_modified(self, in_repo):
        result = runner.invoke(app, ["compare-previous", in_repo.modified, "a.txt"])
        assert result.exit_code == 0
        assert f"a.txt ({_short(in_repo.added)} ↔ {_short(in_repo.modified)})" in result.output
        assert "+two" in result.output

    def test_renamed(self, in_repo):
        result = runner.invoke(app, ["compare-previous", in_repo.renamed, "c.txt"])
        assert result.exit_code == 0
        assert (
            f"b.txt ({_short(in_repo.added)} ↔ c.txt {_short(in_repo.renamed)})" in result.output
        )
        assert "No differences." in result.output

    def test_deleted_shows_deleted_version(self, in_repo):
        result = runner.invoke(app, ["compare-previous", in_repo.deleted, "a.txt"])
        assert result.exit_code == 0
        assert "two" in result.output
        assert "Showing deleted version." in result.output

    def test_added_shows_new_file(self, in_repo):
        result = runner.invoke(app, ["compare-previous", in_repo.added, "b.txt"])
        assert result.exit_code == 0
        assert "bee" in result.output
        assert "as this is a new file. Showing it." in result.output


class TestViewPrevious:
    def test_shows_previous(self, in_repo):
        result = runner.invoke(app, ["view-previous", in_repo.deleted, "a.txt"])
        assert result.exit_code == 0
        assert "two" in result.output

    def test_added_file(self, in_repo):
        result = runner.invoke(app, ["view-previous", in_repo.added, "a.txt"])
        assert result.exit_code == 1
        assert "Previous version of the file cannot be opened" in result.output


class TestCompareWorkspace:
    def test_against_working_file(self, in_repo):
        (in_repo.root / "c.txt").write_text("bee\nbee\nbuzz\nbee\n")
        result = runner.invoke(app, ["compare-workspace", in_repo.renamed, "c.txt"])
        assert result.exit_code == 0
        assert f"c.txt ({_short(in_repo.renamed)} ↔ Working File)" in result.output
        assert "+buzz" in result.output

    def test_workspace_file_missing(self, in_repo):
        result = runner.invoke(app, ["compare-workspace", in_repo.modified, "a.txt"])
        assert result.exit_code == 1
        assert "Corresponding workspace file does not exist" in result.output


class TestCompareAcross:
    def test_modified_between_commits(self, in_repo):
        result = runner.invoke(app, ["compare", in_repo.added, in_repo.modified, "a.txt"])
        assert result.exit_code == 0
        assert f"a.txt ({_short(in_repo.added)} ↔ {_short(in_repo.modified)})" in result.output
        assert "+two" in result.output

    def test_deleted_between_commits(self, in_repo):
        result = runner.invoke(app, ["compare", in_repo.modified, in_repo.deleted, "a.txt"])
        assert result.exit_code == 1
        assert "File cannot be compared with, as it was deleted" in result.output


class TestHistory:
    def test_lists_commits(self, in_repo):
        result = runner.invoke(app, ["history", "c.txt"])
        assert result.exit_code == 0
        assert _short(in_repo.renamed) in result.output
        assert _short(in_repo.added) in result.output
        assert "renamed" in result.output

    def test_no_history(self, in_repo):
        result = runner.invoke(app, ["history", "never.txt"])
        assert result.exit_code == 1


class TestViewerOption:
    def test_invalid_viewer(self, in_repo):
        result = runner.invoke(
            app, ["compare-previous", in_repo.modified, "a.txt", "--viewer", "popup"]
        )
        assert result.exit_code == 2
        assert "Invalid viewer" in result.output

    def test_external_tool_failure_reported(self, in_repo, monkeypatch):
        monkeypatch.setenv("HISTDIFF_DIFF_COMMAND", "histdiff-no-such-tool $LOCAL $REMOTE")
        result = runner.invoke(
            app, ["compare-previous", in_repo.modified, "a.txt", "--viewer", "external"]
        )
        assert result.exit_code == 2
        assert "Viewer error" in result.output


class TestMergeCommit:
    def test_compare_previous_on_merge(self, merge_repo, monkeypatch):
        monkeypatch.chdir(merge_repo.root)
        monkeypatch.delenv("HISTDIFF_VIEWER", raising=False)
        result = runner.invoke(app, ["compare-previous", merge_repo.merge, "m.txt"])
        assert result.exit_code == 0
        assert f"m.txt ({_short(merge_repo.base)} ↔ {_short(merge_repo.merge)})" in result.output
        assert "+side" in result.output

"""Tests for the git log extractor and URL helpers."""

import subprocess
from datetime import datetime, timezone

import pytest

from git_moar.history.extractor import (
    GitLogExtractor,
    branch_url,
    commit_url,
    normalize_remote_url,
)
from git_moar.history.parser import DEFAULT_FORMAT


class TestRemoteUrls:
    @pytest.mark.parametrize(
        "remote,expected",
        [
            ("git@github.com:acme/widgets.git", "https://github.com/acme/widgets"),
            ("git@gitlab.com:acme/widgets", "https://gitlab.com/acme/widgets"),
            ("https://github.com/acme/widgets.git", "https://github.com/acme/widgets"),
            ("https://git.example.com/acme/widgets", "https://git.example.com/acme/widgets"),
        ],
    )
    def test_normalize(self, remote, expected):
        assert normalize_remote_url(remote) == expected

    def test_commit_url_for_known_hosts(self):
        assert commit_url("https://github.com/acme/w", "abc") == "https://github.com/acme/w/commit/abc"
        assert commit_url("https://bitbucket.org/acme/w", "abc") == "#"
        assert commit_url("", "abc") == "#"

    def test_branch_url_strips_remote_and_quotes(self):
        url = branch_url("https://gitlab.com/acme/w", "origin/feature/x")
        assert url == "https://gitlab.com/acme/w/tree/feature%2Fx"

    def test_branch_url_unknown_branch(self):
        assert branch_url("https://github.com/acme/w", "unknown") == "#"


class TestLogCommand:
    def test_default(self, tmp_path):
        extractor = GitLogExtractor(str(tmp_path))
        assert extractor.log_command() == [
            "log",
            f"--pretty=format:{DEFAULT_FORMAT.pretty}",
            "--date=iso",
            "--numstat",
        ]

    def test_branches_and_range(self, tmp_path):
        args = GitLogExtractor(str(tmp_path)).log_command(
            since="2024-01-01", until="2024-02-01", branches=["dev", "main"]
        )
        assert args[-4:] == ["dev", "main", "--since=2024-01-01", "--until=2024-02-01"]

    def test_all_branches_overrides_branch_list(self, tmp_path):
        args = GitLogExtractor(str(tmp_path)).log_command(branches=["dev"], all_branches=True)
        assert "--all" in args
        assert "dev" not in args


class TestGitLogExtractor:
    def _fake_git(self, monkeypatch, responses):
        def fake_run(cmd, **kwargs):
            key = cmd[3]
            if key not in responses:
                return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="unexpected")
            return subprocess.CompletedProcess(cmd, 0, stdout=responses[key], stderr="")

        monkeypatch.setattr("git_moar.history.extractor.subprocess.run", fake_run)

    def test_not_a_repo(self, tmp_path, monkeypatch):
        self._fake_git(monkeypatch, {})
        assert GitLogExtractor(str(tmp_path)).is_git_repo() is False

    def test_failed_log_returns_none(self, tmp_path, monkeypatch):
        self._fake_git(monkeypatch, {"rev-parse": ".git\n"})
        extractor = GitLogExtractor(str(tmp_path))
        assert extractor.is_git_repo() is True
        assert extractor.log() is None

    def test_missing_git_binary(self, tmp_path, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr("git_moar.history.extractor.subprocess.run", fake_run)
        extractor = GitLogExtractor(str(tmp_path))
        assert extractor.is_git_repo() is False
        assert extractor.log() is None

    def test_repo_info(self, tmp_path, monkeypatch):
        self._fake_git(
            monkeypatch,
            {
                "config": "git@github.com:acme/widgets.git\n",
                "branch": "main\n",
                "log": "2023-05-01T08:00:00+00:00\n2023-06-01T08:00:00+00:00\n",
            },
        )
        info = GitLogExtractor(str(tmp_path)).repo_info()

        assert info.name == tmp_path.name
        assert info.url == "https://github.com/acme/widgets"
        assert info.current_branch == "main"
        assert info.first_commit == datetime(2023, 5, 1, 8, tzinfo=timezone.utc)

    def test_repo_info_without_remote(self, tmp_path, monkeypatch):
        self._fake_git(monkeypatch, {})
        info = GitLogExtractor(str(tmp_path)).repo_info()
        assert info.url == ""
        assert info.current_branch is None
        assert info.first_commit is None

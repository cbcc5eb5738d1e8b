#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Tests for cloning buildpacks and inspecting their HEAD."""

from pathlib import Path
import subprocess

import pygit2
import pytest
from provide.foundation.process import ProcessError

from brats.engines.git import GitOperationsHelper, HeadSummary
from tests.helpers.process_fakes import RecordingRunner


@pytest.fixture
def git_helper(recording_runner: RecordingRunner) -> GitOperationsHelper:
    return GitOperationsHelper(runner=recording_runner)


class TestClone:
    """Tests for the clone command and its filesystem preparation."""

    def test_clone_command_is_shallow_and_recursive(self, tmp_path: Path):
        """Test the exact git invocation."""
        dest = tmp_path / "ruby-buildpack"
        cmd = GitOperationsHelper.clone_command("https://github.com/cloudfoundry/ruby-buildpack", "develop", dest)

        assert cmd == [
            "git",
            "clone",
            "-q",
            "-b",
            "develop",
            "--depth",
            "1",
            "--recursive",
            "https://github.com/cloudfoundry/ruby-buildpack",
            str(dest),
        ]

    def test_clone_removes_stale_directory(
        self, git_helper: GitOperationsHelper, recording_runner: RecordingRunner, tmp_path: Path
    ):
        """Test that a leftover clone from an earlier attempt is deleted first."""
        dest = tmp_path / "scratch" / "ruby-buildpack"
        dest.mkdir(parents=True)
        (dest / "leftover.zip").write_text("old")

        git_helper.clone("https://example.com/ruby-buildpack", "develop", dest)

        assert not dest.exists()
        assert recording_runner.commands[0][:2] == ["git", "clone"]
        assert recording_runner.calls[0].check is True

    def test_clone_creates_parent_directory(self, git_helper: GitOperationsHelper, tmp_path: Path):
        """Test that the scratch root is created when missing."""
        dest = tmp_path / "does" / "not" / "exist" / "go-buildpack"
        git_helper.clone("https://example.com/go-buildpack", "master", dest)
        assert dest.parent.is_dir()

    def test_clone_passes_environment(
        self, git_helper: GitOperationsHelper, recording_runner: RecordingRunner, tmp_path: Path
    ):
        """Test that forwarded variables reach the git subprocess."""
        git_helper.clone("https://example.com/x", "develop", tmp_path / "x", env={"CF_HOME": "/cf"})
        assert recording_runner.calls[0].env == {"CF_HOME": "/cf"}

    def test_clone_failure_propagates(self, recording_runner: RecordingRunner, tmp_path: Path):
        """Test that a failed clone raises ProcessError."""
        recording_runner.respond(["git", "clone"], returncode=128, stderr="Remote branch nope not found")
        helper = GitOperationsHelper(runner=recording_runner)

        with pytest.raises(ProcessError) as exc_info:
            helper.clone("https://example.com/x", "nope", tmp_path / "x")

        assert exc_info.value.return_code == 128


class TestHeadInspection:
    """Tests for summarising the cloned commit with pygit2."""

    def test_head_summary(self, temp_git_repo: Path):
        """Test reading the HEAD commit of a real repository."""
        summary = GitOperationsHelper().head_summary(temp_git_repo)

        assert isinstance(summary, HeadSummary)
        assert summary.author == "Brats Test Bot"
        assert summary.message == "Initial commit"
        assert len(summary.commit_hash) == 40

    def test_head_summary_str(self, temp_git_repo: Path):
        """Test the one-line rendering used in the start-of-run log."""
        summary = GitOperationsHelper().head_summary(temp_git_repo)
        text = str(summary)

        assert text.startswith(summary.commit_hash[:7])
        assert "Brats Test Bot" in text
        assert text.endswith("Initial commit")

    def test_head_summary_empty_repository(self, tmp_path: Path):
        """Test that an unborn HEAD yields None."""
        pygit2.init_repository(str(tmp_path / "empty"))
        assert GitOperationsHelper().head_summary(tmp_path / "empty") is None

    def test_describe_head_on_non_repository(self, tmp_path: Path):
        """Test that describing a plain directory does not raise."""
        assert GitOperationsHelper().describe_head(tmp_path).startswith("unavailable")

    def test_describe_head_follows_new_commits(self, temp_git_repo: Path):
        """Test that the description tracks the latest commit."""
        (temp_git_repo / "VERSION").write_text("1.2.3")
        subprocess.run(["git", "add", "VERSION"], cwd=temp_git_repo, check=True)
        subprocess.run(["git", "commit", "-m", "Bump version"], cwd=temp_git_repo, check=True, capture_output=True)

        assert GitOperationsHelper().describe_head(temp_git_repo).endswith("Bump version")


# 🔼⚙️🔚

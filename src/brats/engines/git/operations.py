#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Git operation helpers for buildpack clones."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
import shutil

from attrs import define
import pygit2
from provide.foundation.logger import get_logger
from provide.foundation.process import run

from brats.types import CommandRunner

log = get_logger(__name__)

CLONE_DEPTH = 1


@define(frozen=True, slots=True)
class HeadSummary:
    """The commit a clone is sitting on."""

    commit_hash: str
    author: str
    timestamp: datetime
    message: str

    def __str__(self) -> str:
        when = self.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        return f"{self.commit_hash[:7]} - {self.author} - {when} - {self.message}"


class GitOperationsHelper:
    """Clone buildpack repositories and inspect the result."""

    def __init__(self, runner: CommandRunner = run) -> None:
        self._runner = runner
        self._log = log.bind(helper_id=id(self))

    @staticmethod
    def clone_command(url: str, branch: str, destination: Path) -> list[str]:
        return [
            "git",
            "clone",
            "-q",
            "-b",
            branch,
            "--depth",
            str(CLONE_DEPTH),
            "--recursive",
            url,
            str(destination),
        ]

    def clone(
        self,
        url: str,
        branch: str,
        destination: Path,
        env: Mapping[str, str] | None = None,
    ) -> Path:
        """Shallow, recursive clone of ``branch`` into ``destination``.

        Any existing directory at ``destination`` is removed first so that a
        retried test starts from a clean tree.

        Raises:
            ProcessError: If git exits non-zero
        """
        destination = Path(destination)
        if destination.exists():
            self._log.debug("Removing stale clone", path=str(destination))
            shutil.rmtree(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        self._log.info("Cloning buildpack", url=url, branch=branch, path=str(destination))
        self._runner(self.clone_command(url, branch, destination), env=env, check=True)
        return destination

    def get_repo(self, working_dir: Path) -> pygit2.Repository:
        """Helper to get the pygit2 Repository object."""
        try:
            return pygit2.Repository(str(working_dir))
        except pygit2.GitError as e:
            self._log.error("Failed to open Git repository", path=str(working_dir), error=str(e))
            raise

    def head_summary(self, working_dir: Path) -> HeadSummary | None:
        """Summary of the HEAD commit, or None for an empty repository."""
        repo = self.get_repo(working_dir)
        if repo.is_empty or repo.head_is_unborn:
            return None

        commit = repo.head.peel(pygit2.Commit)
        return HeadSummary(
            commit_hash=str(commit.id),
            author=commit.author.name if commit.author else "Unknown",
            timestamp=datetime.fromtimestamp(commit.commit_time, tz=UTC),
            message=(commit.message or "").split("\n", 1)[0][:80],
        )

    def describe_head(self, working_dir: Path) -> str:
        """One-line HEAD description for logs; never raises."""
        try:
            summary = self.head_summary(working_dir)
        except pygit2.GitError as e:
            return f"unavailable ({e})"
        return str(summary) if summary else "Repository is empty or unborn."


# 🔼⚙️🔚

#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Shared pytest fixtures for the brats test suite."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from brats.config import BratsConfig
from brats.runtime.workflow import BuildpackInstaller
from tests.helpers.process_fakes import RecordingRunner


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary Git repository for testing."""
    repo_path = tmp_path / "test_repo"
    if repo_path.exists():
        shutil.rmtree(repo_path)
    repo_path.mkdir()

    try:
        subprocess.run(["git", "--version"], check=True, capture_output=True, text=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        pytest.skip(f"Git is not available or `git --version` failed: {e}")

    subprocess.run(["git", "init"], cwd=repo_path, check=True, capture_output=True)
    subprocess.run(["git", "config", "user.name", "Brats Test Bot"], cwd=repo_path, check=True)
    subprocess.run(["git", "config", "user.email", "test@brats.example.com"], cwd=repo_path, check=True)
    # Disable GPG signing to prevent tests from failing if user has global GPG config
    subprocess.run(["git", "config", "commit.gpgsign", "false"], cwd=repo_path, check=True)
    subprocess.run(["git", "config", "gpg.program", ""], cwd=repo_path, check=True)

    (repo_path / "README.md").write_text("initial commit")
    subprocess.run(["git", "add", "README.md"], cwd=repo_path, check=True)
    subprocess.run(["git", "commit", "-m", "Initial commit"], cwd=repo_path, check=True, capture_output=True)
    return repo_path


@pytest.fixture
def run_config(tmp_path: Path) -> BratsConfig:
    """A run configuration whose scratch and log dirs live under tmp_path."""
    return BratsConfig(
        branch="develop",
        scratch_root=tmp_path / "tmp",
        log_dir=tmp_path / "log",
        passthrough_env=(),
    )


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def installer(run_config: BratsConfig, recording_runner: RecordingRunner) -> BuildpackInstaller:
    """Installer wired to the recording runner; no real commands run."""
    return BuildpackInstaller(run_config, runner=recording_runner)


# 🔼⚙️🔚

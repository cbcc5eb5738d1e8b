#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Errors raised by the buildpack lifecycle workflows."""

from __future__ import annotations

from typing import Any

from provide.foundation.errors.base import FoundationError

from brats.types import InstallState


class BuildpackWorkflowError(FoundationError):
    """Base exception for a failed install, bump or deploy step."""

    def __init__(self, message: str, buildpack: str, state: InstallState | str, **extra_context: Any):
        self.buildpack = buildpack
        self.state = state.name if isinstance(state, InstallState) else state
        super().__init__(
            f"[{buildpack}-buildpack @ {self.state}] {message}",
            buildpack=buildpack,
            state=self.state,
            **extra_context,
        )

    def _default_code(self) -> str:
        return "BRATS_WORKFLOW_ERROR"


class CloneError(BuildpackWorkflowError):
    """Raised when the buildpack source could not be cloned."""

    def _default_code(self) -> str:
        return "BRATS_CLONE_FAILED"


class PackagingError(BuildpackWorkflowError):
    """Raised when the packaging tool could not produce an artifact.

    ``attempts`` holds the output of every packager invocation that was
    tried, in order, so a fallback never hides the first failure.
    """

    def __init__(
        self,
        message: str,
        buildpack: str,
        state: InstallState | str,
        attempts: list[str] | None = None,
        **extra_context: Any,
    ):
        self.attempts = list(attempts or [])
        if self.attempts:
            message = message + "\n" + "\n".join(
                f"--- attempt {i} ---\n{text}" for i, text in enumerate(self.attempts, start=1)
            )
        super().__init__(message, buildpack, state, **extra_context)

    def _default_code(self) -> str:
        return "BRATS_PACKAGING_FAILED"


class ArtifactNotFoundError(BuildpackWorkflowError):
    """Raised when no packaged zip matches the artifact pattern."""

    def __init__(self, buildpack: str, state: InstallState | str, directory: str, pattern: str):
        self.directory = directory
        self.pattern = pattern
        message = f"No buildpack artifact matching '{pattern}' found in {directory}"
        super().__init__(message, buildpack, state, directory=directory, pattern=pattern)

    def _default_code(self) -> str:
        return "BRATS_ARTIFACT_NOT_FOUND"


class RegistrationError(BuildpackWorkflowError):
    """Raised when the platform rejects a buildpack create/update."""

    def _default_code(self) -> str:
        return "BRATS_REGISTRATION_FAILED"


class DeployError(BuildpackWorkflowError):
    """Raised when a sample app push fails."""

    def _default_code(self) -> str:
        return "BRATS_DEPLOY_FAILED"


# 🔼⚙️🔚

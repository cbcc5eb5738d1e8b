#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Thin wrapper around the ``cf`` command-line client."""

from __future__ import annotations

from collections.abc import Mapping
import json
from pathlib import Path

from attrs import define, field
from provide.foundation.logger import get_logger
from provide.foundation.process import CompletedProcess, run

from brats.types import CommandRunner

log = get_logger(__name__)

BUILDPACK_SUFFIX = "-brat-buildpack"


def brat_buildpack_name(buildpack: str) -> str:
    """Name a buildpack is registered under on the platform."""
    return f"{buildpack}{BUILDPACK_SUFFIX}"


def parse_api_version(text: str) -> tuple[int, ...]:
    """Turn ``"2.57.0"`` into ``(2, 57, 0)``; non-numeric parts count as 0."""
    parts = []
    for piece in text.strip().split("."):
        digits = "".join(ch for ch in piece if ch.isdigit())
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


@define(frozen=True, slots=True)
class AppTemplate:
    """A sample application to push with a buildpack."""

    name: str
    path: Path = field(converter=Path)


class CloudFoundryCLI:
    """Builds and runs ``cf`` commands against the targeted deployment.

    Every command is an argument list; environment overrides go to the
    subprocess only.
    """

    def __init__(
        self,
        runner: CommandRunner = run,
        env: Mapping[str, str] | None = None,
        executable: str = "cf",
    ) -> None:
        self._runner = runner
        self._env = dict(env or {})
        self._cf = executable
        self._log = log.bind(cli=executable)

    def _run(
        self,
        args: list[str],
        check: bool = True,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> CompletedProcess:
        merged = {**self._env, **(env or {})}
        return self._runner([self._cf, *args], cwd=cwd, env=merged or None, check=check)

    def create_buildpack(self, name: str, artifact: Path, position: int, enable: bool = True) -> None:
        args = ["create-buildpack", name, str(artifact), str(position)]
        if enable:
            args.append("--enable")
        self._log.info("Creating buildpack", name=name, artifact=str(artifact), position=position)
        self._run(args)

    def update_buildpack(self, name: str, artifact: Path) -> None:
        self._log.info("Updating buildpack", name=name, artifact=str(artifact))
        self._run(["update-buildpack", name, "-p", str(artifact)])

    def delete_buildpack(self, name: str, check: bool = True) -> CompletedProcess:
        self._log.info("Deleting buildpack", name=name)
        return self._run(["delete-buildpack", name, "-f"], check=check)

    def push_app(
        self,
        template: AppTemplate,
        buildpack: str,
        stack: str,
        env: Mapping[str, str] | None = None,
    ) -> CompletedProcess:
        self._log.info(
            "Pushing app",
            app=template.name,
            path=str(template.path),
            buildpack=buildpack,
            stack=stack,
        )
        return self._run(
            ["push", template.name, "-p", str(template.path), "-b", buildpack, "-s", stack],
            env=env,
        )

    def api_version(self) -> str:
        """API version reported by the targeted Cloud Controller."""
        result = self._run(["curl", "/v2/info"])
        return str(json.loads(result.stdout)["api_version"])

    def api_version_at_least(self, minimum: str) -> bool:
        return parse_api_version(self.api_version()) >= parse_api_version(minimum)


# 🔼⚙️🔚

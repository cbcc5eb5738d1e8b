#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Packaging a cloned buildpack into a zip artifact.

Two generations of buildpacks are supported:

- Go-style (manifest declares ``include_files``): the packager is built from
  the copy of libbuildpack vendored inside the clone, then run with
  ``--cached=true|false``.
- Bundler-style: the Ruby packager gem is run through ``bundle exec``, first
  with ``--cached``/``--uncached``, then with the older positional form.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from provide.foundation.logger import get_logger
from provide.foundation.process import ProcessError, run

from brats.errors import PackagingError
from brats.manifest import PackagingConvention
from brats.types import Caching, CommandRunner, InstallState

log = get_logger(__name__)

ARTIFACT_PATTERN = "*_buildpack*.zip"
GO_PACKAGER_SOURCE_GLOB = "src/*/vendor/github.com/cloudfoundry/libbuildpack/packager/buildpack-packager"
GO_BIN_DIR = ".bin"
BUNDLER_GEMFILE = "cf.Gemfile"

# Phrases option parsers print when they do not know a flag
_REJECTED_FLAG_MARKERS = ("invalid option", "unrecognized", "unknown option", "flag provided but not defined")


def find_artifact(directory: Path, pattern: str = ARTIFACT_PATTERN) -> Path | None:
    """Pick the packaged zip in ``directory`` matching ``pattern``.

    When several files match, the most recently modified one wins and ties
    are broken by file name.
    """
    matches = [path for path in Path(directory).glob(pattern) if path.is_file()]
    if not matches:
        return None
    matches.sort(key=lambda path: (-path.stat().st_mtime, path.name))
    if len(matches) > 1:
        log.warning(
            "Several buildpack artifacts match, using the newest",
            pattern=pattern,
            chosen=matches[0].name,
            candidates=[path.name for path in matches],
        )
    return matches[0]


def failure_output(error: ProcessError) -> str:
    """Combined stdout and stderr of a failed command, or the error text."""
    return "\n".join(part for part in (error.stdout, error.stderr) if part) or str(error)


class Packager(ABC):
    """Base class for the packaging conventions."""

    convention: PackagingConvention

    def __init__(self, runner: CommandRunner = run, env: Mapping[str, str] | None = None) -> None:
        self._runner = runner
        self._env = dict(env or {})

    @abstractmethod
    def package(
        self, buildpack: str, clone_dir: Path, caching: Caching, state: InstallState = InstallState.CLONED
    ) -> None:
        """Run the packaging tool in ``clone_dir``.

        Raises:
            PackagingError: If the tool cannot be built or run
        """


class GoStylePackager(Packager):
    """Builds the vendored Go packager and runs it."""

    convention = PackagingConvention.GO_STYLE

    @staticmethod
    def environment(clone_dir: Path) -> dict[str, str]:
        gopath = Path(clone_dir).resolve()
        return {"GOPATH": str(gopath), "GOBIN": str(gopath / GO_BIN_DIR)}

    @staticmethod
    def packager_source(clone_dir: Path) -> Path | None:
        candidates = sorted(Path(clone_dir).glob(GO_PACKAGER_SOURCE_GLOB))
        return candidates[0] if candidates else None

    @staticmethod
    def package_command(caching: Caching) -> list[str]:
        flag = "false" if caching is Caching.UNCACHED else "true"
        return [f"./{GO_BIN_DIR}/buildpack-packager", f"--cached={flag}"]

    def package(
        self, buildpack: str, clone_dir: Path, caching: Caching, state: InstallState = InstallState.CLONED
    ) -> None:
        env = {**self._env, **self.environment(clone_dir)}
        source = self.packager_source(clone_dir)
        if source is None:
            raise PackagingError(
                f"Vendored buildpack-packager not found under {GO_PACKAGER_SOURCE_GLOB}",
                buildpack,
                state,
            )

        log.info("Building Go buildpack-packager", buildpack=buildpack, source=str(source))
        try:
            self._runner(["go", "install"], cwd=source, env=env, check=True)
        except ProcessError as e:
            raise PackagingError(
                "Could not build buildpack-packager", buildpack, state,
                attempts=[failure_output(e)],
            ) from e

        command = self.package_command(caching)
        log.info("Packaging buildpack", buildpack=buildpack, command=command)
        try:
            self._runner(command, cwd=clone_dir, env=env, check=True)
        except ProcessError as e:
            raise PackagingError(
                "Could not package buildpack", buildpack, state,
                attempts=[failure_output(e)],
            ) from e


class BundlerStylePackager(Packager):
    """Runs the Ruby buildpack-packager gem with a flag-then-positional fallback."""

    convention = PackagingConvention.BUNDLER_STYLE

    def __init__(
        self,
        runner: CommandRunner = run,
        env: Mapping[str, str] | None = None,
        gemfile: str = BUNDLER_GEMFILE,
    ) -> None:
        super().__init__(runner, env)
        self.gemfile = gemfile

    def environment(self) -> dict[str, str]:
        return {**self._env, "BUNDLE_GEMFILE": self.gemfile}

    @staticmethod
    def package_commands(caching: Caching) -> list[list[str]]:
        base = ["bundle", "exec", "buildpack-packager"]
        return [[*base, f"--{caching.value}"], [*base, caching.value]]

    def bundle_install(self, buildpack: str, clone_dir: Path, state: InstallState = InstallState.CLONED) -> None:
        try:
            self._runner(["bundle", "install"], cwd=clone_dir, env=self.environment(), check=True)
        except ProcessError as e:
            raise PackagingError(
                "bundle install failed", buildpack, state,
                attempts=[failure_output(e)],
            ) from e

    def package(
        self, buildpack: str, clone_dir: Path, caching: Caching, state: InstallState = InstallState.CLONED
    ) -> None:
        self.bundle_install(buildpack, clone_dir, state)

        attempts: list[str] = []
        for command in self.package_commands(caching):
            try:
                self._runner(command, cwd=clone_dir, env=self.environment(), check=True)
            except ProcessError as e:
                output = failure_output(e)
                attempts.append(output)
                flag_rejected = any(marker in output.lower() for marker in _REJECTED_FLAG_MARKERS)
                log.warning(
                    "buildpack-packager invocation failed",
                    buildpack=buildpack,
                    command=command,
                    flag_rejected=flag_rejected,
                    return_code=e.return_code,
                )
                continue
            if attempts:
                log.info(
                    "buildpack-packager succeeded with the positional caching argument",
                    buildpack=buildpack,
                    command=command,
                )
            return

        raise PackagingError(
            "Could not package buildpack with either packager invocation",
            buildpack,
            state,
            attempts=attempts,
        )


def packager_for(
    convention: PackagingConvention,
    runner: CommandRunner = run,
    env: Mapping[str, str] | None = None,
) -> Packager:
    if convention is PackagingConvention.GO_STYLE:
        return GoStylePackager(runner, env)
    return BundlerStylePackager(runner, env)


# 🔼⚙️🔚

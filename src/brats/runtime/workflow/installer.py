#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Buildpack lifecycle orchestration.

A buildpack moves through ``UNCLONED -> CLONED -> PACKAGED -> REGISTERED``.
Each step is a blocking external command; the first failure raises and
aborts the rest of the workflow. Nothing is rolled back: whatever was left
in the scratch directory or on the platform is removed by
:meth:`BuildpackInstaller.cleanup_buildpack`.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import re
import shutil

from attrs import define
from provide.foundation.logger import get_logger
from provide.foundation.process import ProcessError, run

from brats.config import BratsConfig
from brats.credentials import put_credentials_in_uris_in_manifest
from brats.engines.git import GitOperationsHelper
from brats.errors import (
    ArtifactNotFoundError,
    BuildpackWorkflowError,
    CloneError,
    DeployError,
    PackagingError,
    RegistrationError,
)
from brats.manifest import MANIFEST_FILE, PackagingConvention, load_manifest
from brats.packaging import ARTIFACT_PATTERN, BundlerStylePackager, failure_output, find_artifact, packager_for
from brats.platform.cf import AppTemplate, CloudFoundryCLI, brat_buildpack_name
from brats.types import Caching, CommandRunner, InstallState

log = get_logger(__name__)

BUMPED_VERSION = "99.99.99"
VERSION_FILE = "VERSION"

JAVA_BUILDPACK = "java"
JAVA_ARTIFACT_DIR = "build"
JAVA_ARTIFACT_PATTERN = "java-buildpack-offline-*.zip"

_BRAT_NAME = re.compile(r"(.*)-brat-buildpack")

Customizer = Callable[[Path], None]


@define(frozen=True, slots=True)
class InstallResult:
    """What an install left behind."""

    buildpack: str
    name: str
    clone_dir: Path
    artifact: Path
    convention: PackagingConvention | None
    head: str


class BuildpackInstaller:
    """Clone, package, register, deploy with, and clean up buildpacks."""

    def __init__(
        self,
        config: BratsConfig,
        runner: CommandRunner = run,
        git: GitOperationsHelper | None = None,
        cf: CloudFoundryCLI | None = None,
    ) -> None:
        self.config = config
        self._runner = runner
        self._env = config.subprocess_env()
        self.git = git or GitOperationsHelper(runner)
        self.cf = cf or CloudFoundryCLI(runner, env=self._env)
        self._states: dict[str, InstallState] = {}
        self._log = log.bind(branch=config.branch)

    def state(self, buildpack: str) -> InstallState:
        return self._states.get(buildpack, InstallState.UNCLONED)

    def _advance(self, buildpack: str, state: InstallState) -> None:
        self._states[buildpack] = state
        self._log.debug("Buildpack state changed", buildpack=buildpack, state=state.name)

    def _clone(self, buildpack: str, branch: str) -> Path:
        url = self.config.repository_url(buildpack)
        try:
            clone_dir = self.git.clone(url, branch, self.config.clone_dir(buildpack), env=self._env)
        except ProcessError as e:
            raise CloneError(
                f"Could not clone {url} at branch '{branch}': {e.stderr or e}",
                buildpack,
                self.state(buildpack),
            ) from e
        self._advance(buildpack, InstallState.CLONED)
        return clone_dir

    def _register(self, buildpack: str, name: str, artifact: Path, position: int) -> None:
        try:
            self.cf.create_buildpack(name, artifact, position, enable=True)
        except ProcessError as e:
            raise RegistrationError(
                f"Could not create buildpack '{name}': {e.stderr or e}", buildpack, self.state(buildpack)
            ) from e
        self._advance(buildpack, InstallState.REGISTERED)

    def _announce(self, buildpack: str, branch: str, clone_dir: Path, description: str = "") -> str:
        head = self.git.describe_head(clone_dir)
        self._log.info(
            f"Running Brats tests{description}",
            buildpack=buildpack,
            url=self.config.repository_url(buildpack),
            git_branch=branch,
            latest=head,
        )
        return head

    def install_buildpack(
        self,
        buildpack: str,
        caching: Caching | str = Caching.CACHED,
        customize: Customizer | None = None,
        branch: str | None = None,
        description: str = "",
    ) -> InstallResult:
        """Clone, package and register ``buildpack`` as ``<buildpack>-brat-buildpack``.

        Args:
            buildpack: Buildpack short name, e.g. ``ruby``
            caching: ``cached`` (default) or ``uncached``
            customize: Called with the clone directory before packaging
            branch: Overrides the configured branch
            description: Appended to the start-of-run log line

        Returns:
            InstallResult describing the registered buildpack

        Raises:
            CloneError: If git clone fails
            PackagingError: If the packager cannot be built or run
            ArtifactNotFoundError: If packaging produced no zip
            RegistrationError: If ``cf create-buildpack`` fails
        """
        caching = Caching.coerce(caching)
        branch = branch or self.config.branch
        self._states.pop(buildpack, None)

        clone_dir = self._clone(buildpack, branch)

        if customize is not None:
            customize(clone_dir)

        manifest = load_manifest(clone_dir / MANIFEST_FILE)
        packager = packager_for(manifest.convention, self._runner, self._env)
        self._log.info(
            "Packaging buildpack",
            buildpack=buildpack,
            convention=manifest.convention.value,
            caching=caching.value,
        )
        packager.package(buildpack, clone_dir, caching, state=InstallState.CLONED)

        artifact = find_artifact(clone_dir, ARTIFACT_PATTERN)
        if artifact is None:
            raise ArtifactNotFoundError(buildpack, InstallState.CLONED, str(clone_dir), ARTIFACT_PATTERN)
        self._advance(buildpack, InstallState.PACKAGED)

        name = brat_buildpack_name(buildpack)
        self._register(buildpack, name, artifact, self.config.position)

        head = self._announce(buildpack, branch, clone_dir, description)
        return InstallResult(buildpack, name, clone_dir, artifact, manifest.convention, head)

    def install_buildpack_with_uri_credentials(
        self,
        buildpack: str,
        caching: Caching | str = Caching.UNCACHED,
        branch: str | None = None,
    ) -> InstallResult:
        """Install a buildpack whose manifest URIs all carry credentials."""

        def _inject(clone_dir: Path) -> None:
            put_credentials_in_uris_in_manifest(clone_dir / MANIFEST_FILE)

        return self.install_buildpack(
            buildpack,
            caching=caching,
            customize=_inject,
            branch=branch,
            description=" simulated buildpack with credentials in uri",
        )

    def install_java_buildpack(self, branch: str | None = None, position: int | None = None) -> InstallResult:
        """Install the Java buildpack, which packages with rake instead of buildpack-packager.

        Any previous ``java-brat-buildpack`` is deleted before registering.
        """
        buildpack = JAVA_BUILDPACK
        branch = branch or self.config.branch
        position = self.config.position if position is None else position
        self._states.pop(buildpack, None)

        clone_dir = self._clone(buildpack, branch)

        bundler = BundlerStylePackager(self._runner, self._env, gemfile="Gemfile")
        bundler.bundle_install(buildpack, clone_dir)
        try:
            self._runner(
                ["bundle", "exec", "rake", "package", "OFFLINE=true", "PINNED=true"],
                cwd=clone_dir,
                env=bundler.environment(),
                check=True,
            )
        except ProcessError as e:
            raise PackagingError(
                "rake package failed", buildpack, InstallState.CLONED, attempts=[failure_output(e)]
            ) from e

        artifact_dir = clone_dir / JAVA_ARTIFACT_DIR
        artifact = find_artifact(artifact_dir, JAVA_ARTIFACT_PATTERN)
        if artifact is None:
            raise ArtifactNotFoundError(buildpack, InstallState.CLONED, str(artifact_dir), JAVA_ARTIFACT_PATTERN)
        self._advance(buildpack, InstallState.PACKAGED)

        name = brat_buildpack_name(buildpack)
        self.cf.delete_buildpack(name, check=False)
        self._register(buildpack, name, artifact, position)

        head = self._announce(buildpack, branch, clone_dir)
        return InstallResult(buildpack, name, clone_dir, artifact, None, head)

    def bump_buildpack_version(self, buildpack: str) -> Path:
        """Repackage an installed buildpack as version 99.99.99 and update it in place.

        Returns:
            Path to the re-pushed artifact
        """
        clone_dir = self.config.clone_dir(buildpack)
        if not clone_dir.is_dir():
            raise BuildpackWorkflowError(
                f"Cannot bump version: {clone_dir} does not exist, install the buildpack first",
                buildpack,
                self.state(buildpack),
            )
        state = self.state(buildpack)

        (clone_dir / VERSION_FILE).write_text(BUMPED_VERSION)

        manifest = load_manifest(clone_dir / MANIFEST_FILE)
        packager = packager_for(manifest.convention, self._runner, self._env)
        packager.package(buildpack, clone_dir, Caching.CACHED, state=state)

        artifact = clone_dir / f"{buildpack}_buildpack-cached-v{BUMPED_VERSION}.zip"
        if not artifact.is_file():
            raise ArtifactNotFoundError(buildpack, state, str(clone_dir), artifact.name)

        name = brat_buildpack_name(buildpack)
        try:
            self.cf.update_buildpack(name, artifact)
        except ProcessError as e:
            raise RegistrationError(f"Could not update buildpack '{name}': {e.stderr or e}", buildpack, state) from e

        self._log.info("Bumped buildpack version", buildpack=name, version=BUMPED_VERSION)
        return artifact

    def cleanup_buildpack(self, buildpack: str) -> None:
        """Best-effort removal of the clone and the registered buildpack; never raises."""
        clone_dir = self.config.clone_dir(buildpack)
        try:
            shutil.rmtree(clone_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            self._log.warning("Could not remove buildpack clone", path=str(clone_dir), error=str(e))

        name = brat_buildpack_name(buildpack)
        try:
            result = self.cf.delete_buildpack(name, check=False)
        except ProcessError as e:
            self._log.warning("Could not delete buildpack", buildpack=name, error=str(e))
        else:
            if result.returncode != 0:
                self._log.debug("cf delete-buildpack reported a failure", buildpack=name, returncode=result.returncode)

        self._states.pop(buildpack, None)

    def buildpack_version(self, buildpack_name: str) -> str | None:
        """VERSION of the local clone behind a ``<language>-brat-buildpack`` name."""
        match = _BRAT_NAME.match(buildpack_name)
        if not match:
            return None
        version_file = self.config.clone_dir(match.group(1)) / VERSION_FILE
        if not version_file.is_file():
            return None
        return version_file.read_text().strip()

    def deploy_app(
        self,
        template: AppTemplate,
        buildpack: str,
        stack: str | None = None,
        buildpack_version: str | None = None,
    ) -> None:
        """Push a sample app with a registered buildpack.

        ``BUILDPACK_VERSION`` is only set in the ``cf push`` environment; when
        not given it is read from the buildpack's clone.
        """
        stack = stack or self.config.stack
        if buildpack_version is None:
            buildpack_version = self.buildpack_version(buildpack)
        env = {"BUILDPACK_VERSION": buildpack_version} if buildpack_version else None

        try:
            self.cf.push_app(template, buildpack=buildpack, stack=stack, env=env)
        except ProcessError as e:
            match = _BRAT_NAME.match(buildpack)
            raise DeployError(
                f"Could not push '{template.name}': {e.stderr or e}",
                match.group(1) if match else buildpack,
                InstallState.REGISTERED,
            ) from e


# 🔼⚙️🔚

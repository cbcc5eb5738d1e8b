#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Buildpack manifest resolution and dependency lookup."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from attrs import define, field
import httpx
from provide.foundation.logger import get_logger
import yaml

if TYPE_CHECKING:
    from brats.config import BratsConfig

log = get_logger(__name__)

MANIFEST_FILE = "manifest.yml"
SDK_TOOLS_FILE = "dotnet-sdk-tools.yml"
INCLUDE_FILES_KEY = "include_files"


class PackagingConvention(Enum):
    """How a buildpack branch expects to be packaged."""

    GO_STYLE = "go"
    BUNDLER_STYLE = "bundler"


def packaging_convention(document: Mapping[str, Any]) -> PackagingConvention:
    """Pick the packaging convention from the manifest's shape.

    Only the presence of the ``include_files`` key matters, not its value.
    """
    if INCLUDE_FILES_KEY in document:
        return PackagingConvention.GO_STYLE
    return PackagingConvention.BUNDLER_STYLE


@define(frozen=True, slots=True)
class Dependency:
    name: str
    version: str | None = field(default=None)
    uri: str | None = field(default=None)
    cf_stacks: tuple[str, ...] = field(factory=tuple, converter=tuple)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Dependency:
        version = data.get("version")
        return cls(
            name=data.get("name", ""),
            version=None if version is None else str(version),
            uri=data.get("uri"),
            cf_stacks=data.get("cf_stacks") or (),
        )


@define(frozen=True, slots=True)
class Manifest:
    """Parsed view of a buildpack ``manifest.yml``."""

    dependencies: tuple[Dependency, ...] = field(factory=tuple, converter=tuple)
    convention: PackagingConvention = field(default=PackagingConvention.BUNDLER_STYLE)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Manifest:
        return cls(
            dependencies=[Dependency.from_mapping(dep) for dep in document.get("dependencies") or []],
            convention=packaging_convention(document),
        )

    def dependency_versions(self, dependency: str, stack: str) -> list[str]:
        """Versions of ``dependency`` built for ``stack``, in manifest order.

        Entries without a version are skipped.
        """
        return [
            dep.version
            for dep in self.dependencies
            if dep.name == dependency and stack in dep.cf_stacks and dep.version is not None
        ]


def load_manifest_document(path: Path) -> dict[str, Any]:
    """Read a local manifest file into a plain mapping."""
    with Path(path).open(encoding="utf-8") as handle:
        document = yaml.safe_load(handle)
    return document or {}


def load_manifest(path: Path) -> Manifest:
    return Manifest.from_document(load_manifest_document(path))


def manifest_url(buildpack: str, branch: str, config: BratsConfig) -> str:
    return f"{config.raw_content_url}/{buildpack}-buildpack/{branch}/{MANIFEST_FILE}"


def sdk_tools_url(branch: str, config: BratsConfig) -> str:
    return f"{config.raw_content_url}/dotnet-core-buildpack/{branch}/{SDK_TOOLS_FILE}"


def fetch_yaml(url: str, client: httpx.Client | None = None) -> Any:
    """GET a YAML document. HTTP and parse failures propagate."""
    log.debug("Fetching YAML document", url=url)
    if client is None:
        response = httpx.get(url, follow_redirects=True)
    else:
        response = client.get(url, follow_redirects=True)
    response.raise_for_status()
    return yaml.safe_load(response.text)


def parsed_manifest(
    buildpack: str,
    config: BratsConfig,
    branch: str | None = None,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Fetch and parse a buildpack's published manifest for a branch."""
    return fetch_yaml(manifest_url(buildpack, branch or config.branch, config), client=client)


def sdk_msbuild(
    sdk_version: str,
    config: BratsConfig,
    branch: str | None = None,
    client: httpx.Client | None = None,
) -> bool:
    """Whether a .NET Core SDK version uses msbuild tooling on this branch."""
    document = fetch_yaml(sdk_tools_url(branch or config.branch, config), client=client)
    return sdk_version in (document or {}).get("msbuild", [])


def dependency_versions_in_manifest(
    buildpack: str,
    dependency: str,
    stack: str,
    config: BratsConfig,
    client: httpx.Client | None = None,
) -> list[str]:
    """Versions of a dependency the published manifest provides for a stack."""
    document = parsed_manifest(buildpack, config, client=client)
    if "dependencies" not in document:
        raise KeyError(f"Manifest for '{buildpack}' has no 'dependencies' key")
    versions = Manifest.from_document(document).dependency_versions(dependency, stack)
    log.debug(
        "Resolved dependency versions",
        buildpack=buildpack,
        dependency=dependency,
        stack=stack,
        versions=versions,
    )
    return versions


# 🔼⚙️🔚

#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Buildpack lifecycle commands for brats."""

from __future__ import annotations

from collections.abc import Callable
import functools
from pathlib import Path
import sys

import click
import httpx
from provide.foundation.cli.decorators import logging_options
from provide.foundation.errors.base import FoundationError
from provide.foundation.logger import get_logger
from structlog.typing import FilteringBoundLogger as StructLogger

from brats.config import BRANCH_TAG, BratsConfig, ConfigurationError, load_config
from brats.manifest import dependency_versions_in_manifest
from brats.runtime.workflow import BuildpackInstaller
from brats.utils import BratsDirectories, setup_run_logging

log: StructLogger = get_logger(__name__)

MISSING_BRANCH_HINT = (
    "Please specify a branch of the buildpack to run against with "
    "-b/--branch <git branch> or the BRATS_BUILDPACK_BRANCH environment variable"
)


def _branch_option(f: Callable) -> Callable:
    return click.option(
        "-b",
        "--branch",
        envvar="BRATS_BUILDPACK_BRANCH",
        show_envvar=True,
        help="Git branch of the buildpack to run against (env var BRATS_BUILDPACK_BRANCH).",
    )(f)


def _tags(branch: str | None) -> dict[str, str]:
    if not branch:
        raise ConfigurationError(MISSING_BRANCH_HINT, config_key=BRANCH_TAG, config_source="cli")
    return {BRANCH_TAG: branch}


def _load(branch: str | None, log_level: str | None, log_file: Path | None) -> BratsConfig:
    config = load_config(_tags(branch))
    paths = BratsDirectories.ensure_structure(config)
    setup_run_logging(log_file or paths["log_file"], level=log_level or "INFO")
    return config


def _handle_errors(command: Callable) -> Callable:
    """Turn workflow failures into a message and exit status 1."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except ConfigurationError as e:
            click.echo(f"❌ Configuration error: {e}", err=True)
            sys.exit(1)
        except FoundationError as e:
            log.exception("brats command failed")
            click.echo(f"❌ Error: {e}", err=True)
            sys.exit(1)
        except httpx.HTTPError as e:
            click.echo(f"❌ Could not fetch manifest: {e}", err=True)
            sys.exit(1)

    return wrapper


@click.group(name="buildpack")
def buildpack_cli():
    """Install, bump and clean up buildpacks on the targeted Cloud Foundry."""


@buildpack_cli.command(name="install")
@click.argument("buildpack")
@_branch_option
@click.option("--uncached", is_flag=True, help="Package without embedded dependencies.")
@click.option(
    "--with-uri-credentials",
    is_flag=True,
    help="Inject login:password into every dependency URI before packaging.",
)
@logging_options
@_handle_errors
def install_buildpack(
    buildpack: str,
    branch: str | None,
    uncached: bool,
    with_uri_credentials: bool,
    log_level: str | None,
    log_file: Path | None,
    **kwargs,
):
    """Clone, package and register BUILDPACK as <BUILDPACK>-brat-buildpack.

    Example:
        brats buildpack install ruby -b develop
    """
    config = _load(branch, log_level, log_file)
    installer = BuildpackInstaller(config)
    caching = "uncached" if uncached else "cached"

    if with_uri_credentials:
        result = installer.install_buildpack_with_uri_credentials(buildpack, caching=caching)
    else:
        result = installer.install_buildpack(buildpack, caching=caching)

    click.echo(f"✅ Registered {result.name} from {result.artifact.name}")
    click.echo(f"   Branch: {config.branch}")
    click.echo(f"   Latest: {result.head}")


@buildpack_cli.command(name="install-java")
@_branch_option
@click.option("--position", type=int, default=None, help="Buildpack priority position.")
@logging_options
@_handle_errors
def install_java_buildpack(
    branch: str | None,
    position: int | None,
    log_level: str | None,
    log_file: Path | None,
    **kwargs,
):
    """Package the Java buildpack with rake and register it."""
    config = _load(branch, log_level, log_file)
    result = BuildpackInstaller(config).install_java_buildpack(position=position)
    click.echo(f"✅ Registered {result.name} from {result.artifact.name}")


@buildpack_cli.command(name="bump")
@click.argument("buildpack")
@_branch_option
@logging_options
@_handle_errors
def bump_buildpack(buildpack: str, branch: str | None, log_level: str | None, log_file: Path | None, **kwargs):
    """Repackage an installed BUILDPACK as version 99.99.99 and update it."""
    config = _load(branch, log_level, log_file)
    artifact = BuildpackInstaller(config).bump_buildpack_version(buildpack)
    click.echo(f"✅ Bumped {buildpack}-brat-buildpack with {artifact.name}")


@buildpack_cli.command(name="cleanup")
@click.argument("buildpack")
@_branch_option
@logging_options
@_handle_errors
def cleanup_buildpack(buildpack: str, branch: str | None, log_level: str | None, log_file: Path | None, **kwargs):
    """Remove the local clone and the registered BUILDPACK. Never fails."""
    config = _load(branch, log_level, log_file)
    BuildpackInstaller(config).cleanup_buildpack(buildpack)
    click.echo(f"🧹 Cleaned up {buildpack}-brat-buildpack")


@buildpack_cli.command(name="versions")
@click.argument("buildpack")
@click.argument("dependency")
@_branch_option
@click.option("-s", "--stack", default=None, help="Stack to filter on (defaults to CF_STACK or cflinuxfs2).")
@logging_options
@_handle_errors
def dependency_versions(
    buildpack: str,
    dependency: str,
    branch: str | None,
    stack: str | None,
    log_level: str | None,
    log_file: Path | None,
    **kwargs,
):
    """List DEPENDENCY versions in BUILDPACK's published manifest."""
    config = load_config(_tags(branch))
    if log_file:
        setup_run_logging(log_file, level=log_level or "INFO")

    versions = dependency_versions_in_manifest(buildpack, dependency, stack or config.stack, config)
    if not versions:
        click.echo(f"⚠️  No {dependency} versions for stack {stack or config.stack}")
        return
    for version in versions:
        click.echo(version)


# 🔼⚙️🔚

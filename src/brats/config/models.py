#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration models for a brats run.

A run is configured once, when the test session starts, from the test
runner's ``--tag key:value`` filters and a handful of environment variables.
The resulting :class:`BratsConfig` is frozen and passed explicitly to every
workflow call."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import os
from pathlib import Path

from attrs import define, field
from provide.foundation.errors.config import ConfigurationError as FoundationConfigurationError
from provide.foundation.logger import get_logger

log = get_logger(__name__)

DEFAULT_STACK = "cflinuxfs2"
DEFAULT_GITHUB_URL = "https://github.com/cloudfoundry"
DEFAULT_RAW_CONTENT_URL = "https://raw.githubusercontent.com/cloudfoundry"
DEFAULT_POSITION = 100

BRANCH_TAG = "buildpack_branch"
LANGUAGE_TAG = "language"

# Forwarded through the scrubbed subprocess environment when set
DEFAULT_PASSTHROUGH_ENV = ("CF_HOME", "GOROOT", "GEM_HOME", "GEM_PATH")


class ConfigurationError(FoundationConfigurationError):
    """Raised when the run configuration is missing or invalid."""


def missing_buildpack_branch() -> str:
    return (
        "Please specify a branch of the buildpack to run BRATS against. "
        "To do so, add '--tag buildpack_branch:<git branch>' to the arguments "
        "passed to pytest"
    )


def _non_negative(instance, attribute, value) -> None:
    if value < 0:
        raise ValueError(f"{attribute.name} must be non-negative, got {value}")


@define(frozen=True, slots=True)
class RetryPolicy:
    """Whole-test retry applied by the test runner."""

    count: int = field(default=3, validator=_non_negative)
    sleep_seconds: float = field(default=5.0, validator=_non_negative)


@define(frozen=True, slots=True)
class BratsConfig:
    """Everything a workflow needs to know about the current run."""

    branch: str = field()
    language: str | None = field(default=None)
    stack: str = field(default=DEFAULT_STACK)
    scratch_root: Path = field(default=Path("tmp"), converter=Path)
    log_dir: Path = field(default=Path("log"), converter=Path)
    github_url: str = field(default=DEFAULT_GITHUB_URL)
    raw_content_url: str = field(default=DEFAULT_RAW_CONTENT_URL)
    position: int = field(default=DEFAULT_POSITION, validator=_non_negative)
    retry: RetryPolicy = field(factory=RetryPolicy)
    passthrough_env: tuple[str, ...] = field(default=DEFAULT_PASSTHROUGH_ENV, converter=tuple)

    @branch.validator
    def _check_branch(self, attribute, value) -> None:
        if not value:
            raise ConfigurationError(missing_buildpack_branch(), config_key=BRANCH_TAG)

    def clone_dir(self, buildpack: str) -> Path:
        """Scratch directory a buildpack is cloned into."""
        return self.scratch_root / f"{buildpack}-buildpack"

    def repository_url(self, buildpack: str) -> str:
        return f"{self.github_url}/{buildpack}-buildpack"

    def subprocess_env(self, environ: Mapping[str, str] | None = None) -> dict[str, str]:
        """Environment overrides forwarded to every external command."""
        source = os.environ if environ is None else environ
        return {name: source[name] for name in self.passthrough_env if source.get(name)}


def parse_tags(values: Iterable[str] | None) -> dict[str, str]:
    """Turn ``["key:value", ...]`` test-runner tags into a mapping.

    A bare ``key`` (no colon) is recorded with the value ``"true"``. Later
    tags win over earlier ones.
    """
    tags: dict[str, str] = {}
    for raw in values or ():
        key, sep, value = raw.partition(":")
        key = key.strip()
        if not key:
            continue
        tags[key] = value.strip() if sep else "true"
    return tags


def load_config(
    tags: Mapping[str, str],
    environ: Mapping[str, str] | None = None,
    retry: RetryPolicy | None = None,
) -> BratsConfig:
    """Build the run configuration from test-runner tags and the environment.

    Args:
        tags: Parsed ``--tag`` filters (see :func:`parse_tags`)
        environ: Environment mapping, defaults to ``os.environ``
        retry: Whole-test rerun policy, defaults to ``RetryPolicy()``

    Returns:
        A frozen BratsConfig

    Raises:
        ConfigurationError: If no ``buildpack_branch`` tag was supplied
    """
    env = os.environ if environ is None else environ

    branch = tags.get(BRANCH_TAG)
    if not branch:
        raise ConfigurationError(
            missing_buildpack_branch(), config_key=BRANCH_TAG, config_source="tags"
        )

    kwargs: dict[str, object] = {
        "branch": branch,
        "language": tags.get(LANGUAGE_TAG),
        "stack": env.get("CF_STACK") or DEFAULT_STACK,
    }
    if env.get("BRATS_SCRATCH_ROOT"):
        kwargs["scratch_root"] = env["BRATS_SCRATCH_ROOT"]
    if env.get("BRATS_LOG_DIR"):
        kwargs["log_dir"] = env["BRATS_LOG_DIR"]
    if retry is not None:
        kwargs["retry"] = retry

    config = BratsConfig(**kwargs)
    log.debug(
        "Loaded brats configuration",
        branch=config.branch,
        language=config.language,
        stack=config.stack,
        scratch_root=str(config.scratch_root),
        reruns=config.retry.count,
    )
    return config


# 🔼⚙️🔚

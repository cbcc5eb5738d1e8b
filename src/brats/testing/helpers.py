#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Helpers for writing buildpack acceptance tests."""

from __future__ import annotations

from pathlib import Path
import textwrap

from provide.foundation.logger import get_logger
import pytest

from brats.config import BratsConfig
from brats.platform.cf import CloudFoundryCLI

log = get_logger(__name__)

DOT_PROFILE_MINIMUM_CF_API = "2.57.0"
DOT_PROFILE_MARKER = "PROFILE_SCRIPT_IS_PRESENT_AND_RAN"

DOT_PROFILE_SCRIPT = textwrap.dedent(
    f"""\
    #!/usr/bin/env bash

    echo {DOT_PROFILE_MARKER}

    """
)


def add_dot_profile_script_to_app(template_path: Path | str) -> Path:
    """Drop an executable ``.profile`` into an app template.

    The script prints ``PROFILE_SCRIPT_IS_PRESENT_AND_RAN`` so tests can check
    the buildpack sourced it at staging.
    """
    profile_path = Path(template_path) / ".profile"
    profile_path.write_text(DOT_PROFILE_SCRIPT)
    profile_path.chmod(0o755)
    return profile_path


def is_current_user_language_tag(config: BratsConfig, language: str) -> bool:
    """Whether ``--tag language:<language>`` selected this language."""
    return config.language == language


def skip_if_cf_api_below(cf: CloudFoundryCLI, version: str, reason: str) -> None:
    """Skip the running test when the targeted Cloud Controller is too old."""
    if not cf.api_version_at_least(version):
        log.info("Skipping test on old CF API", minimum=version)
        pytest.skip(reason)


def skip_if_no_dot_profile_support_on_targeted_cf(cf: CloudFoundryCLI) -> None:
    reason = f".profile script functionality not supported before CF API version {DOT_PROFILE_MINIMUM_CF_API}"
    skip_if_cf_api_below(cf, DOT_PROFILE_MINIMUM_CF_API, reason)


# 🔼⚙️🔚

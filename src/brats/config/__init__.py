#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration module for brats.

Re-exports the configuration models and loading functions."""

from __future__ import annotations

from brats.config.models import (
    BRANCH_TAG,
    DEFAULT_STACK,
    LANGUAGE_TAG,
    BratsConfig,
    ConfigurationError,
    RetryPolicy,
    load_config,
    missing_buildpack_branch,
    parse_tags,
)

__all__ = [
    "BRANCH_TAG",
    "DEFAULT_STACK",
    "LANGUAGE_TAG",
    "BratsConfig",
    "ConfigurationError",
    "RetryPolicy",
    "load_config",
    "missing_buildpack_branch",
    "parse_tags",
]

# 🔼⚙️🔚

#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Buildpack install, bump, deploy and cleanup workflows."""

from brats.runtime.workflow.installer import BUMPED_VERSION, BuildpackInstaller, InstallResult

__all__ = ["BUMPED_VERSION", "BuildpackInstaller", "InstallResult"]

# 🔼⚙️🔚

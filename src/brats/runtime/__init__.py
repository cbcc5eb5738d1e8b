# type: ignore
#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""The runtime package for brats, coordinating the buildpack lifecycle."""

from .workflow import BuildpackInstaller, InstallResult

__all__ = ["BuildpackInstaller", "InstallResult"]

# 🔼⚙️🔚

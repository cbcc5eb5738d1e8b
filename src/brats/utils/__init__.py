#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Filesystem layout and logging utilities for brats runs."""

from brats.utils.directories import BratsDirectories
from brats.utils.log_setup import setup_run_logging

__all__ = ["BratsDirectories", "setup_run_logging"]

# 🔼⚙️🔚

#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Test helper modules for the brats test suite.

Contains a recording fake for the subprocess boundary and file effects
that stand in for git, the packagers and cf."""

from __future__ import annotations

# 🔼⚙️🔚

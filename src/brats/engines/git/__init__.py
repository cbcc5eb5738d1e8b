#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Git helpers for cloning buildpack source."""

from .operations import GitOperationsHelper, HeadSummary

__all__ = ["GitOperationsHelper", "HeadSummary"]

# 🔼⚙️🔚

#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Deployment platform clients."""

from brats.platform.cf import AppTemplate, CloudFoundryCLI, brat_buildpack_name, parse_api_version

__all__ = ["AppTemplate", "CloudFoundryCLI", "brat_buildpack_name", "parse_api_version"]

# 🔼⚙️🔚

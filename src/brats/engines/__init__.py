#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Brats Engines Package.

Helpers for the source-control host the buildpacks are cloned from."""

# 🔼⚙️🔚

#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Test-framework integration for brats."""

from brats.testing.helpers import (
    add_dot_profile_script_to_app,
    is_current_user_language_tag,
    skip_if_cf_api_below,
    skip_if_no_dot_profile_support_on_targeted_cf,
)

__all__ = [
    "add_dot_profile_script_to_app",
    "is_current_user_language_tag",
    "skip_if_cf_api_below",
    "skip_if_no_dot_profile_support_on_targeted_cf",
]

# 🔼⚙️🔚

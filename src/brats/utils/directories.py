#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Scratch and log directory layout for a brats run."""

from __future__ import annotations

from pathlib import Path

from brats.config import BratsConfig

LOG_FILE_NAME = "integration.log"


class BratsDirectories:
    """Creates the directories a run writes to."""

    @staticmethod
    def log_file(config: BratsConfig) -> Path:
        return config.log_dir / LOG_FILE_NAME

    @staticmethod
    def ensure_structure(config: BratsConfig) -> dict[str, Path]:
        """Create the scratch root and log directory if missing.

        Returns:
            Mapping with ``scratch_dir``, ``logs_dir`` and ``log_file``
        """
        config.scratch_root.mkdir(parents=True, exist_ok=True)
        config.log_dir.mkdir(parents=True, exist_ok=True)
        return {
            "scratch_dir": config.scratch_root,
            "logs_dir": config.log_dir,
            "log_file": BratsDirectories.log_file(config),
        }


# 🔼⚙️🔚

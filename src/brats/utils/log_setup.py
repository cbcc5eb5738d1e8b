#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Route run diagnostics to ``log/integration.log``."""

from __future__ import annotations

from pathlib import Path

from attrs import evolve
from provide.foundation import TelemetryConfig, get_hub
from provide.foundation.logger import get_logger

log = get_logger(__name__)


def setup_run_logging(log_file_path: Path, level: str = "DEBUG") -> Path:
    """Initialise Foundation logging with the run's log file.

    Console output keeps Foundation's defaults; everything at ``level`` and
    above is also appended to ``log_file_path``.

    Args:
        log_file_path: File to append structured logs to
        level: Minimum log level

    Returns:
        The log file path
    """
    log_file_path = Path(log_file_path)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    base_config = TelemetryConfig.from_env()
    telemetry_config = evolve(
        base_config,
        service_name="brats",
        logging=evolve(
            base_config.logging,
            default_level=level.upper(),
            log_file=log_file_path,
        ),
    )
    get_hub().initialize_foundation(telemetry_config, force=True)

    log.debug("Run logging configured", log_file=str(log_file_path), level=level.upper())
    return log_file_path


# 🔼⚙️🔚

# type: ignore
#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Common type definitions to avoid circular imports."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum, auto
from pathlib import Path
from typing import Any, Protocol

from provide.foundation.process import CompletedProcess


class CommandRunner(Protocol):
    """Signature shared by ``provide.foundation.process.run`` and test fakes."""

    def __call__(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        **kwargs: Any,
    ) -> CompletedProcess: ...


class InstallState(Enum):
    """Where a buildpack is in its install lifecycle."""

    UNCLONED = auto()
    CLONED = auto()
    PACKAGED = auto()
    REGISTERED = auto()


class Caching(Enum):
    """Whether dependency binaries are embedded in the packaged zip."""

    CACHED = "cached"
    UNCACHED = "uncached"

    @classmethod
    def coerce(cls, value: Caching | str | None) -> Caching:
        """Anything other than ``uncached`` means cached."""
        if isinstance(value, Caching):
            return value
        if value is not None and str(value).lower() == cls.UNCACHED.value:
            return cls.UNCACHED
        return cls.CACHED


# 🔼⚙️🔚

#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Simulate a dependency mirror that needs authenticated URIs.

The buildpack under test must cope with ``user:password@`` in its dependency
URIs (and must not leak them). These helpers rewrite a cloned manifest so
every dependency is fetched that way."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from provide.foundation.logger import get_logger
import yaml

from brats.manifest import load_manifest_document

log = get_logger(__name__)

DEFAULT_LOGIN = "login"
DEFAULT_PASSWORD = "password"

# Vendor agent that is never served from the mirror
EXCLUDED_DEPENDENCY = "CAAPM"


def inject_uri_credentials(uri: str, login: str, password: str) -> str:
    """Return ``uri`` with its user-info replaced by ``login:password``."""
    parts = urlsplit(uri)
    if not parts.netloc:
        raise ValueError(f"Cannot set credentials on a URI without a host: {uri!r}")
    # Accessing port validates it and raises ValueError when malformed
    parts.port  # noqa: B018
    host = parts.netloc.rpartition("@")[2]
    return urlunsplit(parts._replace(netloc=f"{login}:{password}@{host}"))


def put_credentials_in_uris_in_manifest(
    manifest_path: Path | str,
    login: str = DEFAULT_LOGIN,
    password: str = DEFAULT_PASSWORD,
) -> None:
    """Rewrite every dependency URI in a local manifest to carry credentials.

    The file is loaded, mutated in place and written back as YAML. The
    ``CAAPM`` dependency is left untouched.
    """
    manifest_path = Path(manifest_path)
    document = load_manifest_document(manifest_path)
    dependencies = document.get("dependencies") or []

    rewritten = 0
    for dep in dependencies:
        if dep.get("name") == EXCLUDED_DEPENDENCY:
            continue
        dep["uri"] = inject_uri_credentials(dep["uri"], login, password)
        rewritten += 1

    with manifest_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(document, handle, default_flow_style=False, sort_keys=False)

    log.info("Injected credentials into manifest URIs", path=str(manifest_path), dependencies=rewritten)


# 🔼⚙️🔚

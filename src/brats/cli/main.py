#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Entry point for the ``brats`` command."""

from __future__ import annotations

import click

from brats import __version__
from brats.cli.buildpack_cmds import buildpack_cli


@click.group()
@click.version_option(__version__, prog_name="brats")
def cli():
    """brats - buildpack runtime acceptance test helpers."""


cli.add_command(buildpack_cli)

if __name__ == "__main__":
    cli()

# 🔼⚙️🔚

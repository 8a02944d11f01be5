# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""FlyCache CLI: cache provisioning and maintenance."""

from __future__ import annotations

import click

from flycache.cli.console import print_header


class FlyCacheCLI(click.Group):
    """Click group that shows the FlyCache header on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_header()
        super().format_help(ctx, formatter)


@click.group(cls=FlyCacheCLI)
@click.version_option(package_name="flycache")
def cli() -> None:
    """FlyCache: pluggable cache provider CLI."""


# Import and register commands
from flycache.cli.index import create_index_command, flush_command  # noqa: E402
from flycache.cli.info import info_command  # noqa: E402

cli.add_command(create_index_command, name="create-index")
cli.add_command(flush_command, name="flush")
cli.add_command(info_command, name="info")

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
"""'flycache info': Display version, configuration and installed backends."""

from __future__ import annotations

import platform
import sys

import click
from rich.table import Table

from flycache import __version__
from flycache.cache.factory import detect_provider, is_available
from flycache.cli.console import console

_BACKENDS = [
    ("mongodb", "motor.motor_asyncio"),
    ("redis", "redis.asyncio"),
]


@click.command()
def info_command() -> None:
    """Display FlyCache and environment information."""
    console.print(f"\n[flycache]FlyCache[/flycache] [dim]v{__version__}[/dim]\n")

    env_table = Table(title="Environment", show_header=False, border_style="dim")
    env_table.add_column("Key", style="info")
    env_table.add_column("Value")
    env_table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    env_table.add_row("Platform", platform.platform())
    env_table.add_row("Auto-detected provider", detect_provider())
    console.print(env_table)

    backends_table = Table(title="\nCache Backends", border_style="dim")
    backends_table.add_column("Backend", style="info")
    backends_table.add_column("Status")
    backends_table.add_row("memory", "[success]built-in[/success]")
    for name, module in _BACKENDS:
        status = "[success]installed[/success]" if is_available(module) else "[dim]not installed[/dim]"
        backends_table.add_row(name, status)

    console.print(backends_table)
    console.print()

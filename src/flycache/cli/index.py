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
"""'flycache create-index' and 'flycache flush': provisioning and maintenance."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import click

from flycache.cache.adapters.search_index import SearchIndexCacheDriver
from flycache.cache.factory import create_cache_provider, create_search_index_driver
from flycache.cache.provider import CacheProvider
from flycache.cache.serialization import get_serializer
from flycache.cli.console import console
from flycache.core.config import Config
from flycache.kernel.exceptions import FlyCacheException
from flycache.logging.structlog_adapter import StructlogAdapter

_config_option = click.option(
    "--config", "config_path", type=click.Path(dir_okay=False), default=None, help="flycache.yaml / .toml file."
)
_profile_option = click.option("--profile", "profiles", multiple=True, help="Active profile overlay (repeatable).")


def load_config(path: str | None, profiles: tuple[str, ...] = ()) -> Config:
    """Load *path* (defaults only when omitted) and configure logging from it."""
    config = Config.from_file(Path(path), active_profiles=list(profiles)) if path else Config.defaults()
    StructlogAdapter().configure(config)
    return config


async def _create_index(driver: SearchIndexCacheDriver) -> dict[str, Any]:
    try:
        return await driver.create_cache_index()
    finally:
        await driver.stop()


async def _flush(provider: CacheProvider) -> bool:
    try:
        return await provider.flush()
    finally:
        await provider.stop()


@click.command()
@_config_option
@_profile_option
@click.option("--index", "index", default=None, help="Override flycache.cache.document.index.")
@click.option("--type", "doc_type", default=None, help="Override flycache.cache.document.type.")
def create_index_command(
    config_path: str | None, profiles: tuple[str, ...], index: str | None, doc_type: str | None
) -> None:
    """Create the search index that stores cache entries."""
    config = load_config(config_path, profiles)
    serializer = get_serializer(str(config.get("flycache.cache.serializer", "pickle")))
    driver = create_search_index_driver(config, serializer)
    if index is not None:
        driver.set_index(index)
    if doc_type is not None:
        driver.set_type(doc_type)

    try:
        response = asyncio.run(_create_index(driver))
    except FlyCacheException as exc:
        console.print(f"[error]Failed to create index '{driver.index}':[/error] {exc}")
        raise SystemExit(1) from exc

    console.print(f"[success]Created cache index[/success] '{driver.index.lower()}'")
    for key, value in response.items():
        console.print(f"  [info]{key}[/info]: {value}")


@click.command()
@_config_option
@_profile_option
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def flush_command(config_path: str | None, profiles: tuple[str, ...], yes: bool) -> None:
    """Remove every entry of the configured cache backend."""
    config = load_config(config_path, profiles)
    if not yes:
        click.confirm("This removes every cache entry of the backend. Continue?", abort=True)
    provider = create_cache_provider(config)

    if asyncio.run(_flush(provider)):
        console.print("[success]Cache flushed[/success]")
        return
    console.print("[error]Cache backend did not acknowledge the flush[/error]")
    raise SystemExit(1)

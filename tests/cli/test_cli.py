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
"""Tests for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

from flycache.cache.adapters.memory import InMemoryCacheDriver
from flycache.cache.adapters.search_index import SearchIndexCacheDriver
from flycache.cache.provider import CacheProvider
from flycache.cli.main import cli
from flycache.kernel.exceptions import BackendUnavailableException


class IndexStub:
    """Just enough of a SearchIndexClient for provisioning."""

    def __init__(self, acknowledge: bool = True, failure: Exception | None = None) -> None:
        self.acknowledge = acknowledge
        self.failure = failure
        self.created: list[tuple[str, str, dict[str, Any]]] = []
        self.stopped = False

    async def create_index(self, index: str, doc_type: str, schema: dict[str, Any]) -> dict[str, Any]:
        if self.failure is not None:
            raise self.failure
        self.created.append((index, doc_type, schema))
        return {"acknowledged": self.acknowledge, "index": index}

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        self.stopped = True


class UnacknowledgedDriver(InMemoryCacheDriver):
    async def do_flush(self) -> bool:
        return False


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "FlyCache" in result.output
        for command in ("create-index", "flush", "info"):
            assert command in result.output

    def test_help_shows_copyright(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert "Copyright 2026 Firefly Software Solutions Inc." in result.output
        assert "Apache 2.0 License" in result.output

    def test_info(self, runner):
        result = runner.invoke(cli, ["info"])
        assert result.exit_code == 0, result.output
        assert "Cache Backends" in result.output
        assert "memory" in result.output
        assert "built-in" in result.output


class TestCreateIndexCommand:
    def test_creates_index(self, runner):
        stub = IndexStub()
        with patch(
            "flycache.cli.index.create_search_index_driver",
            return_value=SearchIndexCacheDriver(stub),
        ):
            result = runner.invoke(cli, ["create-index"])

        assert result.exit_code == 0, result.output
        assert "Created cache index 'doctrine'" in result.output
        assert stub.created[0][:2] == ("doctrine", "cache")
        assert stub.stopped is True

    def test_index_and_type_overrides(self, runner):
        stub = IndexStub()
        with patch(
            "flycache.cli.index.create_search_index_driver",
            return_value=SearchIndexCacheDriver(stub),
        ):
            result = runner.invoke(cli, ["create-index", "--index", "Sessions", "--type", "Web"])

        assert result.exit_code == 0, result.output
        assert stub.created[0][:2] == ("sessions", "web")

    def test_unacknowledged_creation_fails(self, runner):
        stub = IndexStub(acknowledge=False)
        with patch(
            "flycache.cli.index.create_search_index_driver",
            return_value=SearchIndexCacheDriver(stub),
        ):
            result = runner.invoke(cli, ["create-index"])

        assert result.exit_code == 1
        assert "Failed to create index" in result.output
        assert stub.stopped is True

    def test_backend_failure(self, runner):
        stub = IndexStub(failure=BackendUnavailableException("connection refused"))
        with patch(
            "flycache.cli.index.create_search_index_driver",
            return_value=SearchIndexCacheDriver(stub),
        ):
            result = runner.invoke(cli, ["create-index"])

        assert result.exit_code == 1
        assert "connection refused" in result.output

    def test_reads_config_file_and_profile(self, runner, tmp_path: Path):
        config_file = tmp_path / "flycache.yaml"
        config_file.write_text("flycache:\n  cache:\n    document:\n      index: base\n")
        (tmp_path / "flycache-prod.yaml").write_text("flycache:\n  cache:\n    document:\n      index: prod\n")
        seen: dict[str, Any] = {}

        def fake_driver(config, serializer):
            seen["index"] = config.get("flycache.cache.document.index")
            return SearchIndexCacheDriver(IndexStub(), index=seen["index"])

        with patch("flycache.cli.index.create_search_index_driver", side_effect=fake_driver):
            result = runner.invoke(cli, ["create-index", "--config", str(config_file), "--profile", "prod"])

        assert result.exit_code == 0, result.output
        assert seen["index"] == "prod"
        assert "Created cache index 'prod'" in result.output


class TestFlushCommand:
    def test_flush_with_yes(self, runner):
        provider = CacheProvider(InMemoryCacheDriver())
        with patch("flycache.cli.index.create_cache_provider", return_value=provider):
            result = runner.invoke(cli, ["flush", "--yes"])
        assert result.exit_code == 0, result.output
        assert "Cache flushed" in result.output

    def test_flush_asks_for_confirmation(self, runner):
        provider = CacheProvider(InMemoryCacheDriver())
        with patch("flycache.cli.index.create_cache_provider", return_value=provider):
            result = runner.invoke(cli, ["flush"], input="n\n")
        assert result.exit_code == 1
        assert "Cache flushed" not in result.output

    def test_declined_flush_builds_no_provider(self, runner):
        with patch("flycache.cli.index.create_cache_provider") as factory:
            result = runner.invoke(cli, ["flush"], input="n\n")
        assert result.exit_code == 1
        factory.assert_not_called()

    def test_flush_confirmed(self, runner):
        provider = CacheProvider(InMemoryCacheDriver())
        with patch("flycache.cli.index.create_cache_provider", return_value=provider):
            result = runner.invoke(cli, ["flush"], input="y\n")
        assert result.exit_code == 0, result.output
        assert "Cache flushed" in result.output

    def test_unacknowledged_flush(self, runner):
        provider = CacheProvider(UnacknowledgedDriver())
        with patch("flycache.cli.index.create_cache_provider", return_value=provider):
            result = runner.invoke(cli, ["flush", "--yes"])
        assert result.exit_code == 1
        assert "did not acknowledge" in result.output

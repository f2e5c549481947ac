"""Where chunked datasets come from: an HTTP base URL or a local directory.

Both sources return raw decoded JSON; turning records into ``Paper``
objects is the store's job.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from triage.errors import LoadError

if TYPE_CHECKING:
    from triage.config import ReviewConfig

logger = logging.getLogger(__name__)


class ChunkSource(Protocol):
    """Read-only access to a metadata document and per-chunk documents."""

    async def fetch_metadata(self) -> dict[str, Any]: ...

    async def fetch_chunk(self, index: int) -> list[dict[str, Any]]: ...


class HttpChunkSource:
    """Fetch dataset documents relative to a base URL.

    Parameters
    ----------
    base_url : str
        URL of the directory serving the dataset files.
    config : ReviewConfig
        Supplies document names and the request timeout.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        config: "ReviewConfig",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.config = config
        self._transport = transport

    async def _get_json(self, name: str) -> Any:
        # One client per request: each load is a single-shot operation
        # and may run under a fresh event loop.
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.config.request_timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(name)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                raise LoadError(
                    f"{name}: server returned {e.response.status_code}"
                ) from e
            except httpx.HTTPError as e:
                raise LoadError(f"{name}: {e}") from e
            except ValueError as e:
                raise LoadError(f"{name}: invalid JSON ({e})") from e

    async def fetch_metadata(self) -> dict[str, Any]:
        return await self._get_json(self.config.metadata_name)

    async def fetch_chunk(self, index: int) -> list[dict[str, Any]]:
        data = await self._get_json(self.config.chunk_name(index))
        if not isinstance(data, list):
            raise LoadError(f"chunk {index} is not a JSON array")
        return data


class DirectoryChunkSource:
    """Read dataset documents from a local directory."""

    def __init__(self, directory: Path, config: "ReviewConfig"):
        self.directory = Path(directory)
        self.config = config

    def _read_json(self, name: str) -> Any:
        path = self.directory / name
        try:
            return json.loads(path.read_text(encoding=self.config.encoding))
        except OSError as e:
            raise LoadError(f"cannot read {path}: {e}") from e
        except ValueError as e:
            raise LoadError(f"{path}: invalid JSON ({e})") from e

    async def fetch_metadata(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._read_json, self.config.metadata_name)

    async def fetch_chunk(self, index: int) -> list[dict[str, Any]]:
        data = await asyncio.to_thread(self._read_json, self.config.chunk_name(index))
        if not isinstance(data, list):
            raise LoadError(f"chunk {index} is not a JSON array")
        return data


def make_source(config: "ReviewConfig") -> ChunkSource:
    """Pick the HTTP source when ``base_url`` is set, else the data directory."""
    if config.base_url:
        logger.info(f"Reading chunked dataset from {config.base_url}")
        return HttpChunkSource(config.base_url, config)
    logger.info(f"Reading chunked dataset from {config.data_dir}")
    return DirectoryChunkSource(config.data_dir, config)

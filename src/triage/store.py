"""In-memory paper store, dense or chunk-materialized.

``PaperStore`` owns every ``Paper`` of a session and updates them in
place by id. ``ChunkedPaperStore`` fills the same slot array chunk by
chunk from a ``ChunkSource``; slots of chunks not loaded yet stay empty
and are filtered out of every read.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import TYPE_CHECKING, Any, Callable

from triage.errors import LoadError
from triage.models import DatasetMetadata, Paper, Rating
from triage.sample_data import sample_papers

if TYPE_CHECKING:
    from triage.config import ReviewConfig
    from triage.sources import ChunkSource

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset(f.name for f in fields(Paper)) - {"id"}


class PaperStore:
    """Holds the loaded papers, addressable by ``id``."""

    def __init__(self, papers: list[Paper] | None = None):
        self._slots: list[Paper | None] = []
        self._index: dict[int, int] = {}
        if papers:
            self.replace_all(papers)

    def __len__(self) -> int:
        return len(self._index)

    def papers(self) -> list[Paper]:
        """Return loaded papers in slot order, skipping empty slots."""
        return [p for p in self._slots if p is not None]

    def get(self, paper_id: int) -> Paper | None:
        slot = self._index.get(paper_id)
        return None if slot is None else self._slots[slot]

    def replace_all(self, papers: list[Paper]) -> None:
        """Drop everything and store *papers* densely from slot 0."""
        self._clear()
        self._write(0, papers)

    def _clear(self) -> None:
        self._slots = []
        self._index = {}

    def _write(self, offset: int, papers: list[Paper]) -> None:
        end = offset + len(papers)
        if end > len(self._slots):
            self._slots.extend([None] * (end - len(self._slots)))
        for slot, paper in enumerate(papers, start=offset):
            previous = self._slots[slot]
            if previous is not None and self._index.get(previous.id) == slot:
                del self._index[previous.id]
            self._slots[slot] = paper
            self._index[paper.id] = slot

    def upsert_by_field(self, paper_id: int, field: str, value: Any) -> bool:
        """Set *field* on the paper with *paper_id* in place.

        Returns False, changing nothing, when no paper has that id. The
        collection order is never touched.

        Raises
        ------
        AttributeError
            If *field* is not an editable ``Paper`` attribute.
        """
        if field not in _EDITABLE_FIELDS:
            raise AttributeError(f"Paper has no editable field {field!r}")
        paper = self.get(paper_id)
        if paper is None:
            return False
        setattr(paper, field, value)
        return True

    def set_rating(self, paper_id: int, rating: Rating | None) -> bool:
        return self.upsert_by_field(paper_id, "rating", rating)


class ChunkedPaperStore(PaperStore):
    """Paper store materialized lazily, one fixed-size chunk at a time.

    Chunk *k* is written at slot ``k * chunk_size``. Loads are
    coalesced: asking for a chunk that is loaded or already in flight
    returns the current papers without fetching again.

    Parameters
    ----------
    source : ChunkSource
        Supplies the metadata document and chunk documents.
    config : ReviewConfig
        Supplies the chunk stride.
    fallback : Callable[[], list[Paper]]
        Produces the dataset shown when nothing could be loaded.
    """

    def __init__(
        self,
        source: "ChunkSource",
        config: "ReviewConfig",
        fallback: Callable[[], list[Paper]] = sample_papers,
    ):
        super().__init__()
        self.source = source
        self.chunk_size = config.chunk_size
        self.metadata: DatasetMetadata | None = None
        self.loaded_chunks: set[int] = set()
        self.failed_chunks: set[int] = set()
        self.using_fallback = False
        self.status_message = ""
        self._in_flight: set[int] = set()
        self._fallback = fallback

    @property
    def is_loading(self) -> bool:
        return bool(self._in_flight)

    def loading_status(self) -> dict[str, Any]:
        return {
            "is_loading": self.is_loading,
            "loaded_chunks": len(self.loaded_chunks),
            "total_chunks": self.metadata.total_chunks if self.metadata else 0,
            "total_papers": self.metadata.total_papers if self.metadata else 0,
        }

    def _in_bounds(self, index: int) -> bool:
        if index < 0:
            return False
        return self.metadata is None or index < self.metadata.total_chunks

    async def initialize(self) -> list[Paper]:
        """Read the metadata document, then load the first chunk."""
        await self.load_metadata()
        return await self.load_chunk(0)

    async def load_metadata(self) -> DatasetMetadata | None:
        """Fetch and keep the dataset metadata.

        A failure is logged and leaves ``metadata`` unset, which disables
        the upper bounds check on chunk indices.
        """
        try:
            self.metadata = DatasetMetadata.from_dict(await self.source.fetch_metadata())
        except (LoadError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Dataset metadata unavailable: {e}")
            return None

        if self.metadata.chunk_size != self.chunk_size:
            if self.loaded_chunks:
                logger.warning(
                    f"Metadata chunk size {self.metadata.chunk_size} differs from "
                    f"the active stride {self.chunk_size}; keeping the stride"
                )
            else:
                self.chunk_size = self.metadata.chunk_size
        logger.info(
            f"Dataset has {self.metadata.total_papers} papers in "
            f"{self.metadata.total_chunks} chunks"
        )
        return self.metadata

    async def load_chunk(self, index: int) -> list[Paper]:
        """Materialize chunk *index* and return all loaded papers.

        Already-loaded, in-flight and out-of-range chunks are not
        fetched. A record that cannot be decoded is logged and skipped;
        the rest of the chunk is kept. When the fetch itself fails the
        chunk is recorded in ``failed_chunks`` and the bundled sample
        dataset is shown if nothing else has been loaded.
        """
        if index in self.loaded_chunks or index in self._in_flight:
            return self.papers()
        if not self._in_bounds(index):
            logger.debug(f"Chunk {index} is beyond the dataset; not fetching")
            return self.papers()

        self._in_flight.add(index)
        try:
            records = await self.source.fetch_chunk(index)
        except LoadError as e:
            logger.error(f"Error loading chunk {index}: {e}")
            self.status_message = f"Error loading papers: {e}"
            self.failed_chunks.add(index)
            self._use_fallback()
            return self.papers()
        finally:
            self._in_flight.discard(index)

        # State may have changed while the fetch was suspended.
        if index in self.loaded_chunks or not self._in_bounds(index):
            return self.papers()

        papers = self._decode(index, records)
        if self.using_fallback and papers:
            self._clear()
            self.using_fallback = False

        self._write(index * self.chunk_size, papers[: self.chunk_size])
        self.loaded_chunks.add(index)
        self.failed_chunks.discard(index)
        self.status_message = f"Loaded {len(self)} papers"
        logger.info(f"Loaded chunk {index} ({len(papers)} papers)")
        return self.papers()

    async def load_more(self, current_index: int) -> list[Paper]:
        """Load the chunk after the one containing *current_index*.

        A chunk whose fetch already failed is not requested again here;
        call ``load_chunk`` directly to retry it.
        """
        next_chunk = current_index // self.chunk_size + 1
        if next_chunk not in self.loaded_chunks and next_chunk not in self.failed_chunks:
            await self.load_chunk(next_chunk)
        return self.papers()

    @staticmethod
    def _decode(index: int, records: list[dict[str, Any]]) -> list[Paper]:
        papers = []
        for offset, record in enumerate(records):
            try:
                papers.append(Paper.from_dict(record))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping record {offset} of chunk {index}: {e}")
        return papers

    def _use_fallback(self) -> None:
        if len(self) > 0:
            return
        logger.warning("Falling back to the bundled sample dataset")
        self._write(0, self._fallback())
        self.using_fallback = True

"""Review session: the view, the cursor and every user command.

Each command is a separate method so a front-end can bind keys to them
individually. Any change to the predicates or to a paper recomputes the
view and renormalizes the cursor.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from pathlib import Path

from triage.config import ReviewConfig
from triage.errors import ExportError
from triage.export import write_export
from triage.ingest import load_csv_file
from triage.models import Paper, Rating
from triage.sources import ChunkSource, make_source
from triage.statistics import ReviewStatistics, compute_statistics
from triage.store import ChunkedPaperStore, PaperStore
from triage.view import FilterSet, apply_filters

logger = logging.getLogger(__name__)


class ReviewSession:
    """Pages through one loaded dataset.

    Parameters
    ----------
    store : PaperStore
        Owns the papers; a ``ChunkedPaperStore`` enables prefetching.
    config : ReviewConfig | None
        Session settings; defaults if omitted.
    rng : random.Random | None
        Shuffle source for random order. Pass a seeded generator for
        reproducible ordering.
    source_name : str | None
        Dataset name used in the export file name.
    """

    def __init__(
        self,
        store: PaperStore,
        config: ReviewConfig | None = None,
        rng: random.Random | None = None,
        source_name: str | None = None,
    ):
        self.store = store
        self.config = config or ReviewConfig()
        self.rng = rng or random.Random()
        self.source_name = source_name
        self.filters = FilterSet()
        self.view: list[Paper] = []
        self.cursor = 0
        self.status_message = ""
        self.recompute()

    # ── View maintenance ──────────────────────────────────────────

    def recompute(self) -> None:
        """Re-derive the view; reset the cursor if it fell off the end."""
        self.view = apply_filters(self.store.papers(), self.filters, self.rng)
        if self.view and self.cursor >= len(self.view):
            self.cursor = 0

    def _set_filters(self, filters: FilterSet) -> None:
        self.filters = filters
        self.recompute()

    @property
    def current_paper(self) -> Paper | None:
        if 0 <= self.cursor < len(self.view):
            return self.view[self.cursor]
        return None

    @property
    def total_papers(self) -> int:
        if isinstance(self.store, ChunkedPaperStore) and self.store.metadata:
            if self.store.metadata.total_papers > 0:
                return self.store.metadata.total_papers
        return len(self.store)

    @property
    def progress(self) -> float:
        """Percentage position of the cursor in the view."""
        if not self.view:
            return 0.0
        return (self.cursor + 1) / len(self.view) * 100

    @property
    def position_label(self) -> str:
        label = f"Paper {self.cursor + 1} of {len(self.view)}"
        if len(self.view) != self.total_papers:
            label += f" ({self.total_papers} total)"
        if self.filters.search:
            label += " (filtered)"
        if self.filters.random_order:
            label += " (random order)"
        return label

    # ── Rating and editing ────────────────────────────────────────

    def _rate(self, rating: Rating) -> bool:
        paper = self.current_paper
        if paper is None:
            return False
        logger.debug(f"Rating paper {paper.id} as {rating.value}")
        last_index = len(self.view) - 1
        self.store.set_rating(paper.id, rating)
        if self.cursor < last_index:
            self.cursor += 1
        self.recompute()
        return True

    def rate_interesting(self) -> bool:
        """Rate the current paper interesting and advance."""
        return self._rate(Rating.INTERESTING)

    def rate_not_interesting(self) -> bool:
        """Rate the current paper not interesting and advance."""
        return self._rate(Rating.NOT_INTERESTING)

    def update_comment(self, text: str) -> bool:
        """Replace the confidence comment of the current paper."""
        paper = self.current_paper
        if paper is None:
            return False
        self.store.upsert_by_field(paper.id, "confidence_comment", text)
        self.recompute()
        return True

    # ── Navigation ────────────────────────────────────────────────

    def next_paper(self) -> bool:
        if self.cursor < len(self.view) - 1:
            self.cursor += 1
            return True
        return False

    def previous_paper(self) -> bool:
        if self.cursor > 0:
            self.cursor -= 1
            return True
        return False

    def jump_to(self, number: int) -> bool:
        """Move to the 1-based position *number*; out-of-range is ignored."""
        if 1 <= number <= len(self.view):
            self.cursor = number - 1
            return True
        self.status_message = f"No paper {number}; choose 1-{len(self.view)}"
        return False

    # ── Filters ───────────────────────────────────────────────────

    def set_search(self, text: str) -> None:
        self._set_filters(replace(self.filters, search=text))

    def toggle_unrated_only(self) -> None:
        self._set_filters(self.filters.toggled("unrated_only"))

    def toggle_industry_only(self) -> None:
        self._set_filters(self.filters.toggled("industry_only"))

    def toggle_computer_vision_only(self) -> None:
        self._set_filters(self.filters.toggled("computer_vision_only"))

    def toggle_product_potential_only(self) -> None:
        self._set_filters(self.filters.toggled("product_potential_only"))

    def toggle_random_order(self) -> None:
        self._set_filters(self.filters.toggled("random_order"))

    def clear_filters(self) -> None:
        self._set_filters(self.filters.cleared())
        self.status_message = "Filters cleared"

    # ── Reporting and output ──────────────────────────────────────

    def statistics(self) -> ReviewStatistics:
        return compute_statistics(self.store.papers(), self.view)

    def export(self, output_dir: Path | None = None) -> Path | None:
        """Write every paper (not just the view) to a dated CSV.

        Returns the written path, or None with ``status_message`` set
        when the export failed.
        """
        try:
            path = write_export(
                self.store.papers(),
                output_dir or self.config.output_dir,
                source=self.source_name,
                prefix=self.config.export_prefix,
                encoding=self.config.encoding,
            )
        except ExportError as e:
            logger.error(str(e))
            self.status_message = str(e)
            return None
        self.status_message = f"Saved {path}"
        return path

    async def refresh(self) -> None:
        """Prefetch the next chunk when the cursor nears the loaded end."""
        if not isinstance(self.store, ChunkedPaperStore) or self.store.is_loading:
            return
        if self.cursor > len(self.store) - self.config.preload_margin:
            loaded_before = len(self.store)
            await self.store.load_more(self.cursor)
            if len(self.store) != loaded_before:
                self.recompute()
                self.status_message = self.store.status_message


# ── Constructors ──────────────────────────────────────────────────────


def session_from_csv(
    path: Path,
    config: ReviewConfig | None = None,
    rng: random.Random | None = None,
) -> ReviewSession:
    """Load an uploaded CSV into a dense store.

    Validation errors propagate: this path has no fallback dataset.
    """
    config = config or ReviewConfig()
    papers = load_csv_file(path, config, rng=rng)
    session = ReviewSession(PaperStore(papers), config, rng, source_name=Path(path).name)
    session.status_message = f"Loaded {len(papers)} papers"
    return session


async def session_from_chunks(
    config: ReviewConfig | None = None,
    source: ChunkSource | None = None,
    rng: random.Random | None = None,
) -> ReviewSession:
    """Open a chunked dataset, falling back to sample data on failure."""
    config = config or ReviewConfig()
    store = ChunkedPaperStore(source or make_source(config), config)
    await store.initialize()
    name = store.metadata.source if store.metadata else None
    session = ReviewSession(store, config, rng, source_name=name or None)
    session.status_message = store.status_message
    return session

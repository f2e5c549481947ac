"""Central configuration for the triage tool.

Every tuneable knob (where data lives, how chunks are named, when the
next chunk is prefetched) is collected in one ``@dataclass``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path


@dataclass
class ReviewConfig:
    """Mutable bag of every tuneable knob in a review session.

    Parameters
    ----------
    data_dir : Path
        Directory holding either an uploaded CSV or a chunked dataset
        (``dataset-metadata.json`` plus ``papers-chunk-<k>.json``).
    output_dir : Path
        Directory the annotated CSV is exported to.
    base_url : str | None
        When set, chunk and metadata documents are fetched over HTTP
        from this URL instead of ``data_dir``.
    chunk_size : int
        Stride of the chunked store; chunk *k* starts at ``k * chunk_size``.
    metadata_name : str
        File name of the dataset metadata document.
    chunk_name_template : str
        ``str.format`` template for chunk documents, keyed by ``index``.
    preload_margin : int
        Prefetch the next chunk once the cursor is this close to the end
        of the loaded records.
    nominal_year : int | None
        Year substituted for an unparsable ``Year`` column. Defaults to
        the current calendar year.
    request_timeout : float
        Seconds before an HTTP chunk request is abandoned.
    encoding : str
        Text encoding for CSV input and output.
    export_prefix : str
        Fallback file-name stem for exports without a known source.
    """

    # ── Paths ──────────────────────────────────────────────────────
    data_dir: Path = Path("data")
    output_dir: Path = Path("data/exports")
    base_url: str | None = None

    # ── Chunked dataset layout ─────────────────────────────────────
    chunk_size: int = 1000
    metadata_name: str = "dataset-metadata.json"
    chunk_name_template: str = "papers-chunk-{index}.json"
    preload_margin: int = 100

    # ── Ingest ─────────────────────────────────────────────────────
    nominal_year: int | None = None
    request_timeout: float = 10.0
    encoding: str = "utf-8"

    # ── Export ─────────────────────────────────────────────────────
    export_prefix: str = "papers"

    # ── Helpers ────────────────────────────────────────────────────

    def fallback_year(self) -> int:
        """Return the year used when a row's ``Year`` cannot be parsed."""
        if self.nominal_year is not None:
            return self.nominal_year
        return date.today().year

    def chunk_name(self, index: int) -> str:
        """Return the document name for chunk *index*."""
        return self.chunk_name_template.format(index=index)

"""Serialize annotated papers back to CSV and write the export file.

The column order is fixed. Note the rating encoding: ingest accepts
``true``/``interesting``/``n/a`` and more, while export only ever emits
``true``, ``false`` or an empty cell.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import date
from pathlib import Path

from unidecode import unidecode

from triage.errors import ExportError
from triage.models import Paper, Rating

logger = logging.getLogger(__name__)

EXPORT_HEADER = (
    "Title",
    "Year",
    "Abstract",
    "Keywords",
    "industry",
    "interesting",
    "Label_Uses_Computer_Vision",
    "Label_Solves_Industry_Problem",
    "Label_Can_Be_Product",
    "Solution_Sentence",
    "Layperson_Summary",
    "Confidence_Comment",
)


# ── Field encoding ────────────────────────────────────────────────────


def quote(value: str) -> str:
    """Wrap *value* in double quotes, doubling interior quotes."""
    return '"' + value.replace('"', '""') + '"'


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_rating(rating: Rating | None) -> str:
    if rating is None:
        return ""
    return "true" if rating is Rating.INTERESTING else "false"


def serialize_paper(paper: Paper) -> str:
    """Render one paper as a CSV line in ``EXPORT_HEADER`` order."""
    return ",".join(
        [
            quote(paper.title),
            str(paper.year),
            quote(paper.abstract),
            quote(", ".join(paper.keywords)),
            format_bool(paper.is_industry),
            format_rating(paper.rating),
            format_bool(paper.tags.computer_vision),
            format_bool(paper.tags.industry_problem),
            format_bool(paper.tags.product_potential),
            quote(paper.solution_sentence),
            quote(paper.layperson_summary),
            quote(paper.confidence_comment),
        ]
    )


def serialize_papers(papers: list[Paper]) -> str:
    """Render the header and every paper, joined by single newlines."""
    lines = [",".join(EXPORT_HEADER)]
    lines.extend(serialize_paper(p) for p in papers)
    return "\n".join(lines)


# ── File output ───────────────────────────────────────────────────────


def _slug(name: str) -> str:
    """ASCII-fold *name* and keep alphanumerics, joined by underscores."""
    folded = unidecode(Path(name).stem).lower()
    words = "".join(c if c.isalnum() else " " for c in folded).split()
    return "_".join(words)


def export_filename(
    source: str | None = None,
    day: date | None = None,
    prefix: str = "papers",
) -> str:
    """Build ``<source-slug>_reviewed_<YYYY-MM-DD>.csv``.

    Falls back to *prefix* when *source* is missing or folds to nothing.
    """
    day = day or date.today()
    stem = _slug(source) if source else ""
    return f"{stem or prefix}_reviewed_{day.isoformat()}.csv"


def write_export(
    papers: list[Paper],
    output_dir: Path,
    *,
    source: str | None = None,
    day: date | None = None,
    prefix: str = "papers",
    encoding: str = "utf-8",
) -> Path:
    """Serialize *papers* and write them under *output_dir*.

    The text is written to a temporary file next to the target and
    renamed into place, so a failed export never leaves a partial file.

    Parameters
    ----------
    papers : list[Paper]
        Full record set (not the filtered view).
    output_dir : Path
        Destination directory; created if missing.
    source : str | None
        Name of the loaded dataset, used in the file name.
    day : date | None
        Date stamped into the file name; today if omitted.

    Returns
    -------
    Path
        Location of the written file.

    Raises
    ------
    ExportError
        If serialization or any file operation fails.
    """
    output_dir = Path(output_dir)
    target = output_dir / export_filename(source, day, prefix)
    tmp_name: str | None = None
    try:
        text = serialize_papers(papers)
        output_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=output_dir, prefix=".export-", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding=encoding, newline="") as fh:
            fh.write(text)
        os.replace(tmp_name, target)
    except Exception as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise ExportError(f"Export failed: {e}") from e

    logger.info(f"Exported {len(papers)} papers to {target}")
    return target

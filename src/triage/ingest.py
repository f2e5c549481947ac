"""Record mapping: turn tokenized CSV rows into ``Paper`` records.

Header names are aliased onto canonical slots, the two keyword columns
are merged, and string flags are coerced to booleans, years and ratings.
"""

from __future__ import annotations

import logging
import random
import re
from pathlib import Path
from typing import TYPE_CHECKING

from triage.csv_parse import parse_csv_line, parse_header, split_lines
from triage.errors import InsufficientRowsError, WrongExtensionError
from triage.models import Paper, PaperTags, Rating

if TYPE_CHECKING:
    from triage.config import ReviewConfig

logger = logging.getLogger(__name__)

# ── Source header → canonical slot ────────────────────────────────────
# Headers not listed here are ignored.
_FIELD_MAP = {
    "Title": "title",
    "Year": "year",
    "Abstract": "abstract",
    "Keywords": "keywords",
    "Author Keywords": "keywords",
    "Index Keywords": "keywords",
    "industry": "industry",
    "interesting": "interesting",
    "Label_Uses_Computer_Vision": "computer_vision",
    "Label_Solves_Industry_Problem": "industry_problem",
    "Label_Can_Be_Product": "product_potential",
    "Solution_Sentence": "solution_sentence",
    "Layperson_Summary": "layperson_summary",
    "Confidence_Comment": "confidence_comment",
}

_KEYWORD_SEPARATOR = "; "
_MAX_SYNTHETIC_AUTHORS = 4
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


# ── Coercion ──────────────────────────────────────────────────────────


def to_bool(value: str | None) -> bool:
    """``"true"`` (any case) or ``"1"`` is True; anything else is False."""
    if value is None:
        return False
    return value.lower() == "true" or value == "1"


def to_rating(value: str | None) -> Rating | None:
    """Coerce an ``interesting`` cell to a rating.

    Empty and ``"n/a"`` mean unrated. ``"true"`` and ``"interesting"``
    mean interesting. Any other non-empty value, including ``"false"``,
    means not interesting.
    """
    if not value:
        return None
    lowered = value.lower()
    if lowered == "n/a":
        return None
    if lowered in ("true", "interesting"):
        return Rating.INTERESTING
    return Rating.NOT_INTERESTING


def to_year(value: str | None, fallback: int) -> int:
    """Parse the leading integer of *value*; zero or no digits gives *fallback*."""
    if not value:
        return fallback
    match = _LEADING_INT.match(value)
    if match is None:
        return fallback
    return int(match.group(1)) or fallback


def split_keywords(value: str) -> list[str]:
    """Split a comma-delimited keyword cell, trimming and dropping blanks."""
    if not value:
        return []
    return [k.strip() for k in value.split(",") if k.strip()]


def synthesize_authors(rng: random.Random) -> list[str]:
    """Return 1-4 placeholder author names.

    The source format has no author column, so names are invented.
    """
    count = rng.randint(1, _MAX_SYNTHETIC_AUTHORS)
    return [f"Author {i + 1}" for i in range(count)]


# ── Row mapping ───────────────────────────────────────────────────────


def build_header_index(headers: list[str]) -> dict[str, list[int]]:
    """Map each canonical slot to the column positions that feed it.

    Built once per dataset. Keyword slots can have more than one
    position; they are merged in header order.
    """
    index: dict[str, list[int]] = {}
    for position, header in enumerate(headers):
        slot = _FIELD_MAP.get(header)
        if slot is not None:
            index.setdefault(slot, []).append(position)
    return index


def _cell(values: list[str], position: int) -> str:
    return values[position] if position < len(values) else ""


def _merge_keywords(values: list[str], positions: list[int]) -> str:
    merged = ""
    for position in positions:
        value = _cell(values, position)
        if not merged:
            merged = value
        elif value:
            merged = merged + _KEYWORD_SEPARATOR + value
    return merged


def map_row(
    header_index: dict[str, list[int]],
    values: list[str],
    record_id: int,
    *,
    fallback_year: int,
    rng: random.Random,
) -> Paper:
    """Build one ``Paper`` from a tokenized data row.

    Parameters
    ----------
    header_index : dict[str, list[int]]
        Output of :func:`build_header_index` for this dataset.
    values : list[str]
        Tokenized cells; missing trailing cells read as empty.
    record_id : int
        1-based ordinal of the row in the data section.
    fallback_year : int
        Substituted when ``Year`` is absent or unparsable.
    rng : random.Random
        Source for the synthetic author count.

    Returns
    -------
    Paper
    """

    def get(slot: str) -> str:
        positions = header_index.get(slot)
        if not positions:
            return ""
        # A repeated non-keyword header keeps its last occurrence.
        return _cell(values, positions[-1])

    keywords = _merge_keywords(values, header_index.get("keywords", []))

    return Paper(
        id=record_id,
        title=get("title"),
        abstract=get("abstract"),
        authors=synthesize_authors(rng),
        keywords=split_keywords(keywords),
        year=to_year(get("year"), fallback_year),
        is_industry=to_bool(get("industry")),
        rating=to_rating(get("interesting")),
        solution_sentence=get("solution_sentence"),
        layperson_summary=get("layperson_summary"),
        confidence_comment=get("confidence_comment"),
        tags=PaperTags(
            computer_vision=to_bool(get("computer_vision")),
            industry_problem=to_bool(get("industry_problem")),
            product_potential=to_bool(get("product_potential")),
        ),
    )


# ── Dataset loading ───────────────────────────────────────────────────


def papers_from_csv_text(
    text: str,
    *,
    fallback_year: int,
    rng: random.Random | None = None,
) -> list[Paper]:
    """Parse a whole CSV document into papers.

    Rows are mapped independently: a row that raises is logged and
    skipped, and the batch continues. Ids are the 1-based data-row
    ordinal, so a skipped row leaves a gap.

    Parameters
    ----------
    text : str
        Full CSV text; the first non-blank line is the header.
    fallback_year : int
        Year used for rows whose ``Year`` cannot be parsed.
    rng : random.Random | None
        Random source for author synthesis; unseeded if omitted.

    Returns
    -------
    list[Paper]

    Raises
    ------
    InsufficientRowsError
        If there is no header plus at least one data row.
    """
    lines = split_lines(text)
    if len(lines) < 2:
        raise InsufficientRowsError(
            "CSV file must contain at least a header row and one data row"
        )

    if rng is None:
        rng = random.Random()

    headers = parse_header(lines[0])
    logger.debug(f"CSV headers: {headers}")
    header_index = build_header_index(headers)

    papers: list[Paper] = []
    for record_id, line in enumerate(lines[1:], start=1):
        try:
            values = parse_csv_line(line)
            papers.append(
                map_row(
                    header_index,
                    values,
                    record_id,
                    fallback_year=fallback_year,
                    rng=rng,
                )
            )
        except Exception as exc:
            logger.warning(f"Skipping row {record_id}: {exc}")

    logger.info(f"Processed {len(papers)} papers from CSV")
    return papers


def validate_upload(filename: str, text: str) -> None:
    """Reject an upload before processing begins.

    Raises
    ------
    WrongExtensionError
        If *filename* does not end in ``.csv``.
    InsufficientRowsError
        If *text* is empty or has only a header line.
    """
    if Path(filename).suffix.lower() != ".csv":
        raise WrongExtensionError(f"{filename} is not a .csv file")
    if not text.strip():
        raise InsufficientRowsError(f"{filename} is empty")
    if len(split_lines(text)) < 2:
        raise InsufficientRowsError(
            f"{filename} has a header row but no data rows"
        )


def load_csv_file(
    path: Path,
    config: "ReviewConfig",
    rng: random.Random | None = None,
) -> list[Paper]:
    """Validate and load a CSV file from disk.

    There is no fallback dataset on this path: a rejected file raises
    and the user must retry with a corrected one.
    """
    path = Path(path)
    text = path.read_text(encoding=config.encoding).lstrip("\ufeff")
    validate_upload(path.name, text)
    logger.info(f"Loading papers from {path}")
    return papers_from_csv_text(
        text, fallback_year=config.fallback_year(), rng=rng
    )

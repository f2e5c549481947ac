"""Review progress statistics for the whole dataset and the current view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from triage.models import Paper, Rating

_COLUMNS = ("id", "rating", "is_industry", "computer_vision", "product_potential")


def papers_to_frame(papers: list[Paper]) -> pd.DataFrame:
    """Flatten the fields statistics need into a DataFrame.

    Unrated papers carry ``None`` in the ``rating`` column.
    """
    rows = [
        {
            "id": p.id,
            "rating": p.rating.value if p.rating is not None else None,
            "is_industry": p.is_industry,
            "computer_vision": p.tags.computer_vision,
            "product_potential": p.tags.product_potential,
        }
        for p in papers
    ]
    return pd.DataFrame(rows, columns=list(_COLUMNS))


@dataclass
class RatingCounts:
    """Rating breakdown of one set of papers."""

    total: int
    reviewed: int
    interesting: int
    not_interesting: int

    @property
    def remaining(self) -> int:
        return self.total - self.reviewed

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "RatingCounts":
        counts = df["rating"].value_counts()
        return cls(
            total=len(df),
            reviewed=int(df["rating"].notna().sum()),
            interesting=int(counts.get(Rating.INTERESTING.value, 0)),
            not_interesting=int(counts.get(Rating.NOT_INTERESTING.value, 0)),
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "reviewed": self.reviewed,
            "interesting": self.interesting,
            "not_interesting": self.not_interesting,
            "remaining": self.remaining,
        }


@dataclass
class ReviewStatistics:
    """Progress over the whole dataset and over the filtered view."""

    overall: RatingCounts
    filtered: RatingCounts

    @property
    def progress_percentage(self) -> float:
        """Share of all papers that carry a rating, to one decimal."""
        if self.overall.total == 0:
            return 0.0
        return round(self.overall.reviewed / self.overall.total * 100, 1)

    @property
    def interesting_percentage(self) -> float:
        """Share of reviewed papers rated interesting, to one decimal."""
        if self.overall.reviewed == 0:
            return 0.0
        return round(self.overall.interesting / self.overall.reviewed * 100, 1)

    @property
    def is_filtered(self) -> bool:
        return self.filtered.total != self.overall.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall.to_dict(),
            "filtered": self.filtered.to_dict(),
            "progress_percentage": self.progress_percentage,
            "interesting_percentage": self.interesting_percentage,
        }


def compute_statistics(papers: list[Paper], view: list[Paper]) -> ReviewStatistics:
    """Count ratings across *papers* and across the filtered *view*."""
    return ReviewStatistics(
        overall=RatingCounts.from_frame(papers_to_frame(papers)),
        filtered=RatingCounts.from_frame(papers_to_frame(view)),
    )

"""Paper record and dataset metadata dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Rating(str, Enum):
    """Binary reviewer verdict. ``None`` on a paper means unrated."""

    INTERESTING = "interesting"
    NOT_INTERESTING = "not-interesting"


@dataclass
class PaperTags:
    """Classification labels carried over from the source dataset."""

    computer_vision: bool = False
    industry_problem: bool = False
    product_potential: bool = False


@dataclass
class Paper:
    """One reviewable unit: bibliographic metadata, labels, annotations.

    ``id`` is the 1-based row ordinal assigned at load time and is only
    unique within a single loaded dataset.
    """

    id: int
    title: str = ""
    abstract: str = ""
    authors: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    year: int = 0
    is_industry: bool = False
    rating: Rating | None = None
    solution_sentence: str = ""
    layperson_summary: str = ""
    confidence_comment: str = ""
    tags: PaperTags = field(default_factory=PaperTags)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase shape used by chunk documents."""
        return {
            "id": self.id,
            "title": self.title,
            "abstract": self.abstract,
            "authors": list(self.authors),
            "keywords": list(self.keywords),
            "year": self.year,
            "isIndustry": self.is_industry,
            "rating": self.rating.value if self.rating is not None else None,
            "solutionSentence": self.solution_sentence,
            "laypersonSummary": self.layperson_summary,
            "confidenceComment": self.confidence_comment,
            "tags": {
                "computerVision": self.tags.computer_vision,
                "industryProblem": self.tags.industry_problem,
                "productPotential": self.tags.product_potential,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Paper":
        """Build a paper from a chunk-document record.

        Raises
        ------
        KeyError
            If ``id`` is missing.
        ValueError
            If ``rating`` holds an unknown value.
        """
        raw_rating = data.get("rating")
        tags = data.get("tags") or {}
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            abstract=data.get("abstract") or "",
            authors=list(data.get("authors") or []),
            keywords=list(data.get("keywords") or []),
            year=int(data.get("year") or 0),
            is_industry=bool(data.get("isIndustry", False)),
            rating=Rating(raw_rating) if raw_rating else None,
            solution_sentence=data.get("solutionSentence") or "",
            layperson_summary=data.get("laypersonSummary") or "",
            confidence_comment=data.get("confidenceComment") or "",
            tags=PaperTags(
                computer_vision=bool(tags.get("computerVision", False)),
                industry_problem=bool(tags.get("industryProblem", False)),
                product_potential=bool(tags.get("productPotential", False)),
            ),
        )


@dataclass
class DatasetMetadata:
    """Description of a chunked dataset, read from its metadata document."""

    total_papers: int
    total_chunks: int
    chunk_size: int
    processed_at: str = ""
    source: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DatasetMetadata":
        return cls(
            total_papers=int(data["totalPapers"]),
            total_chunks=int(data["totalChunks"]),
            chunk_size=int(data["chunkSize"]),
            processed_at=str(data.get("processedAt", "")),
            source=str(data.get("source", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPapers": self.total_papers,
            "totalChunks": self.total_chunks,
            "chunkSize": self.chunk_size,
            "processedAt": self.processed_at,
            "source": self.source,
        }

"""Shared pytest fixtures for triage tests."""

import asyncio
import random
from pathlib import Path

import pytest

from triage.errors import LoadError
from triage.models import Paper, PaperTags, Rating

FIXTURES = Path(__file__).parent / "fixtures"


class FakeChunkSource:
    """In-memory ``ChunkSource`` that records every chunk request."""

    def __init__(self, chunks: dict[int, list[Paper]], metadata: dict | None = None):
        self.chunks = chunks
        self.metadata = metadata
        self.calls: list[int] = []

    async def fetch_metadata(self) -> dict:
        if self.metadata is None:
            raise LoadError("dataset-metadata.json: server returned 404")
        return self.metadata

    async def fetch_chunk(self, index: int) -> list[dict]:
        self.calls.append(index)
        # Yield so concurrent loads overlap.
        await asyncio.sleep(0)
        if index not in self.chunks:
            raise LoadError(f"papers-chunk-{index}.json: server returned 404")
        return [p.to_dict() for p in self.chunks[index]]


@pytest.fixture
def sample_csv() -> Path:
    return FIXTURES / "papers_sample.csv"


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def papers() -> list[Paper]:
    """Five papers spanning every filter combination used in tests."""
    return [
        Paper(
            id=1,
            title="Computer Vision for Industry",
            abstract="Inspection of welds with cameras.",
            authors=["Author 1"],
            keywords=["vision", "manufacturing"],
            year=2021,
            is_industry=True,
            tags=PaperTags(computer_vision=True, industry_problem=True,
                           product_potential=True),
        ),
        Paper(
            id=2,
            title="Computer Vision in the Wild",
            abstract="Benchmarks for outdoor scenes.",
            authors=["Author 1", "Author 2"],
            keywords=["benchmark"],
            year=2020,
            rating=Rating.INTERESTING,
            tags=PaperTags(computer_vision=True),
        ),
        Paper(
            id=3,
            title="Tourism Demand Forecasting",
            abstract="Seasonal models for hotel bookings.",
            authors=["Author 1"],
            keywords=["tourism", "forecasting"],
            year=2019,
            is_industry=True,
            rating=Rating.NOT_INTERESTING,
            layperson_summary="Predicts how many visitors arrive.",
            tags=PaperTags(industry_problem=True),
        ),
        Paper(
            id=4,
            title="Graph Neural Networks for Traffic",
            abstract="Road network forecasting.",
            authors=["Author 1", "Author 2", "Author 3"],
            keywords=["graphs"],
            year=2022,
            solution_sentence="An industry-grade GNN pipeline.",
            tags=PaperTags(product_potential=True),
        ),
        Paper(
            id=5,
            title="Hotel Review Mining",
            abstract="Sentiment analysis of guest reviews.",
            authors=["Author 1"],
            keywords=["nlp", "sentiment"],
            year=2023,
            is_industry=True,
            tags=PaperTags(product_potential=True),
        ),
    ]


@pytest.fixture
def fake_source():
    """Factory building a ``FakeChunkSource``."""
    return FakeChunkSource


def make_chunk(start_id: int, count: int) -> list[Paper]:
    return [Paper(id=i, title=f"Paper {i}") for i in range(start_id, start_id + count)]


@pytest.fixture
def chunk_factory():
    return make_chunk

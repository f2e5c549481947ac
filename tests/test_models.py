"""Tests for triage.models: chunk-document conversion."""

import pytest

from triage.models import DatasetMetadata, Paper, PaperTags, Rating


class TestPaperDict:
    def test_to_dict_uses_chunk_keys(self):
        paper = Paper(
            id=4,
            title="T",
            is_industry=True,
            rating=Rating.NOT_INTERESTING,
            tags=PaperTags(product_potential=True),
        )
        d = paper.to_dict()
        assert d["isIndustry"] is True
        assert d["rating"] == "not-interesting"
        assert d["tags"] == {
            "computerVision": False,
            "industryProblem": False,
            "productPotential": True,
        }

    def test_from_dict_restores_paper(self):
        paper = Paper(
            id=7,
            title="Edge Detection",
            abstract="A",
            authors=["Author 1", "Author 2"],
            keywords=["vision"],
            year=2024,
            rating=Rating.INTERESTING,
            solution_sentence="S",
            layperson_summary="L",
            confidence_comment="C",
            tags=PaperTags(computer_vision=True),
        )
        assert Paper.from_dict(paper.to_dict()) == paper

    def test_missing_optional_fields_default(self):
        paper = Paper.from_dict({"id": 3, "title": "Only", "rating": None})
        assert paper.rating is None
        assert paper.solution_sentence == ""
        assert paper.tags == PaperTags()

    def test_missing_id_raises(self):
        with pytest.raises(KeyError):
            Paper.from_dict({"title": "No id"})

    def test_unknown_rating_raises(self):
        with pytest.raises(ValueError):
            Paper.from_dict({"id": 1, "rating": "maybe"})


class TestDatasetMetadata:
    def test_from_dict(self):
        meta = DatasetMetadata.from_dict(
            {
                "totalPapers": 2345,
                "totalChunks": 3,
                "chunkSize": 1000,
                "processedAt": "2024-05-01T10:00:00Z",
                "source": "tourism.csv",
            }
        )
        assert meta.total_chunks == 3
        assert meta.to_dict()["totalPapers"] == 2345

"""Tests for triage.session: cursor, commands, recomputation."""

import asyncio
import random
from datetime import date
from unittest.mock import patch

import pytest

from triage.config import ReviewConfig
from triage.errors import ExportError, InsufficientRowsError
from triage.models import Rating
from triage.session import ReviewSession, session_from_chunks, session_from_csv
from triage.store import ChunkedPaperStore, PaperStore


@pytest.fixture
def session(papers):
    return ReviewSession(PaperStore(papers), ReviewConfig(), random.Random(5))


def _ids(session):
    return [p.id for p in session.view]


# ── Cursor ────────────────────────────────────────────────────────────


class TestNavigation:
    def test_starts_at_first_paper(self, session):
        assert session.cursor == 0
        assert session.current_paper.id == 1

    def test_next_and_previous(self, session):
        assert session.next_paper() is True
        assert session.current_paper.id == 2
        assert session.previous_paper() is True
        assert session.previous_paper() is False
        assert session.cursor == 0

    def test_next_stops_at_end(self, session):
        session.jump_to(5)
        assert session.next_paper() is False
        assert session.cursor == 4

    def test_jump_is_one_based(self, session):
        assert session.jump_to(3) is True
        assert session.current_paper.id == 3

    @pytest.mark.parametrize("number", [0, 6, -1])
    def test_out_of_range_jump_is_ignored(self, session, number):
        session.jump_to(2)
        assert session.jump_to(number) is False
        assert session.cursor == 1
        assert "1-5" in session.status_message

    def test_cursor_resets_when_view_shrinks(self, session):
        session.jump_to(5)
        session.toggle_computer_vision_only()
        assert len(session.view) == 2
        assert session.cursor == 0

    def test_cursor_kept_when_still_in_range(self, session):
        session.jump_to(2)
        session.toggle_unrated_only()
        assert _ids(session) == [1, 4, 5]
        assert session.cursor == 1

    def test_cursor_left_alone_when_view_empty(self, session):
        session.jump_to(4)
        session.set_search("nothing-matches-this")
        assert session.view == []
        assert session.cursor == 3
        assert session.current_paper is None
        assert session.progress == 0.0


# ── Rating and editing ────────────────────────────────────────────────


class TestRating:
    def test_rate_sets_rating_and_advances(self, session):
        assert session.rate_interesting() is True
        assert session.store.get(1).rating is Rating.INTERESTING
        assert session.cursor == 1

    def test_rate_not_interesting(self, session):
        session.jump_to(4)
        session.rate_not_interesting()
        assert session.store.get(4).rating is Rating.NOT_INTERESTING
        assert session.cursor == 4

    def test_rating_last_paper_stays_put(self, session):
        session.jump_to(5)
        session.rate_interesting()
        assert session.cursor == 4

    def test_rating_recomputes_unrated_view(self, session):
        session.toggle_unrated_only()
        assert _ids(session) == [1, 4, 5]
        session.rate_interesting()
        assert _ids(session) == [4, 5]

    def test_rating_with_empty_view_is_noop(self, session):
        session.set_search("zzz")
        assert session.rate_interesting() is False

    def test_update_comment(self, session):
        session.jump_to(2)
        assert session.update_comment("double-check the baseline") is True
        assert session.store.get(2).confidence_comment == "double-check the baseline"


# ── Filters ───────────────────────────────────────────────────────────


class TestFilters:
    def test_each_toggle_flips_its_flag(self, session):
        session.toggle_industry_only()
        assert _ids(session) == [1, 3, 5]
        session.toggle_product_potential_only()
        assert _ids(session) == [1, 5]
        session.toggle_industry_only()
        assert _ids(session) == [1, 4, 5]

    def test_search(self, session):
        session.set_search("vision industry")
        assert _ids(session) == [1]

    def test_clear_filters(self, session):
        session.set_search("tourism")
        session.toggle_industry_only()
        session.toggle_random_order()
        session.clear_filters()
        assert session.filters.is_active is False
        assert _ids(session) == [1, 2, 3, 4, 5]
        assert session.status_message == "Filters cleared"

    def test_random_order_keeps_membership(self, session):
        session.toggle_random_order()
        assert sorted(_ids(session)) == [1, 2, 3, 4, 5]

    def test_position_label(self, session):
        session.set_search("computer")
        session.toggle_random_order()
        assert session.position_label == "Paper 1 of 2 (5 total) (filtered) (random order)"


# ── Reporting and output ──────────────────────────────────────────────


class TestOutput:
    def test_statistics_cover_store_and_view(self, session):
        session.toggle_industry_only()
        stats = session.statistics()
        assert stats.overall.total == 5
        assert stats.filtered.total == 3

    def test_export_writes_all_papers(self, session, tmp_path):
        session.toggle_computer_vision_only()
        path = session.export(tmp_path)
        lines = path.read_text().split("\n")
        assert len(lines) == 6
        assert session.status_message.startswith("Saved")

    def test_export_uses_source_name(self, papers, tmp_path):
        session = ReviewSession(PaperStore(papers), source_name="tourism.csv")
        path = session.export(tmp_path)
        assert path.name == f"tourism_reviewed_{date.today().isoformat()}.csv"

    def test_export_failure_sets_status(self, session, tmp_path):
        with patch("triage.session.write_export", side_effect=ExportError("Export failed: nope")):
            assert session.export(tmp_path) is None
        assert session.status_message == "Export failed: nope"


# ── Constructors ──────────────────────────────────────────────────────


class TestSessionFromCsv:
    def test_loads_fixture(self, sample_csv):
        session = session_from_csv(sample_csv, ReviewConfig(nominal_year=2000))
        assert len(session.view) == 4
        assert session.source_name == "papers_sample.csv"
        assert session.status_message == "Loaded 4 papers"

    def test_rejection_propagates(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("Title,Year\n")
        with pytest.raises(InsufficientRowsError):
            session_from_csv(path)


class TestChunkedSession:
    def _metadata(self, total_papers, total_chunks, chunk_size):
        return {
            "totalPapers": total_papers,
            "totalChunks": total_chunks,
            "chunkSize": chunk_size,
            "source": "tourism.csv",
        }

    def test_opens_first_chunk(self, fake_source, chunk_factory):
        source = fake_source({0: chunk_factory(1, 4)}, self._metadata(8, 2, 4))
        session = asyncio.run(session_from_chunks(ReviewConfig(chunk_size=4), source))
        assert _ids(session) == [1, 2, 3, 4]
        assert session.total_papers == 8
        assert session.source_name == "tourism.csv"

    def test_refresh_prefetches_next_chunk(self, fake_source, chunk_factory):
        source = fake_source(
            {0: chunk_factory(1, 4), 1: chunk_factory(5, 4)}, self._metadata(8, 2, 4)
        )
        config = ReviewConfig(chunk_size=4, preload_margin=2)
        session = asyncio.run(session_from_chunks(config, source))
        session.jump_to(4)
        asyncio.run(session.refresh())
        assert _ids(session) == [1, 2, 3, 4, 5, 6, 7, 8]
        assert source.calls == [0, 1]

    def test_refresh_waits_until_near_end(self, fake_source, chunk_factory):
        source = fake_source(
            {0: chunk_factory(1, 4), 1: chunk_factory(5, 4)}, self._metadata(8, 2, 4)
        )
        config = ReviewConfig(chunk_size=4, preload_margin=2)
        session = asyncio.run(session_from_chunks(config, source))
        asyncio.run(session.refresh())
        assert source.calls == [0]

    def test_refresh_ignores_dense_store(self, session):
        asyncio.run(session.refresh())
        assert len(session.view) == 5

    def test_unreachable_dataset_shows_sample(self, fake_source):
        session = asyncio.run(session_from_chunks(ReviewConfig(), fake_source({})))
        assert isinstance(session.store, ChunkedPaperStore)
        assert session.store.using_fallback is True
        assert len(session.view) == 5
        assert "Error loading papers" in session.status_message

    def test_refresh_on_sample_data_stops_after_one_failed_prefetch(self, fake_source):
        source = fake_source({})
        session = asyncio.run(session_from_chunks(ReviewConfig(), source))
        for _ in range(4):
            asyncio.run(session.refresh())
        assert source.calls == [0, 1]
        assert len(session.view) == 5

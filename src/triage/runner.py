"""Terminal front-end: load a dataset and bind single keys to session commands.

Each keypress is looked up in a fresh dispatch table built from the
current session, so handlers always see current state.
"""

from __future__ import annotations

import asyncio
import logging
import textwrap
from pathlib import Path
from typing import Callable

from triage.config import ReviewConfig
from triage.errors import TriageError
from triage.session import ReviewSession, session_from_chunks, session_from_csv
from triage.statistics import ReviewStatistics

# Configure basic logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

HELP = (
    "m interesting · x not interesting · n next · p previous · j jump · "
    "s stats · f search · c clear · u unrated · i industry · v vision · "
    "b product · r random · e comment · w save · q quit"
)
_RULE = "═" * 66


# ── Rendering ─────────────────────────────────────────────────────────


def _flag(value: bool, label: str) -> str:
    return f"{'✓' if value else '✗'} {label}"


def render(session: ReviewSession) -> None:
    """Print the position line and the current paper."""
    print(f"\n{_RULE}")
    print(f"  {session.position_label}  -  {session.progress:.0f}% complete")
    paper = session.current_paper
    if paper is None:
        if session.store.papers():
            print("  No papers match your filters. Press c to clear them.")
        else:
            print("  No papers loaded.")
    else:
        if paper.rating is None:
            verdict = "Not Reviewed"
        else:
            verdict = paper.rating.value.replace("-", " ").title()
        print(f"  [{paper.year}] {paper.title}")
        print(f"  {verdict} · {_flag(paper.tags.computer_vision, 'Computer Vision')}"
              f" · {_flag(paper.tags.industry_problem, 'Industry Problem')}"
              f" · {_flag(paper.tags.product_potential, 'Product Potential')}")
        print(f"  Authors: {', '.join(paper.authors)}")
        print(f"  Keywords: {', '.join(paper.keywords)}")
        summary = paper.layperson_summary or "No summary provided"
        print(textwrap.indent(textwrap.fill(summary, 64), "  "))
        if paper.confidence_comment:
            print(f"  Comment: {paper.confidence_comment}")
    if session.status_message:
        print(f"  » {session.status_message}")
        session.status_message = ""
    print(_RULE)


def print_statistics(stats: ReviewStatistics) -> None:
    overall = stats.overall
    print("\n  Review Statistics")
    print(f"  {'Total Papers:':<18}{overall.total:>8}")
    print(f"  {'Reviewed:':<18}{overall.reviewed:>8} ({stats.progress_percentage}%)")
    print(f"  {'Interesting:':<18}{overall.interesting:>8}")
    print(f"  {'Not Interesting:':<18}{overall.not_interesting:>8}")
    print(f"  {'Remaining:':<18}{overall.remaining:>8}")
    if stats.is_filtered:
        f = stats.filtered
        print("  Current Filter")
        print(f"  {'Papers:':<18}{f.total:>8}")
        print(f"  {'Reviewed:':<18}{f.reviewed:>8}")
        print(f"  {'Remaining:':<18}{f.remaining:>8}")
    if overall.reviewed:
        print(f"  {stats.interesting_percentage}% of reviewed papers are interesting")


# ── Key bindings ──────────────────────────────────────────────────────


def _prompt_jump(session: ReviewSession) -> None:
    raw = input(f"Paper number (1-{len(session.view)}): ").strip()
    try:
        session.jump_to(int(raw))
    except ValueError:
        session.status_message = "Invalid input. Enter a number."


def _prompt_search(session: ReviewSession) -> None:
    session.set_search(input("Search: ").strip())


def _prompt_comment(session: ReviewSession) -> None:
    if session.current_paper is None:
        return
    session.update_comment(input("Confidence comment: "))


def build_commands(session: ReviewSession) -> dict[str, Callable[[], object]]:
    """Map each key to a zero-argument callable on *session*."""
    return {
        "m": session.rate_interesting,
        "x": session.rate_not_interesting,
        "n": session.next_paper,
        "p": session.previous_paper,
        "j": lambda: _prompt_jump(session),
        "s": lambda: print_statistics(session.statistics()),
        "f": lambda: _prompt_search(session),
        "c": session.clear_filters,
        "u": session.toggle_unrated_only,
        "i": session.toggle_industry_only,
        "v": session.toggle_computer_vision_only,
        "b": session.toggle_product_potential_only,
        "r": session.toggle_random_order,
        "e": lambda: _prompt_comment(session),
        "w": session.export,
    }


# ── Entry point ───────────────────────────────────────────────────────


def open_session(
    config: ReviewConfig, csv_path: Path | None = None
) -> ReviewSession | None:
    """Load the requested dataset, or return None after reporting why not."""
    if csv_path is not None:
        try:
            return session_from_csv(csv_path, config)
        except (TriageError, OSError) as e:
            logger.error(f"Could not load {csv_path}: {e}")
            return None
    return asyncio.run(session_from_chunks(config))


def run_review(config: ReviewConfig | None = None, csv_path: Path | None = None) -> None:
    """Run the interactive review loop until the user quits."""
    if config is None:
        config = ReviewConfig()

    logger.info("Starting review session...")
    session = open_session(config, csv_path)
    if session is None:
        return

    print(HELP)
    while True:
        render(session)
        try:
            key = input("> ").strip().lower()[:1]
        except EOFError:
            break
        if key == "q":
            break
        command = build_commands(session).get(key)
        if command is None:
            print(HELP)
            continue
        try:
            command()
        except TriageError as e:
            logger.error(str(e))
            session.status_message = str(e)
        asyncio.run(session.refresh())

    logger.info("Review session closed.")

"""Filter and ordering rules that derive the browsable view from the store.

``apply_filters`` is pure: it selects and reorders references and never
mutates a paper.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace

from triage.models import Paper


@dataclass(frozen=True)
class FilterSet:
    """The active predicates. All enabled predicates are ANDed together.

    Parameters
    ----------
    search : str
        Whitespace-separated terms; every term must match somewhere.
    unrated_only : bool
        Keep papers without a rating.
    industry_only : bool
        Keep industry papers.
    computer_vision_only : bool
        Keep papers labelled as using computer vision.
    product_potential_only : bool
        Keep papers labelled as having product potential.
    random_order : bool
        Shuffle the filtered result.
    """

    search: str = ""
    unrated_only: bool = False
    industry_only: bool = False
    computer_vision_only: bool = False
    product_potential_only: bool = False
    random_order: bool = False

    @property
    def is_active(self) -> bool:
        return self != FilterSet()

    def cleared(self) -> "FilterSet":
        return FilterSet()

    def toggled(self, name: str) -> "FilterSet":
        """Return a copy with boolean predicate *name* flipped."""
        return replace(self, **{name: not getattr(self, name)})


def search_terms(text: str) -> list[str]:
    """Lowercase *text* and split it into non-empty terms."""
    return text.lower().split()


def _searchable_text(paper: Paper) -> list[str]:
    return [
        paper.title.lower(),
        paper.abstract.lower(),
        *(a.lower() for a in paper.authors),
        *(k.lower() for k in paper.keywords),
        paper.layperson_summary.lower(),
        paper.solution_sentence.lower(),
    ]


def matches_search(paper: Paper, terms: list[str]) -> bool:
    """True if every term is a substring of at least one searchable field."""
    if not terms:
        return True
    haystack = _searchable_text(paper)
    return all(any(term in text for text in haystack) for term in terms)


def apply_filters(
    papers: list[Paper],
    filters: FilterSet,
    rng: random.Random | None = None,
) -> list[Paper]:
    """Derive the ordered view of *papers* under *filters*.

    Parameters
    ----------
    papers : list[Paper]
        Full record set, in store order.
    filters : FilterSet
        Active predicates.
    rng : random.Random | None
        Shuffle source for ``random_order``; unseeded if omitted.

    Returns
    -------
    list[Paper]
        A new list; *papers* is left untouched.
    """
    terms = search_terms(filters.search)
    filtered = [p for p in papers if matches_search(p, terms)]

    if filters.unrated_only:
        filtered = [p for p in filtered if p.rating is None]
    if filters.industry_only:
        filtered = [p for p in filtered if p.is_industry]
    if filters.computer_vision_only:
        filtered = [p for p in filtered if p.tags.computer_vision]
    if filters.product_potential_only:
        filtered = [p for p in filtered if p.tags.product_potential]

    if filters.random_order:
        (rng or random.Random()).shuffle(filtered)

    return filtered

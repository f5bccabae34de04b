"""
Category Scorer — Weighted Heuristic Signals

Runs only when the critical detector found nothing. Each catalog
category contributes its full weight once its match threshold is
met; weights are summed and clamped to 100.

Weights:
  unrealistic salary 25, suspicious contact 20, personal email 15,
  vague company 10, urgency (3+ phrases) 10, too good to be true
  (3+ phrases) 10, very short description (< 100 chars) 5.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from jobshield.catalog import CATALOG, HeuristicCategory, PatternCatalog

SHORT_TEXT_LENGTH = 100
SHORT_TEXT_WEIGHT = 5
SHORT_TEXT_REASON = "Very short job description (lacks detail)"

# Reported when the score is low and nothing fired. Never adds points.
POSITIVE_INDICATORS = (
    "No critical red flags detected",
    "Professional language and structure",
    "No payment requirements found",
)
POSITIVE_THRESHOLD = 30

_CAPITALIZED = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")


@dataclass(frozen=True)
class CategoryResult:
    score: int
    reasons: tuple[str, ...] = ()
    triggered_categories: frozenset[str] = frozenset()
    matches: dict[str, tuple[str, ...]] = field(default_factory=dict, compare=False)


class CategoryScorer:
    """Evaluates heuristic categories in catalog order."""

    def __init__(self, catalog: PatternCatalog = CATALOG):
        self._catalog = catalog

    def score(self, text: str) -> CategoryResult:
        text = text or ""
        lower = text.lower()
        score = 0
        reasons: list[str] = []
        triggered: set[str] = set()
        all_matches: dict[str, tuple[str, ...]] = {}

        for category in self._catalog.categories:
            found = self.find_matches(lower, category)
            if found:
                all_matches[category.id] = found
            if not self._triggers(category, found, text):
                continue
            score += category.weight
            triggered.add(category.id)
            reasons.append(category.reason.format(match=found[0]))

        if len(text.strip()) < SHORT_TEXT_LENGTH:
            score += SHORT_TEXT_WEIGHT
            triggered.add("short_description")
            reasons.append(SHORT_TEXT_REASON)

        score = min(score, 100)

        if score < POSITIVE_THRESHOLD and not reasons:
            reasons.extend(POSITIVE_INDICATORS)

        return CategoryResult(
            score=score,
            reasons=tuple(reasons),
            triggered_categories=frozenset(triggered),
            matches=all_matches,
        )

    @staticmethod
    def find_matches(lower_text: str, category: HeuristicCategory) -> tuple[str, ...]:
        """Phrases of the category present in the (lower-cased) text, in declaration order."""
        return tuple(p for p in category.phrases if p.lower() in lower_text)

    def _triggers(self, category: HeuristicCategory, found: tuple[str, ...], text: str) -> bool:
        if len(found) < category.min_matches:
            return False
        if category.requires_unnamed_company and self.has_specific_company_name(text):
            return False
        return True

    def has_specific_company_name(self, text: str) -> bool:
        """
        Heuristic: any capitalized run of words longer than three
        characters that is not a generic word ("the", "company", ...).
        """
        for token in _CAPITALIZED.findall(text):
            if len(token) > 3 and token.lower() not in self._catalog.generic_words:
                return True
        return False


category_scorer = CategoryScorer()

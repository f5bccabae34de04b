"""
Critical Detector — Unambiguous "Pay Us Money" Signals

A critical hit overrides every other signal: the posting is forced
to Potential Scam with a score of 100.

Scan order (left to right per rule, first qualifying match wins):
  1. Payment phrases — suppressed when a safe phrase appears inside
     the match's context window (not anywhere in the document).
  2. Payment demands — recorded without context-window suppression.
  3. Currency rules  — recorded without context-window suppression.

Groups 2 and 3 walk every occurrence of a rule and keep the first one
that is not covered by a safe phrase.

Demand and currency matches are only discarded when a safe phrase
covers the matched characters themselves ("fee required" inside
"no fee required"), since the match is then part of the benign phrase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Iterator, Optional

from jobshield.catalog import CATALOG, PAYMENT_PHRASE, PatternCatalog, PatternRule

# Characters captured on each side of a match
CONTEXT_RADIUS = 50

CRITICAL_REASON = "Payment or fee requirement detected"
UPFRONT_MONEY_REASON = "Legitimate employers NEVER ask for money upfront"


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class MatchSpan:
    """One critical match and the text around it."""
    match: str
    context: str
    start: int
    end: int
    group: str
    rule_id: str

    def to_dict(self) -> dict:
        return {
            "match": self.match,
            "context": self.context,
            "position": {"start": self.start, "end": self.end},
            "group": self.group,
            "rule_id": self.rule_id,
        }


@dataclass(frozen=True)
class CriticalResult:
    """Outcome of a critical scan. ``detected`` always mirrors ``matches``."""
    matches: tuple[str, ...] = ()
    spans: tuple[MatchSpan, ...] = ()
    suppressed: tuple[MatchSpan, ...] = field(default=(), compare=False)

    @property
    def detected(self) -> bool:
        return len(self.matches) > 0

    @property
    def reasons(self) -> list[str]:
        """Explanations for a hit, in display order. Empty when clean."""
        if not self.detected:
            return []
        return [
            f'CRITICAL: Job requires payment or fees - "{self.matches[0]}"',
            UPFRONT_MONEY_REASON,
        ]

    @property
    def critical_reason(self) -> Optional[str]:
        return CRITICAL_REASON if self.detected else None


# ============================================================
# DETECTOR
# ============================================================

class CriticalDetector:
    """
    Stateless scanner over the catalog's critical rules.

    Instantiated once as a singleton. ``detect`` reads the text and
    the catalog only.
    """

    def __init__(self, catalog: PatternCatalog = CATALOG):
        self._catalog = catalog

    def detect(self, text: str) -> CriticalResult:
        """Scan text for critical payment indicators."""
        if not text:
            return CriticalResult()

        spans: list[MatchSpan] = []
        suppressed: list[MatchSpan] = []

        for group, rules in self._catalog.critical_groups():
            for rule in rules:
                if group == PAYMENT_PHRASE:
                    span = self._first_match(text, rule, group)
                    if span is None:
                        continue
                    if self._safe_in_context(span.context):
                        suppressed.append(span)
                    else:
                        spans.append(span)
                    continue

                # A benign occurrence must not hide a later real demand
                for span in self._iter_matches(text, rule, group):
                    if self._safe_overlaps(text, span):
                        suppressed.append(span)
                        continue
                    spans.append(span)
                    break

        seen: set[str] = set()
        matches: list[str] = []
        for span in spans:
            if span.match not in seen:
                seen.add(span.match)
                matches.append(span.match)

        return CriticalResult(
            matches=tuple(matches),
            spans=tuple(spans),
            suppressed=tuple(suppressed),
        )

    @classmethod
    def _first_match(cls, text: str, rule: PatternRule, group: str) -> Optional[MatchSpan]:
        m = rule.search(text)
        return None if m is None else cls._span(text, m, rule, group)

    @classmethod
    def _iter_matches(cls, text: str, rule: PatternRule, group: str) -> Iterator[MatchSpan]:
        for m in rule.pattern.finditer(text):
            yield cls._span(text, m, rule, group)

    @staticmethod
    def _span(text: str, m: re.Match, rule: PatternRule, group: str) -> MatchSpan:
        start, end = m.start(), m.end()
        context = text[max(0, start - CONTEXT_RADIUS):min(len(text), end + CONTEXT_RADIUS)]
        return MatchSpan(
            match=m.group(0),
            context=context,
            start=start,
            end=end,
            group=group,
            rule_id=rule.id,
        )

    def _safe_in_context(self, context: str) -> bool:
        """True if any safe phrase appears inside the context window."""
        return any(rule.search(context) for rule in self._catalog.safe_phrases)

    def _safe_overlaps(self, text: str, span: MatchSpan) -> bool:
        """True if a safe phrase covers part of the matched characters."""
        offset = max(0, span.start - CONTEXT_RADIUS)
        window = text[offset:min(len(text), span.end + CONTEXT_RADIUS)]
        for rule in self._catalog.safe_phrases:
            for m in rule.pattern.finditer(window):
                if m.start() + offset < span.end and m.end() + offset > span.start:
                    return True
        return False


critical_detector = CriticalDetector()

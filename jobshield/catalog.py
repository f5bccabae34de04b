"""
Pattern Catalog — Immutable Detection Rules

The catalog defines:
  1. Critical payment-phrase rules ("registration fee", "security deposit")
  2. Critical payment-demand rules ("must pay", "payment required")
  3. Critical currency rules (an amount next to a fee-context word)
  4. Safe phrases that look like a critical match but are benign
  5. Heuristic categories with point weights and match thresholds

The catalog is built once at import time and never mutated. Every
scoring call reads the same CATALOG value; nothing here depends on
the request.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Pattern

# --- Catalog Version (reported by /api/patterns) ---
CATALOG_VERSION = "1.0.0"

# Critical rule groups
PAYMENT_PHRASE = "payment_phrase"
PAYMENT_DEMAND = "payment_demand"
CURRENCY = "currency"

CRITICAL_GROUPS = (PAYMENT_PHRASE, PAYMENT_DEMAND, CURRENCY)


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class PatternRule:
    """A regex rule belonging to one critical group (or the safe list)."""
    id: str
    category: str          # PAYMENT_PHRASE | PAYMENT_DEMAND | CURRENCY | "safe"
    pattern: Pattern[str]

    def search(self, text: str):
        return self.pattern.search(text)


@dataclass(frozen=True)
class HeuristicCategory:
    """
    A weighted group of literal phrases.

    The category's weight applies once when at least ``min_matches``
    distinct phrases are found (case-insensitive substring match).
    ``reason`` may reference ``{match}``, the first phrase found in
    declaration order.
    """
    id: str
    name: str
    weight: int
    phrases: tuple[str, ...]
    reason: str
    min_matches: int = 1
    # Only applies when the text names no specific company
    requires_unnamed_company: bool = False


@dataclass(frozen=True)
class PatternCatalog:
    """Read-only bundle of every rule group."""
    payment_phrases: tuple[PatternRule, ...]
    payment_demands: tuple[PatternRule, ...]
    currency_rules: tuple[PatternRule, ...]
    safe_phrases: tuple[PatternRule, ...]
    categories: tuple[HeuristicCategory, ...]
    generic_words: frozenset[str] = field(default_factory=frozenset)
    version: str = CATALOG_VERSION

    def critical_groups(self) -> tuple[tuple[str, tuple[PatternRule, ...]], ...]:
        """Critical rule groups in scan order."""
        return (
            (PAYMENT_PHRASE, self.payment_phrases),
            (PAYMENT_DEMAND, self.payment_demands),
            (CURRENCY, self.currency_rules),
        )

    def describe(self) -> dict:
        """Serializable summary used by the patterns endpoint."""
        return {
            "version": self.version,
            "critical": {
                group: [{"id": r.id, "pattern": r.pattern.pattern} for r in rules]
                for group, rules in self.critical_groups()
            },
            "safe_phrases": [
                {"id": r.id, "pattern": r.pattern.pattern} for r in self.safe_phrases
            ],
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "weight": c.weight,
                    "min_matches": c.min_matches,
                    "phrases": list(c.phrases),
                }
                for c in self.categories
            ],
        }


def _rules(category: str, prefix: str, patterns: list[str]) -> tuple[PatternRule, ...]:
    return tuple(
        PatternRule(
            id=f"{prefix}_{i + 1:02d}",
            category=category,
            pattern=re.compile(p, re.IGNORECASE),
        )
        for i, p in enumerate(patterns)
    )


# ============================================================
# CRITICAL RULES
# ============================================================

# A fee/payment noun with a qualifying word in front of it.
PAYMENT_PHRASE_PATTERNS: list[str] = [
    r"\bregistration\s+fee\b",
    r"\bprocessing\s+fee\b",
    r"\btraining\s+fee\b",
    r"\bapplication\s+fee\b",
    r"\bmembership\s+fee\b",
    r"\badmin\s+fee\b",
    r"\bjoining\s+fee\b",
    r"\bonboarding\s+fee\b",
    r"\bcertification\s+fee\b",
    r"\bid\s+generation\s+fee\b",
    r"\bbackground\s+check\s+fee\b",
    r"\bverification\s+fee\b",
    r"\bactivation\s+fee\b",
    r"\bsetup\s+fee\b",
    r"\benrollment\s+fee\b",
    r"\bstarter\s+kit\s+fee\b",
    r"\bmaterial\s+fee\b",
    r"\bequipment\s+fee\b",
    r"\bsecurity\s+deposit\b",
    r"\brefundable\s+(?:fee|deposit)\b",
    r"\badvance\s+payment\b",
    r"\bpay\s+upfront\b",
    r"\bpaid\s+assessment\b",
    r"\bpaid\s+training\b",
    r"\bpaid\s+certification\b",
]

# Imperative phrasing. No context-window suppression for this group.
PAYMENT_DEMAND_PATTERNS: list[str] = [
    r"\bpay\s+(?:for\s+)?(?:training|certification|materials?|equipment)\b",
    r"\bpayment\s+(?:is\s+)?required\b",
    r"\bfee\s+(?:is\s+)?required\b",
    r"\bmust\s+pay\b",
    r"\bneed\s+to\s+pay\b",
    r"\bhave\s+to\s+pay\b",
    r"\bcharge\s+(?:for|of)\b",
    r"\bcost\s+to\s+join\b",
    r"\bdeposit\s+(?:of|is|required)\b",
]

# A monetary amount co-located with a fee-context word.
CURRENCY_PATTERNS: list[str] = [
    r"\b(?:pay|fee|deposit|charge|cost)\s*[:\-]?\s*[$₹£€¥]\s*\d+",
    r"\b(?:pay|fee|deposit|charge|cost)\s*[:\-]?\s*(?:rs\.?|inr|usd)\s*\d+",
    r"[$₹£€¥]\s*\d+\s*(?:registration|processing|training|application|onboarding|certification)",
    r"\d+\s*(?:dollars?|rupees?|pounds?|euros?)\s*(?:fee|deposit|payment)",
]

# Benign phrases that resemble a critical match.
SAFE_PHRASE_PATTERNS: list[str] = [
    r"\bregistration\s+(?:process|procedure|system|portal|form|link|page|deadline|opens?|closes?)\b",
    r"\bapplication\s+(?:process|procedure|system|portal|form|link|page|deadline)\b",
    r"\bregistered\s+(?:candidates?|applicants?|users?|members?|companies?|trademark)\b",
    r"\bregistration\s+(?:is|will\s+be)\s+(?:open|closed|available|mandatory|optional)\b",
    r"\bcomplete\s+(?:the\s+)?registration\b",
    r"\bafter\s+registration\b",
    r"\bsuccessful\s+registration\b",
    r"\bno\s+(?:fee|fees|cost|charge|payment)\b",
    r"\bfree\s+(?:of\s+charge|training|certification)\b",
]


# ============================================================
# HEURISTIC CATEGORIES (declaration order == reason order)
# ============================================================

HEURISTIC_CATEGORIES: list[HeuristicCategory] = [
    HeuristicCategory(
        id="unrealistic_salary",
        name="Unrealistic salary",
        weight=25,
        phrases=(
            "earn $10000", "make $5000", "guaranteed income", "easy money",
            "work from home earn", "unlimited earning", "get rich", "fast cash",
            "earn lakhs", "earn thousands weekly",
        ),
        reason='Unrealistic salary promises: "{match}"',
    ),
    HeuristicCategory(
        id="suspicious_contact",
        name="Suspicious contact channel",
        weight=20,
        phrases=(
            "whatsapp", "telegram", "signal app", "wickr", "kik messenger",
            "contact via whatsapp", "message on telegram", "dm on instagram",
        ),
        reason="Suspicious contact method: {match}",
    ),
    HeuristicCategory(
        id="personal_email",
        name="Personal email domain",
        weight=15,
        phrases=(
            "@gmail.com", "@yahoo.com", "@hotmail.com", "@outlook.com",
            "@aol.com", "@mail.com", "@protonmail.com", "@icloud.com",
        ),
        reason="Uses personal email domain: {match}",
    ),
    HeuristicCategory(
        id="vague_company",
        name="Vague company description",
        weight=10,
        phrases=(
            "leading company", "reputed company", "top company",
            "multinational company", "well established", "growing company",
            "startup company", "confidential",
        ),
        reason="Vague company description without specific name",
        requires_unnamed_company=True,
    ),
    HeuristicCategory(
        id="urgency_tactics",
        name="Urgency tactics",
        weight=10,
        phrases=(
            "apply now", "limited slots", "hurry", "immediate joining",
            "urgent requirement", "only few positions", "act fast", "don't miss",
        ),
        reason="Uses excessive urgency tactics",
        min_matches=3,  # Occasional urgency is normal; repetition is the signal
    ),
    HeuristicCategory(
        id="too_good_to_be_true",
        name="Too good to be true",
        weight=10,
        phrases=(
            "no experience required", "anyone can apply", "work 2 hours",
            "flexible timing", "part time full pay", "guaranteed selection",
        ),
        reason="Makes unrealistic promises about job requirements",
        min_matches=3,
    ),
]

# Capitalized tokens that never count as a company name
GENERIC_WORDS = frozenset({"the", "company", "job", "position", "role", "candidate"})


# ============================================================
# SINGLETON — built once, never mutated
# ============================================================

CATALOG = PatternCatalog(
    payment_phrases=_rules(PAYMENT_PHRASE, "PAY_PHRASE", PAYMENT_PHRASE_PATTERNS),
    payment_demands=_rules(PAYMENT_DEMAND, "PAY_DEMAND", PAYMENT_DEMAND_PATTERNS),
    currency_rules=_rules(CURRENCY, "CURRENCY", CURRENCY_PATTERNS),
    safe_phrases=_rules("safe", "SAFE", SAFE_PHRASE_PATTERNS),
    categories=tuple(HEURISTIC_CATEGORIES),
    generic_words=GENERIC_WORDS,
)

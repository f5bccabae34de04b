"""
Reason Aggregator

Merges explanations from the critical detector, category scorer and
AI collaborator into one ordered, duplicate-free list of at most
MAX_REASONS entries.
"""

from __future__ import annotations

from typing import Generic, Hashable, Iterable, Iterator, Sequence, TypeVar

MAX_REASONS = 10

# AI red flags that say "nothing wrong". Dropped when a critical rule fired.
NEUTRAL_AI_PHRASES = (
    "no major red flags",
    "appears to follow professional",
    "ai analysis completed",
)

T = TypeVar("T", bound=Hashable)


class OrderedSet(Generic[T]):
    """Insertion-ordered collection that ignores repeated items."""

    def __init__(self, items: Iterable[T] = ()):
        self._items: list[T] = []
        self._seen: set[T] = set()
        self.extend(items)

    def add(self, item: T) -> bool:
        """Append item if unseen. Returns True when it was added."""
        if item in self._seen:
            return False
        self._seen.add(item)
        self._items.append(item)
        return True

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def first(self, n: int) -> list[T]:
        return self._items[:n]

    def __contains__(self, item: object) -> bool:
        return item in self._seen

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"OrderedSet({self._items!r})"


def is_neutral(flag: str) -> bool:
    lowered = flag.lower()
    return any(phrase in lowered for phrase in NEUTRAL_AI_PHRASES)


def aggregate_reasons(
    critical_reasons: Sequence[str],
    category_reasons: Sequence[str],
    ai_red_flags: Sequence[str],
    has_critical_flag: bool,
    limit: int = MAX_REASONS,
) -> list[str]:
    """
    Critical hit:  critical reasons, then AI flags that support a scam verdict.
    Otherwise:     category reasons, then every AI flag.
    """
    merged: OrderedSet[str] = OrderedSet()
    if has_critical_flag:
        merged.extend(critical_reasons)
        merged.extend(f for f in ai_red_flags if not is_neutral(f))
    else:
        merged.extend(category_reasons)
        merged.extend(ai_red_flags)
    return merged.first(limit)

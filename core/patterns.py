"""Per-date trading pattern flags shown beneath the indicator matrix."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from core.accessors import Snapshot, get_accessor

BULLISH = "bullish"
BEARISH = "bearish"
NEUTRAL = "neutral"


@dataclass(frozen=True)
class PatternFlag:
    name: str
    label: str
    sentiment: str


@dataclass(frozen=True)
class PatternCard:
    """Active patterns detected for one snapshot date."""

    date: str
    patterns: tuple[PatternFlag, ...]


def _sentiment(name: str) -> str:
    upper = name.upper()
    if "BULLISH" in upper:
        return BULLISH
    if "BEARISH" in upper:
        return BEARISH
    return NEUTRAL


def pattern_cards(snapshots: Sequence[Snapshot]) -> list[PatternCard]:
    """Collect truthy pattern flags per snapshot; snapshots without a pattern map are skipped."""
    accessor = get_accessor("trade-patterns")
    cards: list[PatternCard] = []

    for snapshot in snapshots:
        flags = accessor(snapshot)
        if not isinstance(flags, Mapping):
            continue
        active = tuple(
            PatternFlag(name=str(name), label=str(name).replace("_", " "), sentiment=_sentiment(str(name)))
            for name, enabled in flags.items()
            if enabled
        )
        cards.append(PatternCard(date=str(snapshot.get("date", "")), patterns=active))

    return cards

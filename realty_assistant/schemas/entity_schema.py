"""Typed entities extracted from a single user message."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class MonetaryAmount:
    """Currency amount in the smallest unit (rupees)."""
    value_in_base_units: int


@dataclass(frozen=True)
class Duration:
    """Time span normalised to whole days."""
    value_in_days: int


@dataclass(frozen=True)
class LocationPhrase:
    """Place name that followed a locative preposition."""
    text: str


@dataclass(frozen=True)
class ExtractedEntities:
    """Result of one extraction pass. Each category is independent."""

    amount: Optional[MonetaryAmount] = None
    duration: Optional[Duration] = None
    location: Optional[LocationPhrase] = None

    def is_empty(self) -> bool:
        return self.amount is None and self.duration is None and self.location is None

    def to_dict(self) -> dict[str, Any]:
        """Flat view of the entities that were found, for turn logs."""
        found: dict[str, Any] = {}
        if self.amount is not None:
            found["budget"] = self.amount.value_in_base_units
        if self.duration is not None:
            found["timeline_days"] = self.duration.value_in_days
        if self.location is not None:
            found["location"] = self.location.text
        return found

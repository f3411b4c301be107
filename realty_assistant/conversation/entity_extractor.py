"""
Rule-based entity extraction from free-text user messages.

Three independent patterns run against the full original text:
amounts (number + Indian scale word), durations (number + time unit)
and locations (word following a locative preposition). Only the first
match per category is kept. Extraction never raises; text that matches
nothing simply yields no entity for that category.

Usage:
    entities = extract("budget is around 40 lakh, near Whitefield")
    entities.amount.value_in_base_units  # 4000000
    entities.location.text               # "Whitefield"
"""

import logging
import re
from typing import Optional

from realty_assistant.schemas.entity_schema import (
    Duration,
    ExtractedEntities,
    LocationPhrase,
    MonetaryAmount,
)

logger = logging.getLogger(__name__)

# Longer digit runs are rejected outright rather than truncated. A number
# that continues a decimal or grouped figure ("1.5", "1,50") is not matched.
MAX_DIGITS = 12

SCALE_MULTIPLIERS: dict[str, int] = {
    "crore": 10_000_000,
    "lakh": 100_000,
    "thousand": 1_000,
    "k": 1_000,
}

UNIT_DAYS: dict[str, int] = {
    "year": 365,
    "month": 30,
    "week": 7,
    "day": 1,
}

# Checked in this order; the first preposition that matches wins
LOCATIVE_PREPOSITIONS: list[str] = ["in", "at", "near", "around"]

_AMOUNT_RE = re.compile(
    rf"(?<![\d.,])(\d{{1,{MAX_DIGITS}}})\s*(crore|lakh|thousand|k)s?\b",
    re.IGNORECASE,
)
_DURATION_RE = re.compile(
    rf"(?<![\d.,])(\d{{1,{MAX_DIGITS}}})\s*(year|month|week|day)s?\b",
    re.IGNORECASE,
)
_LOCATION_RES: list[tuple[str, re.Pattern[str]]] = [
    (word, re.compile(rf"\b{word}\s+([a-z]+)(?=\s|,|\.|$)", re.IGNORECASE))
    for word in LOCATIVE_PREPOSITIONS
]


def extract_amount(text: str) -> Optional[MonetaryAmount]:
    """Parse the first ``<integer> <scale-word>`` phrase into rupees."""
    match = _AMOUNT_RE.search(text)
    if match is None:
        return None
    multiplier = SCALE_MULTIPLIERS[match.group(2).lower()]
    return MonetaryAmount(value_in_base_units=int(match.group(1)) * multiplier)


def extract_duration(text: str) -> Optional[Duration]:
    """Parse the first ``<integer> <time-unit>`` phrase into days."""
    match = _DURATION_RE.search(text)
    if match is None:
        return None
    days_per_unit = UNIT_DAYS[match.group(2).lower()]
    return Duration(value_in_days=int(match.group(1)) * days_per_unit)


def extract_location(text: str) -> Optional[LocationPhrase]:
    """Return the place word after the highest-priority matching preposition."""
    for word, pattern in _LOCATION_RES:
        match = pattern.search(text)
        if match:
            logger.debug("Location matched via '%s': %s", word, match.group(1))
            return LocationPhrase(text=match.group(1).strip())
    return None


def extract(text: Optional[str]) -> ExtractedEntities:
    """Extract amount, duration and location from one message."""
    if not text:
        return ExtractedEntities()
    entities = ExtractedEntities(
        amount=extract_amount(text),
        duration=extract_duration(text),
        location=extract_location(text),
    )
    logger.debug("Extracted entities: %s", entities.to_dict())
    return entities

"""Per-session conversation context."""

from dataclasses import dataclass, field
from typing import Optional

from realty_assistant.schemas.entity_schema import Duration, MonetaryAmount


@dataclass(frozen=True)
class ConversationContext:
    """
    Facts accumulated across the turns of one chat session.

    Created empty at session start and replaced wholesale after every user
    turn. Fields are last-write-wins: a turn that extracts nothing for a
    field leaves the previous value in place.
    """
    lead_captured: bool = False
    interests: frozenset[str] = field(default_factory=frozenset)
    budget: Optional[MonetaryAmount] = None
    timeline: Optional[Duration] = None
    location: Optional[str] = None

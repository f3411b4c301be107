"""
Keyword-rule intent classification.

Rules are an explicit ordered list evaluated top to bottom; the first
rule with any keyword present as a substring of the lower-cased text
wins. The order is the tie-break policy: "help me budget for
construction" is a budget inquiry because the budget rule comes first.

Usage:
    classify("I need help with construction budget")  # Intent.BUDGET_INQUIRY
"""

import logging
from dataclasses import dataclass
from typing import Optional

from realty_assistant.schemas.conversation_schema import Intent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntentRule:
    """One (keywords, label) pair in the precedence list."""
    intent: Intent
    keywords: tuple[str, ...]

    def matches(self, lowered: str) -> bool:
        return any(keyword in lowered for keyword in self.keywords)


class IntentClassifier:
    """Deterministic single-label classifier over an ordered rule list."""

    RULES: list[IntentRule] = [
        IntentRule(Intent.BUDGET_INQUIRY, ("budget", "cost", "price")),
        IntentRule(Intent.DESIGN_SERVICES, ("design", "architect", "plan")),
        IntentRule(Intent.CONSTRUCTION_SERVICES, ("construction", "build", "contractor")),
        IntentRule(Intent.CONSULTATION_REQUEST, ("consultation", "advice", "help")),
        IntentRule(Intent.PROPERTY_INQUIRY, ("property", "house", "flat")),
    ]

    FALLBACK: Intent = Intent.GENERAL

    def classify(self, text: Optional[str]) -> Intent:
        """Return the label of the first matching rule, or the fallback."""
        lowered = (text or "").lower()
        for rule in self.RULES:
            if rule.matches(lowered):
                logger.debug("Intent classified as %s", rule.intent.value)
                return rule.intent
        return self.FALLBACK

    def matching_intents(self, text: Optional[str]) -> list[Intent]:
        """Every rule label that matches, in precedence order."""
        lowered = (text or "").lower()
        return [rule.intent for rule in self.RULES if rule.matches(lowered)]


_default_classifier = IntentClassifier()


def classify(text: Optional[str]) -> Intent:
    """Classify with the default rule list."""
    return _default_classifier.classify(text)

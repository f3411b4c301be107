"""
Conversation analytics computed from recorded turns.

Covers volume (turns, sessions), routing (intent mix, fallback rate)
and understanding (how often budgets, timelines and locations were
picked out of user text).
"""

import logging
from collections import Counter
from dataclasses import dataclass, field

from realty_assistant.config import settings
from realty_assistant.schemas.conversation_schema import Intent, TurnRecord

logger = logging.getLogger(__name__)


@dataclass
class TurnMetrics:
    """Aggregated metrics for a batch of turns."""

    total_turns: int = 0
    total_sessions: int = 0
    avg_turns_per_session: float = 0.0

    # Routing
    intent_counts: dict[str, int] = field(default_factory=dict)
    fallback_rate: float = 0.0

    # Understanding
    budget_capture_rate: float = 0.0
    timeline_capture_rate: float = 0.0
    location_capture_rate: float = 0.0
    entity_capture_rate: float = 0.0


class MetricsCalculator:
    """Calculates analytics from turn records."""

    def calculate(self, records: list[TurnRecord]) -> TurnMetrics:
        metrics = TurnMetrics()
        if not records:
            return metrics

        total = len(records)
        sessions = {r.session_id for r in records}
        metrics.total_turns = total
        metrics.total_sessions = len(sessions)
        metrics.avg_turns_per_session = total / len(sessions)

        counts = Counter(r.classified_intent.value for r in records)
        metrics.intent_counts = {
            intent.value: counts.get(intent.value, 0) for intent in Intent
        }
        metrics.fallback_rate = counts.get(Intent.GENERAL.value, 0) / total

        metrics.budget_capture_rate = self._capture_rate(records, "budget")
        metrics.timeline_capture_rate = self._capture_rate(records, "timeline_days")
        metrics.location_capture_rate = self._capture_rate(records, "location")
        metrics.entity_capture_rate = sum(1 for r in records if r.extracted_entities) / total

        return metrics

    @staticmethod
    def _capture_rate(records: list[TurnRecord], key: str) -> float:
        return sum(1 for r in records if key in r.extracted_entities) / len(records)

    def format_report(self, metrics: TurnMetrics) -> str:
        """Format metrics into a human-readable report."""
        targets = settings.report

        lines = [
            "=" * 60,
            "ASSISTANT CONVERSATION REPORT",
            "=" * 60,
            "",
            "VOLUME",
            f"  Turns:                  {metrics.total_turns}",
            f"  Sessions:               {metrics.total_sessions}",
            f"  Avg turns per session:  {metrics.avg_turns_per_session:.1f}",
            "",
            "ROUTING",
            f"  Fallback rate:          {metrics.fallback_rate:.1%}  (max: {targets.max_fallback_rate:.0%})",
        ]
        for intent, count in metrics.intent_counts.items():
            lines.append(f"    {intent:<24}{count}")
        lines += [
            "",
            "UNDERSTANDING",
            f"  Entity capture rate:    {metrics.entity_capture_rate:.1%}  (target: {targets.target_entity_capture_rate:.0%})",
            f"  Budget captured:        {metrics.budget_capture_rate:.1%}",
            f"  Timeline captured:      {metrics.timeline_capture_rate:.1%}",
            f"  Location captured:      {metrics.location_capture_rate:.1%}",
            "=" * 60,
        ]
        return "\n".join(lines)

    def check_targets(self, metrics: TurnMetrics) -> list[str]:
        """Return a description of each target the batch misses."""
        targets = settings.report
        misses = []
        if metrics.fallback_rate > targets.max_fallback_rate:
            misses.append(
                f"fallback rate {metrics.fallback_rate:.1%} above {targets.max_fallback_rate:.0%}"
            )
        if metrics.entity_capture_rate < targets.target_entity_capture_rate:
            misses.append(
                f"entity capture rate {metrics.entity_capture_rate:.1%} below "
                f"{targets.target_entity_capture_rate:.0%}"
            )
        return misses

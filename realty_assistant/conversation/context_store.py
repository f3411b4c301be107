"""Copy-on-write updates for the per-session ConversationContext."""

import dataclasses

from realty_assistant.schemas.context_schema import ConversationContext
from realty_assistant.schemas.conversation_schema import Intent
from realty_assistant.schemas.entity_schema import ExtractedEntities


def apply_entities(
    context: ConversationContext, entities: ExtractedEntities
) -> ConversationContext:
    """Overwrite budget, timeline and location with whatever this turn found.

    Categories missing from ``entities`` keep their previous value.
    ``lead_captured`` and ``interests`` are never touched here.
    """
    changes = {}
    if entities.amount is not None:
        changes["budget"] = entities.amount
    if entities.duration is not None:
        changes["timeline"] = entities.duration
    if entities.location is not None:
        changes["location"] = entities.location.text
    if not changes:
        return context
    return dataclasses.replace(context, **changes)


def add_interest(context: ConversationContext, intent: Intent) -> ConversationContext:
    """Remember a topic the user asked about. The fallback intent is not a topic."""
    if intent == Intent.GENERAL or intent.value in context.interests:
        return context
    return dataclasses.replace(context, interests=context.interests | {intent.value})

"""
Template-based reply selection.

Each intent maps to a fixed text builder and an ordered action list.
Builders interpolate only the entities extracted from the current turn.
Unauthenticated users without a captured lead get a fixed suffix
appended on every reply.

Usage:
    reply = synthesize(Intent.BUDGET_INQUIRY, entities, context, is_authenticated=False)
    reply.text, reply.actions
"""

import logging
from dataclasses import dataclass
from typing import Callable

from realty_assistant.schemas.context_schema import ConversationContext
from realty_assistant.schemas.conversation_schema import ActionKind, ChatAction, Intent
from realty_assistant.schemas.entity_schema import ExtractedEntities
from realty_assistant.utils import format_rupees

logger = logging.getLogger(__name__)

LEAD_CAPTURE_SUFFIX = (
    "To provide you with the most relevant assistance and connect you with the "
    "right professionals, I'd recommend creating a free account or scheduling a "
    "consultation where we can discuss your needs in detail."
)

GENERAL_ACTIONS: tuple[ChatAction, ...] = (
    ChatAction(kind=ActionKind.SCHEDULE_CONSULTATION, label="Free Consultation"),
    ChatAction(kind=ActionKind.VIEW_SERVICES, label="Explore Services"),
    ChatAction(kind=ActionKind.SUBMIT_REQUIREMENTS, label="Submit Requirements"),
)


@dataclass(frozen=True)
class SynthesizedReply:
    text: str
    actions: tuple[ChatAction, ...]


def _budget_text(entities: ExtractedEntities) -> str:
    around = ""
    if entities.amount is not None:
        around = f" around {format_rupees(entities.amount.value_in_base_units)}"
    return (
        f"I understand you're interested in budget planning{around}. I can help you "
        "with cost estimation services and connect you with professionals who can "
        "provide accurate quotes for your project."
    )


def _design_text(entities: ExtractedEntities) -> str:
    return (
        "Great! I can help you with design services including 2D/3D elevation, "
        "architectural design, and presentation plans. Our certified architects and "
        "designers can bring your vision to life."
    )


def _construction_text(entities: ExtractedEntities) -> str:
    within = ""
    if entities.duration is not None:
        within = f" within your {entities.duration.value_in_days} day timeline"
    return (
        "Perfect! We have experienced contractors and builders who can handle "
        f"everything from structural work to turnkey construction{within}."
    )


def _consultation_text(entities: ExtractedEntities) -> str:
    return (
        "I'd be happy to help you get expert advice! Our free consultation service "
        "connects you with professionals who can provide personalized guidance for "
        "your project."
    )


def _property_text(entities: ExtractedEntities) -> str:
    where = f" in {entities.location.text}" if entities.location is not None else ""
    budget = ""
    if entities.amount is not None:
        budget = f" within your budget of {format_rupees(entities.amount.value_in_base_units)}"
    return (
        f"Looking for properties? I can help you find the perfect property{where}{budget}. "
        "Let me know your specific requirements!"
    )


def _general_text(entities: ExtractedEntities) -> str:
    return (
        "Thanks for your message! I can help you with property search, professional "
        "services, cost estimation, and connecting you with verified vendors. What "
        "specific aspect of your real estate journey can I assist you with?"
    )


@dataclass(frozen=True)
class ResponseTemplate:
    """Text builder plus the ordered actions attached for one intent."""
    build_text: Callable[[ExtractedEntities], str]
    actions: tuple[ChatAction, ...]


TEMPLATES: dict[Intent, ResponseTemplate] = {
    Intent.BUDGET_INQUIRY: ResponseTemplate(_budget_text, (
        ChatAction(kind=ActionKind.SCHEDULE_CONSULTATION, label="Get Cost Estimation"),
        ChatAction(kind=ActionKind.VIEW_SERVICES, label="View Pricing Services"),
    )),
    Intent.DESIGN_SERVICES: ResponseTemplate(_design_text, (
        ChatAction(kind=ActionKind.SCHEDULE_CONSULTATION, label="Design Consultation"),
        ChatAction(kind=ActionKind.VIEW_SERVICES, label="View Design Services"),
    )),
    Intent.CONSTRUCTION_SERVICES: ResponseTemplate(_construction_text, (
        ChatAction(kind=ActionKind.SCHEDULE_CONSULTATION, label="Construction Consultation"),
        ChatAction(kind=ActionKind.VIEW_SERVICES, label="Find Contractors"),
    )),
    Intent.CONSULTATION_REQUEST: ResponseTemplate(_consultation_text, (
        ChatAction(kind=ActionKind.SCHEDULE_CONSULTATION, label="Schedule Free Consultation"),
        ChatAction(kind=ActionKind.SUBMIT_REQUIREMENTS, label="Submit Project Details"),
    )),
    Intent.PROPERTY_INQUIRY: ResponseTemplate(_property_text, (
        ChatAction(kind=ActionKind.SUBMIT_REQUIREMENTS, label="Submit Property Requirements"),
        ChatAction(kind=ActionKind.VIEW_SERVICES, label="Browse Properties"),
    )),
    Intent.GENERAL: ResponseTemplate(_general_text, GENERAL_ACTIONS),
}


def needs_lead_capture(context: ConversationContext, is_authenticated: bool) -> bool:
    # lead_captured is read here but nothing in the engine sets it yet,
    # so guests see the suffix on every reply.
    return not is_authenticated and not context.lead_captured


def synthesize(
    intent: Intent,
    entities: ExtractedEntities,
    context: ConversationContext,
    is_authenticated: bool,
) -> SynthesizedReply:
    """Build the reply text and actions for one classified turn."""
    template = TEMPLATES.get(intent, TEMPLATES[Intent.GENERAL])
    text = template.build_text(entities)
    if needs_lead_capture(context, is_authenticated):
        text = f"{text}\n\n{LEAD_CAPTURE_SUFFIX}"
    logger.debug("Synthesized %s reply with %d action(s)", intent.value, len(template.actions))
    return SynthesizedReply(text=text, actions=template.actions)

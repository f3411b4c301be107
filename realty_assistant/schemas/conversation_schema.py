"""Chat transcript and turn-log schemas."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ActionKind(str, Enum):
    SCHEDULE_CONSULTATION = "schedule_consultation"
    VIEW_SERVICES = "view_services"
    SUBMIT_REQUIREMENTS = "submit_requirements"


class Intent(str, Enum):
    """Closed taxonomy of user intents, derived fresh every turn."""

    BUDGET_INQUIRY = "budget_inquiry"
    DESIGN_SERVICES = "design_services"
    CONSTRUCTION_SERVICES = "construction_services"
    CONSULTATION_REQUEST = "consultation_request"
    PROPERTY_INQUIRY = "property_inquiry"
    GENERAL = "general"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_message_id() -> str:
    return f"MSG-{uuid.uuid4().hex[:12]}"


class ChatAction(BaseModel):
    """A suggested follow-up the user can pick."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    label: str
    payload: Optional[dict[str, Any]] = None


class ChatMessage(BaseModel):
    """A single transcript entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_message_id)
    role: Role
    text: str
    created_at: datetime = Field(default_factory=_utcnow)
    actions: tuple[ChatAction, ...] = ()


class Reply(BaseModel):
    """What the presentation layer receives for one user turn."""

    model_config = ConfigDict(frozen=True)

    reply_text: str
    actions: tuple[ChatAction, ...]


class TurnRecord(BaseModel):
    """Summary of a completed turn handed to the persistence collaborator."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    user_text: str
    reply_text: str
    classified_intent: Intent
    timestamp: datetime = Field(default_factory=_utcnow)
    extracted_entities: dict[str, Any] = Field(default_factory=dict)

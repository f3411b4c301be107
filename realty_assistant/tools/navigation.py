"""
Action dispatch table.

Maps each suggested-action kind to the surface the host app should open.
The engine only emits kinds and labels; resolving them to a target is
the single side effect of picking an action.
"""

import logging
from typing import Union

from realty_assistant.config import settings
from realty_assistant.schemas.conversation_schema import ActionKind

logger = logging.getLogger(__name__)

_nav = settings.navigation

NAVIGATION_TARGETS: dict[ActionKind, str] = {
    ActionKind.SCHEDULE_CONSULTATION: _nav.consultation_url,
    ActionKind.VIEW_SERVICES: _nav.services_url,
    ActionKind.SUBMIT_REQUIREMENTS: _nav.requirements_url,
}


class UnknownActionError(Exception):
    """Raised when an action kind has no navigation target."""


def resolve_target(kind: Union[ActionKind, str]) -> str:
    """Return the navigation target for an action kind."""
    try:
        action_kind = ActionKind(kind)
    except ValueError:
        raise UnknownActionError(
            f"No navigation target for action '{kind}'. "
            f"Known actions: {[k.value for k in NAVIGATION_TARGETS]}"
        ) from None
    return NAVIGATION_TARGETS[action_kind]

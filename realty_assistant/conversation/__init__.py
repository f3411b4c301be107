from realty_assistant.conversation.context_store import add_interest, apply_entities
from realty_assistant.conversation.entity_extractor import extract
from realty_assistant.conversation.intent_classifier import IntentClassifier, classify
from realty_assistant.conversation.response_synthesizer import SynthesizedReply, synthesize
from realty_assistant.conversation.session_manager import (
    ChatSession,
    SessionClosedError,
    SessionManager,
    TurnInProgressError,
    UnknownSessionError,
)

__all__ = [
    "ChatSession",
    "SessionManager",
    "SessionClosedError",
    "TurnInProgressError",
    "UnknownSessionError",
    "IntentClassifier",
    "SynthesizedReply",
    "extract",
    "classify",
    "apply_entities",
    "add_interest",
    "synthesize",
]

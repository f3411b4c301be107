"""
Centralized configuration with environment variable overrides.

Greeting copy, pacing, navigation targets, turn-log location and report
targets are configurable here. Nothing is hardcoded in the engine modules.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag from an env var."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class AssistantConfig:
    """Assistant persona and pacing."""

    name: str = os.getenv("ASSISTANT_NAME", "AI Assistant")
    greeting: str = os.getenv(
        "ASSISTANT_GREETING", "Hi! How can I help you with your real estate needs?"
    )
    services_greeting: str = os.getenv(
        "ASSISTANT_SERVICES_GREETING",
        "Hi! Looking for design, construction or consultation services? I can help.",
    )
    properties_greeting: str = os.getenv(
        "ASSISTANT_PROPERTIES_GREETING",
        "Hi! Tell me where and what you are looking to buy and I'll point you in the right direction.",
    )
    thinking_delay_sec: float = _safe_float("THINKING_DELAY_SEC", "1.0")


@dataclass(frozen=True)
class NavigationConfig:
    """Navigation targets opened when the user picks a suggested action."""

    consultation_url: str = os.getenv("CONSULTATION_URL", "/free-consultation")
    services_url: str = os.getenv("SERVICES_URL", "/services")
    requirements_url: str = os.getenv("REQUIREMENTS_URL", "/requirements-funnel")


@dataclass(frozen=True)
class PersistenceConfig:
    """Best-effort turn log settings."""

    enabled: bool = _safe_bool("TURN_LOG_ENABLED", "true")
    turn_log_path: str = os.getenv("TURN_LOG_PATH", "logs/chat_turns.jsonl")


@dataclass(frozen=True)
class ReportConfig:
    """Targets used when formatting the turn-log analytics report."""

    target_entity_capture_rate: float = _safe_float("TARGET_ENTITY_CAPTURE_RATE", "0.50")
    max_fallback_rate: float = _safe_float("MAX_FALLBACK_RATE", "0.30")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "realty-assistant")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.assistant.thinking_delay_sec < 0:
        raise ValueError(
            f"THINKING_DELAY_SEC must be >= 0, got {config.assistant.thinking_delay_sec}"
        )
    if not config.assistant.greeting.strip():
        raise ValueError("ASSISTANT_GREETING must not be empty")

    for url_name, url in [
        ("CONSULTATION_URL", config.navigation.consultation_url),
        ("SERVICES_URL", config.navigation.services_url),
        ("REQUIREMENTS_URL", config.navigation.requirements_url),
    ]:
        if not url.strip():
            raise ValueError(f"{url_name} must not be empty")

    if config.persistence.enabled and not config.persistence.turn_log_path.strip():
        raise ValueError("TURN_LOG_PATH must be set when TURN_LOG_ENABLED is on")

    for rate_name, rate_value in [
        ("TARGET_ENTITY_CAPTURE_RATE", config.report.target_entity_capture_rate),
        ("MAX_FALLBACK_RATE", config.report.max_fallback_rate),
    ]:
        if not 0.0 <= rate_value <= 1.0:
            raise ValueError(f"{rate_name} must be between 0.0 and 1.0, got {rate_value}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()

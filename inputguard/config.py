# config.py
# Centralized configuration for nest-inputguard
# Version: 1.0.0

import os
import logging
from dataclasses import dataclass
from typing import List, Tuple

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def get_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


def get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"⚠️ {name} is not an integer, using default {default}")
        return default


def get_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# ============================================================================
# DENYLISTS
# ============================================================================
DEFAULT_DISPOSABLE_EMAIL_DOMAINS = ["10minutemail.com", "guerrillamail.com", "tempmail.org"]
DEFAULT_WEAK_PASSWORD_SUBSTRINGS = ["123456", "qwerty", "password", "admin", "login"]
DEFAULT_FORBIDDEN_NAME_WORDS = ["admin", "system", "null", "undefined"]

# ============================================================================
# PASSWORD POLICY
# ============================================================================
# One minimum for every flow, registration included.
DEFAULT_PASSWORD_MIN_LENGTH = 12
DEFAULT_PASSWORD_MAX_LENGTH = 128

# ============================================================================
# RATE LIMITING
# ============================================================================
DEFAULT_RATE_LIMIT_MESSAGES_PER_HOUR = 100
DEFAULT_RATE_LIMIT_INVITATIONS_PER_DAY = 2
DEFAULT_RATE_LIMIT_KEY_PREFIX = "rate_limit_"

# ============================================================================
# STORAGE / SECURITY EVENTS
# ============================================================================
DEFAULT_SECURITY_EVENT_HISTORY = 1000


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment used to build rule sets and limiters"""
    disposable_email_domains: Tuple[str, ...] = tuple(DEFAULT_DISPOSABLE_EMAIL_DOMAINS)
    weak_password_substrings: Tuple[str, ...] = tuple(DEFAULT_WEAK_PASSWORD_SUBSTRINGS)
    forbidden_name_words: Tuple[str, ...] = tuple(DEFAULT_FORBIDDEN_NAME_WORDS)
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH
    password_max_length: int = DEFAULT_PASSWORD_MAX_LENGTH
    rate_limit_messages_per_hour: int = DEFAULT_RATE_LIMIT_MESSAGES_PER_HOUR
    rate_limit_invitations_per_day: int = DEFAULT_RATE_LIMIT_INVITATIONS_PER_DAY
    rate_limit_key_prefix: str = DEFAULT_RATE_LIMIT_KEY_PREFIX
    # base64 (urlsafe) encoded 32-byte key; empty means a per-process random key
    storage_encryption_key: str = ""
    security_event_history: int = DEFAULT_SECURITY_EVENT_HISTORY


def load_settings() -> Settings:
    """Read the current environment (and .env) into a frozen Settings object"""
    settings = Settings(
        disposable_email_domains=tuple(
            d.lower() for d in get_list("DISPOSABLE_EMAIL_DOMAINS", DEFAULT_DISPOSABLE_EMAIL_DOMAINS)
        ),
        weak_password_substrings=tuple(
            get_list("WEAK_PASSWORD_SUBSTRINGS", DEFAULT_WEAK_PASSWORD_SUBSTRINGS)
        ),
        forbidden_name_words=tuple(
            w.lower() for w in get_list("FORBIDDEN_NAME_WORDS", DEFAULT_FORBIDDEN_NAME_WORDS)
        ),
        password_min_length=get_int("PASSWORD_MIN_LENGTH", DEFAULT_PASSWORD_MIN_LENGTH),
        password_max_length=get_int("PASSWORD_MAX_LENGTH", DEFAULT_PASSWORD_MAX_LENGTH),
        rate_limit_messages_per_hour=get_int(
            "RATE_LIMIT_MESSAGES_PER_HOUR", DEFAULT_RATE_LIMIT_MESSAGES_PER_HOUR
        ),
        rate_limit_invitations_per_day=get_int(
            "RATE_LIMIT_INVITATIONS_PER_DAY", DEFAULT_RATE_LIMIT_INVITATIONS_PER_DAY
        ),
        rate_limit_key_prefix=os.getenv("RATE_LIMIT_KEY_PREFIX", DEFAULT_RATE_LIMIT_KEY_PREFIX),
        storage_encryption_key=os.getenv("STORAGE_ENCRYPTION_KEY", ""),
        security_event_history=get_int("SECURITY_EVENT_HISTORY", DEFAULT_SECURITY_EVENT_HISTORY),
    )
    validate_config(settings)
    return settings


# ============================================================================
# VALIDATION
# ============================================================================
def validate_config(settings: Settings) -> bool:
    """Check settings for values that would make the rules unusable"""
    from .exceptions import ConfigurationError

    errors = []

    if settings.password_min_length < 1:
        errors.append("PASSWORD_MIN_LENGTH must be positive")

    if settings.password_max_length < settings.password_min_length:
        errors.append("PASSWORD_MAX_LENGTH is smaller than PASSWORD_MIN_LENGTH")

    if settings.rate_limit_messages_per_hour < 0 or settings.rate_limit_invitations_per_day < 0:
        errors.append("Rate limits cannot be negative")

    if errors:
        for error in errors:
            logger.error(f"❌ Config: {error}")
        raise ConfigurationError("; ".join(errors), context={"errors": errors})

    if settings.password_min_length < DEFAULT_PASSWORD_MIN_LENGTH:
        logger.warning(
            f"⚠️ PASSWORD_MIN_LENGTH={settings.password_min_length} "
            f"is below the recommended {DEFAULT_PASSWORD_MIN_LENGTH}"
        )

    return True

"""
🔐 Secret Manager - passwords, tokens and security events
v1.1 - passlib password hashing, random helpers and a bounded security event log
"""
import hashlib
import hmac
import logging
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Any, Dict, List, Optional

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from .config import DEFAULT_SECURITY_EVENT_HISTORY, get_int

logger = logging.getLogger("INPUTGUARD_SECURITY")

# =============================================================================
# CONSTANTS
# =============================================================================

PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 32

pwd_context = CryptContext(
    schemes=["pbkdf2_sha512"],
    deprecated="auto",
    pbkdf2_sha512__default_rounds=PBKDF2_ITERATIONS,
    pbkdf2_sha512__salt_size=SALT_BYTES,
)

SESSION_TIMEOUT = timedelta(minutes=30)
REFRESH_TOKEN_TIMEOUT = timedelta(days=7)

SEVERITY_LEVELS = {
    "LOW": logging.INFO,
    "MEDIUM": logging.WARNING,
    "HIGH": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class SessionTokens:
    access_token: str
    refresh_token: str
    expires_at: datetime
    refresh_expires_at: datetime


@dataclass
class SecurityEvent:
    """Represents a security-relevant event"""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: str = "unknown"
    severity: str = "MEDIUM"  # LOW, MEDIUM, HIGH, CRITICAL
    user_id: Optional[str] = None
    action: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to dict for logging"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type,
            "severity": self.severity,
            "user_id": SecretManager.anonymize_personal_data(self.user_id) if self.user_id else None,
            "action": self.action,
            "details": self.details,
        }

# =============================================================================
# SECURITY UTILITIES
# =============================================================================


class SecretManager:
    """Password hashing, random tokens and masking helpers"""

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password with PBKDF2-HMAC-SHA512

        Returns:
            Modular crypt string, e.g. "$pbkdf2-sha512$100000$<salt>$<checksum>"
        """
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(password: str, hashed_password: str) -> bool:
        """Check a password against hash_password output"""
        try:
            return pwd_context.verify(password, hashed_password)
        except (UnknownHashError, ValueError):
            logger.warning("⚠️ Stored password hash has an unknown or malformed format")
            return False

    @staticmethod
    def needs_rehash(hashed_password: str) -> bool:
        """True when the hash was made with weaker settings than the current policy"""
        return pwd_context.needs_update(hashed_password)

    @staticmethod
    def generate_secure_token(length: int = 32) -> str:
        """Hex token from `length` random bytes (invitation links etc.)"""
        return secrets.token_hex(length)

    @staticmethod
    def generate_csrf_token() -> str:
        return secrets.token_urlsafe(32)

    @staticmethod
    def validate_csrf_token(token: Optional[str], expected_token: Optional[str]) -> bool:
        if not token or not expected_token:
            return False
        return hmac.compare_digest(token.encode("utf-8"), expected_token.encode("utf-8"))

    @staticmethod
    def generate_session_tokens(now: Optional[datetime] = None) -> SessionTokens:
        now = now or datetime.now(timezone.utc)
        return SessionTokens(
            access_token=SecretManager.generate_secure_token(32),
            refresh_token=SecretManager.generate_secure_token(64),
            expires_at=now + SESSION_TIMEOUT,
            refresh_expires_at=now + REFRESH_TOKEN_TIMEOUT,
        )

    @staticmethod
    def hash_sensitive_data(data: str, salt: Optional[str] = None) -> str:
        """One-way SHA256 for comparisons (not for passwords)"""
        if salt:
            data = salt + data
        return hashlib.sha256(data.encode("utf-8")).hexdigest()

    @staticmethod
    def anonymize_personal_data(data: str) -> str:
        """Keep first and last character, e.g. "jensen" -> "j****n" (GDPR logs)"""
        if len(data) <= 2:
            return "***"
        return data[0] + "*" * (len(data) - 2) + data[-1]

    @staticmethod
    def generate_audit_hash(data: str, previous_hash: str = "", timestamp: Optional[float] = None) -> str:
        """Chain hash for audit entries"""
        if timestamp is None:
            timestamp = time.time()
        combined = f"{previous_hash}{data}{int(timestamp * 1000)}"
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()

# =============================================================================
# SECURITY EVENT LOG
# =============================================================================


class SecurityEventLog:
    """Bounded in-memory history of security events"""

    def __init__(self, max_events: int = DEFAULT_SECURITY_EVENT_HISTORY):
        self.events: List[SecurityEvent] = []
        self._max_events = max_events
        self._lock = RLock()

    def log_event(self, event: SecurityEvent) -> None:
        with self._lock:
            self.events.append(event)

            # Keep only last N events
            if len(self.events) > self._max_events:
                self.events = self.events[-self._max_events:]

        log_level = SEVERITY_LEVELS.get(event.severity, logging.INFO)
        logger.log(log_level, f"🔐 [{event.severity}] {event.event_type}: {event.action}")
        if event.severity in ("HIGH", "CRITICAL"):
            logger.critical(f"🚨 Critical security event: {event.to_dict()}")

    def get_events(self, hours: int = 24) -> List[Dict]:
        """Get security events from last N hours"""
        with self._lock:
            cutoff = datetime.now(timezone.utc) - timedelta(hours=hours)
            return [e.to_dict() for e in self.events if e.timestamp >= cutoff]

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "total_events": len(self.events),
                "critical_count": sum(1 for e in self.events if e.severity == "CRITICAL"),
                "high_count": sum(1 for e in self.events if e.severity == "HIGH"),
                "medium_count": sum(1 for e in self.events if e.severity == "MEDIUM"),
            }


security_events = SecurityEventLog(get_int("SECURITY_EVENT_HISTORY", DEFAULT_SECURITY_EVENT_HISTORY))


def log_security_event(event_type: str, action: str = "", severity: str = "MEDIUM",
                       user_id: Optional[str] = None, **details) -> SecurityEvent:
    """Record a security event on the shared log"""
    event = SecurityEvent(
        event_type=event_type,
        severity=severity.upper(),
        user_id=user_id,
        action=action,
        details=details,
    )
    security_events.log_event(event)
    return event

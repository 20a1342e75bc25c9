"""
nest-inputguard
===============

Input validation, sanitization and rate limiting for the leasing platform.
"""

from .engine import (
    ValidationEngine,
    input_validator,
    is_valid_danish_cpr,
    is_valid_email_format,
    is_valid_phone_number,
    is_valid_property_address,
    sanitize_input,
    validate_address,
    validate_amount,
    validate_cpr,
    validate_email,
    validate_name,
    validate_password,
    validate_phone,
    validate_url,
)
from .exceptions import (
    ConfigurationError,
    FormValidationError,
    InputGuardError,
    InvalidInputError,
    RateLimitError,
    RequiredFieldError,
    SecurityViolationError,
    StorageError,
    ValidationError,
    handle_exception,
)
from .password_strength import PasswordStrength, get_password_strength
from .rate_limiter import RateLimiter
from .result import FormValidationResult, ValidationResult
from .rules import RuleType, ValidationRuleSet, build_rule_set
from .sanitizer import escape_html, sanitize_html, sanitize_text
from .schemas import FieldOptions, FieldSchema, FormSchema
from .secret_manager import SecretManager, SecurityEvent, log_security_event, security_events
from .security_validator import SecurityValidationResult, SecurityValidator
from .storage import EncryptedStore, InMemoryStore, KeyValueStore

__version__ = "1.0.0"

__all__ = [
    "ValidationEngine",
    "input_validator",
    "validate_email",
    "validate_password",
    "validate_name",
    "validate_phone",
    "validate_cpr",
    "validate_address",
    "validate_amount",
    "validate_url",
    "is_valid_email_format",
    "is_valid_phone_number",
    "is_valid_danish_cpr",
    "is_valid_property_address",
    "sanitize_input",
    "sanitize_html",
    "sanitize_text",
    "escape_html",
    "RuleType",
    "ValidationRuleSet",
    "build_rule_set",
    "ValidationResult",
    "FormValidationResult",
    "FieldOptions",
    "FieldSchema",
    "FormSchema",
    "SecurityValidator",
    "SecurityValidationResult",
    "RateLimiter",
    "KeyValueStore",
    "InMemoryStore",
    "EncryptedStore",
    "SecretManager",
    "SecurityEvent",
    "security_events",
    "log_security_event",
    "PasswordStrength",
    "get_password_strength",
    "InputGuardError",
    "ValidationError",
    "RequiredFieldError",
    "InvalidInputError",
    "FormValidationError",
    "SecurityViolationError",
    "RateLimitError",
    "StorageError",
    "ConfigurationError",
    "handle_exception",
]

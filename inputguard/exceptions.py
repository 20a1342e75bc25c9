"""
Custom exception classes for nest-inputguard.
Provides standardized error handling for the opt-in raising APIs.

Plain validation never raises: results carry errors. These exceptions are used
by ``validate_or_raise``, ``RateLimiter.enforce``, the encrypted store and the
configuration loader.
"""

from enum import Enum
from typing import Dict, List, Optional

from . import messages


class ErrorCategory(str, Enum):
    """Category used when logging or serializing an error"""
    VALIDATION = "validation"
    SECURITY = "security"
    RATE_LIMIT = "rate_limit"
    STORAGE = "storage"
    CONFIGURATION = "configuration"


class InputGuardError(Exception):
    """Base exception for all inputguard errors."""

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, error_code: str = None, context: dict = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        super().__init__(self.message)

    def to_user_message(self) -> str:
        """Return a user-friendly error message."""
        return self.message

    def to_dict(self) -> Dict:
        return {
            "error": self.to_user_message(),
            "code": self.error_code,
            "category": self.category.value,
        }


# ============================================================================
# VALIDATION ERRORS
# ============================================================================

class ValidationError(InputGuardError):
    """Base exception for input validation errors."""

    def __init__(self, message: str, errors: Optional[List[str]] = None,
                 error_code: str = None, context: dict = None):
        self.errors = list(errors) if errors else [message]
        super().__init__(message, error_code=error_code, context=context)


class RequiredFieldError(ValidationError):
    """Raised when a mandatory value is missing."""

    def to_user_message(self) -> str:
        return messages.REQUIRED_FIELDS_MISSING


class InvalidInputError(ValidationError):
    """Raised when input fails a structural or policy rule."""

    def to_user_message(self) -> str:
        return f"{messages.INVALID_INPUT}: {'; '.join(self.errors)}"


class FormValidationError(ValidationError):
    """Raised when one or more form fields fail validation."""

    def __init__(self, field_errors: Dict[str, List[str]], context: dict = None):
        self.field_errors = field_errors
        flat = [f"{field}: {err}" for field, errs in field_errors.items() for err in errs]
        super().__init__(messages.DATA_VALIDATION_FAILED, errors=flat, context=context)

    def to_user_message(self) -> str:
        return messages.DATA_VALIDATION_FAILED


class SecurityViolationError(ValidationError):
    """Raised when an attack heuristic matched. Never echoes the input."""

    category = ErrorCategory.SECURITY

    def to_user_message(self) -> str:
        return messages.SECURITY_PATTERN_DETECTED


# ============================================================================
# RATE LIMIT ERRORS
# ============================================================================

class RateLimitError(InputGuardError):
    """Raised when rate limit is exceeded."""

    category = ErrorCategory.RATE_LIMIT

    def to_user_message(self) -> str:
        return messages.TOO_MANY_REQUESTS


# ============================================================================
# STORAGE / CONFIG ERRORS
# ============================================================================

class StorageError(InputGuardError):
    """Raised when a store cannot encode or decode a value."""

    category = ErrorCategory.STORAGE

    def to_user_message(self) -> str:
        return messages.INTERNAL_ERROR


class ConfigurationError(InputGuardError):
    """Raised when settings are inconsistent."""

    category = ErrorCategory.CONFIGURATION

    def to_user_message(self) -> str:
        return messages.INTERNAL_ERROR


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def handle_exception(exc: Exception) -> str:
    """
    Convert any exception to a user-friendly message.

    Args:
        exc: The exception to handle

    Returns:
        Message that is safe to show to the end user
    """
    if isinstance(exc, InputGuardError):
        return exc.to_user_message()
    return messages.INTERNAL_ERROR

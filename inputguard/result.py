"""
Validation result objects.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ValidationResult:
    """Result of a single validation call"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    sanitized: Optional[str] = None

    def __bool__(self) -> bool:
        return self.is_valid

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def error_message(self) -> str:
        """Returns formatted error message"""
        if not self.errors:
            return ""
        return "❌ " + "\n❌ ".join(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "sanitized": self.sanitized,
        }


@dataclass
class FormValidationResult:
    """Result of validating every field declared in a form schema"""
    is_valid: bool
    errors: Dict[str, List[str]] = field(default_factory=dict)
    warnings: Dict[str, List[str]] = field(default_factory=dict)
    sanitized: Dict[str, Optional[str]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.is_valid

    def error_message(self) -> str:
        if not self.errors:
            return ""
        return "\n".join(
            f"❌ {name}: {error}" for name, errors in self.errors.items() for error in errors
        )

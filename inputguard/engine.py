"""
Validation Engine
=================

Validates and sanitizes untrusted form input for the leasing flows
(registration, tenant profile, invitations, escrow amounts).

Every call goes through the same stages:

1. required check
2. XSS scan (skipped when HTML is explicitly allowed)
3. SQL-injection scan
4. type-specific structural rules, then caller-supplied extras
5. sanitization

Attack heuristics stop the call immediately. ``validate`` never raises; use
``validate_or_raise`` when an exception is more convenient.

Usage:
    from inputguard import input_validator, RuleType

    result = input_validator.validate("Foo.Bar@Example.COM", RuleType.EMAIL)
    if result:
        save(result.sanitized)
"""

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Union

from pydantic import ValidationError as SchemaError

from . import messages
from .exceptions import (
    FormValidationError,
    InvalidInputError,
    RequiredFieldError,
    SecurityViolationError,
)
from .result import FormValidationResult, ValidationResult
from .rules import REPEATED_CHAR_PATTERN, SPECIAL_CHARS_PATTERN, RuleType, ValidationRuleSet, build_rule_set
from .sanitizer import sanitize, sanitize_text
from .schemas import FieldSchema, FormSchema
from .security_validator import SecurityValidator

logger = logging.getLogger(__name__)

InputValue = Union[str, int, float, None]
CustomValidator = Callable[[str], Optional[List[str]]]


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class ValidationEngine:
    """
    Stateless validator bound to an immutable rule set.

    Build a second engine with ``rules.with_overrides(...)`` for a stricter
    deployment instead of mutating the default one.
    """

    def __init__(self, rules: Optional[ValidationRuleSet] = None):
        self.rules = rules if rules is not None else build_rule_set()
        self._checks: Dict[RuleType, Callable[[str, ValidationResult], None]] = {
            RuleType.EMAIL: self._check_email,
            RuleType.PASSWORD: self._check_password,
            RuleType.NAME: self._check_name,
            RuleType.PHONE: self._check_phone,
            RuleType.NATIONAL_ID: self._check_national_id,
            RuleType.ADDRESS: self._check_address,
            RuleType.AMOUNT: self._check_amount,
            RuleType.URL: self._check_url,
        }

    # =========================================================================
    # SINGLE VALUE
    # =========================================================================

    def validate(
        self,
        value: InputValue,
        rule_type: Union[RuleType, str],
        *,
        required: bool = False,
        allow_html: bool = False,
        custom_pattern: Union[str, Pattern, None] = None,
        custom_validator: Optional[CustomValidator] = None,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
    ) -> ValidationResult:
        """
        Validate one value against a rule type.

        Args:
            value: Raw input; numbers are converted with str()
            rule_type: RuleType member or its name ("EMAIL", "CPR", ...)
            required: Empty input is an error instead of a pass
            allow_html: Skip the XSS scan and HTML escaping
            custom_pattern: Regex the whole value must match, after builtin rules
            custom_validator: Callable returning extra error messages
            min_length / max_length: Extra length bounds

        Returns:
            ValidationResult; ``sanitized`` is "" for empty optional input and
            None when the call was stopped before sanitization
        """
        result = ValidationResult(is_valid=True)

        if _is_empty(value):
            if required:
                result.add_error(messages.REQUIRED)
            else:
                result.sanitized = ""
            return result

        text = value if isinstance(value, str) else str(value)

        security = SecurityValidator.validate(text, allow_html=allow_html)
        if not security:
            result.add_error(messages.SECURITY_PATTERN_DETECTED)
            return result

        resolved = RuleType.parse(rule_type)
        if resolved is None:
            logger.error(f"❌ Unknown rule type {rule_type!r}, skipping structural checks")
            result.sanitized = sanitize(text, None, self.rules, allow_html)
            return result

        self._checks[resolved](text, result)
        self._apply_caller_checks(text, result, custom_pattern, custom_validator, min_length, max_length)

        result.sanitized = sanitize(text, resolved, self.rules, allow_html)
        return result

    def sanitize(self, value: str, rule_type: Union[RuleType, str, None], allow_html: bool = False) -> str:
        """Sanitize without validating (idempotent)"""
        return sanitize(value, RuleType.parse(rule_type), self.rules, allow_html)

    def validate_or_raise(self, value: InputValue, rule_type: Union[RuleType, str], **options) -> str:
        """
        Validates value or raises exception

        Returns:
            Sanitized value

        Raises:
            RequiredFieldError: Value missing while required
            SecurityViolationError: Attack heuristic matched
            InvalidInputError: Any other rule failed
        """
        result = self.validate(value, rule_type, **options)
        if result.is_valid:
            return result.sanitized

        if _is_empty(value):
            raise RequiredFieldError(messages.REQUIRED, errors=result.errors)
        if messages.SECURITY_PATTERN_DETECTED in result.errors:
            raise SecurityViolationError(messages.SECURITY_PATTERN_DETECTED, errors=result.errors)
        raise InvalidInputError("; ".join(result.errors), errors=result.errors,
                                context={"rule_type": str(rule_type)})

    # =========================================================================
    # FORMS
    # =========================================================================

    def validate_form(
        self,
        values: Mapping[str, Any],
        schema: Union[FormSchema, Mapping[str, Union[FieldSchema, Mapping[str, Any]]]],
    ) -> FormValidationResult:
        """
        Validate every declared field independently.

        ``errors`` only contains failing fields, ``sanitized`` contains every
        declared field. Keys in ``values`` that the schema does not declare
        are ignored.
        """
        entries = schema.field_map if isinstance(schema, FormSchema) else schema
        result = FormValidationResult(is_valid=True)

        for field_name, declaration in entries.items():
            try:
                field_schema = (
                    declaration if isinstance(declaration, FieldSchema)
                    else FieldSchema.model_validate(declaration)
                )
            except SchemaError as e:
                logger.error(f"❌ Invalid schema for field '{field_name}': {e.error_count()} error(s)")
                result.errors[field_name] = [messages.INVALID_FIELD_SCHEMA]
                result.sanitized[field_name] = None
                result.is_valid = False
                continue

            options = field_schema.options
            outcome = self.validate(
                values.get(field_name),
                field_schema.type,
                required=field_schema.required,
                allow_html=options.allow_html,
                custom_pattern=options.custom_pattern,
                custom_validator=options.custom_validator,
                min_length=options.min_length,
                max_length=options.max_length,
            )

            if not outcome.is_valid:
                result.errors[field_name] = outcome.errors
                result.is_valid = False
            if outcome.warnings:
                result.warnings[field_name] = outcome.warnings
            result.sanitized[field_name] = outcome.sanitized

        return result

    def validate_form_or_raise(self, values: Mapping[str, Any], schema) -> Dict[str, Optional[str]]:
        """Returns the sanitized payload or raises FormValidationError"""
        result = self.validate_form(values, schema)
        if not result.is_valid:
            raise FormValidationError(result.errors)
        return result.sanitized

    # =========================================================================
    # CALLER EXTENSIONS
    # =========================================================================

    def _apply_caller_checks(
        self,
        text: str,
        result: ValidationResult,
        custom_pattern: Union[str, Pattern, None],
        custom_validator: Optional[CustomValidator],
        min_length: Optional[int],
        max_length: Optional[int],
    ) -> None:
        if min_length is not None and len(text) < min_length:
            result.add_error(messages.MIN_LENGTH.format(min_length=min_length))

        if max_length is not None and len(text) > max_length:
            result.add_error(messages.MAX_LENGTH.format(max_length=max_length))

        if custom_pattern is not None:
            try:
                if not re.fullmatch(custom_pattern, text):
                    result.add_error(messages.CUSTOM_PATTERN_MISMATCH)
            except (re.error, TypeError) as e:
                logger.error(f"❌ Invalid custom pattern: {e}")
                result.add_error(messages.CUSTOM_VALIDATOR_FAILED)

        if custom_validator is not None:
            try:
                extra_errors = custom_validator(text) or []
            except Exception as e:
                logger.error(f"❌ Custom validator {getattr(custom_validator, '__name__', custom_validator)!r} failed: {e}")
                result.add_error(messages.CUSTOM_VALIDATOR_FAILED)
                return
            for error in extra_errors:
                result.add_error(str(error))

    # =========================================================================
    # TYPE-SPECIFIC RULES
    # =========================================================================

    def _check_email(self, email: str, result: ValidationResult) -> None:
        rule = self.rules.email

        if len(email) < rule.min_length:
            result.add_error(messages.EMAIL_TOO_SHORT.format(min_length=rule.min_length))

        if len(email) > rule.max_length:
            result.add_error(messages.EMAIL_TOO_LONG.format(max_length=rule.max_length))

        if not rule.pattern.fullmatch(email):
            result.add_error(messages.EMAIL_INVALID_FORMAT)

        _, at, domain = email.rpartition("@")
        if at and domain.strip().lower() in rule.disposable_domains:
            result.add_warning(messages.EMAIL_DISPOSABLE)

    def _check_password(self, password: str, result: ValidationResult) -> None:
        rule = self.rules.password

        if len(password) < rule.min_length:
            result.add_error(messages.PASSWORD_TOO_SHORT.format(min_length=rule.min_length))

        if len(password) > rule.max_length:
            result.add_error(messages.PASSWORD_TOO_LONG.format(max_length=rule.max_length))

        if rule.require_uppercase and not re.search(r"[A-Z]", password):
            result.add_error(messages.PASSWORD_NEEDS_UPPERCASE)

        if rule.require_lowercase and not re.search(r"[a-z]", password):
            result.add_error(messages.PASSWORD_NEEDS_LOWERCASE)

        if rule.require_digits and not re.search(r"[0-9]", password):
            result.add_error(messages.PASSWORD_NEEDS_DIGIT)

        if rule.require_special_chars and not SPECIAL_CHARS_PATTERN.search(password):
            result.add_error(messages.PASSWORD_NEEDS_SPECIAL)

        lowered = password.lower()
        repeated = rule.forbid_repeated_chars and REPEATED_CHAR_PATTERN.search(password)
        weak = any(substring.lower() in lowered for substring in rule.forbidden_substrings)
        if repeated or weak:
            result.add_error(messages.PASSWORD_FORBIDDEN_PATTERN)

    def _check_name(self, name: str, result: ValidationResult) -> None:
        rule = self.rules.name

        if len(name) < rule.min_length:
            result.add_error(messages.NAME_TOO_SHORT.format(min_length=rule.min_length))

        if len(name) > rule.max_length:
            result.add_error(messages.NAME_TOO_LONG.format(max_length=rule.max_length))

        if not rule.pattern.fullmatch(name):
            result.add_error(messages.NAME_INVALID_CHARS)

        lowered = name.lower()
        if any(word in lowered for word in rule.forbidden_words):
            result.add_error(messages.NAME_FORBIDDEN_WORD)

    def _check_phone(self, phone: str, result: ValidationResult) -> None:
        rule = self.rules.phone
        cleaned = rule.cleanup.sub("", phone)

        if not rule.pattern.fullmatch(cleaned):
            result.add_error(messages.PHONE_INVALID_FORMAT)

    def _check_national_id(self, cpr: str, result: ValidationResult) -> None:
        """Shape plus day/month bounds; no calendar or checksum validation"""
        rule = self.rules.national_id
        cleaned = rule.cleanup.sub("", cpr)

        if not rule.pattern.fullmatch(cleaned):
            result.add_error(messages.CPR_INVALID_FORMAT)
            return

        digits = cleaned.replace("-", "")
        day = int(digits[0:2])
        month = int(digits[2:4])

        if not 1 <= day <= 31:
            result.add_error(messages.CPR_INVALID_DAY)

        if not 1 <= month <= 12:
            result.add_error(messages.CPR_INVALID_MONTH)

    def _check_address(self, address: str, result: ValidationResult) -> None:
        rule = self.rules.address

        if len(address) < rule.min_length:
            result.add_error(messages.ADDRESS_TOO_SHORT.format(min_length=rule.min_length))

        if len(address) > rule.max_length:
            result.add_error(messages.ADDRESS_TOO_LONG.format(max_length=rule.max_length))

        if not rule.pattern.fullmatch(address):
            result.add_error(messages.ADDRESS_INVALID_CHARS)

    def _check_amount(self, amount: str, result: ValidationResult) -> None:
        """Amounts are in the smallest currency unit (øre)"""
        rule = self.rules.amount

        if not rule.pattern.fullmatch(amount):
            result.add_error(messages.AMOUNT_DIGITS_ONLY)
            return

        # digit count is checked before int() so huge inputs never reach it
        significant = amount.lstrip("0") or "0"
        if len(significant) > len(str(rule.maximum)):
            result.add_error(messages.AMOUNT_TOO_LARGE.format(maximum=rule.maximum))
            return

        numeric = int(significant)

        if numeric < rule.minimum:
            result.add_error(messages.AMOUNT_TOO_SMALL.format(minimum=rule.minimum))

        if numeric > rule.maximum:
            result.add_error(messages.AMOUNT_TOO_LARGE.format(maximum=rule.maximum))

    def _check_url(self, url: str, result: ValidationResult) -> None:
        rule = self.rules.url

        if len(url) > rule.max_length:
            result.add_error(messages.URL_TOO_LONG.format(max_length=rule.max_length))

        if not rule.pattern.fullmatch(url):
            result.add_error(messages.URL_INVALID_FORMAT)

        if not url.startswith("https://"):
            result.add_warning(messages.URL_NOT_HTTPS)


# =============================================================================
# DEFAULT INSTANCE
# =============================================================================

input_validator = ValidationEngine()


def validate_email(email: InputValue, required: bool = True) -> ValidationResult:
    return input_validator.validate(email, RuleType.EMAIL, required=required)


def validate_password(password: InputValue, required: bool = True) -> ValidationResult:
    return input_validator.validate(password, RuleType.PASSWORD, required=required)


def validate_name(name: InputValue, required: bool = True) -> ValidationResult:
    return input_validator.validate(name, RuleType.NAME, required=required)


def validate_phone(phone: InputValue, required: bool = False) -> ValidationResult:
    return input_validator.validate(phone, RuleType.PHONE, required=required)


def validate_cpr(cpr: InputValue, required: bool = False) -> ValidationResult:
    return input_validator.validate(cpr, RuleType.NATIONAL_ID, required=required)


def validate_address(address: InputValue, required: bool = True) -> ValidationResult:
    return input_validator.validate(address, RuleType.ADDRESS, required=required)


def validate_amount(amount: InputValue, required: bool = True) -> ValidationResult:
    return input_validator.validate(amount, RuleType.AMOUNT, required=required)


def validate_url(url: InputValue, required: bool = False) -> ValidationResult:
    return input_validator.validate(url, RuleType.URL, required=required)


def is_valid_email_format(email: str) -> bool:
    return validate_email(email, required=True).is_valid


def is_valid_phone_number(phone: str) -> bool:
    return validate_phone(phone, required=True).is_valid


def is_valid_danish_cpr(cpr: str) -> bool:
    return validate_cpr(cpr, required=True).is_valid


def is_valid_property_address(address: str) -> bool:
    return validate_address(address, required=True).is_valid


def sanitize_input(text: str) -> str:
    """Free-text cleanup with name rules; falls back to plain-text stripping"""
    result = input_validator.validate(text, RuleType.NAME, required=False)
    if result.sanitized:
        return result.sanitized
    return sanitize_text(text or "")

"""
Validation Rule Set (Single Source of Truth)
============================================

Every rule type has one immutable rule object. A ``ValidationRuleSet`` groups
them and is built once from configuration; overrides produce a new set.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Pattern, Tuple, Union

from .config import Settings, load_settings


class RuleType(str, Enum):
    """Fixed validation categories"""
    EMAIL = "EMAIL"
    PASSWORD = "PASSWORD"
    NAME = "NAME"
    PHONE = "PHONE"
    NATIONAL_ID = "NATIONAL_ID"
    ADDRESS = "ADDRESS"
    AMOUNT = "AMOUNT"
    URL = "URL"

    @classmethod
    def parse(cls, value: Union["RuleType", str, None]) -> Optional["RuleType"]:
        """
        Resolve a rule type from a member or a name.

        Returns None for unknown names. ``CPR`` is accepted as an alias of
        ``NATIONAL_ID``.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        name = value.strip().upper()
        if name == "CPR":
            return cls.NATIONAL_ID
        try:
            return cls(name)
        except ValueError:
            return None


# Types whose sanitized form is a canonical digit string
DIGIT_CANONICAL_TYPES = frozenset({RuleType.PHONE, RuleType.NATIONAL_ID, RuleType.AMOUNT})

SPECIAL_CHARS_PATTERN = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")
REPEATED_CHAR_PATTERN = re.compile(r"(.)\1{2,}")


@dataclass(frozen=True)
class EmailRule:
    pattern: Pattern = re.compile(
        r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
        r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
    )
    min_length: int = 5
    max_length: int = 254
    disposable_domains: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PasswordRule:
    min_length: int = 12
    max_length: int = 128
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_digits: bool = True
    require_special_chars: bool = True
    forbid_repeated_chars: bool = True
    # matched case-insensitively
    forbidden_substrings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NameRule:
    pattern: Pattern = re.compile(r"[a-zA-ZæøåÆØÅ\s'-]{1,50}")
    min_length: int = 1
    max_length: int = 50
    forbidden_words: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PhoneRule:
    pattern: Pattern = re.compile(r"(\+45)?[0-9]{8}")
    cleanup: Pattern = re.compile(r"[^\d+]")


@dataclass(frozen=True)
class NationalIdRule:
    pattern: Pattern = re.compile(r"[0-9]{6}-?[0-9]{4}")
    cleanup: Pattern = re.compile(r"[^\d-]")


@dataclass(frozen=True)
class AddressRule:
    pattern: Pattern = re.compile(r"[a-zA-ZæøåÆØÅ0-9\s,.-]{10,200}")
    min_length: int = 10
    max_length: int = 200


@dataclass(frozen=True)
class AmountRule:
    pattern: Pattern = re.compile(r"[0-9]+")
    cleanup: Pattern = re.compile(r"[^\d]")
    minimum: int = 0
    maximum: int = 1_000_000_000  # øre, i.e. 10 million DKK


@dataclass(frozen=True)
class UrlRule:
    pattern: Pattern = re.compile(
        r"https?://(?:[-\w.])+(?::[0-9]+)?(?:/(?:[\w/_.])*)?(?:\?(?:[\w&=%.])*)?(?:#(?:[\w.])*)?",
        re.ASCII,
    )
    max_length: int = 2048


@dataclass(frozen=True)
class ValidationRuleSet:
    """Immutable table of rules, one per RuleType"""
    email: EmailRule = EmailRule()
    password: PasswordRule = PasswordRule()
    name: NameRule = NameRule()
    phone: PhoneRule = PhoneRule()
    national_id: NationalIdRule = NationalIdRule()
    address: AddressRule = AddressRule()
    amount: AmountRule = AmountRule()
    url: UrlRule = UrlRule()

    def for_type(self, rule_type: RuleType):
        return getattr(self, rule_type.value.lower())

    def with_overrides(self, **changes) -> "ValidationRuleSet":
        """
        Return a copy with some rules replaced.

        Usage:
            strict = rules.with_overrides(
                password=replace(rules.password, min_length=16)
            )
        """
        return replace(self, **changes)


def build_rule_set(settings: Optional[Settings] = None) -> ValidationRuleSet:
    """Build the rule set from configuration (environment by default)"""
    if settings is None:
        settings = load_settings()

    return ValidationRuleSet(
        email=EmailRule(disposable_domains=settings.disposable_email_domains),
        password=PasswordRule(
            min_length=settings.password_min_length,
            max_length=settings.password_max_length,
            forbidden_substrings=settings.weak_password_substrings,
        ),
        name=NameRule(forbidden_words=settings.forbidden_name_words),
    )

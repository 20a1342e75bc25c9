"""
Unit tests for ValidationEngine.validate:
- required / empty handling
- attack heuristics short-circuit
- type-specific rules for every RuleType
- caller extensions (custom pattern, custom validator, length bounds)

Run: pytest tests/test_validation_engine.py -v
"""

from dataclasses import replace

import pytest

from inputguard import messages
from inputguard.config import Settings
from inputguard.engine import (
    ValidationEngine,
    is_valid_danish_cpr,
    is_valid_email_format,
    is_valid_phone_number,
    sanitize_input,
    validate_amount,
    validate_phone,
)
from inputguard.exceptions import InvalidInputError, RequiredFieldError, SecurityViolationError
from inputguard.rules import RuleType, build_rule_set


class TestRequired:
    """Empty input and the required flag"""

    @pytest.mark.parametrize("value", [None, ""])
    def test_required_empty_fails_with_single_error(self, engine, value):
        result = engine.validate(value, RuleType.EMAIL, required=True)
        assert result.is_valid is False
        assert result.errors == [messages.REQUIRED]
        assert result.sanitized is None

    @pytest.mark.parametrize("value", [None, ""])
    def test_optional_empty_passes(self, engine, value):
        result = engine.validate(value, RuleType.PHONE)
        assert result.is_valid is True
        assert result.errors == []
        assert result.sanitized == ""

    def test_zero_is_not_empty(self, engine):
        result = engine.validate(0, RuleType.AMOUNT, required=True)
        assert result.is_valid is True
        assert result.sanitized == "0"

    def test_whitespace_is_not_empty(self, engine):
        result = engine.validate("   ", RuleType.NAME, required=True)
        assert messages.REQUIRED not in result.errors


class TestSecurityShortCircuit:
    """Attack patterns stop processing with one generic error"""

    @pytest.mark.parametrize("payload", [
        "<script>alert(1)</script>",
        "<img src=x onerror=alert(1)>",
        "javascript:alert(1)",
        "&lt;script&gt;alert(1)&lt;/script&gt;",
    ])
    def test_xss_rejected(self, engine, payload):
        result = engine.validate(payload, RuleType.NAME)
        assert result.is_valid is False
        assert result.errors == [messages.SECURITY_PATTERN_DETECTED]
        assert result.sanitized is None

    @pytest.mark.parametrize("payload", [
        "Robert'); DROP TABLE users;--",
        "1 OR 1=1",
        "x UNION SELECT password FROM users",
    ])
    def test_sql_injection_rejected(self, engine, payload):
        result = engine.validate(payload, RuleType.ADDRESS)
        assert result.errors == [messages.SECURITY_PATTERN_DETECTED]
        assert result.sanitized is None

    def test_security_error_never_echoes_input(self, engine):
        result = engine.validate("<script>steal()</script>", RuleType.EMAIL)
        assert all("steal" not in error for error in result.errors)

    def test_apostrophe_names_are_rejected(self, engine):
        # The metacharacter heuristic matches any apostrophe
        result = engine.validate("O'Brien", RuleType.NAME)
        assert result.errors == [messages.SECURITY_PATTERN_DETECTED]

    def test_allow_html_skips_xss_scan_and_escaping(self, engine):
        result = engine.validate("<b>Hej</b>", "TEXT", allow_html=True)
        assert result.is_valid is True
        assert result.sanitized == "<b>Hej</b>"

    def test_harmless_markup_is_escaped_without_allow_html(self, engine):
        result = engine.validate("<b>Hej</b>", "TEXT")
        assert result.is_valid is True
        assert result.sanitized == "&lt;b&gt;Hej&lt;/b&gt;"


class TestEmail:
    """EMAIL rule type"""

    def test_valid_email_is_lowercased(self, engine):
        result = engine.validate("Foo.Bar@Example.COM", RuleType.EMAIL)
        assert result.is_valid is True
        assert result.sanitized == "foo.bar@example.com"

    def test_invalid_format(self, engine):
        result = engine.validate("not-an-email", RuleType.EMAIL)
        assert messages.EMAIL_INVALID_FORMAT in result.errors

    def test_too_short(self, engine):
        result = engine.validate("a@b", RuleType.EMAIL)
        assert messages.EMAIL_TOO_SHORT.format(min_length=5) in result.errors

    def test_too_long(self, engine):
        email = "a" * 250 + "@example.com"
        result = engine.validate(email, RuleType.EMAIL)
        assert messages.EMAIL_TOO_LONG.format(max_length=254) in result.errors

    def test_disposable_domain_is_warning_only(self, engine):
        result = engine.validate("user@10minutemail.com", RuleType.EMAIL)
        assert result.is_valid is True
        assert result.warnings == [messages.EMAIL_DISPOSABLE]

    def test_is_valid_email_format_helper(self):
        assert is_valid_email_format("lejer@example.dk") is True
        assert is_valid_email_format("lejer") is False


class TestPassword:
    """PASSWORD rule type"""

    def test_strong_password(self, engine):
        result = engine.validate("Str0ng!Passw0rd#", RuleType.PASSWORD)
        assert result.is_valid is True
        assert result.errors == []

    def test_short_password_lists_every_failure(self, engine):
        result = engine.validate("abc", RuleType.PASSWORD)
        assert messages.PASSWORD_TOO_SHORT.format(min_length=12) in result.errors
        assert messages.PASSWORD_NEEDS_UPPERCASE in result.errors
        assert messages.PASSWORD_NEEDS_DIGIT in result.errors
        assert messages.PASSWORD_NEEDS_SPECIAL in result.errors
        assert messages.PASSWORD_NEEDS_LOWERCASE not in result.errors

    def test_weak_substring(self, engine):
        result = engine.validate("MyPassword99!x", RuleType.PASSWORD)
        assert result.errors == [messages.PASSWORD_FORBIDDEN_PATTERN]

    def test_repeated_characters(self, engine):
        result = engine.validate("Abcdeee12!xyz", RuleType.PASSWORD)
        assert result.errors == [messages.PASSWORD_FORBIDDEN_PATTERN]

    def test_repeat_and_weak_substring_give_one_error(self, engine):
        result = engine.validate("Qwertyyy1!abc", RuleType.PASSWORD)
        assert result.errors.count(messages.PASSWORD_FORBIDDEN_PATTERN) == 1

    def test_too_long(self, engine):
        result = engine.validate("Ab1!" + "xy" * 70, RuleType.PASSWORD)
        assert messages.PASSWORD_TOO_LONG.format(max_length=128) in result.errors

    def test_stricter_rule_set_via_overrides(self, settings):
        rules = build_rule_set(settings)
        strict = ValidationEngine(rules.with_overrides(password=replace(rules.password, min_length=16)))

        assert strict.validate("Str0ng!Passw0rd", RuleType.PASSWORD).errors == [
            messages.PASSWORD_TOO_SHORT.format(min_length=16)
        ]
        # default engine is untouched
        assert ValidationEngine(rules).validate("Str0ng!Passw0rd", RuleType.PASSWORD).is_valid

    def test_min_length_from_settings(self):
        engine = ValidationEngine(build_rule_set(Settings(password_min_length=20, password_max_length=128)))
        result = engine.validate("Str0ng!Passw0rd#", RuleType.PASSWORD)
        assert result.errors == [messages.PASSWORD_TOO_SHORT.format(min_length=20)]


class TestName:
    """NAME rule type"""

    def test_danish_letters_and_whitespace_collapse(self, engine):
        result = engine.validate("  Søren   Kierkegaard ", RuleType.NAME)
        assert result.is_valid is True
        assert result.sanitized == "Søren Kierkegaard"

    def test_hyphenated_name(self, engine):
        assert engine.validate("Anne-Marie Ærø", RuleType.NAME).is_valid

    def test_digits_rejected(self, engine):
        result = engine.validate("John123", RuleType.NAME)
        assert messages.NAME_INVALID_CHARS in result.errors

    def test_forbidden_word_case_insensitive(self, engine):
        result = engine.validate("Administrator", RuleType.NAME)
        assert result.errors == [messages.NAME_FORBIDDEN_WORD]

    def test_too_long(self, engine):
        result = engine.validate("a" * 51, RuleType.NAME)
        assert messages.NAME_TOO_LONG.format(max_length=50) in result.errors


class TestPhone:
    """PHONE rule type"""

    @pytest.mark.parametrize("raw,expected", [
        ("+45 12 34 56 78", "+4512345678"),
        ("12 34 56 78", "12345678"),
        ("12-34-56-78", "12345678"),
    ])
    def test_valid_numbers_are_canonicalized(self, engine, raw, expected):
        result = engine.validate(raw, RuleType.PHONE)
        assert result.is_valid is True
        assert result.sanitized == expected

    @pytest.mark.parametrize("raw", ["1234", "+46 12345678", "123456789"])
    def test_invalid_numbers(self, engine, raw):
        result = engine.validate(raw, RuleType.PHONE)
        assert result.errors == [messages.PHONE_INVALID_FORMAT]

    def test_helpers(self):
        assert is_valid_phone_number("+4512345678") is True
        assert is_valid_phone_number("") is False
        assert validate_phone("").is_valid is True


class TestNationalId:
    """NATIONAL_ID (CPR) rule type"""

    @pytest.mark.parametrize("cpr", ["010190-1234", "0101901234"])
    def test_valid_cpr(self, engine, cpr):
        result = engine.validate(cpr, RuleType.NATIONAL_ID)
        assert result.is_valid is True
        assert result.sanitized == cpr

    def test_cpr_alias(self, engine):
        assert engine.validate("010190-1234", "CPR").is_valid

    def test_day_out_of_range_with_hyphen(self, engine):
        result = engine.validate("320190-1234", RuleType.NATIONAL_ID)
        assert result.errors == [messages.CPR_INVALID_DAY]

    def test_month_out_of_range_without_hyphen(self, engine):
        result = engine.validate("0113901234", RuleType.NATIONAL_ID)
        assert result.errors == [messages.CPR_INVALID_MONTH]

    def test_day_and_month_zero(self, engine):
        result = engine.validate("000090-1234", RuleType.NATIONAL_ID)
        assert result.errors == [messages.CPR_INVALID_DAY, messages.CPR_INVALID_MONTH]

    def test_wrong_shape(self, engine):
        result = engine.validate("01019O1234", RuleType.NATIONAL_ID)
        assert result.errors == [messages.CPR_INVALID_FORMAT]

    def test_helper(self):
        assert is_valid_danish_cpr("311299-9999") is True
        assert is_valid_danish_cpr("311399-9999") is False


class TestAddress:
    """ADDRESS rule type"""

    def test_valid_address(self, engine):
        result = engine.validate("Nørrebrogade 10,  2200 København N", RuleType.ADDRESS)
        assert result.is_valid is True
        assert result.sanitized == "Nørrebrogade 10, 2200 København N"

    def test_too_short(self, engine):
        result = engine.validate("Vej 1", RuleType.ADDRESS)
        assert messages.ADDRESS_TOO_SHORT.format(min_length=10) in result.errors

    def test_invalid_chars(self, engine):
        result = engine.validate("Hovedgaden 1 (baghuset)", RuleType.ADDRESS)
        assert messages.ADDRESS_INVALID_CHARS in result.errors


class TestAmount:
    """AMOUNT rule type (øre)"""

    def test_integer_input(self, engine):
        result = engine.validate(150000, RuleType.AMOUNT)
        assert result.is_valid is True
        assert result.sanitized == "150000"

    def test_decimal_rejected(self, engine):
        result = engine.validate("12.50", RuleType.AMOUNT)
        assert result.errors == [messages.AMOUNT_DIGITS_ONLY]
        assert result.sanitized == "1250"

    def test_upper_bound(self, engine):
        assert engine.validate("1000000000", RuleType.AMOUNT).is_valid
        result = engine.validate("1000000001", RuleType.AMOUNT)
        assert result.errors == [messages.AMOUNT_TOO_LARGE.format(maximum=1_000_000_000)]

    def test_huge_digit_string_is_rejected_without_raising(self, engine):
        result = engine.validate("1" * 5000, RuleType.AMOUNT)
        assert result.is_valid is False
        assert result.errors == [messages.AMOUNT_TOO_LARGE.format(maximum=1_000_000_000)]

    def test_leading_zeros_are_not_counted(self, engine):
        assert engine.validate("0" * 20 + "150000", RuleType.AMOUNT).is_valid

    def test_helper_requires_value(self):
        assert validate_amount(None).errors == [messages.REQUIRED]


class TestUrl:
    """URL rule type"""

    def test_https_url(self, engine):
        result = engine.validate("https://example.com/lejemaal/42?side=2", RuleType.URL)
        assert result.is_valid is True
        assert result.warnings == []

    def test_http_url_gets_warning(self, engine):
        result = engine.validate("http://example.com", RuleType.URL)
        assert result.is_valid is True
        assert result.warnings == [messages.URL_NOT_HTTPS]

    def test_other_scheme_is_invalid(self, engine):
        result = engine.validate("ftp://example.com", RuleType.URL)
        assert messages.URL_INVALID_FORMAT in result.errors

    def test_too_long(self, engine):
        url = "https://example.com/" + "a" * 2048
        result = engine.validate(url, RuleType.URL)
        assert messages.URL_TOO_LONG.format(max_length=2048) in result.errors


class TestUnknownRuleType:
    """Unknown types are scanned and sanitized but not structurally checked"""

    def test_unknown_type_is_permissive(self, engine):
        result = engine.validate("  1234 AB  ", "ZIPCODE")
        assert result.is_valid is True
        assert result.sanitized == "1234 AB"

    def test_unknown_type_is_still_scanned(self, engine):
        result = engine.validate("<script>x</script>", "ZIPCODE")
        assert result.errors == [messages.SECURITY_PATTERN_DETECTED]

    def test_rule_type_parse(self):
        assert RuleType.parse("email") is RuleType.EMAIL
        assert RuleType.parse(" cpr ") is RuleType.NATIONAL_ID
        assert RuleType.parse("nope") is None
        assert RuleType.parse(None) is None


class TestCallerExtensions:
    """custom_pattern, custom_validator, min_length, max_length"""

    def test_custom_pattern_must_match_whole_value(self, engine):
        result = engine.validate("DK12", RuleType.NAME, custom_pattern=r"[A-Z]{2}")
        assert messages.CUSTOM_PATTERN_MISMATCH in result.errors

        result = engine.validate("DK", RuleType.NAME, custom_pattern=r"[A-Z]{2}")
        assert result.is_valid is True

    def test_length_bounds(self, engine):
        assert engine.validate("Bo", RuleType.NAME, min_length=3).errors == [
            messages.MIN_LENGTH.format(min_length=3)
        ]
        assert engine.validate("Karoline", RuleType.NAME, max_length=5).errors == [
            messages.MAX_LENGTH.format(max_length=5)
        ]

    def test_custom_validator_errors_are_appended(self, engine):
        def no_anna(value):
            return ["Anna er optaget"] if value.strip() == "Anna" else []

        result = engine.validate("Anna", RuleType.NAME, custom_validator=no_anna)
        assert result.errors == ["Anna er optaget"]
        assert result.sanitized == "Anna"

    def test_custom_validator_exception_is_contained(self, engine):
        def broken(value):
            raise RuntimeError("boom")

        result = engine.validate("Anna", RuleType.NAME, custom_validator=broken)
        assert result.errors == [messages.CUSTOM_VALIDATOR_FAILED]

    def test_custom_validator_not_called_after_attack(self, engine):
        calls = []
        engine.validate("<script>x</script>", RuleType.NAME, custom_validator=calls.append)
        assert calls == []


class TestValidateOrRaise:
    """Raising wrapper"""

    def test_returns_sanitized_value(self, engine):
        assert engine.validate_or_raise("A@B.DK", RuleType.EMAIL) == "a@b.dk"

    def test_missing_required(self, engine):
        with pytest.raises(RequiredFieldError) as exc_info:
            engine.validate_or_raise(None, RuleType.EMAIL, required=True)
        assert exc_info.value.to_user_message() == messages.REQUIRED_FIELDS_MISSING

    def test_security_violation(self, engine):
        with pytest.raises(SecurityViolationError):
            engine.validate_or_raise("<script>x</script>", RuleType.NAME)

    def test_invalid_input_carries_errors(self, engine):
        with pytest.raises(InvalidInputError) as exc_info:
            engine.validate_or_raise("not-an-email", RuleType.EMAIL)
        assert messages.EMAIL_INVALID_FORMAT in exc_info.value.errors


class TestSanitizeInput:
    """Free-text helper"""

    def test_plain_text(self):
        assert sanitize_input("  Anna   Hansen ") == "Anna Hansen"

    def test_attack_falls_back_to_text_stripping(self):
        cleaned = sanitize_input("<script>x</script>")
        assert "<" not in cleaned and ">" not in cleaned

    def test_none(self):
        assert sanitize_input(None) == ""

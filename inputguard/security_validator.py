"""
Security Validation Module (Centralized attack heuristics)
==========================================================

XSS and SQL-injection patterns in one place. This is a fast rejection layer,
not a security boundary: sinks still need their own output encoding and
parameter binding.
"""

from dataclasses import dataclass, field
from typing import List, Pattern, Tuple
import html
import re

from .secret_manager import log_security_event


@dataclass
class SecurityValidationResult:
    """Result of security validation"""
    is_safe: bool
    threats: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.is_safe

    def threat_message(self) -> str:
        """Returns formatted threat categories (never the input itself)"""
        if not self.threats:
            return ""
        return "🚨 " + "\n🚨 ".join(self.threats)


def _compile(patterns: List[Tuple[str, str]], flags: int = re.IGNORECASE) -> List[Tuple[Pattern, str]]:
    return [(re.compile(pattern, flags), description) for pattern, description in patterns]


class SecurityValidator:
    """
    Centralized security validator

    Usage:
        from inputguard import SecurityValidator

        result = SecurityValidator.check_xss(user_input)
        if not result:
            logger.warning(f"Security threat: {result.threat_message()}")
    """

    XSS_PATTERNS = _compile([
        (r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", "XSS (script block)"),
        (r"<script\b[^>]*>", "XSS (script tag)"),
        (r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", "XSS (iframe block)"),
        (r"javascript:", "XSS (javascript protocol)"),
        (r"vbscript:", "XSS (vbscript protocol)"),
        (r"on\w+\s*=", "XSS (event handler)"),
        (r"<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>", "XSS (object block)"),
        (r"<embed\b[^<]*>", "XSS (embed tag)"),
        (r"<applet\b[^<]*(?:(?!</applet>)<[^<]*)*</applet>", "XSS (applet block)"),
        (r"<meta\b[^<]*>", "XSS (meta tag)"),
        (r"<link\b[^<]*>", "XSS (link tag)"),
    ])

    SQL_INJECTION_PATTERNS = _compile([
        (r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|UNION|SCRIPT)\b", "SQL injection (keyword)"),
        (r"('|;|--|\s\*|\s%|^\*|^%)", "SQL injection (metacharacter)"),
        (r"(\d+)\s*(=|<|>|!|<=|>=)\s*(\d+)", "SQL injection (tautology)"),
        (r"(\bOR\b|\bAND\b)\s+(\d+)\s*(=|<|>|!|<=|>=)\s*(\d+)", "SQL injection (boolean tautology)"),
    ])

    @classmethod
    def _first_match(cls, text: str, patterns: List[Tuple[Pattern, str]]) -> str:
        for pattern, description in patterns:
            if pattern.search(text):
                return description
        return ""

    @classmethod
    def check_xss(cls, text: str) -> SecurityValidationResult:
        """
        Checks text, and its HTML-entity-decoded form, for script injection

        Args:
            text: Raw user input

        Returns:
            SecurityValidationResult with is_safe flag and threat list
        """
        threat = cls._first_match(text, cls.XSS_PATTERNS)
        if threat:
            return SecurityValidationResult(is_safe=False, threats=[threat])

        decoded = cls.decode_html(text)
        if decoded != text:
            threat = cls._first_match(decoded, cls.XSS_PATTERNS)
            if threat:
                return SecurityValidationResult(is_safe=False, threats=[f"Encoded {threat}"])

        return SecurityValidationResult(is_safe=True)

    @classmethod
    def check_sql_injection(cls, text: str) -> SecurityValidationResult:
        """Checks text for SQL injection fragments"""
        threat = cls._first_match(text, cls.SQL_INJECTION_PATTERNS)
        if threat:
            return SecurityValidationResult(is_safe=False, threats=[threat])
        return SecurityValidationResult(is_safe=True)

    @classmethod
    def validate(cls, text: str, allow_html: bool = False) -> SecurityValidationResult:
        """
        Runs the XSS scan (unless HTML is allowed) and then the SQL scan.

        Stops at the first category that matches.
        """
        if not allow_html:
            xss = cls.check_xss(text)
            if not xss:
                log_security_event("ATTACK_PATTERN", action=xss.threats[0])
                return xss

        sql = cls.check_sql_injection(text)
        if not sql:
            log_security_event("ATTACK_PATTERN", action=sql.threats[0])
        return sql

    @staticmethod
    def decode_html(text: str) -> str:
        """Resolves named and numeric HTML entities"""
        return html.unescape(text)

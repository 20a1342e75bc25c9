"""
Sanitization helpers.

``sanitize`` is idempotent for every rule type: the escaped form never
contains a raw ``<``, ``>``, ``"``, ``'`` and every ``&`` starts one of the
entities produced here, so a second pass changes nothing.
"""

import re
from typing import Optional

from .rules import DIGIT_CANONICAL_TYPES, RuleType, ValidationRuleSet

_BARE_AMPERSAND = re.compile(r"&(?!(?:amp|lt|gt|quot|#39);)")
_WHITESPACE = re.compile(r"\s+")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

_BLOCK_TAGS = re.compile(
    r"<(script|iframe|object|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_SINGLE_TAGS = re.compile(r"<(embed|link|meta)\b[^>]*>", re.IGNORECASE)
_EVENT_HANDLERS = re.compile(r"on\w+\s*=", re.IGNORECASE)
_SCRIPT_PROTOCOLS = re.compile(r"(javascript|vbscript):", re.IGNORECASE)
_NON_BASIC_TAGS = re.compile(r"<(?!/?(?:b|i|em|strong|br)\b)[^>]+>", re.IGNORECASE)

MAX_FREE_TEXT_LENGTH = 1000


def escape_html(text: str) -> str:
    """HTML-escape ``< > " ' &`` without double-escaping existing entities"""
    text = _BARE_AMPERSAND.sub("&amp;", text)
    return (
        text.replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def sanitize(
    value: str,
    rule_type: Optional[RuleType],
    rules: ValidationRuleSet,
    allow_html: bool = False,
) -> str:
    """
    Produce the storable form of a value.

    Digit-canonical types are stripped first, so escaped entities never leak
    digits into phone numbers, CPR numbers or amounts.
    """
    if rule_type in DIGIT_CANONICAL_TYPES:
        return rules.for_type(rule_type).cleanup.sub("", value)

    if not allow_html:
        value = escape_html(value)

    if rule_type is RuleType.EMAIL:
        return value.lower().strip()
    if rule_type in (RuleType.NAME, RuleType.ADDRESS):
        return collapse_whitespace(value)
    return value.strip()


def sanitize_html(text: str, allow_basic_tags: bool = False) -> str:
    """
    Make user content safe for display.

    With ``allow_basic_tags`` dangerous blocks, event handlers and script
    protocols are removed and only b/i/em/strong/br tags survive; otherwise
    everything is escaped.
    """
    if not allow_basic_tags:
        return escape_html(text)

    text = _BLOCK_TAGS.sub("", text)
    text = _SINGLE_TAGS.sub("", text)
    text = _EVENT_HANDLERS.sub("", text)
    text = _SCRIPT_PROTOCOLS.sub("", text)
    text = _NON_BASIC_TAGS.sub("", text)
    return text.strip()[:MAX_FREE_TEXT_LENGTH]


def sanitize_text(text: str) -> str:
    """Plain text for storage: control chars and quote/angle chars removed"""
    text = _CONTROL_CHARS.sub("", text)
    text = re.sub(r"[<>\"'\\]", "", text)
    return collapse_whitespace(text)[:MAX_FREE_TEXT_LENGTH]

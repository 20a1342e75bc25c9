"""
Password strength indicator for registration forms.

Independent of pass/fail validation: a password can be valid and still only
"good", and the feedback list tells the user what would raise the score.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from . import messages
from .config import DEFAULT_PASSWORD_MIN_LENGTH, DEFAULT_WEAK_PASSWORD_SUBSTRINGS
from .rules import REPEATED_CHAR_PATTERN, SPECIAL_CHARS_PATTERN

LEVEL_WEAK = "weak"
LEVEL_FAIR = "fair"
LEVEL_GOOD = "good"
LEVEL_STRONG = "strong"


@dataclass
class PasswordStrength:
    score: int
    level: str
    feedback: List[str] = field(default_factory=list)


def _level_for(score: int) -> str:
    if score < 30:
        return LEVEL_WEAK
    if score < 60:
        return LEVEL_FAIR
    if score < 80:
        return LEVEL_GOOD
    return LEVEL_STRONG


def get_password_strength(
    password: str,
    min_length: Optional[int] = None,
    weak_substrings: Sequence[str] = DEFAULT_WEAK_PASSWORD_SUBSTRINGS,
) -> PasswordStrength:
    """
    Score a password from 0 to 100

    Args:
        password: Candidate password
        min_length: Length named in the feedback hint (default: policy minimum)
        weak_substrings: Substrings that cost points, case-insensitive

    Returns:
        PasswordStrength with score, level and Danish feedback hints
    """
    if min_length is None:
        min_length = DEFAULT_PASSWORD_MIN_LENGTH

    score = 0
    feedback: List[str] = []

    # Length
    if len(password) >= 8:
        score += 10
    if len(password) >= 12:
        score += 10
    if len(password) >= 16:
        score += 10
    if len(password) < min_length:
        feedback.append(messages.STRENGTH_USE_MIN_LENGTH.format(min_length=min_length))

    # Character classes
    if re.search(r"[a-z]", password):
        score += 10
    else:
        feedback.append(messages.STRENGTH_ADD_LOWERCASE)

    if re.search(r"[A-Z]", password):
        score += 10
    else:
        feedback.append(messages.STRENGTH_ADD_UPPERCASE)

    if re.search(r"[0-9]", password):
        score += 10
    else:
        feedback.append(messages.STRENGTH_ADD_DIGIT)

    if SPECIAL_CHARS_PATTERN.search(password):
        score += 15
    else:
        feedback.append(messages.STRENGTH_ADD_SPECIAL)

    # Patterns
    if not REPEATED_CHAR_PATTERN.search(password):
        score += 10

    lowered = password.lower()
    if not any(weak.lower() in lowered for weak in weak_substrings):
        score += 15

    return PasswordStrength(score=score, level=_level_for(score), feedback=feedback)

"""Form schema models."""

import re
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import RuleType


class FieldOptions(BaseModel):
    """Per-field options layered on top of the builtin rule."""
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    allow_html: bool = Field(default=False, description="Skip XSS scan and HTML escaping")
    custom_pattern: Optional[Any] = Field(default=None, description="Extra regex the value must match")
    custom_validator: Optional[Callable[[str], List[str]]] = Field(
        default=None, description="Callable returning extra error messages"
    )
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)

    @field_validator("custom_pattern", mode="before")
    @classmethod
    def compile_pattern(cls, v):
        if v is None or isinstance(v, re.Pattern):
            return v
        if not isinstance(v, str):
            raise ValueError("custom_pattern must be a string or compiled pattern")
        try:
            return re.compile(v)
        except re.error as e:
            raise ValueError(f"custom_pattern is not a valid regex: {e}")


class FieldSchema(BaseModel):
    """Declaration of one form field."""
    model_config = ConfigDict(extra="forbid")

    type: RuleType = Field(..., description="Rule type the value is checked against")
    required: bool = Field(default=False)
    options: FieldOptions = Field(default_factory=FieldOptions)

    @field_validator("type", mode="before")
    @classmethod
    def parse_rule_type(cls, v):
        rule_type = RuleType.parse(v)
        if rule_type is None:
            raise ValueError(f"Unknown rule type: {v!r}")
        return rule_type


class FormSchema(BaseModel):
    """Mapping of field name to its declaration."""
    field_map: Dict[str, FieldSchema]

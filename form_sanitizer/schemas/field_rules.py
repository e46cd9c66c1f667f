"""
Declarative per-field sanitization rules for a form.
Rule declarations hold names and tags only, never submitted values.
"""
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

from form_sanitizer.services.exceptions import InvalidFieldRuleError


class FieldRule(BaseModel):
    """How one submitted field is sanitized."""
    name: str = Field(..., description="Form field name")
    sanitize_type: str = Field(
        default="text",
        alias="sanitizeType",
        description="Sanitize-type tag; unknown tags fall back to text"
    )
    allowed_values: List[str] = Field(
        default_factory=list,
        alias="allowedValues",
        description="Allow-list for radio fields"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise InvalidFieldRuleError("field name must not be empty")
        return v

    @model_validator(mode="after")
    def validate_allowed_values(self) -> "FieldRule":
        """Allow-lists only make sense for radio fields."""
        if self.allowed_values and self.sanitize_type != "radio":
            raise InvalidFieldRuleError(
                f"allowed values given for non-radio type '{self.sanitize_type}'",
                field_name=self.name,
            )
        return self

    class Config:
        populate_by_name = True
        frozen = True


class FormRules(BaseModel):
    """The full rule set for one form, in field order."""
    fields: List[FieldRule] = Field(default_factory=list, description="Field rules")

    @field_validator("fields")
    @classmethod
    def validate_unique_names(cls, v: List[FieldRule]) -> List[FieldRule]:
        seen = set()
        for rule in v:
            if rule.name in seen:
                raise InvalidFieldRuleError("declared more than once", field_name=rule.name)
            seen.add(rule.name)
        return v

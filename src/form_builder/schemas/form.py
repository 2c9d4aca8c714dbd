"""Pydantic schemas for form definitions, values and validation results.

Attribute names are snake_case; JSON uses the camelCase keys of the
browser application (dependsOn, defaultValue, createdAt, ...) so saved
forms round-trip through the store unchanged.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)
from pydantic.alias_generators import to_camel


FieldType = Literal[
    "text",
    "number",
    "date",
    "select",
    "radio",
    "checkbox",
    "textarea",
    "derived",
]

RuleType = Literal[
    "required",
    "minLength",
    "maxLength",
    "email",
    "password",
    "min",
    "max",
    "custom",
]

# Field types that render a fixed list of choices
CHOICE_FIELD_TYPES = frozenset({"select", "radio", "checkbox"})

# Rule types whose parameter must be a number
NUMERIC_RULE_TYPES = frozenset({"minLength", "maxLength", "min", "max"})

FieldValue = Union[str, int, float, List[str], date, None]

# field id -> current value
FormValueMap = Dict[str, Any]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump with camelCase keys and JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FieldOption(_CamelModel):
    """Immutable choice for select, radio and checkbox fields."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class ValidationRule(_CamelModel):
    """A named constraint with an optional parameter and a fixed message.

    minLength/maxLength/min/max take a numeric ``value``; custom takes a
    regex pattern string. A rule whose ``value`` has not been filled in yet
    is kept and simply does not apply. Whether a pattern compiles is only
    checked when the rule runs.
    """

    type: RuleType
    value: Optional[Union[StrictInt, StrictFloat, StrictStr]] = None
    message: str

    @model_validator(mode="after")
    def validate_parameter(self):
        if self.value is None:
            return self
        if self.type in NUMERIC_RULE_TYPES and not isinstance(self.value, (int, float)):
            raise ValueError(f"'{self.type}' rule requires a numeric value")
        if self.type == "custom" and not isinstance(self.value, str):
            raise ValueError("'custom' rule requires a regex pattern string")
        return self


class DerivedFieldFormula(_CamelModel):
    """Formula of a derived field.

    ``depends_on`` lists the ids of fields whose current values are visible
    to the expression.
    """

    expression: str
    depends_on: List[str] = Field(default_factory=list)


class FormField(_CamelModel):
    id: str
    type: FieldType
    label: str
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    validations: List[ValidationRule] = Field(default_factory=list)
    options: Optional[List[FieldOption]] = None
    default_value: FieldValue = None
    formula: Optional[DerivedFieldFormula] = None
    order: int = 0

    @model_validator(mode="after")
    def validate_type_requirements(self):
        """Choice fields need options, derived fields need a formula."""
        if self.type in CHOICE_FIELD_TYPES and self.options is None:
            raise ValueError(f"options are required for '{self.type}' fields")
        if self.type == "derived" and self.formula is None:
            raise ValueError("formula is required for 'derived' fields")
        return self

    @property
    def is_derived(self) -> bool:
        return self.type == "derived"


class FormSchema(_CamelModel):
    """A form definition. Owns its fields exclusively."""

    id: str
    name: str
    description: Optional[str] = None
    fields: List[FormField] = Field(default_factory=list)
    created_at: str
    updated_at: str

    @model_validator(mode="after")
    def validate_unique_field_ids(self):
        seen = set()
        for field in self.fields:
            if field.id in seen:
                raise ValueError(f"Duplicate field id '{field.id}'")
            seen.add(field.id)
        return self

    def get_field(self, field_id: str) -> Optional[FormField]:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def sorted_fields(self) -> List[FormField]:
        """Fields in display order."""
        return sorted(self.fields, key=lambda f: f.order)


class FieldError(_CamelModel):
    field_id: str
    message: str


class FormValidationResult(_CamelModel):
    is_valid: bool
    errors: List[FieldError] = Field(default_factory=list)


class FormSubmission(_CamelModel):
    form_id: str
    data: FormValueMap
    submitted_at: str


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.isoformat(timespec="milliseconds") + "Z"

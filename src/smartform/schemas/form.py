"""
Form field models shared by the builder, the preview and the AI import.

`kind` is serialized as `kind`; `type` is accepted on input because the
generation service (and older clients) use that key.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator

DEFAULT_SELECT_OPTIONS = ("Option 1", "Option 2")


class FieldKind(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    TEXTAREA = "textarea"
    SELECT = "select"
    NUMBER = "number"


FIELD_KIND_LABELS = {
    FieldKind.TEXT: "Text",
    FieldKind.EMAIL: "Email",
    FieldKind.TEXTAREA: "Long Text",
    FieldKind.NUMBER: "Number",
    FieldKind.SELECT: "Select Dropdown",
}


def new_field_id() -> str:
    return str(uuid.uuid4())


def split_options(value: Any) -> Any:
    """
    Accept the builder's comma-separated options text as well as a list.

    `"red, blue ,green"` -> `["red", "blue", "green"]`; empty items are dropped.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    if isinstance(value, (list, tuple)):
        return [str(s).strip() for s in value if str(s).strip()]
    return value


class FieldSpec(BaseModel):
    """Field attributes without an id (what the AI import produces)."""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    kind: FieldKind = Field(validation_alias=AliasChoices("kind", "type"))
    required: bool = False
    options: Optional[List[str]] = None
    placeholder: Optional[str] = None

    @field_validator("options", mode="before")
    @classmethod
    def _split_options(cls, v: Any) -> Any:
        return split_options(v)

    @model_validator(mode="after")
    def _options_only_for_select(self) -> "FieldSpec":
        if self.kind != FieldKind.SELECT:
            self.options = None
        return self


class GeneratedField(FieldSpec):
    """
    One element of the form-generation reply.

    Stricter than `FieldSpec`: `required` and `placeholder` must be present, and
    `required` must be a JSON boolean.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    required: StrictBool
    placeholder: str


class FieldDefinition(FieldSpec):
    id: str = Field(default_factory=new_field_id)

    @classmethod
    def from_spec(cls, spec: FieldSpec, *, field_id: Optional[str] = None) -> "FieldDefinition":
        data = spec.model_dump(exclude={"id"})
        return cls(id=field_id or new_field_id(), **data)

    def render_options(self) -> Optional[List[str]]:
        """Options to display; an empty select shows the default pair without storing it."""
        if self.kind != FieldKind.SELECT:
            return None
        if self.options:
            return list(self.options)
        return list(DEFAULT_SELECT_OPTIONS)


class FieldUpdate(BaseModel):
    """Partial edit coming from the builder; unset attributes stay untouched."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    label: Optional[str] = None
    kind: Optional[FieldKind] = Field(default=None, validation_alias=AliasChoices("kind", "type"))
    required: Optional[bool] = None
    options: Optional[List[str]] = None
    placeholder: Optional[str] = None

    @field_validator("options", mode="before")
    @classmethod
    def _split_options(cls, v: Any) -> Any:
        return split_options(v)


def default_field() -> FieldDefinition:
    return FieldDefinition(label="New Field", kind=FieldKind.TEXT, required=False, placeholder="")


def initial_fields() -> List[FieldDefinition]:
    return [
        FieldDefinition(id="1", label="Full Name", kind=FieldKind.TEXT, required=True, placeholder="John Doe"),
        FieldDefinition(
            id="2", label="Email Address", kind=FieldKind.EMAIL, required=True, placeholder="john@example.com"
        ),
        FieldDefinition(
            id="3", label="Message", kind=FieldKind.TEXTAREA, required=True, placeholder="How can we help you?"
        ),
    ]

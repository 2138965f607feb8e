from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartform.schemas.form import FieldKind


class ImportRequest(BaseModel):
    """Request body for `POST /v1/api/form/import`."""

    model_config = ConfigDict(populate_by_name=True)

    description: str = Field(..., description="Pasted questions or a natural-language form description.")

    @field_validator("description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description must not be empty")
        return v


class AddFieldRequest(BaseModel):
    """Optional overrides for a newly added field; omitted keys use the builder defaults."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    label: Optional[str] = None
    kind: Optional[FieldKind] = None
    required: Optional[bool] = None
    placeholder: Optional[str] = None


class SubmitRequest(BaseModel):
    """Request body for `POST /v1/api/form/submit`."""

    model_config = ConfigDict(populate_by_name=True)

    values: Dict[str, str] = Field(default_factory=dict)

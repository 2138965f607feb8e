from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartform.schemas.analysis import AnalysisResult

SubmissionValues = Dict[str, str]


class FrozenValues(dict):
    """Submitted values of a stored record; every mutating method raises `TypeError`."""

    def _read_only(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("submission values are read-only")

    __setitem__ = _read_only
    __delitem__ = _read_only
    __ior__ = _read_only
    clear = _read_only
    pop = _read_only
    popitem = _read_only
    setdefault = _read_only
    update = _read_only

    def __reduce__(self) -> Any:
        return (FrozenValues, (dict(self),))


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SubmissionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = Field(default_factory=_utc_now_iso, description="ISO-8601 UTC instant.")
    values: SubmissionValues = Field(default_factory=dict, validate_default=True)
    analysis: Optional[AnalysisResult] = None
    status: Literal["pending", "processed"] = "pending"

    @field_validator("values", mode="after")
    @classmethod
    def _freeze_values(cls, v: Dict[str, str]) -> Dict[str, str]:
        return FrozenValues(v)

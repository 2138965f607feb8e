from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Urgency = Literal["Low", "Medium", "High"]
Sentiment = Literal["Positive", "Neutral", "Negative"]


class EmailDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., description="Subject line of the drafted reply.")
    body: str = Field(..., description="Body of the drafted reply.")


class AnalysisResult(BaseModel):
    """
    Validated submission analysis.

    Every key is required: a reply that omits one (including `emailDraft.body`)
    must fail validation instead of being filled with a default. Input is accepted
    by alias only (`suggestedAction`, `emailDraft`), matching `ANALYSIS_SCHEMA`.
    """

    model_config = ConfigDict(frozen=True)

    urgency: Urgency
    category: str
    sentiment: Sentiment
    summary: str
    suggested_action: str = Field(..., alias="suggestedAction")
    email_draft: EmailDraft = Field(..., alias="emailDraft")

"""
DSPy Module wrappers, one per generation task.

Imports `dspy`; loaded lazily by `smartform.providers.generation`.
"""

from __future__ import annotations

from typing import Any

import dspy  # type: ignore

from smartform.signatures.json_signatures import FormFieldsJSON, IntegrationScript, SubmissionAnalysisJSON


class FormFieldsModule(dspy.Module):
    def __init__(self) -> None:
        super().__init__()
        self.prog = dspy.Predict(FormFieldsJSON)

    def forward(self, **kwargs: Any) -> dspy.Prediction:
        return self.prog(**kwargs)


class SubmissionAnalysisModule(dspy.Module):
    def __init__(self) -> None:
        super().__init__()
        self.prog = dspy.Predict(SubmissionAnalysisJSON)

    def forward(self, **kwargs: Any) -> dspy.Prediction:
        return self.prog(**kwargs)


class IntegrationScriptModule(dspy.Module):
    def __init__(self) -> None:
        super().__init__()
        self.prog = dspy.Predict(IntegrationScript)

    def forward(self, **kwargs: Any) -> dspy.Prediction:
        return self.prog(**kwargs)


__all__ = ["FormFieldsModule", "IntegrationScriptModule", "SubmissionAnalysisModule"]

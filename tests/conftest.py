from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if _SRC.exists():
    sys.path.insert(0, str(_SRC))


_CREDENTIAL_ENV = (
    "GEMINI_API_KEY",
    "API_KEY",
    "OPENAI_API_KEY",
    "GROQ_API_KEY",
    "SMARTFORM_PROVIDER",
    "DSPY_PROVIDER",
    "SMARTFORM_MODEL",
    "DSPY_MODEL",
)


class FakeGenerationService:
    """Replays canned program output (or raises) instead of calling the network."""

    def __init__(self, replies: Optional[List[Optional[str]]] = None, error: Optional[Exception] = None) -> None:
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def run(self, task: Any, **inputs: Any) -> Optional[str]:
        self.calls.append({"task": task.name, "inputs": inputs})
        if self.error is not None:
            raise self.error
        if not self.replies:
            return None
        return self.replies.pop(0)


ANALYSIS_HIGH = {
    "urgency": "High",
    "category": "Bug Report",
    "sentiment": "Negative",
    "summary": "Alice reports a broken feature that needs urgent attention.",
    "suggestedAction": "Escalate to the on-call engineer today.",
    "emailDraft": {
        "subject": "We're on it: your urgent report",
        "body": "Hi Alice,\n\nThanks for letting us know. Our team is looking into it now.",
    },
}


@pytest.fixture
def no_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _CREDENTIAL_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_service():
    return FakeGenerationService


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    return json.loads(json.dumps(ANALYSIS_HIGH))

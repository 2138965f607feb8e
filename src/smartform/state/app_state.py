"""
Top-level application state and the view/tab controller.

One `AppState` is created per app instance at startup and never reset. Routes
read and mutate it on the event loop; blocking AI calls run elsewhere and hand
their results back for the route to commit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from smartform.schemas.form import FIELD_KIND_LABELS, FieldDefinition, initial_fields
from smartform.state.form_store import FormStore
from smartform.state.submissions import (
    SubmissionLog,
    SubmissionPipeline,
    email_actions,
    sheet_columns,
    sheet_rows,
)


class AppTab(str, Enum):
    BUILDER = "builder"
    PREVIEW = "preview"
    SUBMISSIONS = "submissions"
    INTEGRATION = "integration"


@dataclass
class ScriptCache:
    revision: int
    script: str


@dataclass
class AppState:
    active_tab: AppTab = AppTab.PREVIEW
    form: FormStore = field(default_factory=lambda: FormStore(initial_fields()))
    submissions: SubmissionLog = field(default_factory=SubmissionLog)
    importing: bool = False
    submitting: bool = False
    generating_script: bool = False
    import_dialog_open: bool = False
    script_cache: Optional[ScriptCache] = None

    @property
    def pipeline(self) -> SubmissionPipeline:
        return SubmissionPipeline(self.submissions)

    def select_tab(self, tab: AppTab) -> AppTab:
        self.active_tab = AppTab(tab)
        return self.active_tab

    def cached_script(self) -> Optional[str]:
        cache = self.script_cache
        if cache is None or cache.revision != self.form.revision:
            return None
        return cache.script

    def store_script(self, revision: int, script: str) -> bool:
        """Keep `script` only if the form is still at `revision`."""
        if revision != self.form.revision:
            return False
        self.script_cache = ScriptCache(revision=revision, script=script)
        return True

    def summary(self) -> Dict[str, Any]:
        return {
            "activeTab": self.active_tab.value,
            "fieldCount": len(self.form),
            "submissionCount": len(self.submissions),
            "formRevision": self.form.revision,
            "busy": {
                "importing": self.importing,
                "submitting": self.submitting,
                "generatingScript": self.generating_script,
            },
            "importDialogOpen": self.import_dialog_open,
        }

    def render_view(self, tab: Optional[AppTab] = None) -> Dict[str, Any]:
        """Payload of `tab` (default: the active tab), tagged with its name."""
        current = AppTab(tab) if tab is not None else self.active_tab
        fields = self.form.fields
        if current == AppTab.BUILDER:
            return {
                "tab": current.value,
                "fields": [f.model_dump(mode="json") for f in fields],
                "kinds": [{"value": k.value, "label": label} for k, label in FIELD_KIND_LABELS.items()],
                "importDialogOpen": self.import_dialog_open,
                "importing": self.importing,
            }
        if current == AppTab.PREVIEW:
            return {
                "tab": current.value,
                "fields": [preview_field(f) for f in fields],
                "submitting": self.submitting,
            }
        if current == AppTab.SUBMISSIONS:
            records = self.submissions.records
            return {
                "tab": current.value,
                "count": len(records),
                "columns": sheet_columns(fields),
                "rows": sheet_rows(records, fields),
                "emails": email_actions(records, fields),
                "records": [r.model_dump(mode="json", by_alias=True) for r in reversed(records)],
            }
        return {
            "tab": current.value,
            "fieldLabels": [f.label for f in fields],
            "script": self.cached_script(),
            "generating": self.generating_script,
        }


def preview_field(f: FieldDefinition) -> Dict[str, Any]:
    out = f.model_dump(mode="json", exclude_none=True)
    options = f.render_options()
    if options is not None:
        out["options"] = options
    return out

from smartform.state.app_state import AppState, AppTab
from smartform.state.form_store import FormStore
from smartform.state.submissions import SubmissionLog, SubmissionPipeline

__all__ = ["AppState", "AppTab", "FormStore", "SubmissionLog", "SubmissionPipeline"]

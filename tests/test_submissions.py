import csv
import io
import json

import pytest

from smartform.errors import MissingRequiredValueError, SchemaViolationError, UnknownFieldError
from smartform.programs.orchestrator import analyze_submission
from smartform.schemas.analysis import AnalysisResult
from smartform.schemas.form import initial_fields
from smartform.schemas.submission import SubmissionRecord
from smartform.state.submissions import (
    SubmissionLog,
    SubmissionPipeline,
    email_actions,
    sheet_columns,
    sheet_csv,
    sheet_rows,
)

VALUES = {"1": "Alice", "2": "a@x.com", "3": "This is broken and urgent!"}


def test_submit_appends_one_processed_record(make_service, analysis_payload):
    log = SubmissionLog()
    service = make_service([json.dumps(analysis_payload)])
    fields = initial_fields()

    record = SubmissionPipeline(log).submit(
        VALUES, fields, lambda v, f: analyze_submission(v, f, service=service)
    )

    assert len(log) == 1
    assert log.records[0] is record
    assert record.status == "processed"
    assert record.analysis is not None
    assert record.analysis.urgency == "High"
    assert record.values == VALUES


def test_failed_analysis_appends_nothing(make_service):
    log = SubmissionLog()
    service = make_service(['{"urgency": "High"}'])
    with pytest.raises(SchemaViolationError):
        SubmissionPipeline(log).submit(
            VALUES, initial_fields(), lambda v, f: analyze_submission(v, f, service=service)
        )
    assert len(log) == 0


def test_missing_required_value_is_rejected_before_analysis():
    calls = []
    with pytest.raises(MissingRequiredValueError) as info:
        SubmissionPipeline(SubmissionLog()).submit(
            {"1": "Alice", "2": "  "}, initial_fields(), lambda v, f: calls.append(v)
        )
    assert info.value.labels == ["Email Address", "Message"]
    assert calls == []


def test_unknown_field_ids_are_rejected():
    with pytest.raises(UnknownFieldError):
        SubmissionPipeline(SubmissionLog()).submit(
            {**VALUES, "ghost": "boo"}, initial_fields(), lambda v, f: None
        )


def _record(analysis_payload, **values):
    return SubmissionRecord(
        values=values,
        analysis=AnalysisResult.model_validate(analysis_payload),
        status="processed",
    )


def test_sheet_rows_newest_first_with_processing_label(analysis_payload):
    fields = initial_fields()
    first = _record(analysis_payload, **VALUES)
    second = SubmissionRecord(values={"1": "Bob"})
    rows = sheet_rows([first, second], fields)

    assert sheet_columns(fields) == ["Timestamp", "Full Name", "Email Address", "Message", "AI Analysis", "Urgency"]
    assert rows[0] == [second.timestamp, "Bob", "", "", "Processing...", ""]
    assert rows[1][1:] == ["Alice", "a@x.com", "This is broken and urgent!", analysis_payload["summary"], "High"]


def test_email_actions_use_first_email_field_or_user(analysis_payload):
    fields = initial_fields()
    with_email = _record(analysis_payload, **VALUES)
    without_email = _record(analysis_payload, **{"1": "Bob"})
    actions = email_actions([with_email, without_email], fields)

    assert actions[0]["to"] == "User"
    assert actions[1]["to"] == "a@x.com"
    assert actions[1]["subject"] == analysis_payload["emailDraft"]["subject"]
    assert actions[1]["category"] == "Bug Report"


def test_sheet_csv_has_header_and_rows(analysis_payload):
    fields = initial_fields()
    text = sheet_csv([_record(analysis_payload, **VALUES)], fields)
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == sheet_columns(fields)
    assert rows[1][1] == "Alice"
    assert len(rows) == 2


def test_stored_values_are_read_only(make_service, analysis_payload):
    log = SubmissionLog()
    service = make_service([json.dumps(analysis_payload)])
    SubmissionPipeline(log).submit(VALUES, initial_fields(), lambda v, f: analyze_submission(v, f, service=service))

    stored = log.records[0]
    with pytest.raises(TypeError):
        stored.values["1"] = "Mallory"
    with pytest.raises(TypeError):
        stored.values.update({"ghost": "boo"})
    assert stored.values == VALUES
    assert stored.model_dump()["values"] == VALUES


def test_default_values_are_read_only_too():
    with pytest.raises(TypeError):
        SubmissionRecord().values["1"] = "x"

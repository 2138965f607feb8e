"""
Submission pipeline and the append-only submission log.

`SubmissionPipeline.submit` validates values against the active fields, runs the
analysis callable and appends one processed record. A failed analysis appends
nothing; the caller surfaces the error and the user resubmits.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from smartform.errors import MissingRequiredValueError, UnknownFieldError
from smartform.schemas.analysis import AnalysisResult
from smartform.schemas.form import FieldDefinition, FieldKind
from smartform.schemas.submission import SubmissionRecord

logger = logging.getLogger(__name__)

AnalyzeCallable = Callable[[Mapping[str, str], Sequence[FieldDefinition]], AnalysisResult]

PROCESSING_LABEL = "Processing..."


class SubmissionLog:
    def __init__(self) -> None:
        self._records: List[SubmissionRecord] = []

    def append(self, record: SubmissionRecord) -> SubmissionRecord:
        self._records.append(record)
        return record

    @property
    def records(self) -> Tuple[SubmissionRecord, ...]:
        return tuple(self._records)

    def newest_first(self) -> List[SubmissionRecord]:
        return list(reversed(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SubmissionRecord]:
        return iter(tuple(self._records))


def validate_values(values: Mapping[str, str], fields: Sequence[FieldDefinition]) -> Dict[str, str]:
    known = {f.id for f in fields}
    unknown = set(values) - known
    if unknown:
        raise UnknownFieldError(unknown)
    missing = [f.label for f in fields if f.required and not str(values.get(f.id) or "").strip()]
    if missing:
        raise MissingRequiredValueError(missing)
    return {k: str(v) for k, v in values.items()}


class SubmissionPipeline:
    def __init__(self, log: SubmissionLog) -> None:
        self.log = log

    def prepare(self, values: Mapping[str, str], fields: Sequence[FieldDefinition]) -> Dict[str, str]:
        return validate_values(values, fields)

    def commit(self, values: Mapping[str, str], analysis: AnalysisResult) -> SubmissionRecord:
        record = SubmissionRecord(values=dict(values), analysis=analysis, status="processed")
        self.log.append(record)
        logger.info("submission %s recorded urgency=%s", record.id, analysis.urgency)
        return record

    def submit(
        self,
        values: Mapping[str, str],
        fields: Sequence[FieldDefinition],
        analyze: AnalyzeCallable,
    ) -> SubmissionRecord:
        clean = self.prepare(values, fields)
        analysis = analyze(clean, fields)
        return self.commit(clean, analysis)


def _email_field(fields: Sequence[FieldDefinition]) -> Optional[FieldDefinition]:
    for f in fields:
        if f.kind == FieldKind.EMAIL:
            return f
    return None


def sheet_columns(fields: Sequence[FieldDefinition]) -> List[str]:
    return ["Timestamp", *[f.label for f in fields], "AI Analysis", "Urgency"]


def sheet_rows(records: Sequence[SubmissionRecord], fields: Sequence[FieldDefinition]) -> List[List[str]]:
    """
    Spreadsheet-style rows, newest first, one column per current field.
    """
    rows: List[List[str]] = []
    for rec in reversed(list(records)):
        analysis = rec.analysis
        rows.append(
            [
                rec.timestamp,
                *[rec.values.get(f.id, "") for f in fields],
                analysis.summary if analysis else PROCESSING_LABEL,
                analysis.urgency if analysis else "",
            ]
        )
    return rows


def email_actions(records: Sequence[SubmissionRecord], fields: Sequence[FieldDefinition]) -> List[Dict[str, Any]]:
    email_field = _email_field(fields)
    out: List[Dict[str, Any]] = []
    for rec in reversed(list(records)):
        analysis = rec.analysis
        recipient = rec.values.get(email_field.id, "") if email_field else ""
        out.append(
            {
                "submissionId": rec.id,
                "to": recipient or "User",
                "subject": analysis.email_draft.subject if analysis else None,
                "body": analysis.email_draft.body if analysis else None,
                "category": analysis.category if analysis else None,
                "sentiment": analysis.sentiment if analysis else None,
            }
        )
    return out


def sheet_csv(records: Sequence[SubmissionRecord], fields: Sequence[FieldDefinition]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(sheet_columns(fields))
    writer.writerows(sheet_rows(records, fields))
    return buf.getvalue()

"""
DSPy Signatures (LLM contracts only).

- FormFieldsJSON: pasted questions or a description -> JSON array of form fields
- SubmissionAnalysisJSON: one submission -> JSON analysis object with a drafted reply
- IntegrationScript: field labels -> Google Apps Script webhook receiver (plain code)

DSPy builds the prompt from the docstring and the field descriptions. JSON outputs are
strings; they are parsed and validated with pydantic in `smartform.programs.orchestrator`.
"""

from __future__ import annotations

import json

import dspy  # type: ignore

from smartform.programs.response_schemas import ANALYSIS_SCHEMA, FORM_FIELDS_SCHEMA


class FormFieldsJSON(dspy.Signature):
    """
    Convert a text description or a list of questions into a structured form schema.

    ROLE AND GOAL:
    You are a form builder assistant. Read the input text and produce one form field per question.

    HARD RULES:
    - Output MUST be a JSON array only in `fields_json` (no prose, no markdown, no code fences).
    - Detect the label, the appropriate field kind, and whether the question seems required.
    - `kind` MUST be one of `allowed_kinds`.
    - Use "textarea" for long free-text answers and "select" when the answer is one of a fixed list.
    - For a "select" field, extract the options in the order they appear.
    - Write a helpful placeholder for every field.
    - Keep the questions in the order they appear in the input.
    """

    description: str = dspy.InputField(desc="Pasted questions or a natural-language form description.")
    allowed_kinds: list[str] = dspy.InputField(desc="Allowed field kinds (e.g. ['text','email']).")

    fields_json: str = dspy.OutputField(
        desc="JSON ONLY (no markdown). An array of field objects matching this JSON Schema: "
        + json.dumps(FORM_FIELDS_SCHEMA, separators=(",", ":"))
    )


class SubmissionAnalysisJSON(dspy.Signature):
    """
    Analyze one form submission for the admin and draft a reply to the submitter.

    ROLE AND GOAL:
    You are an intelligent form processor. Determine urgency, category and sentiment, summarize the
    submission in one sentence, suggest the admin's next action, and draft a professional email reply.

    HARD RULES:
    - Output MUST be a JSON object only in `analysis_json` (no prose, no markdown, no code fences).
    - urgency is one of Low, Medium, High; sentiment is one of Positive, Neutral, Negative.
    - category is a short label such as Support, Sales, Inquiry or Bug Report.
    - Follow `recipient_hint` when addressing the email draft.
    """

    submission_data: str = dspy.InputField(desc="One 'Label: value' line per form field, in form order.")
    recipient_hint: str = dspy.InputField(desc="How to address the drafted reply.")

    analysis_json: str = dspy.OutputField(
        desc="JSON ONLY (no markdown). An object matching this JSON Schema: "
        + json.dumps(ANALYSIS_SCHEMA, separators=(",", ":"))
    )


class IntegrationScript(dspy.Signature):
    """
    Write a Google Apps Script webhook receiver (`doPost`) for a form.

    HARD RULES:
    - Parse the JSON payload from the request.
    - Append a row to the active Google Sheet with a timestamp and the field values, in `field_labels` order.
    - Send an email notification to `admin_email` containing the form details.
    - Output ONLY the code in `script`, no markdown formatting.
    """

    field_labels: list[str] = dspy.InputField(desc="Labels of the form fields, in form order.")
    admin_email: str = dspy.InputField(desc="Address that receives the notification email.")

    script: str = dspy.OutputField(desc="Google Apps Script source code only.")

import json

import pytest

from smartform.errors import (
    EmptyResponseError,
    MissingCredentialError,
    SchemaViolationError,
    TransportFailureError,
)
from smartform.programs.context_builder import RECIPIENT_FROM_DATA, RECIPIENT_GENERIC
from smartform.programs.orchestrator import (
    SCRIPT_ERROR_PLACEHOLDER,
    analyze_submission,
    decode_analysis,
    decode_generated_fields,
    generate_form_from_description,
    generate_integration_script,
)
from smartform.providers import generation
from smartform.schemas.form import FieldDefinition, FieldKind, initial_fields


SCENARIO_A_REPLY = json.dumps(
    [
        {"label": "Name", "kind": "text", "required": True, "placeholder": "Your name"},
        {"label": "Email", "kind": "email", "required": True, "placeholder": "you@example.com"},
        {
            "label": "Favorite color",
            "kind": "select",
            "required": False,
            "options": ["red", "blue", "green"],
            "placeholder": "Pick a color",
        },
    ]
)


def test_generate_form_from_description_scenario_a(make_service):
    service = make_service([SCENARIO_A_REPLY])
    fields = generate_form_from_description(
        "Name (required), Email (required), Favorite color: red, blue, green", service=service
    )
    assert len(fields) == 3
    assert [f.label for f in fields] == ["Name", "Email", "Favorite color"]
    assert fields[0].required is True
    assert fields[2].kind == FieldKind.SELECT
    assert fields[2].options == ["red", "blue", "green"]

    call = service.calls[0]
    assert call["task"] == "form_fields"
    assert call["inputs"]["description"] == "Name (required), Email (required), Favorite color: red, blue, green"
    assert "textarea" in call["inputs"]["allowed_kinds"]


def test_generated_fields_accept_type_key_and_drop_options_for_non_select():
    reply = json.dumps(
        [{"label": "Bio", "type": "textarea", "required": False, "placeholder": "", "options": ["x"]}]
    )
    fields = decode_generated_fields(reply)
    assert fields[0].kind == FieldKind.TEXTAREA
    assert fields[0].options is None


def test_generate_form_rejects_blank_description(make_service):
    service = make_service([SCENARIO_A_REPLY])
    with pytest.raises(ValueError):
        generate_form_from_description("   ", service=service)
    assert service.calls == []


@pytest.mark.parametrize(
    "reply",
    [
        "not json",
        json.dumps({"label": "x"}),
        json.dumps([{"label": "x", "kind": "date", "required": True, "placeholder": ""}]),
        json.dumps([{"label": "x", "kind": "text", "placeholder": ""}]),
    ],
)
def test_decode_generated_fields_schema_violations(reply):
    with pytest.raises(SchemaViolationError):
        decode_generated_fields(reply)


@pytest.mark.parametrize("reply", [None, "", "   "])
def test_empty_replies_are_empty_response_errors(reply):
    with pytest.raises(EmptyResponseError):
        decode_generated_fields(reply)
    with pytest.raises(EmptyResponseError):
        decode_analysis(reply)


def test_decode_analysis_keeps_every_value(analysis_payload):
    result = decode_analysis(json.dumps(analysis_payload))
    assert result.model_dump(by_alias=True) == analysis_payload


def test_decode_analysis_rejects_missing_email_body(analysis_payload):
    del analysis_payload["emailDraft"]["body"]
    with pytest.raises(SchemaViolationError):
        decode_analysis(json.dumps(analysis_payload))


def test_decode_analysis_rejects_out_of_enum_urgency(analysis_payload):
    analysis_payload["urgency"] = "Critical"
    with pytest.raises(SchemaViolationError):
        decode_analysis(json.dumps(analysis_payload))


def test_analyze_submission_scenario_b(make_service, analysis_payload):
    fields = [
        FieldDefinition(id="name", label="Name", kind=FieldKind.TEXT, required=True),
        FieldDefinition(id="email", label="Email", kind=FieldKind.EMAIL, required=True),
        FieldDefinition(id="message", label="Message", kind=FieldKind.TEXTAREA, required=True),
    ]
    values = {"name": "Alice", "email": "a@x.com", "message": "This is broken and urgent!"}
    service = make_service([json.dumps(analysis_payload)])

    result = analyze_submission(values, fields, service=service)

    assert result.urgency == "High"
    assert result.sentiment == "Negative"
    call = service.calls[0]
    assert call["task"] == "submission_analysis"
    assert call["inputs"]["submission_data"] == "Name: Alice\nEmail: a@x.com\nMessage: This is broken and urgent!"
    assert call["inputs"]["recipient_hint"] == RECIPIENT_FROM_DATA


def test_analyze_submission_propagates_transport_failure(make_service):
    service = make_service(error=TransportFailureError("boom"))
    with pytest.raises(TransportFailureError):
        analyze_submission({"1": "x"}, initial_fields(), service=service)


def test_integration_script_strips_fences_and_lists_fields(make_service):
    service = make_service(["```javascript\nfunction doPost(e) {}\n```"])
    script = generate_integration_script(initial_fields(), service=service, admin_email="ops@example.com")
    assert script == "function doPost(e) {}"
    inputs = service.calls[0]["inputs"]
    assert inputs["field_labels"] == ["Full Name", "Email Address", "Message"]
    assert inputs["admin_email"] == "ops@example.com"
    assert service.calls[0]["task"] == "integration_script"


@pytest.mark.parametrize("service_kwargs", [{"error": TransportFailureError("down")}, {"replies": [""]}])
def test_integration_script_degrades_to_placeholder(make_service, service_kwargs):
    service = make_service(**service_kwargs)
    assert generate_integration_script(initial_fields(), service=service) == SCRIPT_ERROR_PLACEHOLDER


def test_missing_credential_fails_before_any_network_call(no_credentials, monkeypatch, analysis_payload):
    def _no_network(cfg):
        raise AssertionError("LM must not be built without a credential")

    monkeypatch.setattr(generation, "_build_lm", _no_network)

    with pytest.raises(MissingCredentialError):
        generate_form_from_description("Name, Email")
    with pytest.raises(MissingCredentialError):
        analyze_submission({"1": "Alice"}, initial_fields())
    with pytest.raises(MissingCredentialError):
        generate_integration_script(initial_fields())


def test_default_admin_email_reads_env(make_service, monkeypatch):
    monkeypatch.setenv("SMARTFORM_ADMIN_EMAIL", "forms@acme.test")
    service = make_service(["function doPost(e) {}"])
    generate_integration_script(initial_fields(), service=service)
    assert service.calls[0]["inputs"]["admin_email"] == "forms@acme.test"


def test_analysis_without_email_value_keeps_greeting_generic(make_service, analysis_payload):
    service = make_service([json.dumps(analysis_payload)])
    analyze_submission({"1": "Alice", "2": "", "3": "Hello"}, initial_fields(), service=service)
    assert service.calls[0]["inputs"]["recipient_hint"] == RECIPIENT_GENERIC


def test_decode_analysis_rejects_snake_case_keys(analysis_payload):
    analysis_payload["suggested_action"] = analysis_payload.pop("suggestedAction")
    analysis_payload["email_draft"] = analysis_payload.pop("emailDraft")
    with pytest.raises(SchemaViolationError):
        decode_analysis(json.dumps(analysis_payload))


@pytest.mark.parametrize("required", ["yes", 1, "true"])
def test_generated_required_must_be_a_json_boolean(required):
    reply = json.dumps([{"label": "Name", "kind": "text", "required": required, "placeholder": ""}])
    with pytest.raises(SchemaViolationError):
        decode_generated_fields(reply)


def test_integration_script_placeholder_when_lm_cannot_be_built(no_credentials, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k")

    def _broken_build(cfg):
        raise ImportError("No module named 'dspy'")

    monkeypatch.setattr(generation, "_build_lm", _broken_build)
    assert generate_integration_script(initial_fields()) == SCRIPT_ERROR_PLACEHOLDER
    with pytest.raises(TransportFailureError):
        analyze_submission({"1": "Alice"}, initial_fields())

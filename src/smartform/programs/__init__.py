"""
Generation-service programs (DSPy modules, signature inputs, response contracts, decoding).

Runtime request/response glue lives in `smartform.api`; store mutations live in
`smartform.state`.
"""

from smartform.programs.orchestrator import (
    SCRIPT_ERROR_PLACEHOLDER,
    analyze_submission,
    decode_analysis,
    decode_generated_fields,
    generate_form_from_description,
    generate_integration_script,
)

__all__ = [
    "SCRIPT_ERROR_PLACEHOLDER",
    "analyze_submission",
    "decode_analysis",
    "decode_generated_fields",
    "generate_form_from_description",
    "generate_integration_script",
]

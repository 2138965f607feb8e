"""
DSPy signatures for the generation-service calls.

Importing this package imports `dspy`; runtime code loads it lazily (see
`smartform.providers.generation`).
"""

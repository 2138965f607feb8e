"""
HTTP surface for the SmartForm service (FastAPI).

Entrypoint: `smartform.api.main:app` (or `create_app()` for tests and embedding).
"""

"""
SmartForm: form builder service with AI-assisted import, submission analysis,
and integration script generation.

- Runtime package: `src/smartform/`
- HTTP entrypoint: `smartform.api.main:app`
"""

__version__ = "0.1.0"

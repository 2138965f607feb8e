"""
Generation-service transport.

Builds a DSPy `dspy.LM` (LiteLLM under the hood) per call and runs one of the
programs in `smartform.programs.modules` with it, so the orchestrator only deals
with signature inputs in and output text out.
Credentials are resolved from the environment on every call; nothing is cached
at import time.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from smartform.errors import MissingCredentialError, ServiceConfigError, TransportFailureError

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "gemini"
DEFAULT_MODEL = "gemini-2.5-flash"

# Provider -> env vars holding its single secret (first non-blank wins).
_CREDENTIAL_ENV: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "API_KEY"),
    "openai": ("OPENAI_API_KEY",),
    "groq": ("GROQ_API_KEY",),
}


def _env_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_int(name: str) -> Optional[int]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _prefixed_model(provider: str, model_name: str) -> str:
    p = str(provider or "").strip().lower()
    m = str(model_name or "").strip()
    if not p:
        return m
    if m.startswith(f"{p}/"):
        return m
    return f"{p}/{m}"


def resolve_lm_config() -> Dict[str, str]:
    """
    Resolve the LM config from env.

    Env resolution order:
      - SMARTFORM_PROVIDER / DSPY_PROVIDER / "gemini"
      - SMARTFORM_MODEL / DSPY_MODEL / "gemini-2.5-flash"
      - the provider's credential variable (see `_CREDENTIAL_ENV`)

    Raises `MissingCredentialError` when the credential is absent.
    """
    provider = (os.getenv("SMARTFORM_PROVIDER") or os.getenv("DSPY_PROVIDER") or DEFAULT_PROVIDER).strip().lower()
    env_names = _CREDENTIAL_ENV.get(provider)
    if env_names is None:
        raise ServiceConfigError(f"Unsupported generation provider: {provider!r}")

    api_key = ""
    for name in env_names:
        api_key = (os.getenv(name) or "").strip()
        if api_key:
            break
    if not api_key:
        raise MissingCredentialError(env_names)

    model_name = (os.getenv("SMARTFORM_MODEL") or os.getenv("DSPY_MODEL") or DEFAULT_MODEL).strip()
    return {
        "provider": provider,
        "model": _prefixed_model(provider, model_name),
        "modelName": model_name,
        "apiKey": api_key,
    }


def _build_lm(cfg: Dict[str, str]) -> Any:
    import dspy  # type: ignore

    kwargs: Dict[str, Any] = {
        "model": cfg["model"],
        "api_key": cfg["apiKey"],
        "cache": False,
        "num_retries": 0,
    }
    temperature = _env_float("DSPY_TEMPERATURE")
    if temperature is not None:
        kwargs["temperature"] = temperature
    max_tokens = _env_int("DSPY_MAX_TOKENS")
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    timeout = _env_float("DSPY_LLM_TIMEOUT_SEC")
    if timeout is not None:
        kwargs["timeout"] = timeout
    return dspy.LM(**kwargs)


@dataclass(frozen=True)
class GenerationTask:
    """
    One DSPy program run against the generation service.

    `module` names a `dspy.Module` class in `smartform.programs.modules`; `output_field`
    is the signature output read from the prediction.
    """

    name: str
    module: str
    output_field: str


def _predict(task: GenerationTask, lm: Any, inputs: Dict[str, Any]) -> Any:
    import dspy  # type: ignore

    from smartform.programs import modules

    program = getattr(modules, task.module)()
    # Thread-local: calls run on worker threads, so the global `dspy.settings` is left alone.
    with dspy.context(lm=lm):
        return program(**inputs)


class GenerationService:
    """
    Runs one DSPy program per call against the configured provider.

    `run()` resolves credentials first, so a missing key fails before any LM is
    built. Anything that fails after that (building the LM, the program call)
    is wrapped in `TransportFailureError`.
    """

    def run(self, task: GenerationTask, **inputs: Any) -> Optional[str]:
        cfg = resolve_lm_config()

        t0 = time.perf_counter()
        try:
            lm = _build_lm(cfg)
            pred = _predict(task, lm, inputs)
        except Exception as exc:
            logger.warning(
                "generation call failed provider=%s model=%s task=%s err=%r",
                cfg["provider"],
                cfg["modelName"],
                task.name,
                exc,
            )
            raise TransportFailureError(f"{type(exc).__name__}: {exc}") from exc

        dur_ms = int((time.perf_counter() - t0) * 1000)
        logger.info(
            "generation call ok provider=%s model=%s task=%s dur_ms=%s",
            cfg["provider"],
            cfg["modelName"],
            task.name,
            dur_ms,
        )
        raw = getattr(pred, task.output_field, None)
        if raw is None:
            return None
        return str(raw)

"""
Per-request access log for the SmartForm API.

Off unless `SMARTFORM_HTTP_LOG` is truthy. Each request yields one JSON line on
the `smartform.http` logger with status, duration and size-capped bodies; form
values are logged as sent, credentials and auth headers are masked. The request
id (incoming `x-request-id`, or a generated one) is echoed on the response.
"""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("smartform.http")

REQUEST_ID_HEADER = b"x-request-id"

_MASK = "***"
_MASKED_NAMES = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "api_key",
        "apikey",
        "gemini_api_key",
        "openai_api_key",
        "groq_api_key",
        "token",
        "secret",
        "password",
    }
)


def env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: (_MASK if str(k).lower() in _MASKED_NAMES else _redact(v)) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _decode_headers(raw: Optional[Iterable[Tuple[bytes, bytes]]]) -> Dict[str, str]:
    headers = {k.decode("latin-1").lower(): v.decode("latin-1", errors="replace") for k, v in raw or []}
    return {k: (_MASK if k in _MASKED_NAMES else v) for k, v in headers.items()}


class _BodyCapture:
    """Keeps the first `limit` bytes of a streamed body."""

    def __init__(self, limit: int) -> None:
        self.limit = max(0, limit)
        self.buf = bytearray()
        self.truncated = False

    def feed(self, chunk: bytes) -> None:
        if not chunk or self.limit <= 0:
            return
        room = self.limit - len(self.buf)
        if len(chunk) > room:
            self.truncated = True
        if room > 0:
            self.buf.extend(chunk[:room])

    def render(self, content_type: str) -> Dict[str, Any]:
        return {"body": _render_body(content_type, bytes(self.buf)), "body_truncated": self.truncated}


def _render_body(content_type: str, body: bytes) -> Any:
    if not body:
        return ""
    ct = (content_type or "").lower()
    text = body.decode("utf-8", errors="replace")
    if "application/json" in ct:
        try:
            return _redact(json.loads(text))
        except ValueError:
            return text
    if ct.startswith("text/"):
        return text
    return "<binary>"


class HttpLoggingMiddleware:
    def __init__(self, app: ASGIApp, *, log_headers: bool, max_body_bytes: int) -> None:
        self.app = app
        self.log_headers = log_headers
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        req_headers = _decode_headers(scope.get("headers"))
        request_id = req_headers.get(REQUEST_ID_HEADER.decode()) or uuid.uuid4().hex[:12]
        req_body = _BodyCapture(self.max_body_bytes)
        res_body = _BodyCapture(self.max_body_bytes)
        response: Dict[str, Any] = {"status": None, "headers": []}

        async def receive_logged() -> Message:
            message = await receive()
            if message.get("type") == "http.request":
                req_body.feed(message.get("body") or b"")
            return message

        async def send_logged(message: Message) -> None:
            if message.get("type") == "http.response.start":
                headers: List[Tuple[bytes, bytes]] = [
                    (k, v) for k, v in message.get("headers") or [] if k.lower() != REQUEST_ID_HEADER
                ]
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message = {**message, "headers": headers}
                response["status"] = int(message.get("status") or 0)
                response["headers"] = headers
            elif message.get("type") == "http.response.body":
                res_body.feed(message.get("body") or b"")
            await send(message)

        failure: Optional[BaseException] = None
        try:
            await self.app(scope, receive_logged, send_logged)
        except BaseException as exc:  # noqa: BLE001 - logged below, then re-raised
            failure = exc
            raise
        finally:
            res_headers = _decode_headers(response["headers"])
            entry: Dict[str, Any] = {
                "id": request_id,
                "method": str(scope.get("method") or "").upper(),
                "path": str(scope.get("path") or ""),
                "status": response["status"],
                "dur_ms": int((time.perf_counter() - started_at) * 1000),
                "request": req_body.render(req_headers.get("content-type", "")),
                "response": res_body.render(res_headers.get("content-type", "")),
            }
            if self.log_headers:
                entry["request"]["headers"] = req_headers
                entry["response"]["headers"] = res_headers
            if failure is not None:
                entry["error"] = {"type": type(failure).__name__, "message": str(failure)}
            logger.info(json.dumps(entry, ensure_ascii=False, separators=(",", ":"), default=str))


def install_http_logging(app: Any) -> bool:
    """
    Add `HttpLoggingMiddleware` when `SMARTFORM_HTTP_LOG` is on.

    `SMARTFORM_HTTP_LOG_HEADERS` adds (masked) headers to each line;
    `SMARTFORM_HTTP_LOG_BODY_MAX_BYTES` (default 4096) caps captured body bytes.
    """
    if not env_bool("SMARTFORM_HTTP_LOG", default=False):
        return False
    app.add_middleware(
        HttpLoggingMiddleware,
        log_headers=env_bool("SMARTFORM_HTTP_LOG_HEADERS", default=False),
        max_body_bytes=env_int("SMARTFORM_HTTP_LOG_BODY_MAX_BYTES", default=4096),
    )
    return True

from __future__ import annotations

import os
from typing import Any, Optional

from .logging_utils import scrub
from .settings import get_settings

_SECRET_HEADERS = {"authorization", "cookie", "set-cookie"}


def _before_send(event: dict[str, Any], hint: dict[str, Any] | None) -> dict[str, Any] | None:
    req = event.get("request") or {}
    hdrs = req.get("headers") or {}
    for k in list(hdrs.keys()):
        if str(k).lower() in _SECRET_HEADERS:
            hdrs[k] = "[redacted]"
    if hdrs:
        req["headers"] = hdrs
        event["request"] = req
    # Store failures pass raw driver text through; it may quote a token
    if isinstance(event.get("message"), str):
        event["message"] = scrub(event["message"])
    for exc in (event.get("exception") or {}).get("values") or []:
        if isinstance(exc.get("value"), str):
            exc["value"] = scrub(exc["value"])
    return event


def init_sentry() -> Optional[object]:
    """Initialize Sentry when SENTRY_DSN is set; returns the SDK module or None."""
    dsn = (os.environ.get("SENTRY_DSN") or "").strip()
    if not dsn:
        return None
    import sentry_sdk
    from sentry_sdk.integrations.starlette import StarletteIntegration

    settings = get_settings()
    sentry_sdk.init(
        dsn=dsn,
        release=settings.git_sha or settings.app_version,
        traces_sample_rate=float(os.environ.get("SENTRY_TRACES_SAMPLE_RATE", "0.0") or 0.0),
        environment=os.environ.get("SENTRY_ENV") or os.environ.get("ENV") or "dev",
        integrations=[StarletteIntegration()],
        before_send=_before_send,
    )
    return sentry_sdk

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.db import init_database
from core.errors import ODError
from core.logging_utils import get_request_id, maybe_enable_json_logging, set_request_id
from core.observability import init_sentry
from core.settings import get_settings

from .routes.admin import router as admin_router
from .routes.health import router as health_router
from .routes.od import router as od_router
from .routes.reports import router as reports_router
from .routes.users import router as users_router

load_dotenv()

logger = logging.getLogger("od_api")
access_logger = logging.getLogger("od_api.access")


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_database()
    yield


def _resolve_cors_origins() -> list[str]:
    origins = get_settings().cors_origin_list()
    if origins:
        return origins
    return [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


def _format_error_payload(detail: object, code: Optional[str] = None) -> dict:
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("detail") or str(detail)
        code = code or detail.get("code")
    else:
        message = str(detail or "")
    payload = {"ok": False, "error": message or "error"}
    if code:
        payload["code"] = str(code)
    return payload


def register_exception_handlers(target) -> None:
    def _wants_problem_json(request: Request) -> bool:
        accept = (request.headers.get("accept") or "").lower()
        return "application/problem+json" in accept

    def _problem_payload(request: Request, status: int, detail: object = None) -> dict:
        try:
            title = HTTPStatus(status).phrase
        except ValueError:
            title = "Error"
        return {
            "type": "about:blank",
            "title": title,
            "status": status,
            "detail": detail if detail is not None else "",
            "instance": str(request.url.path),
            "request_id": get_request_id() or "",
        }

    def _respond(request: Request, status: int, message: object, code: Optional[str] = None) -> JSONResponse:
        if _wants_problem_json(request):
            content = _problem_payload(request, status, message)
            return JSONResponse(status_code=status, content=content, media_type="application/problem+json")
        payload = _format_error_payload(message, code)
        payload["request_id"] = get_request_id() or ""
        return JSONResponse(status_code=status, content=payload)

    async def od_error_handler(request: Request, exc: ODError):
        if exc.status_code >= 500:
            logger.error("request failed: %s", exc.message)
        return _respond(request, exc.status_code, exc.message, exc.code)

    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _respond(request, exc.status_code, exc.detail)

    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        if _wants_problem_json(request):
            content = _problem_payload(request, 422, exc.errors())
            return JSONResponse(status_code=422, content=content, media_type="application/problem+json")
        payload = {
            "ok": False,
            "error": "validation_error",
            "code": "validation_error",
            "details": exc.errors(),
            "request_id": get_request_id() or "",
        }
        return JSONResponse(status_code=422, content=payload)

    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        # Driver messages are passed through verbatim
        logger.exception("store failure on %s %s", request.method, request.url.path)
        message = str(getattr(exc, "orig", None) or exc)
        return _respond(request, 500, message, "store_failure")

    target.add_exception_handler(ODError, od_error_handler)
    target.add_exception_handler(StarletteHTTPException, http_exception_handler)
    target.add_exception_handler(RequestValidationError, validation_exception_handler)
    target.add_exception_handler(SQLAlchemyError, store_error_handler)


def create_app() -> FastAPI:
    # Optional observability (JSON logs + Sentry) enabled by env vars
    maybe_enable_json_logging()
    init_sentry()
    application = FastAPI(title="OD Request API", version=get_settings().app_version, lifespan=lifespan)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=_resolve_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def _request_id_mw(request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        set_request_id(rid)
        start = time.perf_counter()
        resp = await call_next(request)
        resp.headers["X-Request-ID"] = rid
        access_logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            resp.status_code,
            extra={
                "method": request.method,
                "handler": request.url.path,
                "status": resp.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
            },
        )
        return resp

    application.include_router(health_router)
    application.include_router(users_router)
    application.include_router(od_router)
    application.include_router(reports_router)
    application.include_router(admin_router)
    register_exception_handlers(application)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("od_api.main:app", host="0.0.0.0", port=get_settings().port)

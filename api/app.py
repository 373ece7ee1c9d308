"""Manual trigger surface for the status checks.

Routes:
    GET /                  static status payload
    GET /check/components  run the components check
    GET /check/incidents   run the incidents check
    GET /check/all         run both, aggregated

Other GET paths are matched case-insensitively and without a trailing
slash against the check routes by suffix; anything still unmatched answers
with the static payload.  OPTIONS is always accepted, and every other
method gets a 405.  Unexpected errors are reported as a JSON 500.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from core.errors import MonitorError
from core.monitor import CHECKS, StatusMonitor

log = logging.getLogger(__name__)

_OTHER_METHODS = ["POST", "PUT", "PATCH", "DELETE"]


def _error_body(exc: BaseException) -> dict[str, Any]:
    return {"error": "Failed to process request", "message": str(exc)}


def create_app(monitor: StatusMonitor, title: str = "Cloudflare Status Monitor") -> FastAPI:
    app = FastAPI(title=title, version="0.1.0")
    app.state.monitor = monitor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(MonitorError)
    async def monitor_error_handler(request: Request, exc: MonitorError) -> JSONResponse:
        log.error("Error processing %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content=_error_body(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        log.error("Unhandled error processing %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=_error_body(exc))

    def _index() -> dict[str, Any]:
        return {
            "status": "ok",
            "message": f"{title} is running",
            "endpoints": {
                "checkComponents": "/check/components",
                "checkIncidents": "/check/incidents",
                "checkAll": "/check/all",
            },
        }

    @app.get("/")
    async def root() -> dict[str, Any]:
        return _index()

    @app.get("/check/components")
    async def check_components() -> dict[str, Any]:
        result = await app.state.monitor.check_components()
        return result.to_dict()

    @app.get("/check/incidents")
    async def check_incidents() -> dict[str, Any]:
        result = await app.state.monitor.check_incidents()
        return result.to_dict()

    @app.get("/check/all")
    async def check_all() -> JSONResponse:
        outcomes = await app.state.monitor.run_checks(CHECKS)
        results: dict[str, Any] = {}
        failed: list[str] = []
        for check, outcome in outcomes.items():
            if isinstance(outcome, BaseException):
                log.error("Check %s failed: %s", check, outcome)
                failed.append(check)
                results[check] = _error_body(outcome)
            else:
                results[check] = outcome.to_dict()

        if failed:
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Failed to process request",
                    "message": f"{len(failed)} check(s) failed: {', '.join(failed)}",
                    "results": results,
                },
            )
        return JSONResponse(content={"status": "success", "results": results})

    suffix_routes = (
        ("/check/components", check_components),
        ("/check/incidents", check_incidents),
        ("/check/all", check_all),
    )

    @app.get("/{path:path}", response_model=None)
    async def fallback(path: str) -> dict[str, Any] | JSONResponse:
        normalized = "/" + path.lower().rstrip("/")
        for suffix, handler in suffix_routes:
            if normalized.endswith(suffix):
                return await handler()
        return _index()

    @app.options("/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=200)

    @app.api_route("/{path:path}", methods=_OTHER_METHODS)
    async def method_not_allowed(path: str) -> PlainTextResponse:
        return PlainTextResponse("Method not allowed", status_code=405)

    return app

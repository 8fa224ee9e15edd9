"""JSON response envelope shared by every endpoint.

Success::

    {"success": true, "message": ..., "data": ..., "app": {...}, "timestamp": ...}

Error::

    {"success": false, "message": ..., "errors": ..., "app": {...}, "timestamp": ...}
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def _app_metadata(request: Request) -> dict[str, str]:
    settings = request.app.state.settings
    return {"name": settings.app_name, "version": settings.app_version}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def success(
    request: Request,
    message: str,
    data: Any = None,
    status_code: int = 200,
) -> JSONResponse:
    body = {
        "success": True,
        "message": message,
        "data": data,
        "app": _app_metadata(request),
        "timestamp": _timestamp(),
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def error(
    request: Request,
    message: str,
    errors: Any = None,
    status_code: int = 400,
) -> JSONResponse:
    body = {
        "success": False,
        "message": message,
        "errors": errors if errors is not None else {},
        "app": _app_metadata(request),
        "timestamp": _timestamp(),
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

"""JSON error responses shared by the route modules.

Every error body carries a short, stable ``error`` string; ``details`` holds
the raw exception message for diagnostics only.
"""

from __future__ import annotations

from typing import Optional

from fastapi.responses import JSONResponse


def error_response(
    status_code: int, error: str, details: Optional[str] = None
) -> JSONResponse:
    body: dict[str, str] = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)

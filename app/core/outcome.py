# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Outcome reporting — the single exit point of every operation.
An Outcome is (severity, audit message, HTTP status, JSON body); the
reporter logs the audit entry and renders exactly one response.
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.metrics.prometheus import OUTCOMES_TOTAL

logger = get_logger("congregation.audit")

INFO = "info"
WARN = "warn"


@dataclass(frozen=True)
class Outcome:
    severity: str
    message: str
    status: int
    body: Any


def info(message: str, body: Any, status: int = 200) -> Outcome:
    return Outcome(severity=INFO, message=message, status=status, body=body)


def warn(message: str, status: int, body: Any) -> Outcome:
    return Outcome(severity=WARN, message=message, status=status, body=body)


def coded(message: str, status: int, code: str) -> Outcome:
    """Warning outcome whose body is the ``{"message": <code>}`` envelope."""
    return warn(message, status, {"message": code})


class OutcomeReporter:
    """Record the audit entry for an outcome and build its HTTP response."""

    def render(self, request: Request, outcome: Outcome) -> JSONResponse:
        level = logging.INFO if outcome.severity == INFO else logging.WARNING
        logger.log(
            level,
            outcome.message,
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "severity": outcome.severity,
                "status": outcome.status,
                "method": request.method,
                "path": request.url.path,
            },
        )
        OUTCOMES_TOTAL.labels(
            severity=outcome.severity, status=str(outcome.status)
        ).inc()
        return JSONResponse(
            status_code=outcome.status,
            content=jsonable_encoder(outcome.body),
        )


reporter = OutcomeReporter()

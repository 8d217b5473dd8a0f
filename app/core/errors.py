# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error handling — guarded failures and the global exception handlers.
Services raise OperationError with a ready-made warn Outcome; anything
else is unexpected and ends in the generic 500 handler.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.core.outcome import Outcome, coded, reporter, warn

logger = get_logger(__name__)

BAD_REQUEST_BODY = {"message": "Bad request: provided inputs are invalid."}


class OperationError(Exception):
    """A failure that already knows how it must be reported."""

    def __init__(self, outcome: Outcome) -> None:
        self.outcome = outcome
        super().__init__(outcome.message)

    @property
    def status_code(self) -> int:
        return self.outcome.status

    @property
    def body(self):
        return self.outcome.body

    @classmethod
    def coded(cls, status: int, code: str, message: str) -> "OperationError":
        return cls(coded(message, status, code))

    @classmethod
    def bad_request(cls, message: str) -> "OperationError":
        return cls(warn(message, 400, BAD_REQUEST_BODY))


def add_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI app."""

    @app.exception_handler(OperationError)
    async def operation_error_handler(request: Request, exc: OperationError):
        return reporter.render(request, exc.outcome)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        detail = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return reporter.render(
            request, warn(f"invalid input: {detail}", 400, BAD_REQUEST_BODY)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception: %s",
            exc,
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "method": request.method,
                "path": request.url.path,
            },
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"message": "INTERNAL_ERROR"})

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Payload validation — pydantic schemas checked inside the service layer,
after authorization. All field errors are folded into one audit message;
the caller only ever sees the generic bad-request body.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.errors import OperationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def describe_errors(exc: ValidationError) -> str:
    return ", ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
        for err in exc.errors()
    )


def validate_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    """Validate a request body. Raises OperationError (400) on any field error."""
    try:
        return schema.model_validate(payload if payload is not None else {})
    except ValidationError as exc:
        raise OperationError.bad_request(
            f"invalid input: {describe_errors(exc)}"
        ) from exc

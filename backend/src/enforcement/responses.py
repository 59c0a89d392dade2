"""Error response bodies returned by the request governor."""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from domain.governance.models import EnforcementResult, ViolationCode, ViolationSeverity

BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
BUSINESS_RULE_VALIDATION_ERROR = "BUSINESS_RULE_VALIDATION_ERROR"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_body(
    code: str,
    message: str,
    field: Optional[str] = None,
    details: Optional[list[dict[str, Any]]] = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if field is not None:
        error["field"] = field
    if details is not None:
        error["details"] = details
    error["timestamp"] = _timestamp()
    return {"success": False, "error": error}


def blocked_response(result: EnforcementResult) -> JSONResponse:
    """409 response for a blocked request.

    Blocked by errors: message joins the error messages, code is
    INVALID_STATUS_TRANSITION when the first error is one. Blocked by
    warnings only: message joins the warning messages.
    """
    if result.blocked_by is ViolationSeverity.WARNING:
        blocking = result.warnings
        message = "Business rule warnings require attention: "
        code = BUSINESS_RULE_VIOLATION
    else:
        blocking = result.errors
        message = "Business rule violations: "
        if blocking[0].code == ViolationCode.INVALID_STATUS_TRANSITION.value:
            code = ViolationCode.INVALID_STATUS_TRANSITION.value
        else:
            code = BUSINESS_RULE_VIOLATION

    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body(
            code,
            message + ", ".join(v.message for v in blocking),
            field=blocking[0].field,
            details=[v.to_dict() for v in blocking],
        ),
    )


def validation_failure_response() -> JSONResponse:
    """500 response when the rules could not be evaluated at all."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(BUSINESS_RULE_VALIDATION_ERROR, "Unable to validate business rules"),
    )

"""Pydantic schemas for the business rules API"""

from pydantic import BaseModel, Field

from domain.governance.models import EnforcementResult, Violation, ViolationSeverity


class ViolationResponse(BaseModel):
    """A single violation as returned by the API and the warnings header."""
    field: str
    message: str
    code: str
    severity: ViolationSeverity

    @classmethod
    def from_violation(cls, violation: Violation) -> "ViolationResponse":
        return cls(
            field=violation.field,
            message=violation.message,
            code=violation.code,
            severity=violation.severity,
        )


class EvaluationResponse(BaseModel):
    """Response schema for a dry-run evaluation.

    ``blocked`` reports what the governor would decide under the default
    policy; the dry-run call itself is never blocked.
    """
    entity_kind: str
    blocked: bool
    errors: list[ViolationResponse] = Field(default_factory=list)
    warnings: list[ViolationResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, entity_kind: str, result: EnforcementResult) -> "EvaluationResponse":
        return cls(
            entity_kind=entity_kind,
            blocked=result.blocked,
            errors=[ViolationResponse.from_violation(v) for v in result.errors],
            warnings=[ViolationResponse.from_violation(v) for v in result.warnings],
        )


class TransitionsResponse(BaseModel):
    """Allowed next statuses for a status of one entity kind."""
    entity_kind: str
    status: str
    allowed_transitions: list[str]
    terminal: bool

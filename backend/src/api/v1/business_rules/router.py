"""Business rules API: dry-run evaluation and transition lookup.

Lets clients check a payload or status change before submitting it. Nothing
here writes, and the responses are never blocked by the governor.
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from auth.middleware import get_actor
from domain.governance.aggregator import aggregate
from domain.governance.errors import UnknownEntityKindError
from domain.governance.models import DEFAULT_POLICY, EntityKind, EvaluationContext
from domain.governance.policy import decide
from domain.governance.port import GovernanceDataPort
from domain.governance.registry import get_payload_evaluator, get_transition_evaluator
from domain.governance.status import get_allowed_transitions, is_terminal, parse_status
from schemas.business_rules import EvaluationResponse, TransitionsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/business-rules", tags=["business-rules"])


def get_port_factory(request: Request) -> Callable[[], AbstractAsyncContextManager[GovernanceDataPort]]:
    """Dependency returning the data port factory configured on the app."""
    return request.app.state.port_factory


def _parse_kind(kind: str) -> EntityKind:
    try:
        return EntityKind(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown entity kind '{kind}'")


@router.post("/{kind}/evaluate", response_model=EvaluationResponse)
async def evaluate_business_rules(
    kind: str,
    request: Request,
    payload: dict[str, Any] = Body(...),
    entity_id: Optional[str] = Query(
        None, description="Evaluate as a status change of this existing entity"
    ),
    port_factory=Depends(get_port_factory),
):
    """Evaluate a payload against an entity kind's business rules.

    With ``entity_id`` the payload's ``statusCode`` is checked as a status
    change of that entity instead.

    Returns:
        Errors, warnings and whether the default policy would block
    """
    entity_kind = _parse_kind(kind)
    try:
        evaluator = get_transition_evaluator(entity_kind) if entity_id else get_payload_evaluator(entity_kind)
    except UnknownEntityKindError as e:
        raise HTTPException(status_code=404, detail=str(e))

    async with port_factory() as port:
        context = EvaluationContext(
            payload=payload,
            data=port,
            actor=get_actor(request),
            entity_id=entity_id,
        )
        violations = await evaluator.evaluate(context)

    result = decide(aggregate(violations), DEFAULT_POLICY)
    logger.info(
        f"Dry-run evaluation for {entity_kind.value}: "
        f"{len(result.errors)} errors, {len(result.warnings)} warnings",
        extra={"entity_kind": entity_kind.value, "blocked": result.blocked}
    )
    return EvaluationResponse.from_result(entity_kind.value, result)


@router.get("/{kind}/transitions/{status}", response_model=TransitionsResponse)
def get_status_transitions(kind: str, status: str):
    """List the statuses reachable in one step from ``status``.

    Returns 404 for kinds without a lifecycle and for unknown statuses.
    """
    entity_kind = _parse_kind(kind)
    try:
        allowed = get_allowed_transitions(entity_kind, status)
    except UnknownEntityKindError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if parse_status(entity_kind, status) is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown {entity_kind.value} status '{status}'"
        )

    return TransitionsResponse(
        entity_kind=entity_kind.value,
        status=status,
        allowed_transitions=[s.value for s in allowed],
        terminal=is_terminal(entity_kind, status),
    )

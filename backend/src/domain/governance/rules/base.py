"""RuleEvaluator base: runs an ordered battery of checks for one entity kind."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar, Sequence, Type

from ..models import EntityKind, EvaluationContext, Violation, ViolationCode
from ..payloads import GovernancePayload


logger = logging.getLogger(__name__)


Check = Callable[[Any, EvaluationContext], Awaitable[list[Violation]]]


class RuleEvaluator(ABC):
    """Evaluates one entity kind's business rules.

    Every check in ``checks()`` runs in order and contributes to one list, so
    the caller sees every violation in a single round trip. An unexpected
    exception (data-access outage, malformed payload) stops the battery and
    is converted into a single VALIDATION_SYSTEM_ERROR; violations found
    before the failure are kept.
    """

    kind: ClassVar[EntityKind]
    payload_model: ClassVar[Type[GovernancePayload]] = GovernancePayload
    system_error_field: ClassVar[str] = "general"
    system_error_message: ClassVar[str] = "Unable to validate business rules"

    @abstractmethod
    def checks(self) -> Sequence[tuple[str, Check]]:
        """Return ``(name, check)`` pairs in execution order."""
        pass

    async def evaluate(self, context: EvaluationContext) -> list[Violation]:
        """Run every check against the context's payload.

        Args:
            context: Evaluation context with payload and data port

        Returns:
            All violations found; never raises
        """
        violations: list[Violation] = []
        rule_name = "payload"

        try:
            payload = self.parse(context)
            for rule_name, check in self.checks():
                found = await check(payload, context)
                violations.extend(found)
                logger.debug(
                    f"Business rule '{self.kind.value}.{rule_name}' found {len(found)} violations"
                )
        except Exception as e:
            logger.error(
                f"Business rule '{self.kind.value}.{rule_name}' failed: {e}",
                exc_info=True
            )
            violations.append(self.system_error())

        return violations

    def parse(self, context: EvaluationContext) -> Any:
        return self.payload_model.model_validate(dict(context.payload))

    def system_error(self) -> Violation:
        return Violation.error(
            self.system_error_field,
            self.system_error_message,
            ViolationCode.VALIDATION_SYSTEM_ERROR,
        )

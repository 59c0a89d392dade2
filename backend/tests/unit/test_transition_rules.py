"""Unit tests for status transition evaluation

Tests cover:
- Illegal transitions short-circuit with one INVALID_STATUS_TRANSITION
- Order shipping guard over sibling order items
- Payment verification reminder on completion
- Missing status / missing entity handling
- Guard failures converted into a system error
"""

import pytest

from domain.governance.models import EntityKind, ViolationSeverity
from domain.governance.registry import get_transition_evaluator
from domain.governance.rules import StatusTransitionEvaluator
from fixtures.fake_port import FailingGovernancePort


def codes(violations):
    return [v.code for v in violations]


@pytest.fixture
def order_evaluator():
    return get_transition_evaluator(EntityKind.ORDER)


class TestIllegalTransitions:
    """Table check runs first and short-circuits"""

    @pytest.mark.asyncio
    async def test_draft_to_shipped(self, order_evaluator, fake_port, make_context):
        violations = await order_evaluator.evaluate_transition(
            "ord-1", "draft", "shipped", make_context({})
        )

        assert codes(violations) == ["INVALID_STATUS_TRANSITION"]
        assert violations[0].field == "statusCode"
        assert violations[0].message == "Cannot transition from 'draft' to 'shipped'"
        # Guards for the unreachable target never ran
        assert "get_order_items_by_order" not in fake_port.calls

    @pytest.mark.asyncio
    async def test_unknown_target_status(self, order_evaluator, make_context):
        violations = await order_evaluator.evaluate_transition(
            "ord-1", "draft", "archived", make_context({})
        )

        assert codes(violations) == ["INVALID_STATUS_TRANSITION"]


class TestShippingGuard:
    """INCOMPLETE_ITEMS_CANNOT_SHIP"""

    @pytest.mark.asyncio
    async def test_item_still_in_production_blocks_shipping(self, order_evaluator, fake_port, make_context):
        fake_port.add_order_item("item-1", order_id="ord-1", status_code="completed")
        fake_port.add_order_item("item-2", order_id="ord-1", status_code="in_production")

        violations = await order_evaluator.evaluate_transition(
            "ord-1", "processing", "shipped", make_context({})
        )

        assert codes(violations) == ["INCOMPLETE_ITEMS_CANNOT_SHIP"]
        assert violations[0].message == "Cannot ship order - 1 items are not completed"
        assert violations[0].severity is ViolationSeverity.ERROR

    @pytest.mark.asyncio
    async def test_completed_and_cancelled_items_may_ship(self, order_evaluator, fake_port, make_context):
        fake_port.add_order_item("item-1", order_id="ord-1", status_code="completed")
        fake_port.add_order_item("item-2", order_id="ord-1", status_code="cancelled")
        fake_port.add_order_item("item-3", order_id="ord-2", status_code="in_production")

        violations = await order_evaluator.evaluate_transition(
            "ord-1", "processing", "shipped", make_context({})
        )

        assert violations == []

    @pytest.mark.asyncio
    async def test_shipped_to_delivered_has_no_guards(self, order_evaluator, fake_port, make_context):
        fake_port.add_order_item("item-1", order_id="ord-1", status_code="completed")

        violations = await order_evaluator.evaluate_transition(
            "ord-1", "shipped", "delivered", make_context({})
        )

        assert violations == []


class TestCompletionReminder:
    """PAYMENT_VERIFICATION_REQUIRED is a warning on every completion"""

    @pytest.mark.asyncio
    async def test_delivered_to_completed(self, order_evaluator, make_context):
        violations = await order_evaluator.evaluate_transition(
            "ord-1", "delivered", "completed", make_context({})
        )

        assert codes(violations) == ["PAYMENT_VERIFICATION_REQUIRED"]
        assert violations[0].severity is ViolationSeverity.WARNING

    @pytest.mark.asyncio
    async def test_self_transition_skips_guards(self, order_evaluator, make_context):
        violations = await order_evaluator.evaluate_transition(
            "ord-1", "completed", "completed", make_context({})
        )

        assert violations == []


class TestStatusChangePayload:
    """evaluate() reads statusCode from the payload and the current status from the port"""

    @pytest.mark.asyncio
    async def test_reads_current_status_through_port(self, order_evaluator, fake_port, make_context):
        fake_port.set_status(EntityKind.ORDER, "ord-1", "draft")

        violations = await order_evaluator.evaluate(
            make_context({"statusCode": "shipped"}, entity_id="ord-1")
        )

        assert codes(violations) == ["INVALID_STATUS_TRANSITION"]
        assert "get_entity_status" in fake_port.calls

    @pytest.mark.asyncio
    async def test_entity_id_falls_back_to_payload_id(self, order_evaluator, fake_port, make_context):
        fake_port.set_status(EntityKind.ORDER, "ord-1", "draft")

        violations = await order_evaluator.evaluate(make_context({"id": "ord-1", "statusCode": "pending"}))

        assert violations == []

    @pytest.mark.asyncio
    async def test_blank_status_code_is_required(self, order_evaluator, make_context):
        violations = await order_evaluator.evaluate(
            make_context({"statusCode": "  "}, entity_id="ord-1")
        )

        assert codes(violations) == ["STATUS_CODE_REQUIRED"]
        assert violations[0].field == "statusCode"

    @pytest.mark.asyncio
    async def test_missing_entity(self, order_evaluator, make_context):
        violations = await order_evaluator.evaluate(
            make_context({"statusCode": "pending"}, entity_id="ghost")
        )

        assert codes(violations) == ["ENTITY_NOT_FOUND"]
        assert violations[0].field == "id"
        assert violations[0].message == "Order not found"

    @pytest.mark.asyncio
    async def test_other_kinds_use_their_own_table(self, fake_port, make_context):
        fake_port.add_work_order("wo-1", "completed")
        evaluator = get_transition_evaluator(EntityKind.WORK_ORDER)

        assert await evaluator.evaluate(make_context({"statusCode": "shipped"}, entity_id="wo-1")) == []
        assert codes(await evaluator.evaluate(
            make_context({"statusCode": "queued"}, entity_id="wo-1")
        )) == ["INVALID_STATUS_TRANSITION"]

    @pytest.mark.asyncio
    async def test_work_order_not_found_message(self, make_context):
        evaluator = get_transition_evaluator(EntityKind.WORK_ORDER)

        violations = await evaluator.evaluate(make_context({"statusCode": "queued"}, entity_id="ghost"))

        assert violations[0].message == "Work order not found"


class TestGuardFailures:
    """Guard exceptions become one VALIDATION_SYSTEM_ERROR on statusCode"""

    @pytest.mark.asyncio
    async def test_guard_lookup_failure(self, order_evaluator, make_context):
        port = FailingGovernancePort(failing="get_order_items_by_order")

        violations = await order_evaluator.evaluate_transition(
            "ord-1", "processing", "shipped", make_context({}, data=port)
        )

        assert codes(violations) == ["VALIDATION_SYSTEM_ERROR"]
        assert violations[0].field == "statusCode"
        assert violations[0].message == "Unable to validate status transition"

    @pytest.mark.asyncio
    async def test_status_lookup_failure(self, order_evaluator, make_context):
        port = FailingGovernancePort(failing="get_entity_status")

        violations = await order_evaluator.evaluate(
            make_context({"statusCode": "pending"}, entity_id="ord-1", data=port)
        )

        assert codes(violations) == ["VALIDATION_SYSTEM_ERROR"]
        assert violations[0].field == "statusCode"

    @pytest.mark.asyncio
    async def test_custom_guards(self, fake_port, make_context):
        async def exploding_guard(entity_id, context):
            raise RuntimeError("boom")

        evaluator = StatusTransitionEvaluator(EntityKind.ORDER, guards={"pending": (exploding_guard,)})

        violations = await evaluator.evaluate_transition("ord-1", "draft", "pending", make_context({}))

        assert codes(violations) == ["VALIDATION_SYSTEM_ERROR"]

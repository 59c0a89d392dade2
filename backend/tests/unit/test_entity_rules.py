"""Unit tests for design job, work order, purchase order and inventory rules"""

from datetime import timedelta

import pytest

from domain.governance.models import ViolationSeverity
from domain.governance.rules import (
    DesignJobRuleEvaluator,
    InventoryRuleEvaluator,
    PurchaseOrderRuleEvaluator,
    WorkOrderRuleEvaluator,
)
from fixtures.fake_port import FailingGovernancePort


def codes(violations):
    return [v.code for v in violations]


class TestDesignJobRules:
    """Design job creation rules"""

    @pytest.mark.asyncio
    async def test_order_item_from_other_org(self, fake_port, make_context):
        fake_port.add_order_item("item-1", order_id="ord-1", status_code="pending_design", org_id="org-2")

        violations = await DesignJobRuleEvaluator().evaluate(
            make_context({"orderItemId": "item-1", "orgId": "org-1"})
        )

        assert codes(violations) == ["INVALID_ORDER_ITEM_ORG"]
        assert violations[0].field == "orderItemId"

    @pytest.mark.asyncio
    async def test_tight_deadline(self, make_context, now):
        payload = {"deadline": (now + timedelta(hours=10)).isoformat(), "estimatedHours": 8}

        violations = await DesignJobRuleEvaluator().evaluate(make_context(payload))

        assert codes(violations) == ["TIGHT_DEADLINE_WARNING"]
        assert violations[0].severity is ViolationSeverity.WARNING

    @pytest.mark.asyncio
    async def test_deadline_with_double_buffer_passes(self, make_context, now):
        payload = {"deadline": (now + timedelta(hours=16)).isoformat(), "estimatedHours": 8}

        assert await DesignJobRuleEvaluator().evaluate(make_context(payload)) == []

    @pytest.mark.asyncio
    async def test_designer_workload_counts_active_jobs_only(self, fake_port, make_context):
        for index in range(10):
            fake_port.add_design_job(f"job-{index}", "drafting", assignee_designer_id="designer-1")
        fake_port.add_design_job("done", "approved", assignee_designer_id="designer-1")

        violations = await DesignJobRuleEvaluator().evaluate(
            make_context({"assigneeDesignerId": "designer-1"})
        )

        assert codes(violations) == ["HIGH_DESIGNER_WORKLOAD"]
        assert violations[0].severity is ViolationSeverity.WARNING

    @pytest.mark.asyncio
    async def test_designer_workload_excludes_the_job_itself(self, fake_port, make_context):
        for index in range(10):
            fake_port.add_design_job(f"job-{index}", "drafting", assignee_designer_id="designer-1")

        violations = await DesignJobRuleEvaluator().evaluate(
            make_context({"id": "job-0", "assigneeDesignerId": "designer-1"})
        )

        assert violations == []

    @pytest.mark.asyncio
    async def test_system_error_message(self, make_context):
        port = FailingGovernancePort(failing="get_order_item")

        violations = await DesignJobRuleEvaluator().evaluate(
            make_context({"orderItemId": "item-1", "orgId": "org-1"}, data=port)
        )

        assert codes(violations) == ["VALIDATION_SYSTEM_ERROR"]
        assert violations[0].message == "Unable to validate design job business rules"


class TestWorkOrderRules:
    """Work order creation rules"""

    @pytest.mark.asyncio
    async def test_order_item_not_found(self, make_context):
        violations = await WorkOrderRuleEvaluator().evaluate(make_context({"orderItemId": "ghost"}))

        assert codes(violations) == ["ORDER_ITEM_NOT_FOUND"]

    @pytest.mark.asyncio
    async def test_design_not_approved(self, fake_port, make_context):
        fake_port.add_order_item("item-1", order_id="ord-1", status_code="design_in_progress")
        fake_port.add_design_job("job-1", "under_review", order_item_id="item-1")

        violations = await WorkOrderRuleEvaluator().evaluate(make_context({"orderItemId": "item-1"}))

        assert codes(violations) == ["DESIGN_NOT_APPROVED"]
        assert violations[0].severity is ViolationSeverity.ERROR

    @pytest.mark.asyncio
    async def test_any_approved_design_is_enough(self, fake_port, make_context):
        fake_port.add_order_item("item-1", order_id="ord-1", status_code="design_approved")
        fake_port.add_design_job("job-1", "rejected", order_item_id="item-1")
        fake_port.add_design_job("job-2", "approved", order_item_id="item-1")

        assert await WorkOrderRuleEvaluator().evaluate(make_context({"orderItemId": "item-1"})) == []

    @pytest.mark.asyncio
    async def test_manufacturer_workload_threshold(self, fake_port, make_context):
        for index in range(20):
            fake_port.add_work_order(f"wo-{index}", "in_production", manufacturer_id="mfr-1")
        fake_port.add_work_order("wo-old", "shipped", manufacturer_id="mfr-1")

        violations = await WorkOrderRuleEvaluator().evaluate(make_context({"manufacturerId": "mfr-1"}))

        assert codes(violations) == ["HIGH_MANUFACTURER_WORKLOAD"]

    @pytest.mark.asyncio
    async def test_manufacturer_below_threshold(self, fake_port, make_context):
        for index in range(19):
            fake_port.add_work_order(f"wo-{index}", "queued", manufacturer_id="mfr-1")

        assert await WorkOrderRuleEvaluator().evaluate(make_context({"manufacturerId": "mfr-1"})) == []

    @pytest.mark.asyncio
    async def test_manufacturing_window_too_short(self, make_context, now):
        payload = {
            "plannedStartDate": now.isoformat(),
            "plannedDueDate": (now + timedelta(hours=20)).isoformat(),
        }

        violations = await WorkOrderRuleEvaluator().evaluate(make_context(payload))

        assert codes(violations) == ["INSUFFICIENT_MANUFACTURING_TIME"]
        assert violations[0].field == "plannedDueDate"


class TestPurchaseOrderRules:
    """Purchase order creation rules"""

    @pytest.mark.asyncio
    async def test_inactive_supplier(self, fake_port, make_context):
        fake_port.add_manufacturer("sup-1", is_active=False)

        violations = await PurchaseOrderRuleEvaluator().evaluate(make_context({"supplierId": "sup-1"}))

        assert codes(violations) == ["INACTIVE_SUPPLIER"]

    @pytest.mark.asyncio
    async def test_unknown_supplier(self, make_context):
        violations = await PurchaseOrderRuleEvaluator().evaluate(make_context({"supplierId": "ghost"}))

        assert codes(violations) == ["INACTIVE_SUPPLIER"]

    @pytest.mark.asyncio
    async def test_approval_threshold_default_and_override(self, make_context):
        evaluator = PurchaseOrderRuleEvaluator()

        assert codes(await evaluator.evaluate(make_context({"totalAmount": 1500}))) == ["APPROVAL_REQUIRED"]
        assert await evaluator.evaluate(make_context({"totalAmount": 1000})) == []
        assert await evaluator.evaluate(make_context({"totalAmount": 1500, "approvalThreshold": 2000})) == []

    @pytest.mark.asyncio
    async def test_below_moq(self, fake_port, make_context):
        fake_port.add_material("mat-1", moq=100)
        fake_port.add_material("mat-2", moq=None)
        payload = {"items": [
            {"materialId": "mat-1", "quantity": 50},
            {"materialId": "mat-2", "quantity": 1},
            {"materialId": "mat-1", "quantity": 100},
        ]}

        violations = await PurchaseOrderRuleEvaluator().evaluate(make_context(payload))

        assert codes(violations) == ["BELOW_MOQ"]
        assert violations[0].field == "items[0].quantity"

    @pytest.mark.asyncio
    async def test_delivery_dates(self, make_context, now):
        evaluator = PurchaseOrderRuleEvaluator()

        def payload(delta):
            return {"orderDate": now.isoformat(), "expectedDeliveryDate": (now + delta).isoformat()}

        assert codes(await evaluator.evaluate(make_context(payload(timedelta(hours=-1))))) == ["INVALID_DELIVERY_DATE"]
        assert codes(await evaluator.evaluate(make_context(payload(timedelta(days=3))))) == ["SHORT_LEAD_TIME"]
        assert await evaluator.evaluate(make_context(payload(timedelta(days=10)))) == []

    @pytest.mark.asyncio
    async def test_violations_before_failure_are_kept(self, make_context):
        port = FailingGovernancePort(failing="get_material")
        port.add_manufacturer("sup-1")
        payload = {
            "supplierId": "sup-1",
            "totalAmount": 5000,
            "items": [{"materialId": "mat-1", "quantity": 1}],
        }

        violations = await PurchaseOrderRuleEvaluator().evaluate(make_context(payload, data=port))

        assert codes(violations) == ["APPROVAL_REQUIRED", "VALIDATION_SYSTEM_ERROR"]
        assert violations[1].message == "Unable to validate purchase order business rules"


class TestInventoryRules:
    """Inventory update rules"""

    @pytest.mark.asyncio
    async def test_material_not_found(self, make_context):
        violations = await InventoryRuleEvaluator().evaluate(make_context({"materialId": "ghost"}))

        assert codes(violations) == ["MATERIAL_NOT_FOUND"]

    @pytest.mark.asyncio
    async def test_negative_quantity(self, fake_port, make_context):
        fake_port.add_material("mat-1")

        violations = await InventoryRuleEvaluator().evaluate(
            make_context({"materialId": "mat-1", "quantityOnHand": -5})
        )

        assert codes(violations) == ["NEGATIVE_INVENTORY"]

    @pytest.mark.asyncio
    async def test_low_stock_at_reorder_level(self, fake_port, make_context):
        fake_port.add_material("mat-1", reorder_level=20)

        violations = await InventoryRuleEvaluator().evaluate(
            make_context({"materialId": "mat-1", "quantityOnHand": 20})
        )

        assert codes(violations) == ["LOW_STOCK_WARNING"]
        assert violations[0].severity is ViolationSeverity.WARNING

    @pytest.mark.asyncio
    async def test_stock_above_reorder_level(self, fake_port, make_context):
        fake_port.add_material("mat-1", reorder_level=20)

        assert await InventoryRuleEvaluator().evaluate(
            make_context({"materialId": "mat-1", "quantityOnHand": 21})
        ) == []

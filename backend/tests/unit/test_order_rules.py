"""Unit tests for order business rules"""

from datetime import timedelta
from decimal import Decimal

import pytest

from domain.governance.models import ViolationSeverity
from domain.governance.payloads import OrderPayload
from domain.governance.rules.order_rules import OrderRuleEvaluator, calculate_order_total
from fixtures.fake_port import FailingGovernancePort


def codes(violations):
    return [v.code for v in violations]


@pytest.fixture
def evaluator():
    return OrderRuleEvaluator()


class TestCustomerOrg:
    """INVALID_CUSTOMER_ORG"""

    @pytest.mark.asyncio
    async def test_customer_in_same_org_passes(self, evaluator, fake_port, make_context):
        fake_port.add_customer("cust-1", org_id="org-1")

        violations = await evaluator.evaluate(make_context({"customerId": "cust-1", "orgId": "org-1"}))

        assert violations == []

    @pytest.mark.asyncio
    async def test_customer_in_other_org(self, evaluator, fake_port, make_context):
        fake_port.add_customer("cust-1", org_id="org-2")

        violations = await evaluator.evaluate(make_context({"customerId": "cust-1", "orgId": "org-1"}))

        assert codes(violations) == ["INVALID_CUSTOMER_ORG"]
        assert violations[0].field == "customerId"
        assert violations[0].severity is ViolationSeverity.ERROR

    @pytest.mark.asyncio
    async def test_missing_customer(self, evaluator, make_context):
        violations = await evaluator.evaluate(make_context({"customerId": "ghost", "orgId": "org-1"}))

        assert codes(violations) == ["INVALID_CUSTOMER_ORG"]

    @pytest.mark.asyncio
    async def test_skipped_without_org(self, evaluator, fake_port, make_context):
        """Partial payloads only run the checks whose fields are present"""
        violations = await evaluator.evaluate(make_context({"customerId": "cust-1"}))

        assert violations == []
        assert "get_customer" not in fake_port.calls


class TestTotalCalculation:
    """INVALID_TOTAL_CALCULATION"""

    @pytest.mark.asyncio
    async def test_total_off_by_two_cents(self, evaluator, make_context):
        payload = {"items": [{"quantity": 2, "priceSnapshot": 10}], "totalAmount": 19.98}

        violations = await evaluator.evaluate(make_context(payload))

        assert codes(violations) == ["INVALID_TOTAL_CALCULATION"]
        assert violations[0].field == "totalAmount"
        assert "20.00" in violations[0].message

    @pytest.mark.asyncio
    async def test_total_within_one_cent(self, evaluator, make_context):
        payload = {"items": [{"quantity": 2, "priceSnapshot": 10}], "totalAmount": "20.01"}

        assert await evaluator.evaluate(make_context(payload)) == []

    @pytest.mark.asyncio
    async def test_exact_total_over_many_items(self, evaluator, make_context):
        payload = {
            "items": [
                {"quantity": 3, "priceSnapshot": "0.10"},
                {"quantity": 1, "priceSnapshot": "0.20"},
            ],
            "totalAmount": "0.50",
        }

        assert await evaluator.evaluate(make_context(payload)) == []

    def test_missing_item_values_count_as_zero(self):
        order = OrderPayload.model_validate({"items": [{"quantity": 2}, {"priceSnapshot": 5}]})

        assert calculate_order_total(order) == Decimal(0)


class TestDueDate:
    """DUE_DATE_TOO_SOON / DUE_DATE_TOO_FAR compare fractional days until due"""

    @pytest.mark.asyncio
    async def test_half_a_day_is_too_soon(self, evaluator, make_context, now):
        payload = {"dueDate": (now + timedelta(hours=12)).isoformat()}

        violations = await evaluator.evaluate(make_context(payload))

        assert codes(violations) == ["DUE_DATE_TOO_SOON"]
        assert violations[0].severity is ViolationSeverity.ERROR

    @pytest.mark.asyncio
    async def test_past_due_date_is_too_soon(self, evaluator, make_context, now):
        payload = {"dueDate": (now - timedelta(days=3)).isoformat()}

        assert codes(await evaluator.evaluate(make_context(payload))) == ["DUE_DATE_TOO_SOON"]

    @pytest.mark.asyncio
    async def test_one_day_out_is_fine(self, evaluator, make_context, now):
        payload = {"dueDate": (now + timedelta(days=1, minutes=1)).isoformat()}

        assert await evaluator.evaluate(make_context(payload)) == []

    @pytest.mark.asyncio
    async def test_over_a_year_is_a_warning(self, evaluator, make_context, now):
        payload = {"dueDate": (now + timedelta(days=400)).isoformat()}

        violations = await evaluator.evaluate(make_context(payload))

        assert codes(violations) == ["DUE_DATE_TOO_FAR"]
        assert violations[0].severity is ViolationSeverity.WARNING

    @pytest.mark.asyncio
    async def test_half_a_day_past_a_year_is_a_warning(self, evaluator, make_context, now):
        payload = {"dueDate": (now + timedelta(days=365, hours=12)).isoformat()}

        assert codes(await evaluator.evaluate(make_context(payload))) == ["DUE_DATE_TOO_FAR"]

    @pytest.mark.asyncio
    async def test_exactly_a_year_is_fine(self, evaluator, make_context, now):
        payload = {"dueDate": (now + timedelta(days=365)).isoformat()}

        assert await evaluator.evaluate(make_context(payload)) == []

    @pytest.mark.asyncio
    async def test_naive_due_date_treated_as_utc(self, evaluator, make_context, now):
        payload = {"dueDate": (now + timedelta(days=10)).replace(tzinfo=None).isoformat()}

        assert await evaluator.evaluate(make_context(payload)) == []


class TestProfitMarginAndQuantities:
    """LOW_PROFIT_MARGIN and HIGH_QUANTITY_WARNING"""

    @pytest.mark.asyncio
    async def test_low_margin(self, evaluator, make_context):
        violations = await evaluator.evaluate(make_context({"totalAmount": 1000, "revenueEstimate": 50}))

        assert codes(violations) == ["LOW_PROFIT_MARGIN"]
        assert violations[0].severity is ViolationSeverity.WARNING

    @pytest.mark.asyncio
    async def test_ten_percent_margin_passes(self, evaluator, make_context):
        assert await evaluator.evaluate(make_context({"totalAmount": 1000, "revenueEstimate": 100})) == []

    @pytest.mark.asyncio
    async def test_zero_total_skips_margin(self, evaluator, make_context):
        assert await evaluator.evaluate(make_context({"totalAmount": 0, "revenueEstimate": 0})) == []

    @pytest.mark.asyncio
    async def test_high_quantity_names_item_index(self, evaluator, make_context):
        payload = {"items": [{"quantity": 5}, {"quantity": 1500}]}

        violations = await evaluator.evaluate(make_context(payload))

        assert codes(violations) == ["HIGH_QUANTITY_WARNING"]
        assert violations[0].field == "items[1].quantity"


class TestOrderEvaluator:
    """Evaluator-level behaviour"""

    @pytest.mark.asyncio
    async def test_collects_every_violation(self, evaluator, fake_port, make_context, now):
        fake_port.add_customer("cust-1", org_id="org-2")
        payload = {
            "orgId": "org-1",
            "customerId": "cust-1",
            "items": [{"quantity": 2000, "priceSnapshot": 1}],
            "totalAmount": 10,
            "dueDate": (now + timedelta(hours=2)).isoformat(),
        }

        violations = await evaluator.evaluate(make_context(payload))

        assert codes(violations) == [
            "INVALID_CUSTOMER_ORG",
            "INVALID_TOTAL_CALCULATION",
            "DUE_DATE_TOO_SOON",
            "HIGH_QUANTITY_WARNING",
        ]

    @pytest.mark.asyncio
    async def test_empty_payload_has_no_violations(self, evaluator, make_context):
        assert await evaluator.evaluate(make_context({})) == []

    @pytest.mark.asyncio
    async def test_data_failure_becomes_system_error(self, evaluator, make_context):
        port = FailingGovernancePort(failing="get_customer")

        violations = await evaluator.evaluate(make_context(
            {"customerId": "cust-1", "orgId": "org-1", "totalAmount": 5, "items": []},
            data=port,
        ))

        assert codes(violations) == ["VALIDATION_SYSTEM_ERROR"]
        assert violations[0].field == "general"
        assert violations[0].message == "Unable to validate business rules"

    @pytest.mark.asyncio
    async def test_malformed_payload_becomes_system_error(self, evaluator, make_context):
        violations = await evaluator.evaluate(make_context({"totalAmount": "lots"}))

        assert codes(violations) == ["VALIDATION_SYSTEM_ERROR"]

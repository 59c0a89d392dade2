"""Inventory business rules.

Rules implemented:
- MATERIAL_NOT_FOUND: referenced material must exist
- NEGATIVE_INVENTORY: quantity on hand cannot be negative
- LOW_STOCK_WARNING: quantity on hand at or below the reorder level
"""

from ..models import EntityKind, EvaluationContext, Violation, ViolationCode
from ..payloads import InventoryPayload
from .base import RuleEvaluator


async def validate_material_exists(inventory: InventoryPayload, context: EvaluationContext) -> list[Violation]:
    if not inventory.material_id:
        return []

    if await context.data.get_material(inventory.material_id) is None:
        return [Violation.error(
            "materialId",
            "Material not found",
            ViolationCode.MATERIAL_NOT_FOUND,
        )]
    return []


async def validate_non_negative(inventory: InventoryPayload, context: EvaluationContext) -> list[Violation]:
    if inventory.quantity_on_hand is not None and inventory.quantity_on_hand < 0:
        return [Violation.error(
            "quantityOnHand",
            "Quantity on hand cannot be negative",
            ViolationCode.NEGATIVE_INVENTORY,
        )]
    return []


async def validate_reorder_level(inventory: InventoryPayload, context: EvaluationContext) -> list[Violation]:
    if not inventory.material_id or inventory.quantity_on_hand is None:
        return []

    material = await context.data.get_material(inventory.material_id)
    if material is not None and material.reorder_level and inventory.quantity_on_hand <= material.reorder_level:
        return [Violation.warning(
            "quantityOnHand",
            f"Inventory below reorder level ({material.reorder_level})",
            ViolationCode.LOW_STOCK_WARNING,
        )]
    return []


class InventoryRuleEvaluator(RuleEvaluator):
    """Business rules for inventory updates."""

    kind = EntityKind.INVENTORY
    payload_model = InventoryPayload
    system_error_message = "Unable to validate inventory business rules"

    def checks(self):
        return (
            ("material_exists", validate_material_exists),
            ("non_negative", validate_non_negative),
            ("reorder_level", validate_reorder_level),
        )

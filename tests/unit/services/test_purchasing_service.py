"""Tests for PurchasingService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from artstock.core.entities.costing import RecalculationReport
from artstock.core.entities.stock import AppliedMovement, MaterialMovement, MovementType
from artstock.core.exceptions import ValidationError
from artstock.core.services import PurchasingService


@pytest.fixture
def purchase_store():
    store = AsyncMock()

    async def record_purchase(purchase):
        applied = AppliedMovement(
            old_quantity=0,
            new_quantity=purchase.quantity,
            movement=MaterialMovement(
                id=1,
                material_id=purchase.material_id,
                movement_type=MovementType.IN,
                quantity=purchase.quantity,
                delta=purchase.quantity,
                reason="Purchase",
            ),
        )
        return purchase.model_copy(update={"id": 10}), applied

    store.record_purchase.side_effect = record_purchase
    return store


@pytest.fixture
def cost_service():
    service = AsyncMock()
    service.recalculate_all.return_value = RecalculationReport(total=2, updated=2)
    return service


class TestRecordPurchase:
    async def test_records_and_refreshes_costs(self, purchase_store, cost_service):
        service = PurchasingService(purchase_store, cost_service)

        result = await service.record_purchase("CANVAS", 20, 4.5, supplier="ArtCo")

        assert result.purchase.id == 10
        assert result.purchase.supplier == "ArtCo"
        assert result.applied.new_quantity == 20
        assert result.recalculation.total == 2
        (filters,), _ = cost_service.recalculate_all.await_args
        assert filters.material_id == "CANVAS"
        assert filters.active_only is False

    async def test_refresh_can_be_disabled(self, purchase_store, cost_service):
        service = PurchasingService(purchase_store, cost_service, recalculate_on_purchase=False)

        result = await service.record_purchase("CANVAS", 20, 4.5)

        assert result.recalculation is None
        cost_service.recalculate_all.assert_not_called()

    async def test_purchase_date_kept(self, purchase_store, cost_service):
        service = PurchasingService(purchase_store, cost_service)
        when = datetime(2024, 2, 1, tzinfo=UTC)

        result = await service.record_purchase("CANVAS", 1, 1, purchase_date=when)

        assert result.purchase.purchase_date == when

    @pytest.mark.parametrize(("quantity", "unit_price"), [(0, 1), (-1, 1), (1, -0.5)])
    async def test_rejects_bad_values(self, purchase_store, cost_service, quantity, unit_price):
        service = PurchasingService(purchase_store, cost_service)
        with pytest.raises(ValidationError):
            await service.record_purchase("CANVAS", quantity, unit_price)
        purchase_store.record_purchase.assert_not_called()

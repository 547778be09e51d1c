"""Purchase recording with optional cost refresh of affected pictures."""

from dataclasses import dataclass
from datetime import datetime

from artstock.config import get_logger
from artstock.core.entities.costing import RecalculationFilter, RecalculationReport
from artstock.core.entities.material import MaterialPurchase
from artstock.core.entities.stock import AppliedMovement
from artstock.core.exceptions import ValidationError
from artstock.core.interfaces.purchase_store import IPurchaseStore
from artstock.core.services.cost_calculation import CostCalculationService

logger = get_logger(__name__)


@dataclass
class PurchaseResult:
    """Stored purchase, its stock movement and the optional cost refresh."""

    purchase: MaterialPurchase
    applied: AppliedMovement
    recalculation: RecalculationReport | None = None


class PurchasingService:
    """Records material purchases."""

    def __init__(
        self,
        purchase_store: IPurchaseStore,
        cost_service: CostCalculationService,
        recalculate_on_purchase: bool = True,
    ):
        self._purchase_store = purchase_store
        self._cost_service = cost_service
        self._recalculate_on_purchase = recalculate_on_purchase

    async def record_purchase(
        self,
        material_id: str,
        quantity: float,
        unit_price: float,
        supplier: str | None = None,
        purchase_date: datetime | None = None,
    ) -> PurchaseResult:
        """
        Store a purchase and receive its quantity into stock in one transaction.

        With recalculation on, every picture using the material then gets a
        fresh cost_price. Prices are left alone.
        """
        if quantity <= 0:
            raise ValidationError("quantity", "must be greater than zero", quantity)
        if unit_price < 0:
            raise ValidationError("unit_price", "must not be negative", unit_price)

        purchase = MaterialPurchase(
            material_id=material_id,
            quantity=quantity,
            unit_price=unit_price,
            supplier=supplier,
        )
        if purchase_date is not None:
            purchase.purchase_date = purchase_date

        purchase, applied = await self._purchase_store.record_purchase(purchase)
        result = PurchaseResult(purchase=purchase, applied=applied)

        if self._recalculate_on_purchase:
            result.recalculation = await self._cost_service.recalculate_all(
                RecalculationFilter(material_id=material_id, active_only=False)
            )
            logger.info(
                "purchase_costs_refreshed",
                material_id=material_id,
                pictures=result.recalculation.total,
            )
        return result

"""
Picture cost calculation.

Material unit cost is the weighted average price of the most recent purchases
(total paid / quantity bought over the last N purchases, 0 with no purchases).
Picture cost is the bill-of-materials sum plus labour at the configured hourly
rate.
"""

import asyncio

from artstock.config import get_logger
from artstock.core.entities.costing import (
    CostBreakdown,
    CostLine,
    PricingFactors,
    RecalculationFilter,
    RecalculationItem,
    RecalculationReport,
    RecalculationStats,
)
from artstock.core.exceptions import PictureNotFoundError, ValidationError
from artstock.core.interfaces.picture_store import IPictureStore
from artstock.core.interfaces.purchase_store import IPurchaseStore
from artstock.core.services.pricing import margin_percent, price_breakdown

logger = get_logger(__name__)


class CostCalculationService:
    """Computes and stores picture cost prices."""

    def __init__(
        self,
        picture_store: IPictureStore,
        purchase_store: IPurchaseStore,
        purchase_window: int = 10,
        hourly_rate: float = 0.0,
    ):
        if purchase_window <= 0:
            raise ValidationError("purchase_window", "must be greater than zero", purchase_window)
        if hourly_rate < 0:
            raise ValidationError("hourly_rate", "must not be negative", hourly_rate)
        self._picture_store = picture_store
        self._purchase_store = purchase_store
        self._purchase_window = purchase_window
        self._hourly_rate = hourly_rate

    async def material_unit_cost(self, material_id: str) -> float:
        """Weighted average unit price over the recent purchase window."""
        purchases = await self._purchase_store.recent_purchases(
            material_id, limit=self._purchase_window
        )
        total_quantity = sum(p.quantity for p in purchases)
        if total_quantity <= 0:
            return 0.0
        return sum(p.total_price for p in purchases) / total_quantity

    async def calculate_cost(self, picture_id: str) -> CostBreakdown:
        """Cost of one picture from its bill of materials and work hours."""
        picture = await self._picture_store.get_picture(picture_id)
        if picture is None:
            raise PictureNotFoundError(picture_id)

        lines = []
        unit_costs: dict[str, float] = {}
        for line in await self._picture_store.get_bill_of_materials(picture_id):
            if line.material_id not in unit_costs:
                unit_costs[line.material_id] = await self.material_unit_cost(line.material_id)
            unit_cost = unit_costs[line.material_id]
            lines.append(
                CostLine(
                    material_id=line.material_id,
                    quantity=line.quantity,
                    unit_cost=round(unit_cost, 4),
                    line_cost=round(line.quantity * unit_cost, 2),
                )
            )

        material_cost = round(sum(line.quantity * unit_costs[line.material_id] for line in lines), 2)
        labor_cost = round(picture.work_hours * self._hourly_rate, 2)
        breakdown = CostBreakdown(
            picture_id=picture_id,
            unit_cost=round(material_cost + labor_cost, 2),
            material_cost=material_cost,
            labor_cost=labor_cost,
            lines=lines,
        )
        logger.debug(
            "picture_cost_calculated",
            picture_id=picture_id,
            unit_cost=breakdown.unit_cost,
            lines=len(lines),
        )
        return breakdown

    async def update_cost(self, picture_id: str) -> CostBreakdown:
        """Calculate and store a picture's cost_price."""
        breakdown = await self.calculate_cost(picture_id)
        await self._picture_store.update_costing(picture_id, cost_price=breakdown.unit_cost)
        logger.info("picture_cost_updated", picture_id=picture_id, cost_price=breakdown.unit_cost)
        return breakdown

    async def recalculate_all(
        self,
        filter: RecalculationFilter | None = None,
        update_prices: bool = False,
        pricing: PricingFactors | None = None,
    ) -> RecalculationReport:
        """
        Recalculate cost (and optionally price) for every matching picture.

        Pictures are processed one by one; a failure is recorded against that
        picture and the loop continues. Prices move only with
        ``update_prices=True``.
        """
        filter = filter or RecalculationFilter()
        pricing = pricing or PricingFactors()
        pictures = await self._picture_store.list_pictures(
            material_id=filter.material_id,
            picture_type=filter.picture_type,
            active_only=filter.active_only,
        )

        report = RecalculationReport(total=len(pictures))
        for picture in pictures:
            item = RecalculationItem(
                picture_id=picture.id,
                picture_name=picture.name,
                old_cost_price=picture.cost_price,
                old_price=picture.price,
            )
            try:
                breakdown = await self.calculate_cost(picture.id)
                item.new_cost_price = breakdown.unit_cost
                new_price = None
                if update_prices:
                    new_price = price_breakdown(breakdown.unit_cost, pricing).final_price
                    item.new_price = new_price
                    item.price_updated = new_price != picture.price
                await self._picture_store.update_costing(
                    picture.id, cost_price=breakdown.unit_cost, price=new_price
                )
                report.updated += 1
            except Exception as e:
                item.error = str(e)
                report.errors.append(item)
                logger.warning(
                    "picture_recalculation_failed",
                    picture_id=picture.id,
                    error=str(e),
                )
            report.items.append(item)
            # Cancellation point between pictures
            await asyncio.sleep(0)

        logger.info(
            "costs_recalculated",
            total=report.total,
            updated=report.updated,
            errors=len(report.errors),
            update_prices=update_prices,
        )
        return report

    async def recalculation_stats(self) -> RecalculationStats:
        """Cost-price coverage of active pictures, overall and per type."""
        pictures = await self._picture_store.list_pictures(active_only=True)
        stats = RecalculationStats(total=len(pictures))
        if not pictures:
            return stats

        costed = [p for p in pictures if p.cost_price and p.cost_price > 0]
        stats.with_cost_price = len(costed)
        stats.without_cost_price = len(pictures) - len(costed)
        stats.average_cost_price = round(sum(p.cost_price for p in costed) / len(pictures), 2)
        stats.average_price = round(sum(p.price for p in pictures) / len(pictures), 2)
        stats.average_margin = margin_percent(stats.average_price, stats.average_cost_price)

        for picture_type, group in stats.by_type.items():
            members = [p for p in pictures if p.type.value == picture_type]
            if not members:
                continue
            group.count = len(members)
            group.average_cost = round(sum(p.cost_price or 0.0 for p in members) / len(members), 2)
            group.average_price = round(sum(p.price for p in members) / len(members), 2)

        logger.info(
            "recalculation_stats_computed",
            total=stats.total,
            without_cost_price=stats.without_cost_price,
        )
        return stats

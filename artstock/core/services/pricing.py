"""
Recommended sale prices.

    price = clamp(cost * (1 + markup / 100) * complexity * size * urgency,
                  min_price, max_price)

rounded to cents. The breakdown keeps every intermediate factor so a price can
be explained to the workshop owner.
"""

from typing import TYPE_CHECKING, Any

import pydantic

from artstock.config import get_logger
from artstock.core.entities.costing import (
    MarkupAdvice,
    PriceBreakdown,
    PriceGroupStats,
    PriceRecommendation,
    PricingFactors,
    PricingStats,
    RecommendedPricingSettings,
    price_range,
)
from artstock.core.exceptions import PictureSizeNotFoundError, ValidationError
from artstock.core.interfaces.picture_store import IPictureStore

if TYPE_CHECKING:
    from artstock.core.services.cost_calculation import CostCalculationService

logger = get_logger(__name__)

# Average markup (percent over cost) below which a raise is advised, and at or
# above which a cut is advised.
LOW_MARKUP = 150.0
HIGH_MARKUP = 250.0
RAISED_MARKUP = 200.0
LOWERED_MARKUP = 250.0


def margin_percent(price: float, cost: float) -> float:
    """Profit share of ``price`` in percent, 0 for a non-positive price."""
    return round((price - cost) / price * 100, 2) if price > 0 else 0.0


def parse_factors(
    factors: PricingFactors | dict[str, Any] | None,
    defaults: PricingFactors | None = None,
) -> PricingFactors:
    """
    Merge caller overrides onto defaults.

    Raises ValidationError for malformed values (non-positive multiplier,
    min above max, markup below -100%).
    """
    base = defaults or PricingFactors()
    if factors is None:
        return base
    if isinstance(factors, PricingFactors):
        return factors
    try:
        return PricingFactors(**{**base.model_dump(), **factors})
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "pricing"
        raise ValidationError(field, first.get("msg", str(e)), first.get("input")) from e


def price_breakdown(cost_price: float, factors: PricingFactors) -> PriceBreakdown:
    """Apply markup, multipliers and bounds to a cost price."""
    base_price = cost_price * (1 + factors.markup_percentage / 100)
    unclamped = (
        base_price
        * factors.complexity_multiplier
        * factors.size_multiplier
        * factors.urgency_multiplier
    )
    clamped_price = min(max(unclamped, factors.min_price), factors.max_price)
    final_price = round(clamped_price, 2)
    profit = round(final_price - cost_price, 2)
    margin = round(profit / final_price * 100, 2) if final_price else 0.0

    return PriceBreakdown(
        cost_price=cost_price,
        markup_percentage=factors.markup_percentage,
        base_price=round(base_price, 2),
        complexity_multiplier=factors.complexity_multiplier,
        size_multiplier=factors.size_multiplier,
        urgency_multiplier=factors.urgency_multiplier,
        unclamped_price=round(unclamped, 2),
        min_price=factors.min_price,
        max_price=factors.max_price,
        clamped=clamped_price != unclamped,
        final_price=final_price,
        profit=profit,
        profit_margin=margin,
    )


class PricingService:
    """Recommends and applies sale prices from calculated costs."""

    def __init__(
        self,
        cost_service: "CostCalculationService",
        picture_store: IPictureStore,
        defaults: PricingFactors | None = None,
    ):
        self._cost_service = cost_service
        self._picture_store = picture_store
        self._defaults = defaults or PricingFactors()

    @property
    def defaults(self) -> PricingFactors:
        return self._defaults

    async def recommend_price(
        self,
        picture_id: str,
        factors: PricingFactors | dict[str, Any] | None = None,
    ) -> PriceRecommendation:
        """Recommended price for a picture from its current calculated cost."""
        settings = parse_factors(factors, self._defaults)
        cost = await self._cost_service.calculate_cost(picture_id)
        breakdown = price_breakdown(cost.unit_cost, settings)

        logger.info(
            "price_recommended",
            picture_id=picture_id,
            cost_price=cost.unit_cost,
            price=breakdown.final_price,
            clamped=breakdown.clamped,
        )
        return PriceRecommendation(
            picture_id=picture_id,
            price=breakdown.final_price,
            breakdown=breakdown,
        )

    async def apply_price(
        self,
        picture_id: str,
        factors: PricingFactors | dict[str, Any] | None = None,
    ) -> PriceRecommendation:
        """Recommend a price and write it, with the cost, to the picture."""
        recommendation = await self.recommend_price(picture_id, factors)
        await self._picture_store.update_costing(
            picture_id,
            cost_price=recommendation.breakdown.cost_price,
            price=recommendation.price,
        )
        logger.info("price_applied", picture_id=picture_id, price=recommendation.price)
        return recommendation

    async def price_by_size(
        self,
        picture_size_id: str,
        base_price_per_cm2: float = 0.5,
        type_multiplier: float = 1.0,
        factors: PricingFactors | dict[str, Any] | None = None,
    ) -> float:
        """Area-based quote for a size, bounded by the min and max price."""
        if base_price_per_cm2 < 0:
            raise ValidationError("base_price_per_cm2", "must not be negative", base_price_per_cm2)
        if type_multiplier <= 0:
            raise ValidationError("type_multiplier", "must be greater than zero", type_multiplier)
        settings = parse_factors(factors, self._defaults)
        size = await self._picture_store.get_size(picture_size_id)
        if size is None:
            raise PictureSizeNotFoundError(picture_size_id)

        price = size.width_cm * size.height_cm * base_price_per_cm2 * type_multiplier
        return round(min(max(price, settings.min_price), settings.max_price), 2)

    async def pricing_stats(self) -> PricingStats:
        """Price, cost and margin averages over active pictures with their groupings."""
        pictures = await self._picture_store.list_pictures(active_only=True)
        stats = PricingStats(total=len(pictures))
        if not pictures:
            return stats

        size_names: dict[str, str] = {}
        total_price = total_cost = 0.0
        for picture in pictures:
            if picture.picture_size_id not in size_names:
                size = await self._picture_store.get_size(picture.picture_size_id)
                size_names[picture.picture_size_id] = size.name if size else picture.picture_size_id
            cost = picture.cost_price or 0.0
            total_price += picture.price
            total_cost += cost

            for groups, key in (
                (stats.by_type, picture.type.value),
                (stats.by_size, size_names[picture.picture_size_id]),
            ):
                group = groups.setdefault(key, PriceGroupStats())
                group.count += 1
                group.total_price += picture.price
                group.total_cost += cost
            stats.price_ranges[price_range(picture.price)] += 1

        stats.average_price = round(total_price / len(pictures), 2)
        stats.average_cost = round(total_cost / len(pictures), 2)
        stats.average_margin = margin_percent(stats.average_price, stats.average_cost)
        for group in [*stats.by_type.values(), *stats.by_size.values()]:
            group.total_price = round(group.total_price, 2)
            group.total_cost = round(group.total_cost, 2)
            group.average_price = round(group.total_price / group.count, 2)
            group.average_cost = round(group.total_cost / group.count, 2)
            group.average_margin = margin_percent(group.average_price, group.average_cost)

        logger.info(
            "pricing_stats_computed",
            total=stats.total,
            average_price=stats.average_price,
            average_margin=stats.average_margin,
        )
        return stats

    async def recommended_settings(self) -> RecommendedPricingSettings:
        """
        Suggest a default markup from the current average markup over cost.

        Below 150% a raise to 200% is advised, from 250% a cut to 250%, and in
        between the current markup is kept. Without any cost data the
        configured defaults are returned unchanged.
        """
        stats = await self.pricing_stats()
        if stats.average_cost <= 0:
            return RecommendedPricingSettings(
                factors=self._defaults,
                current_margin=stats.average_margin,
                advice=MarkupAdvice.NO_COST_DATA,
                reasoning="No cost prices recorded; keep the configured markup",
            )

        current_markup = round(
            (stats.average_price - stats.average_cost) / stats.average_cost * 100, 2
        )
        if current_markup < LOW_MARKUP:
            advice, markup = MarkupAdvice.RAISE, RAISED_MARKUP
            reasoning = "Raise the markup to improve profitability"
        elif current_markup < HIGH_MARKUP:
            advice, markup = MarkupAdvice.KEEP, current_markup
            reasoning = "The current markup is within the healthy range"
        else:
            advice, markup = MarkupAdvice.LOWER, LOWERED_MARKUP
            reasoning = "Consider lowering the markup to stay competitive"

        logger.info(
            "pricing_settings_recommended",
            current_markup=current_markup,
            advice=advice.value,
            markup_percentage=markup,
        )
        return RecommendedPricingSettings(
            factors=self._defaults.model_copy(update={"markup_percentage": markup}),
            current_markup=current_markup,
            current_margin=stats.average_margin,
            advice=advice,
            reasoning=reasoning,
        )

"""Cost and pricing domain entities."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from artstock.core.entities.picture import PictureType


class CostLine(BaseModel):
    """Cost contribution of one bill-of-materials line."""

    material_id: str
    quantity: float
    unit_cost: float
    line_cost: float


class CostBreakdown(BaseModel):
    """Unit cost of a picture with its per-line contributions."""

    picture_id: str
    unit_cost: float
    material_cost: float
    labor_cost: float = 0.0
    lines: list[CostLine] = Field(default_factory=list)


class PricingFactors(BaseModel):
    """Options recognised by the pricing engine."""

    markup_percentage: float = Field(default=200.0, ge=-100)
    min_price: float = Field(default=50.0, ge=0)
    max_price: float = Field(default=1000.0, ge=0)
    complexity_multiplier: float = Field(default=1.0, gt=0)
    size_multiplier: float = Field(default=1.0, gt=0)
    urgency_multiplier: float = Field(default=1.0, gt=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "PricingFactors":
        if self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self


class PriceBreakdown(BaseModel):
    """Every intermediate factor of a price recommendation."""

    cost_price: float
    markup_percentage: float
    base_price: float
    complexity_multiplier: float
    size_multiplier: float
    urgency_multiplier: float
    unclamped_price: float
    min_price: float
    max_price: float
    clamped: bool
    final_price: float
    profit: float
    profit_margin: float


class PriceRecommendation(BaseModel):
    """Suggested sale price for a picture."""

    picture_id: str
    price: float
    breakdown: PriceBreakdown


class RecalculationFilter(BaseModel):
    """Which pictures a bulk recalculation touches."""

    material_id: str | None = None
    picture_type: PictureType | None = None
    active_only: bool = True


class RecalculationItem(BaseModel):
    """Outcome for one picture of a bulk recalculation."""

    picture_id: str
    picture_name: str
    old_cost_price: float | None = None
    new_cost_price: float | None = None
    old_price: float | None = None
    new_price: float | None = None
    price_updated: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class RecalculationReport(BaseModel):
    """Aggregate outcome of a bulk recalculation."""

    total: int = 0
    updated: int = 0
    errors: list[RecalculationItem] = Field(default_factory=list)
    items: list[RecalculationItem] = Field(default_factory=list)


PRICE_RANGES = ("under_50", "50_100", "100_200", "200_500", "500_1000", "over_1000")


def price_range(price: float) -> str:
    """Bucket label for a sale price; upper bounds are inclusive."""
    if price < 50:
        return "under_50"
    if price <= 100:
        return "50_100"
    if price <= 200:
        return "100_200"
    if price <= 500:
        return "200_500"
    if price <= 1000:
        return "500_1000"
    return "over_1000"


class PriceGroupStats(BaseModel):
    """Price and cost figures for one group of pictures."""

    count: int = 0
    total_price: float = 0.0
    total_cost: float = 0.0
    average_price: float = 0.0
    average_cost: float = 0.0
    average_margin: float = 0.0


class PricingStats(BaseModel):
    """
    Price and cost figures over active pictures.

    ``average_margin`` is the profit share of the average price, in percent.
    A picture without a cost price counts as zero cost.
    """

    total: int = 0
    average_price: float = 0.0
    average_cost: float = 0.0
    average_margin: float = 0.0
    by_type: dict[str, PriceGroupStats] = Field(default_factory=dict)
    by_size: dict[str, PriceGroupStats] = Field(default_factory=dict)
    price_ranges: dict[str, int] = Field(default_factory=lambda: dict.fromkeys(PRICE_RANGES, 0))


class MarkupAdvice(str, Enum):
    """Direction of a markup recommendation."""

    RAISE = "RAISE"
    KEEP = "KEEP"
    LOWER = "LOWER"
    NO_COST_DATA = "NO_COST_DATA"


class RecommendedPricingSettings(BaseModel):
    """Pricing defaults suggested from the current price and cost averages."""

    factors: PricingFactors
    base_price_per_cm2: float = 0.5
    current_markup: float | None = None
    current_margin: float = 0.0
    advice: MarkupAdvice
    reasoning: str


class TypeCostStats(BaseModel):
    """Cost coverage for one picture type."""

    count: int = 0
    average_cost: float = 0.0
    average_price: float = 0.0


class RecalculationStats(BaseModel):
    """How many active pictures carry a cost price, with averages."""

    total: int = 0
    with_cost_price: int = 0
    without_cost_price: int = 0
    average_cost_price: float = 0.0
    average_price: float = 0.0
    average_margin: float = 0.0
    by_type: dict[str, TypeCostStats] = Field(
        default_factory=lambda: {t.value: TypeCostStats() for t in PictureType}
    )

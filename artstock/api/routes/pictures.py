"""Picture costing and pricing endpoints."""

from fastapi import APIRouter, Depends, Query

from artstock.api.dependencies import get_bom, get_costing, get_pricing, get_state_machine
from artstock.application.dto.requests import (
    RebuildMaterialsRequest,
    RecalculateRequest,
    RecommendedPriceRequest,
)
from artstock.application.dto.responses import (
    CascadeWarningResponse,
    ErrorResponse,
    MaterialLineResponse,
    RebuildMaterialsResponse,
)
from artstock.core.entities.costing import (
    CostBreakdown,
    PriceRecommendation,
    PricingStats,
    RecalculationFilter,
    RecalculationReport,
    RecalculationStats,
    RecommendedPricingSettings,
)
from artstock.core.services import (
    BillOfMaterialsService,
    CostCalculationService,
    OrderStateMachine,
    PricingService,
    parse_factors,
)

router = APIRouter(prefix="/api/pictures", tags=["pictures"])


@router.get("/pricing-stats", response_model=PricingStats)
async def pricing_stats(pricing: PricingService = Depends(get_pricing)) -> PricingStats:
    """Price, cost and margin averages over active pictures."""
    return await pricing.pricing_stats()


@router.get("/pricing-settings/recommended", response_model=RecommendedPricingSettings)
async def recommended_pricing_settings(
    pricing: PricingService = Depends(get_pricing),
) -> RecommendedPricingSettings:
    """Markup suggestion from the current average markup over cost."""
    return await pricing.recommended_settings()


@router.get("/recalculation-stats", response_model=RecalculationStats)
async def recalculation_stats(
    costing: CostCalculationService = Depends(get_costing),
) -> RecalculationStats:
    """How many active pictures carry a cost price."""
    return await costing.recalculation_stats()


@router.post(
    "/recalculate",
    response_model=RecalculationReport,
    responses={400: {"model": ErrorResponse}},
)
async def recalculate_costs(
    request: RecalculateRequest,
    costing: CostCalculationService = Depends(get_costing),
    pricing: PricingService = Depends(get_pricing),
) -> RecalculationReport:
    """
    Recalculate cost_price for every matching picture.

    Sale prices move only when update_prices is set. Failures are reported
    per picture and do not stop the run.
    """
    factors = parse_factors(request.pricing, pricing.defaults)
    return await costing.recalculate_all(
        RecalculationFilter(
            material_id=request.material_id,
            picture_type=request.picture_type,
            active_only=request.active_only,
        ),
        update_prices=request.update_prices,
        pricing=factors,
    )


@router.get(
    "/sizes/{picture_size_id}/quote",
    response_model=dict[str, float],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def quote_by_size(
    picture_size_id: str,
    base_price_per_cm2: float = Query(default=0.5, ge=0),
    type_multiplier: float = Query(default=1.0, gt=0),
    pricing: PricingService = Depends(get_pricing),
) -> dict[str, float]:
    """Area-based price quote for a picture size."""
    price = await pricing.price_by_size(
        picture_size_id,
        base_price_per_cm2=base_price_per_cm2,
        type_multiplier=type_multiplier,
    )
    return {"price": price}


@router.get(
    "/{picture_id}/cost",
    response_model=CostBreakdown,
    responses={404: {"model": ErrorResponse}},
)
async def get_picture_cost(
    picture_id: str,
    costing: CostCalculationService = Depends(get_costing),
) -> CostBreakdown:
    """Unit cost of a picture from its bill of materials."""
    return await costing.calculate_cost(picture_id)


@router.post(
    "/{picture_id}/recommended-price",
    response_model=PriceRecommendation,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def recommended_price(
    picture_id: str,
    request: RecommendedPriceRequest | None = None,
    pricing: PricingService = Depends(get_pricing),
) -> PriceRecommendation:
    """Recommended sale price; with apply=true it is written to the picture."""
    request = request or RecommendedPriceRequest()
    if request.apply:
        return await pricing.apply_price(picture_id, request.overrides())
    return await pricing.recommend_price(picture_id, request.overrides())


@router.post(
    "/{picture_id}/materials/rebuild",
    response_model=RebuildMaterialsResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def rebuild_materials(
    picture_id: str,
    request: RebuildMaterialsRequest | None = None,
    bom: BillOfMaterialsService = Depends(get_bom),
    costing: CostCalculationService = Depends(get_costing),
) -> RebuildMaterialsResponse:
    """
    Regenerate the standard bill of materials, changing the size first if given.

    The picture's cost price is recalculated from the new lines.
    """
    request = request or RebuildMaterialsRequest()
    rebuilt = await bom.rebuild(picture_id, request.picture_size_id)
    cost = await costing.update_cost(picture_id)
    return RebuildMaterialsResponse(
        picture_id=rebuilt.picture_id,
        picture_size_id=rebuilt.picture_size_id,
        lines=[
            MaterialLineResponse(material_id=line.material_id, quantity=line.quantity)
            for line in rebuilt.lines
        ],
        cost_price=cost.unit_cost,
    )


@router.delete(
    "/{picture_id}",
    response_model=list[CascadeWarningResponse],
    responses={404: {"model": ErrorResponse}},
)
async def release_picture(
    picture_id: str,
    state_machine: OrderStateMachine = Depends(get_state_machine),
) -> list[CascadeWarningResponse]:
    """
    Delete a picture after returning its outstanding materials.

    A non-empty warning list means the return failed and the picture was kept.
    """
    warnings = await state_machine.release_picture(picture_id)
    return [CascadeWarningResponse.from_warning(w) for w in warnings]

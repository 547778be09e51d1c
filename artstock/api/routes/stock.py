"""Stock ledger endpoints."""

from fastapi import APIRouter, Depends, Query, status

from artstock.api.dependencies import get_app_settings, get_ledger, get_purchasing
from artstock.application.dto.requests import AdjustRequest, MovementRequest, PurchaseRequest
from artstock.application.dto.responses import (
    AdjustResponse,
    ConsumeResponse,
    ErrorResponse,
    MovementListResponse,
    MovementResponse,
    PurchaseResponse,
    ReceiveResponse,
    ReconciliationResponse,
    StockResponse,
)
from artstock.config import Settings
from artstock.core.entities.stock import LedgerStats, MovementReference, ReferenceKind
from artstock.core.services import PurchasingService, StockLedger

router = APIRouter(prefix="/api/stock", tags=["stock"])


def _reference(request: MovementRequest) -> MovementReference | None:
    if request.reference_id is None:
        return None
    return MovementReference(
        entity_id=request.reference_id,
        kind=request.reference_kind or ReferenceKind.MANUAL,
    )


@router.get("/movements", response_model=MovementListResponse)
async def list_movements(
    material_id: str | None = None,
    limit: int | None = Query(default=None, gt=0),
    offset: int = Query(default=0, ge=0),
    ledger: StockLedger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
) -> MovementListResponse:
    """List movements, most recent first."""
    limit = min(
        limit or settings.ledger.default_movement_limit,
        settings.ledger.max_movement_limit,
    )
    movements = await ledger.list_movements(material_id=material_id, limit=limit, offset=offset)
    return MovementListResponse(
        items=[MovementResponse.from_entity(m) for m in movements],
        limit=limit,
        offset=offset,
    )


@router.get("/stats", response_model=LedgerStats)
async def ledger_stats(ledger: StockLedger = Depends(get_ledger)) -> LedgerStats:
    """Material count, low-stock count, total quantity and recent movement count."""
    return await ledger.stats()


@router.get("/low", response_model=list[StockResponse])
async def list_low_stock(
    limit: int = Query(default=100, gt=0, le=1000),
    offset: int = Query(default=0, ge=0),
    ledger: StockLedger = Depends(get_ledger),
) -> list[StockResponse]:
    """Stocks at or below their minimum level."""
    stocks = await ledger.list_low_stock(limit=limit, offset=offset)
    return [StockResponse.from_entity(s) for s in stocks]


@router.get(
    "/{material_id}",
    response_model=StockResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_stock(
    material_id: str,
    ledger: StockLedger = Depends(get_ledger),
) -> StockResponse:
    """Current stock of a material."""
    return StockResponse.from_entity(await ledger.get_stock(material_id))


@router.put(
    "/{material_id}/min-level",
    response_model=StockResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def set_min_level(
    material_id: str,
    min_level: float | None = None,
    ledger: StockLedger = Depends(get_ledger),
) -> StockResponse:
    """Set or clear the low-stock threshold."""
    return StockResponse.from_entity(await ledger.set_min_level(material_id, min_level))


@router.post(
    "/{material_id}/receive",
    response_model=ReceiveResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def receive_stock(
    material_id: str,
    request: MovementRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> ReceiveResponse:
    """Receive stock (IN movement)."""
    result = await ledger.receive(
        material_id,
        request.quantity,
        request.reason,
        reference=_reference(request),
        notes=request.notes,
    )
    return ReceiveResponse(
        new_quantity=result.new_quantity,
        movement=MovementResponse.from_entity(result.movement),
    )


@router.post(
    "/{material_id}/consume",
    response_model=ConsumeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def consume_stock(
    material_id: str,
    request: MovementRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> ConsumeResponse:
    """Consume stock (OUT movement). Stock may go negative."""
    result = await ledger.consume(
        material_id,
        request.quantity,
        request.reason,
        reference=_reference(request),
        notes=request.notes,
    )
    return ConsumeResponse(
        new_quantity=result.new_quantity,
        went_negative=result.went_negative,
        movement=MovementResponse.from_entity(result.movement),
    )


@router.post(
    "/{material_id}/adjust",
    response_model=AdjustResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    material_id: str,
    request: AdjustRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> AdjustResponse:
    """Set stock to an exact quantity (ADJUSTMENT movement)."""
    result = await ledger.adjust(
        material_id, request.new_quantity, request.reason, notes=request.notes
    )
    return AdjustResponse(
        old_quantity=result.old_quantity,
        new_quantity=result.new_quantity,
        delta=result.delta,
        movement=MovementResponse.from_entity(result.movement),
    )


@router.post(
    "/{material_id}/purchases",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_purchase(
    material_id: str,
    request: PurchaseRequest,
    purchasing: PurchasingService = Depends(get_purchasing),
) -> PurchaseResponse:
    """Record a purchase; its quantity is received into stock."""
    result = await purchasing.record_purchase(
        material_id,
        request.quantity,
        request.unit_price,
        supplier=request.supplier,
        purchase_date=request.purchase_date,
    )
    purchase = result.purchase
    return PurchaseResponse(
        id=purchase.id,  # type: ignore[arg-type]
        material_id=purchase.material_id,
        quantity=purchase.quantity,
        unit_price=purchase.unit_price,
        total_price=purchase.total_price,
        supplier=purchase.supplier,
        purchase_date=purchase.purchase_date,
        new_quantity=result.applied.new_quantity,
        movement=MovementResponse.from_entity(result.applied.movement),
        recalculated_pictures=result.recalculation.total if result.recalculation else None,
    )


@router.get(
    "/{material_id}/reconcile",
    response_model=ReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconcile_stock(
    material_id: str,
    ledger: StockLedger = Depends(get_ledger),
) -> ReconciliationResponse:
    """Compare stock with the sum of its movements."""
    return ReconciliationResponse.from_entity(await ledger.reconcile(material_id))

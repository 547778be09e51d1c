"""Order endpoints: intake, details, numbering and status transitions."""

from datetime import datetime

from fastapi import APIRouter, Depends, status

from artstock.api.dependencies import get_intake, get_numbering, get_state_machine
from artstock.application.dto.requests import CreateOrderRequest, UpdateOrderStatusRequest
from artstock.application.dto.responses import (
    ErrorResponse,
    NextNumberResponse,
    OrderCreatedResponse,
    OrderDetailResponse,
    StatusChangeResponse,
)
from artstock.core.services import OrderIntakeService, OrderNumberingService, OrderStateMachine

router = APIRouter(prefix="/api/orders", tags=["orders"])


# Fixed paths are declared before /{order_id}
@router.get(
    "/next-number",
    response_model=NextNumberResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def next_order_number(
    prefix: str | None = None,
    numbering: OrderNumberingService = Depends(get_numbering),
) -> NextNumberResponse:
    """
    Reserve the next order number.

    The number is consumed even if no order is created with it.
    """
    return NextNumberResponse(order_number=await numbering.next_number(prefix))


@router.get(
    "/numbering-stats",
    response_model=dict[str, int],
    responses={400: {"model": ErrorResponse}},
)
async def numbering_stats(
    start: datetime,
    end: datetime,
    numbering: OrderNumberingService = Depends(get_numbering),
) -> dict[str, int]:
    """Order counts per number prefix in a date range."""
    return await numbering.numbering_stats(start, end)


@router.post(
    "",
    response_model=OrderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_order(
    request: CreateOrderRequest,
    intake: OrderIntakeService = Depends(get_intake),
) -> OrderCreatedResponse:
    """Create an order with its pictures and bills of materials."""
    result = await intake.create_order(
        request.customer_name,
        request.pictures,
        prefix=request.prefix,
        notes=request.notes,
    )
    return OrderCreatedResponse.from_result(result)


@router.get(
    "/{order_id}",
    response_model=OrderDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_order(
    order_id: str,
    intake: OrderIntakeService = Depends(get_intake),
) -> OrderDetailResponse:
    """Order with its pictures and consumption records."""
    return OrderDetailResponse.from_details(await intake.get_order_details(order_id))


@router.post(
    "/{order_id}/status",
    response_model=StatusChangeResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    state_machine: OrderStateMachine = Depends(get_state_machine),
) -> StatusChangeResponse:
    """
    Move an order to a new status.

    Entering IN_PROGRESS, COMPLETED or DELIVERED consumes materials for any
    picture not yet consumed. CANCELLED returns everything still outstanding.
    Per-picture failures come back as warnings; the status change stands.
    """
    result = await state_machine.set_status(order_id, request.status)
    return StatusChangeResponse.from_result(result)

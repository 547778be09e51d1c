"""
Order fulfillment state machine.

Status changes are persisted first, in their own transaction, and only land if
the order still has the status the transition was checked against. Stock side
effects then run per picture, each in its own transaction:

- entering IN_PROGRESS, COMPLETED or DELIVERED consumes every picture's bill
  of materials once per order (pictures with outstanding consumption are
  skipped);
- entering CANCELLED returns exactly what the consumption records say was
  taken.

A failing picture becomes a CascadeWarning. It never rolls back the status
or the other pictures. A cancellation that lands mid-consumption stops the
remaining pictures from being taken.
"""

from datetime import UTC, datetime

from artstock.config import get_logger
from artstock.core.entities.order import (
    SIDE_EFFECTS,
    Order,
    OrderConsumption,
    OrderStatus,
    SideEffect,
    StatusChangeResult,
    can_transition,
)
from artstock.core.entities.picture import PictureMaterial
from artstock.core.exceptions import (
    ArtStockError,
    CascadeWarning,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    PictureNotFoundError,
    ValidationError,
)
from artstock.core.interfaces.fulfillment_store import IFulfillmentStore
from artstock.core.interfaces.order_store import IOrderStore
from artstock.core.interfaces.picture_store import IPictureStore
from artstock.core.services.bill_of_materials import BillOfMaterialsService

logger = get_logger(__name__)


def _cascade_warning(
    operation: str,
    error: Exception,
    order_id: str | None,
    picture_id: str | None,
    lines: list[PictureMaterial] | list[OrderConsumption],
) -> CascadeWarning:
    """Wrap a per-picture failure with the material and quantity it hit."""
    material_id = None
    if isinstance(error, ArtStockError):
        material_id = error.details.get("material_id")
    if material_id is None and len(lines) == 1:
        material_id = lines[0].material_id
    quantity = next((line.quantity for line in lines if line.material_id == material_id), None)

    warning = CascadeWarning(
        operation=operation,
        message=str(error),
        order_id=order_id,
        picture_id=picture_id,
        material_id=material_id,
        quantity=quantity,
    )
    logger.warning(
        "cascade_warning",
        operation=operation,
        order_id=order_id,
        picture_id=picture_id,
        material_id=material_id,
        quantity=quantity,
        error=str(error),
        error_type=type(error).__name__,
    )
    return warning


class OrderStateMachine:
    """Validates status transitions and drives their stock side effects."""

    def __init__(
        self,
        order_store: IOrderStore,
        picture_store: IPictureStore,
        fulfillment_store: IFulfillmentStore,
        bom_service: BillOfMaterialsService,
    ):
        self._order_store = order_store
        self._picture_store = picture_store
        self._fulfillment_store = fulfillment_store
        self._bom_service = bom_service

    async def set_status(
        self, order_id: str, new_status: OrderStatus | str
    ) -> StatusChangeResult:
        """
        Move an order to ``new_status`` and run the side effect of that status.

        Re-entering the current status is a retry: the side effect runs again
        and, thanks to the consumption records, only touches pictures that
        were not processed before.

        Raises:
            OrderNotFoundError: unknown order.
            InvalidStatusTransitionError: the table does not allow the move.
            ConcurrencyConflict: another request changed the status first.
        """
        try:
            requested = OrderStatus(new_status)
        except ValueError as e:
            raise ValidationError("status", "unknown order status", new_status) from e

        order = await self._order_store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        if not can_transition(order.status, requested):
            raise InvalidStatusTransitionError(
                order_id, order.status.value, requested.value
            )

        completed_at = None
        if requested is OrderStatus.COMPLETED and order.completed_at is None:
            completed_at = datetime.now(UTC)
        updated = await self._order_store.update_status(
            order_id, requested, completed_at, expected_status=order.status
        )
        logger.info(
            "order_status_changed",
            order_id=order_id,
            order_number=order.order_number,
            previous_status=order.status.value,
            status=requested.value,
        )

        result = StatusChangeResult(order=updated, previous_status=order.status)
        effect = SIDE_EFFECTS[requested]
        if effect is SideEffect.CONSUME:
            await self._consume_order(updated, result)
        elif effect is SideEffect.RETURN:
            await self._return_order(updated, result)

        result.order = await self._order_store.get_order(order_id) or updated
        if result.warnings:
            logger.warning(
                "order_status_changed_with_warnings",
                order_id=order_id,
                status=requested.value,
                warnings=len(result.warnings),
            )
        return result

    async def _consume_order(self, order: Order, result: StatusChangeResult) -> None:
        pictures = await self._picture_store.list_order_pictures(order.id)
        already_consumed = await self._fulfillment_store.consumed_picture_ids(order.id)

        for picture in pictures:
            if picture.id in already_consumed:
                continue
            lines: list[PictureMaterial] = []
            try:
                lines = await self._bom_service.ensure(picture.id)
                if not lines:
                    logger.info(
                        "picture_has_no_materials",
                        order_id=order.id,
                        picture_id=picture.id,
                    )
                    continue
                records = await self._fulfillment_store.consume_picture(
                    order.id, picture.id, lines
                )
                if records:
                    result.consumed_pictures.append(picture.id)
            except Exception as e:
                result.warnings.append(
                    _cascade_warning("consume", e, order.id, picture.id, lines)
                )

        if not result.warnings and order.materials_consumed_at is None:
            await self._order_store.mark_materials_consumed(order.id, datetime.now(UTC))
            logger.info(
                "order_materials_consumed",
                order_id=order.id,
                pictures=len(result.consumed_pictures),
            )

    async def _return_order(self, order: Order, result: StatusChangeResult) -> None:
        outstanding = await self._fulfillment_store.outstanding_for_order(order.id)

        by_picture: dict[str | None, list[OrderConsumption]] = {}
        for record in outstanding:
            by_picture.setdefault(record.picture_id, []).append(record)

        for picture_id, records in by_picture.items():
            try:
                returned = await self._fulfillment_store.return_picture(order.id, picture_id)
                if returned and picture_id is not None:
                    result.returned_pictures.append(picture_id)
            except Exception as e:
                result.warnings.append(
                    _cascade_warning("return", e, order.id, picture_id, records)
                )

        if outstanding and not result.warnings:
            await self._order_store.mark_materials_returned(order.id, datetime.now(UTC))
            logger.info(
                "order_materials_returned",
                order_id=order.id,
                pictures=len(by_picture),
            )

    async def release_picture(self, picture_id: str) -> list[CascadeWarning]:
        """
        Return a picture's outstanding consumption, then delete the picture.

        If the return fails the picture is kept and the warning is returned.
        """
        picture = await self._picture_store.get_picture(picture_id)
        if picture is None:
            raise PictureNotFoundError(picture_id)

        if picture.order_id is not None:
            try:
                await self._fulfillment_store.return_picture(picture.order_id, picture_id)
            except Exception as e:
                return [_cascade_warning("release", e, picture.order_id, picture_id, [])]

        await self._picture_store.delete_picture(picture_id)
        logger.info("picture_released", picture_id=picture_id, order_id=picture.order_id)
        return []

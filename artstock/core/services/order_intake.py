"""
Order intake: number allocation, picture attachment and order totals.

Creating an order never touches stock. Materials are consumed later, when the
state machine moves the order into production.
"""

from collections.abc import Awaitable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from artstock.config import get_logger
from artstock.core.entities.order import (
    Order,
    OrderCreationResult,
    OrderDetails,
    PictureRequest,
)
from artstock.core.entities.picture import CustomPhotoPicture, PictureType, ReadyMadePicture
from artstock.core.exceptions import (
    CascadeWarning,
    ConcurrencyConflict,
    OrderNotFoundError,
    PictureNotFoundError,
    PictureSizeNotFoundError,
    ValidationError,
)
from artstock.core.interfaces.fulfillment_store import IFulfillmentStore
from artstock.core.interfaces.order_store import IOrderStore
from artstock.core.interfaces.picture_store import AnyPicture, IPictureStore
from artstock.core.services.bill_of_materials import BillOfMaterialsService
from artstock.core.services.order_numbering import OrderNumberingService

logger = get_logger(__name__)


def _log_number_conflict(retry_state: RetryCallState) -> None:
    logger.warning(
        "order_number_conflict",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


class OrderIntakeService:
    """Creates orders with their pictures."""

    def __init__(
        self,
        order_store: IOrderStore,
        picture_store: IPictureStore,
        fulfillment_store: IFulfillmentStore,
        numbering: OrderNumberingService,
        bom_service: BillOfMaterialsService,
        max_retries: int = 5,
    ):
        self._order_store = order_store
        self._picture_store = picture_store
        self._fulfillment_store = fulfillment_store
        self._numbering = numbering
        self._bom_service = bom_service
        self._max_retries = max_retries

    async def create_order(
        self,
        customer_name: str,
        pictures: list[PictureRequest],
        prefix: str | None = None,
        notes: str | None = None,
    ) -> OrderCreationResult:
        """
        Create an order and attach its pictures.

        Catalog and size references are checked before anything is written.
        A failed bill-of-materials step (materializing a custom picture, copying
        a catalog picture) is a warning; the order and picture stay.

        Raises:
            ValidationError: empty customer name or no pictures.
            PictureNotFoundError / PictureSizeNotFoundError: bad references.
            ConcurrencyConflict: no unique number after ``max_retries``.
        """
        if not customer_name or not customer_name.strip():
            raise ValidationError("customer_name", "must not be empty", customer_name)
        if not pictures:
            raise ValidationError("pictures", "at least one picture is required")

        sources = await self._resolve_sources(pictures)
        order = await self._insert_with_number(customer_name.strip(), prefix, notes)
        result = OrderCreationResult(order=order)

        for request in pictures:
            source = sources.get(request.catalog_picture_id) if request.catalog_picture_id else None
            picture = await self._attach_picture(order, request, source, result.warnings)
            result.pictures.append(picture)

        total = round(sum(p.price for p in result.pictures), 2)
        await self._order_store.update_total_price(order.id, total)
        order.total_price = total

        logger.info(
            "order_intake_complete",
            order_id=order.id,
            order_number=order.order_number,
            pictures=len(result.pictures),
            total_price=total,
            warnings=len(result.warnings),
        )
        return result

    async def _resolve_sources(self, pictures: list[PictureRequest]) -> dict[str, AnyPicture]:
        sources: dict[str, AnyPicture] = {}
        for request in pictures:
            if request.catalog_picture_id:
                source = await self._picture_store.get_picture(request.catalog_picture_id)
                if source is None:
                    raise PictureNotFoundError(request.catalog_picture_id)
                if not isinstance(source, ReadyMadePicture) or not source.in_catalog:
                    raise ValidationError(
                        "catalog_picture_id",
                        "must reference a ready-made catalog picture",
                        request.catalog_picture_id,
                    )
                sources[source.id] = source
            elif await self._picture_store.get_size(request.picture_size_id) is None:
                raise PictureSizeNotFoundError(request.picture_size_id)
        return sources

    async def _insert_with_number(
        self, customer_name: str, prefix: str | None, notes: str | None
    ) -> Order:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries),
                retry=retry_if_exception_type(ConcurrencyConflict),
                before_sleep=_log_number_conflict,
            ):
                with attempt:
                    number = await self._numbering.next_number(prefix)
                    order = await self._order_store.create_order(
                        Order(order_number=number, customer_name=customer_name, notes=notes)
                    )
        except RetryError as e:
            logger.error("order_number_retries_exhausted", attempts=self._max_retries)
            raise ConcurrencyConflict(
                "order_number", "no unique order number available", attempts=self._max_retries
            ) from e.last_attempt.exception()
        return order

    async def _attach_picture(
        self,
        order: Order,
        request: PictureRequest,
        source: AnyPicture | None,
        warnings: list[CascadeWarning],
    ) -> AnyPicture:
        if source is not None:
            copy = ReadyMadePicture(
                name=request.name or source.name,
                picture_size_id=source.picture_size_id,
                order_id=order.id,
                description=request.description or source.description,
                price=request.price if request.price is not None else source.price,
                cost_price=source.cost_price,
                work_hours=request.work_hours if request.work_hours is not None else source.work_hours,
                source_picture_id=source.id,
                image_url=source.image_url,
            )
            copy = await self._picture_store.create_picture(copy)
            await self._guard_bom(
                "copy_bom", self._bom_service.copy(source.id, copy.id), order, copy, warnings
            )
            return copy

        fields = {
            "name": request.name,
            "picture_size_id": request.picture_size_id,
            "order_id": order.id,
            "description": request.description,
            "price": request.price or 0.0,
            "work_hours": request.work_hours or 0.0,
        }
        if request.type is PictureType.CUSTOM_PHOTO:
            picture: AnyPicture = CustomPhotoPicture(photo_url=request.photo_url, **fields)
        else:
            picture = ReadyMadePicture(**fields)
        picture = await self._picture_store.create_picture(picture)

        if picture.type is PictureType.CUSTOM_PHOTO:
            await self._guard_bom(
                "materialize_bom",
                self._bom_service.materialize_standard(picture.id),
                order,
                picture,
                warnings,
            )
        return picture

    async def _guard_bom(
        self,
        operation: str,
        step: Awaitable[object],
        order: Order,
        picture: AnyPicture,
        warnings: list[CascadeWarning],
    ) -> None:
        """Run a bill-of-materials step; a failure becomes a warning."""
        try:
            await step
        except Exception as e:
            warning = CascadeWarning(
                operation=operation,
                message=str(e),
                order_id=order.id,
                picture_id=picture.id,
            )
            logger.warning(
                "cascade_warning",
                operation=operation,
                order_id=order.id,
                picture_id=picture.id,
                error=str(e),
            )
            warnings.append(warning)

    async def get_order_details(self, order_id: str) -> OrderDetails:
        order = await self._order_store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return OrderDetails(
            order=order,
            pictures=await self._picture_store.list_order_pictures(order_id),
            consumptions=await self._fulfillment_store.list_consumptions(order_id),
        )

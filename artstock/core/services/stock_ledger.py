"""
Stock ledger service.

Every stock mutation goes through here: receive (IN), consume (OUT) and
adjust (ADJUSTMENT). Each call is one write transaction in the store, so the
stock row and its movement are committed together. Pure service with no
infrastructure imports; the store is injected via constructor.
"""

from datetime import UTC, datetime, timedelta

from artstock.config import get_logger
from artstock.core.entities.stock import (
    AdjustResult,
    ConsumeResult,
    LedgerStats,
    MaterialMovement,
    MovementReference,
    MovementType,
    ReceiveResult,
    Reconciliation,
    Stock,
)
from artstock.core.exceptions import MaterialNotFoundError, ValidationError
from artstock.core.interfaces.material_store import IMaterialStore
from artstock.core.interfaces.stock_store import IStockLedgerStore

logger = get_logger(__name__)


def _require_positive(quantity: float) -> None:
    if quantity <= 0:
        raise ValidationError("quantity", "must be greater than zero", quantity)


def _require_reason(reason: str) -> None:
    if not reason or not reason.strip():
        raise ValidationError("reason", "must not be empty", reason)


class StockLedger:
    """Quantity mutations with an append-only movement log."""

    def __init__(
        self,
        ledger_store: IStockLedgerStore,
        material_store: IMaterialStore,
        stats_window_days: int = 7,
    ):
        self._ledger_store = ledger_store
        self._material_store = material_store
        self._stats_window_days = stats_window_days

    async def receive(
        self,
        material_id: str,
        quantity: float,
        reason: str,
        reference: MovementReference | None = None,
        notes: str | None = None,
    ) -> ReceiveResult:
        """
        Add ``quantity`` to stock and append an IN movement.

        Raises:
            ValidationError: quantity <= 0 or an empty reason.
            MaterialNotFoundError: the material does not exist.
        """
        _require_positive(quantity)
        _require_reason(reason)

        applied = await self._ledger_store.apply_movement(
            material_id, MovementType.IN, quantity, reason, reference, notes
        )
        logger.info(
            "stock_received",
            material_id=material_id,
            qty=quantity,
            new_quantity=applied.new_quantity,
            movement_id=applied.movement.id,
        )
        return ReceiveResult(new_quantity=applied.new_quantity, movement=applied.movement)

    async def consume(
        self,
        material_id: str,
        quantity: float,
        reason: str,
        reference: MovementReference | None = None,
        notes: str | None = None,
    ) -> ConsumeResult:
        """
        Take ``quantity`` from stock and append an OUT movement.

        Stock may go negative (backorder). That is reported through
        ``went_negative`` and a warning log, never an exception.
        """
        _require_positive(quantity)
        _require_reason(reason)

        applied = await self._ledger_store.apply_movement(
            material_id, MovementType.OUT, quantity, reason, reference, notes
        )
        went_negative = applied.new_quantity < 0
        if went_negative:
            logger.warning(
                "stock_went_negative",
                material_id=material_id,
                qty=quantity,
                old_quantity=applied.old_quantity,
                new_quantity=applied.new_quantity,
            )
        logger.info(
            "stock_consumed",
            material_id=material_id,
            qty=quantity,
            new_quantity=applied.new_quantity,
            movement_id=applied.movement.id,
        )
        return ConsumeResult(
            new_quantity=applied.new_quantity,
            went_negative=went_negative,
            movement=applied.movement,
        )

    async def adjust(
        self,
        material_id: str,
        new_quantity: float,
        reason: str,
        notes: str | None = None,
    ) -> AdjustResult:
        """
        Set stock to exactly ``new_quantity``.

        The ADJUSTMENT movement has magnitude ``|new - old|``; its signed delta
        keeps the ledger reconcilable.
        """
        _require_reason(reason)

        applied = await self._ledger_store.set_quantity(
            material_id,
            new_quantity,
            reason,
            notes,
        )
        delta = applied.new_quantity - applied.old_quantity
        logger.info(
            "stock_adjusted",
            material_id=material_id,
            old_quantity=applied.old_quantity,
            new_quantity=applied.new_quantity,
            delta=delta,
        )
        return AdjustResult(
            old_quantity=applied.old_quantity,
            new_quantity=applied.new_quantity,
            delta=delta,
            movement=applied.movement,
        )

    async def get_stock(self, material_id: str) -> Stock:
        """Current stock of a material; a material never moved reads as zero."""
        stock = await self._ledger_store.get_stock(material_id)
        if stock is not None:
            return stock
        if await self._material_store.get_material(material_id) is None:
            raise MaterialNotFoundError(material_id)
        return Stock(material_id=material_id, quantity=0.0)

    async def list_low_stock(self, limit: int = 100, offset: int = 0) -> list[Stock]:
        return await self._ledger_store.list_low_stock(limit=limit, offset=offset)

    async def set_min_level(self, material_id: str, min_level: float | None) -> Stock:
        if min_level is not None and min_level < 0:
            raise ValidationError("min_level", "must not be negative", min_level)
        return await self._ledger_store.set_min_level(material_id, min_level)

    async def list_movements(
        self,
        material_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MaterialMovement]:
        """Movements, most recent first."""
        if limit <= 0:
            raise ValidationError("limit", "must be greater than zero", limit)
        if offset < 0:
            raise ValidationError("offset", "must not be negative", offset)
        return await self._ledger_store.list_movements(
            material_id=material_id, limit=limit, offset=offset
        )

    async def stats(self) -> LedgerStats:
        """Aggregate figures over the configured movement window."""
        since = datetime.now(UTC) - timedelta(days=self._stats_window_days)
        figures = await self._ledger_store.get_stats(since)
        return LedgerStats(window_days=self._stats_window_days, **figures)

    async def reconcile(self, material_id: str) -> Reconciliation:
        """Compare the stock row with the sum of the material's movement deltas."""
        stock = await self.get_stock(material_id)
        ledger_quantity, movement_count = await self._ledger_store.ledger_totals(
            material_id
        )
        result = Reconciliation(
            material_id=material_id,
            stock_quantity=stock.quantity,
            ledger_quantity=ledger_quantity,
            movement_count=movement_count,
        )
        if not result.balanced:
            logger.error(
                "ledger_unbalanced",
                material_id=material_id,
                stock_quantity=stock.quantity,
                ledger_quantity=ledger_quantity,
            )
        return result

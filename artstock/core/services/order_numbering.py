"""Order number allocation: PREFIX-YYYY-MM-DD-NNN, sequential per prefix and day."""

from datetime import UTC, date, datetime

from artstock.config import get_logger
from artstock.core.exceptions import ValidationError
from artstock.core.interfaces.order_store import IOrderStore

logger = get_logger(__name__)


def format_order_number(prefix: str, day: date, sequence: int) -> str:
    return f"{prefix}-{day.isoformat()}-{sequence:03d}"


class OrderNumberingService:
    """
    Issues unique order numbers.

    The store reserves sequences atomically, so concurrent callers always get
    distinct numbers. The ``orders.order_number`` UNIQUE constraint remains the
    final guard; order intake retries on a collision.
    """

    def __init__(self, order_store: IOrderStore, default_prefix: str = "ART"):
        self._order_store = order_store
        self._default_prefix = default_prefix

    @staticmethod
    def validate_prefix(prefix: str) -> str:
        if not prefix or not prefix.isascii() or not prefix.isalnum():
            raise ValidationError("prefix", "must be non-empty and alphanumeric", prefix)
        return prefix

    async def next_number(self, prefix: str | None = None, day: date | None = None) -> str:
        """Reserve and return the next order number for ``prefix`` today."""
        prefix = self.validate_prefix(prefix or self._default_prefix)
        day = day or datetime.now(UTC).date()

        sequence = await self._order_store.allocate_sequence(prefix, day)
        number = format_order_number(prefix, day, sequence)
        logger.info("order_number_issued", order_number=number, sequence=sequence)
        return number

    async def is_unique(self, order_number: str) -> bool:
        return not await self._order_store.number_exists(order_number)

    async def numbering_stats(self, start: datetime, end: datetime) -> dict[str, int]:
        """Order counts per prefix created between ``start`` and ``end``."""
        if start > end:
            raise ValidationError("start", "must not be after end", start.isoformat())
        return await self._order_store.count_numbers_by_prefix(start, end)

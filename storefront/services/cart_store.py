"""
Shopping cart state for one shopper session.

Lines are keyed by (product id, variant id) and kept in the order they were
first added. Totals are summed in integer cents. When a storage backend is
attached, every mutation is written through before the call returns.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..core.exceptions import InvalidQuantityError
from ..core.money import to_cents, from_cents
from ..database.carts import CartStorage, serialize_lines, deserialize_lines
from ..models.cart import CartLine

logger = logging.getLogger(__name__)

BADGE_LIMIT = 99


def _is_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CartStore:
    """Ordered collection of cart lines with aggregate queries"""

    def __init__(self, session_key: str, storage: Optional[CartStorage] = None):
        self.session_key = session_key
        self._storage = storage
        self._lines: dict[tuple[str, str], CartLine] = {}

    @classmethod
    def load(cls, session_key: str, storage: CartStorage) -> "CartStore":
        """Restore a cart from its persisted snapshot"""
        store = cls(session_key, storage)
        for line in deserialize_lines(storage.read(session_key), key=session_key):
            store._lines[line.key] = line
        logger.info(f"Loaded cart {session_key} with {len(store._lines)} line(s)")
        return store

    @property
    def lines(self) -> tuple[CartLine, ...]:
        """Cart lines in insertion order"""
        return tuple(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, product_id: str, variant_id: str) -> Optional[CartLine]:
        return self._lines.get((product_id, variant_id))

    def add_line(
        self,
        product_id: str,
        variant_id: str,
        unit_price: Decimal,
        quantity: int = 1,
    ) -> CartLine:
        """
        Add a variant to the cart, merging with an existing line.

        The unit price of an existing line is kept as it was when the line
        was first added.

        Raises:
            InvalidQuantityError: quantity is not a positive integer
        """
        if not _is_quantity(quantity) or quantity < 1:
            raise InvalidQuantityError(quantity)

        key = (product_id, variant_id)
        existing = self._lines.get(key)

        if existing:
            line = existing.model_copy(update={"quantity": existing.quantity + quantity})
        else:
            line = CartLine(
                product_id=product_id,
                variant_id=variant_id,
                unit_price=from_cents(to_cents(unit_price)),
                quantity=quantity,
            )

        self._commit({**self._lines, key: line})
        logger.debug(f"Cart {self.session_key}: {key} quantity now {line.quantity}")
        return line

    def update_quantity(self, product_id: str, variant_id: str, new_quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line"""
        if not _is_quantity(new_quantity):
            raise InvalidQuantityError(new_quantity)

        key = (product_id, variant_id)
        existing = self._lines.get(key)
        if not existing:
            return

        if new_quantity <= 0:
            self.remove_line(product_id, variant_id)
            return

        self._commit({**self._lines, key: existing.model_copy(update={"quantity": new_quantity})})
        logger.debug(f"Cart {self.session_key}: {key} quantity set to {new_quantity}")

    def remove_line(self, product_id: str, variant_id: str) -> None:
        key = (product_id, variant_id)
        if key not in self._lines:
            return
        self._commit({k: line for k, line in self._lines.items() if k != key})
        logger.debug(f"Cart {self.session_key}: removed {key}")

    def clear(self) -> None:
        self._commit({})

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def get_total_amount(self) -> Decimal:
        total_cents = sum(
            to_cents(line.unit_price) * line.quantity for line in self._lines.values()
        )
        return from_cents(total_cents)

    def badge_label(self) -> str:
        """Item count as shown on the header cart badge"""
        total = self.get_total_items()
        if total <= 0:
            return ""
        if total > BADGE_LIMIT:
            return f"{BADGE_LIMIT}+"
        return str(total)

    def _commit(self, lines: dict[tuple[str, str], CartLine]) -> None:
        """Write the new lines to storage, then make them current.

        A failed write leaves the cart as it was.
        """
        if self._storage is not None:
            self._storage.write(self.session_key, serialize_lines(lines.values()))
        self._lines = lines

"""Cart snapshot storage"""

import json
import logging
import os
import tempfile
from typing import Iterable, Optional

from pydantic import ValidationError

from ..core.money import to_cents, from_cents
from ..models.cart import CartLine, CartLineRecord

logger = logging.getLogger(__name__)


class CartStorage:
    """Stores one serialized cart per session key"""

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, payload: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryCartStorage(CartStorage):
    """In-memory cart storage"""

    def __init__(self):
        self.snapshots: dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self.snapshots.get(key)

    def write(self, key: str, payload: str) -> None:
        self.snapshots[key] = payload

    def delete(self, key: str) -> None:
        self.snapshots.pop(key, None)


class FileCartStorage(CartStorage):
    """
    One JSON file per session.

    Writes go to a temporary file that then replaces the snapshot, so a
    crash leaves either the old or the new cart on disk, never a mix.
    """

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        safe_key = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
        return os.path.join(self.directory, f"{safe_key}.json")

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def write(self, key: str, payload: str) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)


def serialize_lines(lines: Iterable[CartLine]) -> str:
    """Serialize cart lines as an ordered JSON list of records"""
    records = [
        CartLineRecord.from_line(line).model_dump(mode="json", by_alias=True)
        for line in lines
    ]
    return json.dumps(records)


def deserialize_lines(payload: Optional[str], key: str = "") -> list[CartLine]:
    """
    Rebuild cart lines from a stored snapshot.

    Corrupt data never fails the load: unreadable snapshots yield an empty
    cart, invalid records are dropped, and records repeating a
    (product, variant) key are merged into the first one.
    """
    if not payload:
        return []

    try:
        raw_records = json.loads(payload)
    except ValueError:
        logger.warning(f"Discarding unreadable cart snapshot for session {key}")
        return []

    if not isinstance(raw_records, list):
        logger.warning(f"Discarding cart snapshot for session {key}: expected a list")
        return []

    merged: dict[tuple[str, str], CartLine] = {}

    for position, raw in enumerate(raw_records):
        try:
            record = CartLineRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Dropping malformed cart record #{position} for session {key}: "
                f"{e.error_count()} validation error(s)"
            )
            continue

        if record.quantity <= 0:
            logger.warning(
                f"Dropping cart record #{position} for session {key}: "
                f"quantity {record.quantity}"
            )
            continue

        line_key = (record.product_id, record.variant_id)
        existing = merged.get(line_key)
        if existing:
            logger.warning(
                f"Merging duplicate cart record #{position} for session {key}: {line_key}"
            )
            merged[line_key] = existing.model_copy(
                update={"quantity": existing.quantity + record.quantity}
            )
        else:
            merged[line_key] = CartLine(
                product_id=record.product_id,
                variant_id=record.variant_id,
                unit_price=from_cents(to_cents(record.unit_price)),
                quantity=record.quantity,
            )

    return list(merged.values())


def build_cart_storage(settings) -> CartStorage:
    """Create the configured storage backend"""
    if settings.cart_storage == "file":
        logger.info(f"Persisting carts to {settings.cart_storage_dir}")
        return FileCartStorage(settings.cart_storage_dir)
    return MemoryCartStorage()

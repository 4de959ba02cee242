"""Tests for cart snapshots and session restore"""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.core.session import SessionManager
from storefront.database.carts import (
    FileCartStorage,
    MemoryCartStorage,
    deserialize_lines,
    serialize_lines,
)
from storefront.models.cart import CartLine, CartLineRecord
from storefront.services.cart_store import CartStore


def test_every_mutation_is_written_through(storage):
    cart = CartStore("s1", storage)

    cart.add_line("p1", "v1", Decimal("40"), 2)
    assert json.loads(storage.read("s1")) == [
        {"productId": "p1", "variantId": "v1", "unitPrice": "40.00", "quantity": 2}
    ]

    cart.update_quantity("p1", "v1", 5)
    assert json.loads(storage.read("s1"))[0]["quantity"] == 5

    cart.remove_line("p1", "v1")
    assert json.loads(storage.read("s1")) == []


class FailingStorage(MemoryCartStorage):
    """Accepts a number of writes, then fails every one after"""

    def __init__(self, allowed_writes=0):
        super().__init__()
        self.allowed_writes = allowed_writes

    def write(self, key, payload):
        if self.allowed_writes <= 0:
            raise OSError("disk full")
        self.allowed_writes -= 1
        super().write(key, payload)


def test_failed_write_leaves_new_cart_empty():
    cart = CartStore("s1", FailingStorage())

    with pytest.raises(OSError):
        cart.add_line("p1", "v1", Decimal("40"), 1)

    assert cart.lines == ()
    assert cart.get_total_items() == 0


def test_failed_write_leaves_cart_and_snapshot_in_step():
    storage = FailingStorage(allowed_writes=2)
    cart = CartStore("s1", storage)
    cart.add_line("p1", "v1", Decimal("40"), 1)
    cart.add_line("p2", "v1", Decimal("10"), 2)
    before = cart.lines

    for mutate in (
        lambda: cart.add_line("p1", "v1", Decimal("40"), 3),
        lambda: cart.update_quantity("p1", "v1", 7),
        lambda: cart.update_quantity("p1", "v1", 0),
        lambda: cart.remove_line("p2", "v1"),
        cart.clear,
    ):
        with pytest.raises(OSError):
            mutate()
        assert cart.lines == before
        assert deserialize_lines(storage.read("s1")) == list(before)


def test_load_restores_lines_in_order(storage):
    cart = CartStore("s1", storage)
    cart.add_line("p2", "v1", Decimal("9.99"), 1)
    cart.add_line("p1", "v3", Decimal("40.00"), 3)

    restored = CartStore.load("s1", storage)

    assert restored.lines == cart.lines
    assert restored.get_total_amount() == Decimal("129.99")


def test_load_without_snapshot_is_empty(storage):
    assert CartStore.load("unknown", storage).is_empty


def test_invalid_records_are_dropped():
    payload = json.dumps([
        {"productId": "p1", "variantId": "v1", "unitPrice": "10.00", "quantity": 1},
        {"productId": "p2", "variantId": "v1", "unitPrice": "10.00", "quantity": 0},
        {"productId": "p3", "variantId": "v1", "unitPrice": "10.00", "quantity": -4},
        {"variantId": "v1", "unitPrice": "10.00", "quantity": 1},
        {"productId": "p4", "variantId": "v1", "unitPrice": "-1", "quantity": 1},
        {"productId": "p5", "variantId": "v1", "unitPrice": "10.00", "quantity": "lots"},
        "not a record",
    ])

    lines = deserialize_lines(payload)

    assert [line.key for line in lines] == [("p1", "v1")]


def test_duplicate_records_are_merged():
    payload = json.dumps([
        {"productId": "p1", "variantId": "v1", "unitPrice": "10.00", "quantity": 1},
        {"productId": "p2", "variantId": "v1", "unitPrice": "5.00", "quantity": 1},
        {"productId": "p1", "variantId": "v1", "unitPrice": "12.00", "quantity": 2},
    ])

    lines = deserialize_lines(payload)

    assert [line.key for line in lines] == [("p1", "v1"), ("p2", "v1")]
    assert lines[0].quantity == 3
    assert lines[0].unit_price == Decimal("10.00")


def test_unreadable_snapshots_give_empty_cart():
    assert deserialize_lines("{not json") == []
    assert deserialize_lines(json.dumps({"productId": "p1"})) == []
    assert deserialize_lines("") == []
    assert deserialize_lines(None) == []


def test_numeric_unit_price_is_accepted():
    payload = json.dumps([{"productId": "p1", "variantId": "v1", "unitPrice": 19.5, "quantity": 2}])
    assert deserialize_lines(payload)[0].unit_price == Decimal("19.5")


def test_serialize_keeps_order():
    cart = CartStore("s1")
    cart.add_line("b", "1", Decimal("1"), 1)
    cart.add_line("a", "1", Decimal("2"), 1)

    records = json.loads(serialize_lines(cart.lines))

    assert [r["productId"] for r in records] == ["b", "a"]


def test_file_storage_round_trip(tmp_path):
    storage = FileCartStorage(str(tmp_path / "carts"))
    cart = CartStore("session-1", storage)
    cart.add_line("p1", "v1", Decimal("40"), 2)

    restored = CartStore.load("session-1", FileCartStorage(str(tmp_path / "carts")))

    assert restored.get_total_items() == 2
    assert list((tmp_path / "carts").glob("*.tmp")) == []


def test_file_storage_sanitizes_keys(tmp_path):
    storage = FileCartStorage(str(tmp_path))
    storage.write("../escape", "[]")

    assert storage.read("../escape") == "[]"
    assert not (tmp_path.parent / "escape.json").exists()

    storage.delete("../escape")
    assert storage.read("../escape") is None


def test_session_restored_after_restart(storage):
    manager = SessionManager(storage)
    session = manager.create_session()
    session.cart.add_line("p1", "v1", Decimal("40"), 1)

    restarted = SessionManager(storage)
    restored = restarted.get_session(session.session_id)

    assert restored is not None
    assert restored.cart.get_total_items() == 1


def test_empty_session_survives_restart(storage):
    session = SessionManager(storage).create_session()
    assert SessionManager(storage).get_session(session.session_id) is not None


def test_unknown_session(storage):
    manager = SessionManager(storage)

    assert manager.get_session("nope") is None
    assert manager.get_or_create_session("nope").session_id != "nope"


def test_delete_session_drops_snapshot(storage):
    manager = SessionManager(storage)
    session = manager.create_session()

    assert manager.delete_session(session.session_id) is True
    assert storage.read(session.session_id) is None
    assert manager.get_session(session.session_id) is None
    assert manager.delete_session(session.session_id) is False


def test_cleanup_old_sessions_drops_snapshots(storage):
    manager = SessionManager(storage)
    sessions = [manager.create_session() for _ in range(5)]
    sessions[0].cart.add_line("p1", "v1", Decimal("3"), 1)

    assert manager.cleanup_old_sessions(max_age_hours=-1) == 5
    assert manager.sessions == {}
    assert storage.snapshots == {}
    assert manager.get_session(sessions[0].session_id) is None


def test_cleanup_keeps_recent_sessions(storage):
    manager = SessionManager(storage)
    session = manager.create_session()

    assert manager.cleanup_old_sessions(max_age_hours=24) == 0
    assert storage.read(session.session_id) is not None


def test_record_accepts_field_names_and_dumps_aliases():
    record = CartLineRecord(product_id="p1", variant_id="v1", unit_price=Decimal("2.50"), quantity=1)

    assert record.model_dump(mode="json", by_alias=True) == {
        "productId": "p1", "variantId": "v1", "unitPrice": "2.50", "quantity": 1,
    }
    assert CartLineRecord.model_validate({
        "productId": "p1", "variantId": "v1", "unitPrice": "2.50", "quantity": 1,
    }) == record


def test_cart_lines_are_frozen():
    line = CartLine(product_id="p1", variant_id="v1", unit_price=Decimal("1"), quantity=1)

    with pytest.raises(ValidationError):
        line.quantity = 2

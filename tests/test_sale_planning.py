from decimal import Decimal

import pytest
from pydantic import ValidationError

from charnoks.core.errors import CorruptRecord, InsufficientStock, InvalidRequest, ProductNotFound
from charnoks.schemas.sale import SaleCreate
from charnoks.services.sale_transaction import (
    MAX_MONEY,
    ProductSnapshot,
    parse_product_record,
    plan_sale,
    requested_product_ids,
)


def _snapshot(**products):
    return {
        pid: ProductSnapshot(id=pid, name=name, price=Decimal(price), stock=stock)
        for pid, (name, price, stock) in products.items()
    }


def _request(items, payment):
    return SaleCreate.model_validate(
        {
            "items": [{"productId": pid, "quantity": qty} for pid, qty in items],
            "payment": payment,
        }
    )


def test_plan_uses_stored_prices_and_decrements_stock():
    snapshot = _snapshot(A=("Apple", "2.50", 10), B=("Bread", "1.00", 5))

    plan = plan_sale(_request([("A", 2), ("B", 1)], 6.00), snapshot, worker_id=7)

    assert plan.total == Decimal("6.00")
    assert plan.change == Decimal("0.00")
    assert plan.payment == Decimal("6.00")
    assert dict(plan.stock_updates) == {"A": 8, "B": 4}
    assert [(l.product_id, l.quantity, l.price, l.line_total) for l in plan.lines] == [
        ("A", 2, Decimal("2.50"), Decimal("5.00")),
        ("B", 1, Decimal("1.00"), Decimal("1.00")),
    ]
    assert plan.worker_id == 7
    assert plan.created_at.tzinfo is not None


def test_plan_rejects_quantity_above_stock_and_names_the_product():
    snapshot = _snapshot(A=("Apple", "2.50", 1))

    with pytest.raises(InsufficientStock) as ex:
        plan_sale(_request([("A", 2)], 10), snapshot, worker_id=1)

    assert ex.value.product_id == "A"
    assert ex.value.shortfall == 1
    assert "Apple" in ex.value.message
    assert ex.value.to_dict()["kind"] == "InsufficientStock"


def test_plan_sums_repeated_lines_before_checking_stock():
    snapshot = _snapshot(A=("Apple", "1.00", 3))

    with pytest.raises(InsufficientStock) as ex:
        plan_sale(_request([("A", 2), ("A", 2)], 10), snapshot, worker_id=1)

    assert ex.value.requested == 4
    assert ex.value.available == 3


def test_plan_keeps_repeated_lines_and_decrements_once_per_product():
    snapshot = _snapshot(A=("Apple", "1.00", 5))

    plan = plan_sale(_request([("A", 2), ("A", 1)], 3), snapshot, worker_id=1)

    assert len(plan.lines) == 2
    assert dict(plan.stock_updates) == {"A": 2}
    assert plan.total == Decimal("3.00")


def test_plan_reports_missing_product():
    snapshot = _snapshot(A=("Apple", "1.00", 5))

    with pytest.raises(ProductNotFound) as ex:
        plan_sale(_request([("A", 1), ("ghost", 1)], 10), snapshot, worker_id=1)

    assert ex.value.product_id == "ghost"


def test_plan_rejects_underpayment_by_default():
    snapshot = _snapshot(A=("Apple", "2.50", 5))

    with pytest.raises(InvalidRequest) as ex:
        plan_sale(_request([("A", 2)], 4), snapshot, worker_id=1)

    assert "less than the sale total" in ex.value.message


def test_plan_allows_underpayment_when_enabled():
    snapshot = _snapshot(A=("Apple", "2.50", 5))

    plan = plan_sale(_request([("A", 2)], 4), snapshot, worker_id=1, allow_underpayment=True)

    assert plan.change == Decimal("-1.00")


def test_plan_rounds_money_to_cents():
    snapshot = _snapshot(A=("Gum", "0.335", 10))

    plan = plan_sale(_request([("A", 3)], 5), snapshot, worker_id=1)

    # price is rounded first, then multiplied
    assert plan.lines[0].price == Decimal("0.34")
    assert plan.total == Decimal("1.02")
    assert plan.change == Decimal("3.98")


def test_requested_product_ids_are_distinct_and_ordered():
    request = _request([("B", 1), ("A", 1), ("B", 2)], 1)
    assert requested_product_ids(request) == ["B", "A"]


@pytest.mark.parametrize(
    "payload",
    [
        {"items": [], "payment": 5},
        {"payment": 5},
        {"items": [{"productId": "A", "quantity": 1}], "payment": "5"},
        {"items": [{"productId": "A", "quantity": 1}], "payment": True},
        {"items": [{"productId": "A", "quantity": 1}], "payment": None},
        {"items": [{"productId": "A", "quantity": 1}], "payment": float("nan")},
        {"items": [{"productId": "A", "quantity": 1}], "payment": -1},
        {"items": [{"productId": "A", "quantity": 0}], "payment": 5},
        {"items": [{"productId": "A", "quantity": 1.5}], "payment": 5},
        {"items": [{"productId": "", "quantity": 1}], "payment": 5},
    ],
)
def test_sale_request_rejects_malformed_input(payload):
    with pytest.raises(ValidationError):
        SaleCreate.model_validate(payload)


def test_sale_request_accepts_float_payment_exactly():
    request = _request([("A", 1)], 0.1)
    assert request.payment == Decimal("0.1")


def test_parse_product_record_accepts_valid_mapping():
    snap = parse_product_record("A", {"name": "Apple", "price": "2.50", "stock": 3})
    assert snap == ProductSnapshot(id="A", name="Apple", price=Decimal("2.50"), stock=3)


@pytest.mark.parametrize(
    "record",
    [
        {"name": "Apple", "price": None, "stock": 3},
        {"name": "Apple", "price": "2.50", "stock": -1},
        {"name": "", "price": "2.50", "stock": 3},
        {"price": "2.50", "stock": 3},
        {"name": "Apple", "price": "2.50", "stock": "lots"},
    ],
)
def test_parse_product_record_rejects_malformed_documents(record):
    with pytest.raises(CorruptRecord) as ex:
        parse_product_record("A", record)

    assert ex.value.record_id == "A"
    assert ex.value.kind == "CorruptRecord"


def test_parse_product_record_keeps_the_id_it_was_read_by():
    snap = parse_product_record("A", {"id": "B", "name": "Apple", "price": "2.50", "stock": 3})
    assert snap.id == "A"


def test_plan_rejects_totals_too_large_to_store():
    snapshot = _snapshot(A=("Generator", "60000000.00", 5))

    with pytest.raises(InvalidRequest) as ex:
        plan_sale(_request([("A", 2)], 10), snapshot, worker_id=1)

    assert ex.value.to_dict()["total"] == 120000000.0


def test_plan_rejects_payment_that_rounds_past_the_maximum():
    snapshot = _snapshot(A=("Apple", "2.50", 5))

    with pytest.raises(InvalidRequest):
        plan_sale(_request([("A", 1)], 99999999.999), snapshot, worker_id=1)


def test_plan_accepts_the_largest_storable_total():
    snapshot = _snapshot(A=("Truck", "99999999.99", 1))

    plan = plan_sale(_request([("A", 1)], 99999999.99), snapshot, worker_id=1)

    assert plan.total == MAX_MONEY
    assert plan.change == Decimal("0.00")

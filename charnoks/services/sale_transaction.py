# =========================================================
# SALE TRANSACTION
#
# Read -> validate -> write, expressed without any store API:
#
#   snapshot = store.read_products(ids)      (fetch phase)
#   plan     = plan_sale(request, snapshot)  (validation, pure)
#   sale_id  = store.write_sale(plan)        (commit phase)
#
# execute_sale() drives those three steps against anything
# implementing SaleStore. The SQLAlchemy adapter and its retry
# loop live in services/sale_store.py.
# =========================================================

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from collections.abc import Mapping
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from charnoks.core.errors import CorruptRecord, InsufficientStock, InvalidRequest, ProductNotFound
from charnoks.schemas.sale import SaleCreate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Largest value a Numeric(10, 2) money column holds
MAX_MONEY = Decimal("99999999.99")


def to_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class ProductSnapshot(BaseModel):
    """A product as read inside the transaction, validated at the store boundary."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    stock: int = Field(..., ge=0)


def parse_product_record(product_id: str, record) -> ProductSnapshot:
    """Parse a stored product (ORM row or mapping) or raise CorruptRecord."""
    try:
        if isinstance(record, Mapping):
            return ProductSnapshot.model_validate({**record, "id": product_id})
        return ProductSnapshot.model_validate(record)
    except ValidationError as exc:
        reason = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise CorruptRecord("products", product_id, reason) from exc


@dataclass(frozen=True)
class SaleLine:
    product_id: str
    quantity: int
    price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class SalePlan:
    """Everything the commit phase writes."""

    worker_id: int
    lines: tuple
    stock_updates: Mapping[str, int]
    total: Decimal
    payment: Decimal
    change: Decimal
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SaleStore(Protocol):
    def read_products(self, product_ids) -> dict:
        """Return {product_id: ProductSnapshot} for the ids that exist."""

    def write_sale(self, plan: SalePlan) -> str:
        """Apply stock updates, persist the sale, return its id."""


def requested_product_ids(request: SaleCreate) -> list[str]:
    # Distinct ids, first-seen order
    return list(dict.fromkeys(item.product_id for item in request.items))


def plan_sale(
    request: SaleCreate,
    snapshot: Mapping[str, ProductSnapshot],
    worker_id: int,
    *,
    allow_underpayment: bool = False,
) -> SalePlan:
    """Validate a request against freshly read products and build the write set.

    Raises ProductNotFound, InsufficientStock or InvalidRequest (underpayment or
    amounts too large to store) without side effects.
    """
    for product_id in requested_product_ids(request):
        if product_id not in snapshot:
            raise ProductNotFound(product_id)

    # A product listed on several lines is checked against its combined quantity
    requested: dict[str, int] = {}
    for item in request.items:
        requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity

    for product_id, quantity in requested.items():
        product = snapshot[product_id]
        if quantity > product.stock:
            raise InsufficientStock(product_id, product.name, quantity, product.stock)

    lines = []
    total = Decimal("0.00")
    for item in request.items:
        price = to_money(snapshot[item.product_id].price)
        line_total = to_money(price * item.quantity)
        total += line_total
        lines.append(
            SaleLine(
                product_id=item.product_id,
                quantity=item.quantity,
                price=price,
                line_total=line_total,
            )
        )

    total = to_money(total)
    payment = to_money(request.payment)

    if total > MAX_MONEY or payment > MAX_MONEY:
        raise InvalidRequest(
            f"Sale amounts cannot exceed {MAX_MONEY}",
            total=float(total),
            payment=float(payment),
        )

    if payment < total and not allow_underpayment:
        raise InvalidRequest(
            f"Payment {payment} is less than the sale total {total}",
            total=float(total),
            payment=float(payment),
        )

    stock_updates = {
        product_id: snapshot[product_id].stock - quantity
        for product_id, quantity in requested.items()
    }

    return SalePlan(
        worker_id=worker_id,
        lines=tuple(lines),
        stock_updates=stock_updates,
        total=total,
        payment=payment,
        change=to_money(payment - total),
    )


def execute_sale(
    store: SaleStore,
    request: SaleCreate,
    worker_id: int,
    *,
    allow_underpayment: bool = False,
) -> tuple[str, SalePlan]:
    """One attempt of the sale transaction. Reads strictly precede writes."""
    snapshot = store.read_products(requested_product_ids(request))
    plan = plan_sale(request, snapshot, worker_id, allow_underpayment=allow_underpayment)
    sale_id = store.write_sale(plan)
    return sale_id, plan

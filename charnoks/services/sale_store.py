# =========================================================
# SQLALCHEMY STORE ADAPTER
#
# Optimistic concurrency: Product.version is SQLAlchemy's
# version_id_col, so every UPDATE is issued as
#
#   UPDATE products SET stock=?, version=? WHERE id=? AND version=?
#
# If another transaction committed a change to the row after we
# read it, the UPDATE matches nothing, the ORM raises
# StaleDataError and run_in_transaction() retries the whole unit
# of work with fresh reads.
# =========================================================

import logging

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from charnoks.core.config import settings
from charnoks.core.errors import SaleError, TransactionConflict
from charnoks.models.products import Product
from charnoks.models.sales import Sale
from charnoks.models.sale_items import SaleItem
from charnoks.schemas.sale import SaleCreate
from charnoks.services.sale_transaction import SalePlan, execute_sale, parse_product_record

logger = logging.getLogger(__name__)


class SqlAlchemySaleStore:
    def __init__(self, db: Session):
        self.db = db
        self._loaded: dict[str, Product] = {}

    def read_products(self, product_ids):
        ids = list(product_ids)
        if not ids:
            return {}

        rows = self.db.query(Product).filter(Product.id.in_(ids)).all()

        snapshot = {}
        for product in rows:
            snapshot[product.id] = parse_product_record(product.id, product)
            self._loaded[product.id] = product
        return snapshot

    def write_sale(self, plan: SalePlan) -> str:
        for product_id, new_stock in plan.stock_updates.items():
            self._loaded[product_id].stock = new_stock

        sale = Sale(
            worker_id=plan.worker_id,
            total=plan.total,
            payment=plan.payment,
            change=plan.change,
            created_at=plan.created_at,
        )
        sale.items = [
            SaleItem(
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.price,
                line_total=line.line_total,
            )
            for line in plan.lines
        ]
        self.db.add(sale)

        # Version checks run here and again on commit
        self.db.flush()
        return sale.id


def run_in_transaction(db: Session, work, max_attempts: int | None = None):
    """Run work(db) and commit; on a write conflict roll back and run it again.

    Any other exception rolls back and propagates unchanged.
    """
    attempts = settings.SALE_MAX_ATTEMPTS if max_attempts is None else max_attempts
    if attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {attempts}")

    for attempt in range(1, attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except StaleDataError as exc:
            db.rollback()
            logger.warning(
                "Write conflict on attempt %s/%s: %s", attempt, attempts, exc
            )
        except Exception:
            db.rollback()
            raise

    logger.error("Giving up after %s conflicting attempts", attempts)
    raise TransactionConflict(attempts)


def record_sale(
    db: Session,
    sale_data: SaleCreate,
    worker_id: int,
    *,
    max_attempts: int | None = None,
    allow_underpayment: bool | None = None,
):
    """Record a sale atomically. Returns (sale_id, plan)."""
    if allow_underpayment is None:
        allow_underpayment = settings.ALLOW_UNDERPAYMENT

    def work(session: Session):
        return execute_sale(
            SqlAlchemySaleStore(session),
            sale_data,
            worker_id,
            allow_underpayment=allow_underpayment,
        )

    try:
        sale_id, plan = run_in_transaction(db, work, max_attempts=max_attempts)
    except SaleError as exc:
        logger.info("Sale rejected for worker %s: %s", worker_id, exc.message)
        raise

    logger.info(
        "Sale %s recorded by worker %s: %s line(s), total %s, change %s",
        sale_id, worker_id, len(plan.lines), plan.total, plan.change,
    )
    return sale_id, plan


def restock_product(db: Session, product_id: str, quantity: int, *, max_attempts: int | None = None):
    """Add quantity to a product's stock under the same conflict retry as sales.

    Returns the product, or None if it does not exist.
    """
    def work(session: Session):
        product = session.query(Product).filter(Product.id == product_id).first()
        if product is None:
            return None
        parse_product_record(product.id, product)
        product.stock = product.stock + quantity
        session.flush()
        return product

    product = run_in_transaction(db, work, max_attempts=max_attempts)

    if product is not None:
        db.refresh(product)
        logger.info("Product %s restocked by %s, stock now %s", product_id, quantity, product.stock)
    return product

# =========================================================
# SALES ROUTER
#
# WORKERS:
# - Can record sales
# - See only the sales they recorded
#
# OWNERS:
# - Full history, optionally filtered by worker
#
# Recording is one optimistic transaction (services/sale_store.py).
# A request that failed on the network has an unknown outcome:
# clients should check history before resubmitting.
# =========================================================

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status, Request
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError

from charnoks.database import get_db
from charnoks.core.auth import get_current_user
from charnoks.core.rate_limiter import limiter
from charnoks.models.sales import Sale
from charnoks.models.users import ROLE_OWNER
from charnoks.schemas.sale import SaleCreate, SaleReceipt, SaleResponse
from charnoks.services.sale_store import record_sale

router = APIRouter(prefix="/sales", tags=["Sales"])

logger = logging.getLogger(__name__)


# =========================================================
# RECORD SALE
# =========================================================
@router.post("", response_model=SaleReceipt, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_sale(
    request: Request,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    try:
        sale_id, plan = record_sale(db, sale_data, worker_id=current_user.id)

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Sale failed for worker %s", current_user.id)
        raise HTTPException(status_code=500, detail="Unable to complete sale")

    return SaleReceipt(
        success=True,
        sale_id=sale_id,
        total=float(plan.total),
        change=float(plan.change),
    )


# =========================================================
# LIST SALES
# =========================================================
@router.get("", response_model=list[SaleResponse])
def list_sales(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
    worker_id: int | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    query = db.query(Sale).options(selectinload(Sale.items))

    #  WORKERS -- OWN SALES ONLY
    if current_user.role != ROLE_OWNER:
        query = query.filter(Sale.worker_id == current_user.id)
    elif worker_id is not None:
        query = query.filter(Sale.worker_id == worker_id)

    return (
        query
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


# =========================================================
# GET SINGLE SALE
# =========================================================
@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(
    sale_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    sale = (
        db.query(Sale)
        .options(selectinload(Sale.items))
        .filter(Sale.id == sale_id)
        .first()
    )

    # Another worker's sale looks exactly like a missing one
    if not sale or (current_user.role != ROLE_OWNER and sale.worker_id != current_user.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sale not found",
        )

    return sale

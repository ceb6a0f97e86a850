# charnoks/routers/expenses.py

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from charnoks.database import get_db
from charnoks.core.auth import get_current_user
from charnoks.models.expenses import Expense
from charnoks.models.users import ROLE_OWNER
from charnoks.schemas.expense import ExpenseCreate, ExpenseResponse

router = APIRouter(prefix="/expenses", tags=["Expenses"])

logger = logging.getLogger(__name__)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def record_expense(
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    expense = Expense(
        description=expense_data.description,
        amount=expense_data.amount,
        worker_id=current_user.id,
    )

    db.add(expense)
    db.commit()
    db.refresh(expense)

    logger.info("Expense %s of %s recorded by %s", expense.id, expense.amount, current_user.id)
    return expense


@router.get("", response_model=list[ExpenseResponse])
def list_expenses(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    query = db.query(Expense)

    if current_user.role != ROLE_OWNER:
        query = query.filter(Expense.worker_id == current_user.id)

    return (
        query
        .order_by(Expense.created_at.desc(), Expense.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )

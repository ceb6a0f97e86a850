# charnoks/models/expenses.py

from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, ForeignKey, DateTime
from sqlalchemy.sql import func

from charnoks.database import Base
from charnoks.models.products import new_document_id


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(32), primary_key=True, default=new_document_id)
    description = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)

    worker_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

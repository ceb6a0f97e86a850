# models/sales.py

from sqlalchemy import Column, Index, Integer, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from charnoks.database import Base
from charnoks.models.products import new_document_id


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(32), primary_key=True, default=new_document_id)

    worker_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    total = Column(Numeric(10, 2), nullable=False)
    payment = Column(Numeric(10, 2), nullable=False)
    change = Column(Numeric(10, 2), nullable=False)

    # Stamped by the sale service during the commit phase
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )

    __table_args__ = (
        Index("ix_sales_worker_created", "worker_id", "created_at"),
    )

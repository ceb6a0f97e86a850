# charnoks/models/notes.py

from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, ForeignKey, DateTime
from sqlalchemy.sql import func

from charnoks.database import Base
from charnoks.models.products import new_document_id

NOTE_CATEGORIES = (
    "Delivery Note",
    "Reminder",
    "Supply Cost",
    "Internal Expense",
    "Other",
)


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(32), primary_key=True, default=new_document_id)
    category = Column(String(32), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(String, nullable=False, default="")

    # Optional; only some categories carry money
    amount = Column(Numeric(10, 2), nullable=True)

    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        CheckConstraint(
            "category IN (" + ", ".join(f"'{c}'" for c in NOTE_CATEGORIES) + ")",
            name="ck_notes_category_valid",
        ),
        CheckConstraint("amount IS NULL OR amount >= 0", name="ck_notes_amount_non_negative"),
    )

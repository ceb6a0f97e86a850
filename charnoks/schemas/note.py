from decimal import Decimal
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NoteCategory = Literal["Delivery Note", "Reminder", "Supply Cost", "Internal Expense", "Other"]


class NoteCreate(BaseModel):
    category: NoteCategory
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    amount: Decimal | None = Field(None, ge=0, lt=100_000_000)


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    category: str
    title: str
    description: str
    amount: float | None = None
    created_at: datetime = Field(alias="date")
    author_id: int = Field(alias="authorId")

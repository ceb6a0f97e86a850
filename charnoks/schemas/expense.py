from decimal import Decimal
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    amount: Decimal = Field(..., gt=0, lt=100_000_000)


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    description: str
    amount: float
    created_at: datetime = Field(alias="date")
    worker_id: int = Field(alias="workerId")

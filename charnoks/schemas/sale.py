# schemas/sale.py

import math
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


class SaleItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., alias="productId", min_length=1)
    quantity: StrictInt = Field(..., gt=0)


class SaleCreate(BaseModel):
    items: List[SaleItemCreate] = Field(..., min_length=1)
    payment: Decimal = Field(..., ge=0, lt=100_000_000)

    @field_validator("payment", mode="before")
    @classmethod
    def payment_must_be_a_number(cls, value):
        # bool is an int subclass and strings would be coerced; both are rejected
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise ValueError("payment must be a number")
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError("payment must be a finite number")
            return Decimal(str(value))
        return value


class SaleReceipt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    sale_id: str = Field(alias="saleId")
    total: float
    change: float


class SaleItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    product_id: str = Field(alias="productId")
    quantity: int
    price: float
    line_total: float = Field(alias="lineTotal")


class SaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    items: List[SaleItemResponse]
    total: float
    payment: float
    change: float
    created_at: datetime = Field(alias="date")
    worker_id: int = Field(alias="workerId")

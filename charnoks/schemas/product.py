from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class ProductCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=200)

    price: Decimal = Field(
        ...,
        gt=0,
        lt=100_000_000,
        description="Selling price must be below 100 million"
    )

    stock: int = Field(0, ge=0)
    category: str = Field("", max_length=100)
    image_url: str | None = Field(None, alias="imageUrl")


class ProductUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    price: Decimal | None = Field(None, gt=0, lt=100_000_000)
    category: str | None = Field(None, max_length=100)
    image_url: str | None = Field(None, alias="imageUrl")


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    price: float
    stock: int
    category: str
    image_url: str | None = Field(None, alias="imageUrl")
    created_at: datetime = Field(alias="createdAt")


class RestockRequest(BaseModel):
    quantity: int = Field(..., gt=0, le=1_000_000)

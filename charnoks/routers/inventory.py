# charnoks/routers/inventory.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from charnoks.database import get_db
from charnoks.core.auth import get_owner_user
from charnoks.models.products import Product
from charnoks.schemas.product import ProductResponse, RestockRequest
from charnoks.services.sale_store import restock_product

router = APIRouter(
    prefix="/inventory",
    tags=["Inventory"],
)


@router.post("/{product_id}/restock", response_model=ProductResponse)
def restock(
    product_id: str,
    restock_data: RestockRequest,
    db: Session = Depends(get_db),
    owner=Depends(get_owner_user),
):
    product = restock_product(db, product_id, restock_data.quantity)

    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


@router.get("/low-stock", response_model=list[ProductResponse])
def low_stock(
    threshold: int = Query(5, ge=0),
    db: Session = Depends(get_db),
    owner=Depends(get_owner_user),
):
    return (
        db.query(Product)
        .filter(Product.stock <= threshold)
        .order_by(Product.stock.asc(), Product.name.asc())
        .all()
    )

# charnoks/routers/products.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from charnoks.database import get_db
from charnoks.core.auth import get_current_user, get_owner_user
from charnoks.models.products import Product
from charnoks.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)

logger = logging.getLogger(__name__)


def _get_product_or_404(db: Session, product_id: str) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return product


def _name_taken(db: Session, name: str) -> bool:
    return db.query(Product).filter(Product.name == name).first() is not None


def _duplicate_name():
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Product with this name already exists",
    )


def _commit_or_409(db: Session):
    try:
        db.commit()
    except StaleDataError:
        # A sale or restock touched the row since it was read
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product was modified concurrently, please retry",
        )
    except IntegrityError:
        # Another request took the name between our check and the write
        db.rollback()
        raise _duplicate_name()


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
    owner=Depends(get_owner_user),
):
    if _name_taken(db, product_data.name):
        raise _duplicate_name()

    product = Product(
        name=product_data.name,
        price=product_data.price,
        stock=product_data.stock,
        category=product_data.category,
        image_url=product_data.image_url,
    )

    db.add(product)
    _commit_or_409(db)
    db.refresh(product)

    logger.info("Product %s (%s) created with stock %s", product.id, product.name, product.stock)
    return product


@router.get("", response_model=list[ProductResponse])
def list_products(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return db.query(Product).order_by(Product.name.asc()).all()


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return _get_product_or_404(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
    owner=Depends(get_owner_user),
):
    product = _get_product_or_404(db, product_id)

    if product_data.name is not None and product_data.name != product.name:
        if _name_taken(db, product_data.name):
            raise _duplicate_name()
        product.name = product_data.name

    if product_data.price is not None:
        product.price = product_data.price

    if product_data.category is not None:
        product.category = product_data.category

    if product_data.image_url is not None:
        product.image_url = product_data.image_url

    _commit_or_409(db)
    db.refresh(product)

    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    owner=Depends(get_owner_user),
):
    product = _get_product_or_404(db, product_id)

    # Sale lines keep the id; history stays intact
    db.delete(product)
    _commit_or_409(db)

    logger.info("Product %s deleted by owner %s", product_id, owner.id)
    return None

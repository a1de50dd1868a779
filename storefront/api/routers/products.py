from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.schemas import ProductCreate, ProductOut, ProductPage, ProductUpdate
from storefront.services.product_service import ProductService

# the catalog is managed and browsed by admins only
router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(require_admin)])


@router.post("/", response_model=ProductOut)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return ProductService(db).create_product(payload)


@router.get("/", response_model=ProductPage)
def list_products(skip: int = Query(0, ge=0), db: Session = Depends(get_db)):
    return ProductService(db).list_products(skip)


@router.get("/search", response_model=List[ProductOut])
def search_products(
    q: str = Query(..., min_length=1),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return ProductService(db).search_products(q, skip)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ProductService(db).get_product(product_id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return ProductService(db).update_product(product_id, payload)


@router.delete("/{product_id}", response_model=ProductOut)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    return ProductService(db).delete_product(product_id)

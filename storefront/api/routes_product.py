from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.authz import Action
from storefront.db.deps import get_db, require
from storefront.schemas.common import Envelope, ok
from storefront.schemas.product import ProductCreate, ProductOut, ProductUpdate, StockAdjustment
from storefront.services.product_service import ProductService

router = APIRouter()

admin_only = require(Action.manage_products)


def _out(products) -> List[ProductOut]:
    return [ProductOut.model_validate(product) for product in products]


@router.get("", response_model=Envelope[List[ProductOut]])
def list_products(db: Session = Depends(get_db)):
    return ok(_out(ProductService(db).list_products()))


@router.get("/search", response_model=Envelope[List[ProductOut]])
def search_products(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return ok(_out(ProductService(db).search(q)))


@router.get("/search/{query}", response_model=Envelope[List[ProductOut]])
def search_products_by_path(query: str, db: Session = Depends(get_db)):
    return ok(_out(ProductService(db).search(query)))


@router.get("/featured", response_model=Envelope[List[ProductOut]])
def featured_products(limit: int = Query(None, gt=0), db: Session = Depends(get_db)):
    return ok(_out(ProductService(db).featured(limit)))


@router.get("/category/{category_id}", response_model=Envelope[List[ProductOut]])
def products_by_category(category_id: int, db: Session = Depends(get_db)):
    return ok(_out(ProductService(db).list_by_category(category_id)))


@router.get("/{product_id}", response_model=Envelope[ProductOut])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ok(ProductOut.model_validate(ProductService(db).get_product(product_id)))


@router.post("", response_model=Envelope[ProductOut], status_code=201, dependencies=[Depends(admin_only)])
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    product = ProductService(db).create_product(data.model_dump())
    return ok(ProductOut.model_validate(product), "Product created")


@router.put("/{product_id}", response_model=Envelope[ProductOut], dependencies=[Depends(admin_only)])
def update_product(product_id: int, data: ProductUpdate, db: Session = Depends(get_db)):
    product = ProductService(db).update_product(product_id, data.model_dump(exclude_unset=True))
    return ok(ProductOut.model_validate(product), "Product updated")


@router.patch("/{product_id}/stock", response_model=Envelope[ProductOut], dependencies=[Depends(admin_only)])
def adjust_stock(product_id: int, data: StockAdjustment, db: Session = Depends(get_db)):
    product = ProductService(db).adjust_stock(product_id, data.quantity)
    return ok(ProductOut.model_validate(product), "Stock updated")


@router.delete("/{product_id}", response_model=Envelope[None], dependencies=[Depends(admin_only)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    ProductService(db).delete_product(product_id)
    return ok(message="Product deleted")

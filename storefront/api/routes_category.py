from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.authz import Action
from storefront.db.deps import get_db, require
from storefront.schemas.common import Envelope, ok
from storefront.schemas.product import CategoryCreate, CategoryOut, CategoryUpdate
from storefront.services.category_service import CategoryService

router = APIRouter()

admin_only = require(Action.manage_categories)


@router.get("", response_model=Envelope[List[CategoryOut]])
def list_categories(db: Session = Depends(get_db)):
    return ok(CategoryService(db).list_categories())


@router.get("/{category_id}", response_model=Envelope[CategoryOut])
def get_category(category_id: int, db: Session = Depends(get_db)):
    return ok(CategoryService(db).get_category_details(category_id))


@router.post("", response_model=Envelope[CategoryOut], status_code=201, dependencies=[Depends(admin_only)])
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    return ok(CategoryService(db).create_category(data.name), "Category created")


@router.put("/{category_id}", response_model=Envelope[CategoryOut], dependencies=[Depends(admin_only)])
def update_category(category_id: int, data: CategoryUpdate, db: Session = Depends(get_db)):
    return ok(CategoryService(db).update_category(category_id, data.name), "Category updated")


@router.delete("/{category_id}", response_model=Envelope[None], dependencies=[Depends(admin_only)])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    CategoryService(db).delete_category(category_id)
    return ok(message="Category deleted")

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cardshop import schemas
from cardshop.auth.dependencies import require_admin
from cardshop.db import get_db
from cardshop.revalidation import (
    ADMIN_CATEGORIES_PATH,
    ADMIN_DASHBOARD_PATH,
    STOREFRONT_ROOT_PATH,
    PathRevalidator,
    get_revalidator,
)
from cardshop.services import catalog_admin as catalog_service

router = APIRouter(prefix="/admin/catalog", tags=["admin-catalog"])

PRODUCT_PATHS = (ADMIN_DASHBOARD_PATH, STOREFRONT_ROOT_PATH)
CATEGORY_PATHS = (ADMIN_CATEGORIES_PATH, STOREFRONT_ROOT_PATH)


@router.get("/products", response_model=list[schemas.AdminProductOut])
def list_products(
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return catalog_service.list_products(db)


@router.post("/products", response_model=schemas.ProductOut)
def save_product(
    payload: schemas.ProductSave,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    product = catalog_service.save_product(db, payload)
    revalidator.revalidate(PRODUCT_PATHS)
    return product


@router.delete("/products/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    catalog_service.delete_product(db, product_id)
    revalidator.revalidate(PRODUCT_PATHS)


@router.patch("/products/{product_id}/status", response_model=schemas.ProductOut)
def toggle_product_status(
    product_id: str,
    payload: schemas.ProductStatusUpdate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    product = catalog_service.toggle_product_status(db, product_id, payload.is_active)
    revalidator.revalidate(PRODUCT_PATHS)
    return product


@router.patch("/products/{product_id}/order", response_model=schemas.ProductOut)
def reorder_product(
    product_id: str,
    payload: schemas.ProductOrderUpdate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    product = catalog_service.reorder_product(db, product_id, payload.sort_order)
    revalidator.revalidate(PRODUCT_PATHS)
    return product


@router.get("/categories", response_model=list[schemas.CategoryOut])
def list_categories(
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return catalog_service.list_categories(db)


@router.post("/categories", response_model=schemas.CategoryOut, status_code=201)
def create_category(
    payload: schemas.CategoryCreate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    category = catalog_service.create_category(db, payload)
    revalidator.revalidate(CATEGORY_PATHS)
    return category


@router.patch("/categories/{category_id}", response_model=schemas.CategoryOut)
def update_category(
    category_id: int,
    payload: schemas.CategoryUpdate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    category = catalog_service.update_category(db, category_id, payload)
    revalidator.revalidate(CATEGORY_PATHS)
    return category


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    catalog_service.delete_category(db, category_id)
    revalidator.revalidate(CATEGORY_PATHS)

"""
Admin catalog service: products and categories.
The admin/catalog router only orchestrates (HTTP, Depends, revalidation) and calls this service.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import asc
from sqlalchemy.orm import Session

from cardshop import models, schemas
from cardshop.services.cards import count_unused_cards, get_product_or_404

logger = logging.getLogger(__name__)


def generate_product_id() -> str:
    return f"prod_{int(time.time() * 1000)}"


def _normalize_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _normalize_compare_at_price(value: Decimal | None) -> Decimal | None:
    if value is None or value == 0:
        return None
    return value


def ensure_category_exists(db: Session, name: str) -> None:
    exists = db.query(models.Category.id).filter(models.Category.name == name).first()
    if exists:
        return
    db.add(models.Category(name=name, sort_order=0))
    db.flush()


def save_product(db: Session, payload: schemas.ProductSave) -> models.Product:
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Product name is required")

    product_id = _normalize_optional_text(payload.id) or generate_product_id()
    category = _normalize_optional_text(payload.category)
    if category:
        ensure_category_exists(db, category)

    fields = dict(
        name=name,
        description=payload.description,
        price=payload.price,
        compare_at_price=_normalize_compare_at_price(payload.compare_at_price),
        category=category,
        image=_normalize_optional_text(payload.image),
        purchase_limit=payload.purchase_limit,
        is_hot=payload.is_hot,
    )

    product = db.query(models.Product).filter(models.Product.id == product_id).first()
    if product:
        for key, value in fields.items():
            setattr(product, key, value)
    else:
        product = models.Product(id=product_id, **fields)
        db.add(product)

    db.commit()
    db.refresh(product)
    logger.info("[catalog] saved product_id=%s", product.id)
    return product


def delete_product(db: Session, product_id: str) -> None:
    product = get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("[catalog] deleted product_id=%s", product_id)


def toggle_product_status(db: Session, product_id: str, is_active: bool) -> models.Product:
    product = get_product_or_404(db, product_id)
    product.is_active = is_active
    db.commit()
    db.refresh(product)
    return product


def reorder_product(db: Session, product_id: str, sort_order: int) -> models.Product:
    product = get_product_or_404(db, product_id)
    product.sort_order = sort_order
    db.commit()
    db.refresh(product)
    return product


def list_products(db: Session) -> list[schemas.AdminProductOut]:
    products = (
        db.query(models.Product)
        .order_by(asc(models.Product.sort_order), asc(models.Product.name))
        .all()
    )
    stock = count_unused_cards(db, [product.id for product in products])
    return [
        schemas.AdminProductOut.model_validate(product).model_copy(update={"stock": stock.get(product.id, 0)})
        for product in products
    ]


def _normalize_category_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")
    return name


def _ensure_category_name_free(db: Session, name: str, exclude_id: int | None = None) -> None:
    query = db.query(models.Category.id).filter(models.Category.name == name)
    if exclude_id is not None:
        query = query.filter(models.Category.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail="Category already exists")


def list_categories(db: Session) -> list[models.Category]:
    return (
        db.query(models.Category)
        .order_by(asc(models.Category.sort_order), asc(models.Category.name))
        .all()
    )


def create_category(db: Session, payload: schemas.CategoryCreate) -> models.Category:
    name = _normalize_category_name(payload.name)
    _ensure_category_name_free(db, name)
    category = models.Category(
        name=name,
        icon=_normalize_optional_text(payload.icon),
        sort_order=payload.sort_order,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, payload: schemas.CategoryUpdate) -> models.Category:
    category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    if payload.name is not None:
        name = _normalize_category_name(payload.name)
        _ensure_category_name_free(db, name, exclude_id=category.id)
        category.name = name
    if payload.icon is not None:
        category.icon = _normalize_optional_text(payload.icon)
    if payload.sort_order is not None:
        category.sort_order = payload.sort_order
    category.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    db.delete(category)
    db.commit()

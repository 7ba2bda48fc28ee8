"""
Card key inventory: batch ingestion, guarded deletion and listing.

The admin/cards router handles HTTP, authorization and revalidation,
then calls this service.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from fastapi import HTTPException
from sqlalchemy import func, insert, or_
from sqlalchemy.orm import Session

from cardshop import models
from cardshop.db import settings
from cardshop.domain.cards.keys import chunked, sanitize_card_keys
from cardshop.domain.cards.reservation import is_recently_reserved, reservation_cutoff
from cardshop.schema import drop_legacy_card_key_index

logger = logging.getLogger(__name__)


def get_product_or_404(db: Session, product_id: str) -> models.Product:
    product = db.query(models.Product).filter(models.Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def add_cards_batch(
    db: Session,
    product_id: str,
    card_keys: Iterable[str | None],
    chunk_size: int | None = None,
) -> int:
    """Store one batch of keys for a product and return how many were written.

    Keys are stripped and blank ones dropped; nothing else is filtered, so
    keys already present are stored again. Rows go out in multi-row
    INSERTs of at most `chunk_size` rows regardless of the batch size.
    """
    valid_keys = sanitize_card_keys(card_keys)
    if not valid_keys:
        return 0

    drop_legacy_card_key_index(db)
    get_product_or_404(db, product_id)

    size = chunk_size or settings.card_insert_chunk_size
    for batch in chunked(valid_keys, size):
        db.execute(
            insert(models.CardKey).values(
                [{"product_id": product_id, "card_key": key, "is_used": False} for key in batch]
            )
        )
    db.commit()
    logger.info("[cards] added product_id=%s count=%s", product_id, len(valid_keys))
    return len(valid_keys)


def delete_card(db: Session, card_id: int, now: datetime | None = None) -> str:
    """Delete a single unused, unreserved key. Returns its product id."""
    card = db.query(models.CardKey).filter(models.CardKey.id == card_id).first()
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    if card.is_used:
        raise HTTPException(status_code=409, detail="Cannot delete used card")
    if is_recently_reserved(card.reserved_at, now):
        raise HTTPException(status_code=409, detail="Cannot delete reserved card")

    product_id = card.product_id
    db.delete(card)
    db.commit()
    logger.info("[cards] deleted card_id=%s product_id=%s", card_id, product_id)
    return product_id


def delete_all_cards(db: Session, product_id: str, now: datetime | None = None) -> int:
    """Delete every deletable key of a product in one conditional DELETE."""
    cutoff = reservation_cutoff(now)
    deleted = (
        db.query(models.CardKey)
        .filter(
            models.CardKey.product_id == product_id,
            or_(models.CardKey.is_used.is_(False), models.CardKey.is_used.is_(None)),
            or_(models.CardKey.reserved_at.is_(None), models.CardKey.reserved_at < cutoff),
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("[cards] cleared product_id=%s deleted=%s", product_id, deleted)
    return int(deleted or 0)


def list_unused_cards(db: Session, product_id: str) -> list[models.CardKey]:
    return (
        db.query(models.CardKey)
        .filter(
            models.CardKey.product_id == product_id,
            or_(models.CardKey.is_used.is_(False), models.CardKey.is_used.is_(None)),
        )
        .order_by(models.CardKey.id.asc())
        .all()
    )


def count_unused_cards(db: Session, product_ids: list[str]) -> dict[str, int]:
    if not product_ids:
        return {}
    rows = (
        db.query(models.CardKey.product_id, func.count(models.CardKey.id))
        .filter(
            models.CardKey.product_id.in_(product_ids),
            or_(models.CardKey.is_used.is_(False), models.CardKey.is_used.is_(None)),
        )
        .group_by(models.CardKey.product_id)
        .all()
    )
    return {product_id: int(count) for product_id, count in rows}

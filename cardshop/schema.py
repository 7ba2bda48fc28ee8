"""
Schema preparation for databases created before the current models.

`ensure_schema` is idempotent and runs once per engine (startup hook and
scripts). Production deployments still go through Alembic; this covers
databases that were bootstrapped by hand and never migrated.
"""
from __future__ import annotations

import logging
import threading

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cardshop import models
from cardshop.db import Base

logger = logging.getLogger(__name__)

# Columns added to `products` after the first releases: name -> DDL type/default.
LEGACY_PRODUCT_COLUMNS = {
    "compare_at_price": "NUMERIC(10, 2)",
    "is_hot": "BOOLEAN NOT NULL DEFAULT FALSE",
}

_prepared: set[str] = set()
_lock = threading.Lock()


def _engine_key(engine: Engine) -> str:
    return f"{id(engine)}:{engine.url}"


def ensure_schema(engine: Engine) -> bool:
    """Bring the database up to the current models.

    Returns True when the preparation ran, False when it had already run
    for this engine in the current process.
    """
    key = _engine_key(engine)
    with _lock:
        if key in _prepared:
            return False
        Base.metadata.create_all(engine)
        with engine.begin() as conn:
            existing = {column["name"] for column in inspect(conn).get_columns("products")}
            for name, ddl in LEGACY_PRODUCT_COLUMNS.items():
                if name in existing:
                    continue
                logger.info("[schema] adding products.%s", name)
                conn.execute(text(f"ALTER TABLE products ADD COLUMN {name} {ddl}"))
            conn.execute(text(f"DROP INDEX IF EXISTS {models.LEGACY_CARD_KEY_INDEX}"))
        _prepared.add(key)
        return True


def reset_schema_guard() -> None:
    with _lock:
        _prepared.clear()


def drop_legacy_card_key_index(db: Session) -> bool:
    """Best effort: drop the old (product_id, card_key) unique index.

    Duplicate keys are allowed, so the index must not exist. Failures are
    logged and ignored; the caller's transaction is rolled back, so this
    must run before anything else in the session.
    """
    try:
        db.execute(text(f"DROP INDEX IF EXISTS {models.LEGACY_CARD_KEY_INDEX}"))
        return True
    except SQLAlchemyError as exc:
        logger.warning("[schema] could not drop %s: %s", models.LEGACY_CARD_KEY_INDEX, exc)
        db.rollback()
        return False

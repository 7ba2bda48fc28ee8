from __future__ import annotations

from sqlalchemy.orm import Session

from cardshop import models, schemas
from cardshop.domain.config.shop_settings import (
    CHECKIN_ENABLED_KEY,
    CHECKIN_REWARD_KEY,
    DEFAULT_CHECKIN_REWARD,
    DEFAULT_LOW_STOCK_THRESHOLD,
    LOW_STOCK_THRESHOLD_KEY,
    SHOP_NAME_KEY,
    load_flag,
    load_positive_int,
    normalize_positive_int,
    normalize_shop_name,
)


def get_setting(db: Session, key: str) -> str | None:
    row = db.query(models.Setting).filter(models.Setting.key == key).first()
    return row.value if row else None


def set_setting(db: Session, key: str, value: str) -> None:
    row = db.query(models.Setting).filter(models.Setting.key == key).first()
    if row:
        row.value = value
    else:
        db.add(models.Setting(key=key, value=value))
    db.commit()


def load_shop_settings(db: Session) -> schemas.ShopSettingsOut:
    return schemas.ShopSettingsOut(
        shop_name=get_setting(db, SHOP_NAME_KEY),
        low_stock_threshold=load_positive_int(get_setting(db, LOW_STOCK_THRESHOLD_KEY), DEFAULT_LOW_STOCK_THRESHOLD),
        checkin_reward=load_positive_int(get_setting(db, CHECKIN_REWARD_KEY), DEFAULT_CHECKIN_REWARD),
        checkin_enabled=load_flag(get_setting(db, CHECKIN_ENABLED_KEY)),
    )


def save_shop_name(db: Session, raw_name: str | None) -> str:
    # ValueError for empty/too long names; the router maps it to 400.
    name = normalize_shop_name(raw_name)
    set_setting(db, SHOP_NAME_KEY, name)
    return name


def save_low_stock_threshold(db: Session, raw: str | int | None) -> str:
    value = normalize_positive_int(raw, DEFAULT_LOW_STOCK_THRESHOLD)
    set_setting(db, LOW_STOCK_THRESHOLD_KEY, value)
    return value


def save_checkin_reward(db: Session, raw: str | int | None) -> str:
    value = normalize_positive_int(raw, DEFAULT_CHECKIN_REWARD)
    set_setting(db, CHECKIN_REWARD_KEY, value)
    return value


def save_checkin_enabled(db: Session, enabled: bool) -> str:
    value = "true" if enabled else "false"
    set_setting(db, CHECKIN_ENABLED_KEY, value)
    return value

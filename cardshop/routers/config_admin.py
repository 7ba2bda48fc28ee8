from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cardshop import schemas
from cardshop.auth.dependencies import require_admin
from cardshop.db import get_db
from cardshop.revalidation import ADMIN_DASHBOARD_PATH, STOREFRONT_ROOT_PATH, PathRevalidator, get_revalidator
from cardshop.services import shop_settings

router = APIRouter(prefix="/admin/settings", tags=["admin-settings"])


@router.get("", response_model=schemas.ShopSettingsOut)
def get_settings(
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return shop_settings.load_shop_settings(db)


@router.put("/shop-name", response_model=schemas.ShopSettingsOut)
def save_shop_name(
    payload: schemas.ShopNameUpdate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    try:
        shop_settings.save_shop_name(db, payload.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    revalidator.revalidate([STOREFRONT_ROOT_PATH, ADMIN_DASHBOARD_PATH])
    return shop_settings.load_shop_settings(db)


@router.put("/low-stock-threshold", response_model=schemas.ShopSettingsOut)
def save_low_stock_threshold(
    payload: schemas.PositiveIntSettingUpdate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    shop_settings.save_low_stock_threshold(db, payload.value)
    revalidator.revalidate([ADMIN_DASHBOARD_PATH])
    return shop_settings.load_shop_settings(db)


@router.put("/checkin-reward", response_model=schemas.ShopSettingsOut)
def save_checkin_reward(
    payload: schemas.PositiveIntSettingUpdate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    shop_settings.save_checkin_reward(db, payload.value)
    revalidator.revalidate([ADMIN_DASHBOARD_PATH])
    return shop_settings.load_shop_settings(db)


@router.put("/checkin-enabled", response_model=schemas.ShopSettingsOut)
def save_checkin_enabled(
    payload: schemas.CheckinEnabledUpdate,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    shop_settings.save_checkin_enabled(db, payload.enabled)
    revalidator.revalidate([ADMIN_DASHBOARD_PATH, STOREFRONT_ROOT_PATH])
    return shop_settings.load_shop_settings(db)

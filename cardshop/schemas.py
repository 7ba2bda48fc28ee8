from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, Field


# Catalog


class ProductSave(BaseModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    compare_at_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image: Optional[str] = None
    purchase_limit: Optional[int] = Field(default=None, ge=1)
    is_hot: bool = False


class ProductOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: Decimal
    compare_at_price: Optional[Decimal] = None
    category: Optional[str] = None
    image: Optional[str] = None
    purchase_limit: Optional[int] = None
    is_hot: bool = False
    is_active: bool = True
    sort_order: int = 0

    class Config:
        from_attributes = True


class AdminProductOut(ProductOut):
    stock: int = 0


class ProductStatusUpdate(BaseModel):
    is_active: bool


class ProductOrderUpdate(BaseModel):
    sort_order: int


class CategoryCreate(BaseModel):
    name: str
    icon: Optional[str] = None
    sort_order: int = 0


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    icon: Optional[str] = None
    sort_order: int

    class Config:
        from_attributes = True


# Card keys


class CardsBatchIn(BaseModel):
    keys: List[Optional[str]] = Field(default_factory=list)


class CardsBatchOut(BaseModel):
    success: int


class CardsTextIn(BaseModel):
    cards: str


class CardsDeleteAllOut(BaseModel):
    deleted: int


class CardKeyOut(BaseModel):
    id: int
    card_key: str
    reserved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductCardsOut(BaseModel):
    product_id: str
    product_name: str
    unused_count: int
    cards: List[CardKeyOut] = Field(default_factory=list)


# Shop settings


class ShopNameUpdate(BaseModel):
    name: str


class PositiveIntSettingUpdate(BaseModel):
    value: Optional[Union[int, str]] = None


class CheckinEnabledUpdate(BaseModel):
    enabled: bool


class ShopSettingsOut(BaseModel):
    shop_name: Optional[str] = None
    low_stock_threshold: int
    checkin_reward: int
    checkin_enabled: bool

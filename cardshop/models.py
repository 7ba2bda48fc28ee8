from cardshop.domain.catalog.models import Category, Product, Review
from cardshop.domain.cards.models import LEGACY_CARD_KEY_INDEX, CardKey
from cardshop.domain.config.models import Setting

__all__ = [
    "Category",
    "Product",
    "Review",
    "CardKey",
    "LEGACY_CARD_KEY_INDEX",
    "Setting",
]

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cardshop.db import Base

LEGACY_CARD_KEY_INDEX = "cards_product_id_card_key_uq"


class CardKey(Base):
    """One redeemable key of a product's digital inventory.

    Key strings are not unique, not even within a product: uploading the
    same file twice stores every key twice.
    """

    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    card_key: Mapped[str] = mapped_column(Text, nullable=False)
    is_used: Mapped[bool | None] = mapped_column(Boolean, default=False)
    reserved_order_id: Mapped[str | None] = mapped_column(String(64))
    reserved_at: Mapped["DateTime | None"] = mapped_column(DateTime(timezone=True))
    used_at: Mapped["DateTime | None"] = mapped_column(DateTime(timezone=True))
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    product = relationship("Product", back_populates="cards")

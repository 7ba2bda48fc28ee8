from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cardshop import models
from cardshop.auth.dependencies import require_admin
from cardshop.db import get_db
from cardshop.revalidation import ADMIN_REVIEWS_PATH, PathRevalidator, get_revalidator

router = APIRouter(prefix="/admin/reviews", tags=["admin-reviews"])


@router.delete("/{review_id}", status_code=204)
def delete_review(
    review_id: int,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    review = db.query(models.Review).filter(models.Review.id == review_id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    db.delete(review)
    db.commit()
    revalidator.revalidate([ADMIN_REVIEWS_PATH])

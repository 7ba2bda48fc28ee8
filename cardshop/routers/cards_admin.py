from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from cardshop import schemas
from cardshop.auth.dependencies import require_admin
from cardshop.db import get_db
from cardshop.domain.cards.keys import normalize_card_keys
from cardshop.revalidation import PathRevalidator, card_mutation_paths, get_revalidator
from cardshop.services import cards as cards_service

router = APIRouter(prefix="/admin/cards", tags=["admin-cards"])

ALLOWED_KEY_FILE_TYPES = {"text/plain", "text/csv", "application/octet-stream", "application/vnd.ms-excel"}
ALLOWED_KEY_FILE_EXTENSIONS = (".txt", ".csv")
MAX_KEY_FILE_BYTES = 2 * 1024 * 1024


@router.get("/{product_id}", response_model=schemas.ProductCardsOut)
def get_product_cards(
    product_id: str,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = cards_service.get_product_or_404(db, product_id)
    unused = cards_service.list_unused_cards(db, product_id)
    return schemas.ProductCardsOut(
        product_id=product.id,
        product_name=product.name,
        unused_count=len(unused),
        cards=[schemas.CardKeyOut.model_validate(card) for card in unused],
    )


@router.post("/{product_id}/batch", response_model=schemas.CardsBatchOut)
def add_cards_batch(
    product_id: str,
    payload: schemas.CardsBatchIn,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    success = cards_service.add_cards_batch(db, product_id, payload.keys)
    if success:
        revalidator.revalidate(card_mutation_paths(product_id))
    return schemas.CardsBatchOut(success=success)


@router.post("/{product_id}", response_model=schemas.CardsBatchOut)
def add_cards(
    product_id: str,
    payload: schemas.CardsTextIn,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    card_keys = normalize_card_keys(payload.cards)
    if not card_keys:
        raise HTTPException(status_code=400, detail="No cards found")
    success = cards_service.add_cards_batch(db, product_id, card_keys)
    revalidator.revalidate(card_mutation_paths(product_id))
    return schemas.CardsBatchOut(success=success)


@router.post("/{product_id}/file", response_model=schemas.CardsBatchOut)
def upload_cards_file(
    product_id: str,
    file: UploadFile = File(...),
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    file_name = (file.filename or "").lower()
    if (file.content_type or "") not in ALLOWED_KEY_FILE_TYPES and not file_name.endswith(ALLOWED_KEY_FILE_EXTENSIONS):
        raise HTTPException(status_code=400, detail="Unsupported file type")

    contents = file.file.read(MAX_KEY_FILE_BYTES + 1)
    if len(contents) > MAX_KEY_FILE_BYTES:
        raise HTTPException(status_code=400, detail="File too large (max 2MB)")
    try:
        text = contents.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="File must be UTF-8 text") from exc

    card_keys = normalize_card_keys(text)
    if not card_keys:
        raise HTTPException(status_code=400, detail="No cards found")
    success = cards_service.add_cards_batch(db, product_id, card_keys)
    revalidator.revalidate(card_mutation_paths(product_id))
    return schemas.CardsBatchOut(success=success)


@router.delete("/item/{card_id}", status_code=204)
def delete_card(
    card_id: int,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    product_id = cards_service.delete_card(db, card_id)
    revalidator.revalidate(card_mutation_paths(product_id))


@router.delete("/{product_id}", response_model=schemas.CardsDeleteAllOut)
def delete_all_cards(
    product_id: str,
    _: str = Depends(require_admin),
    db: Session = Depends(get_db),
    revalidator: PathRevalidator = Depends(get_revalidator),
):
    deleted = cards_service.delete_all_cards(db, product_id)
    revalidator.revalidate(card_mutation_paths(product_id))
    return schemas.CardsDeleteAllOut(deleted=deleted)

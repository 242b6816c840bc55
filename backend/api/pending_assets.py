"""Pending asset API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies import require_session
from database import get_db
from schemas.pending_asset import (
    PendingAssetCreate,
    PendingAssetListResponse,
    PendingAssetResponse,
    PendingAssetUpdate,
    PendingAssetWriteResponse,
)
from services.pending_asset_service import PendingAssetService

router = APIRouter(
    prefix="/api/pending-assets",
    tags=["pending-assets"],
    dependencies=[Depends(require_session)],
)


def _similar_name_warnings(db: Session, name: str) -> list[str]:
    return [
        f"Similar holding already exists: '{existing}'"
        for existing in PendingAssetService.similar_names(db, name)
    ]


@router.get("", response_model=PendingAssetListResponse)
def list_pending(db: Session = Depends(get_db)):
    items = PendingAssetService.list_pending(db)
    return PendingAssetListResponse(
        items=items, total_value_usd=PendingAssetService.total_value(items)
    )


@router.post("", response_model=PendingAssetWriteResponse, status_code=201)
def create_pending(body: PendingAssetCreate, db: Session = Depends(get_db)):
    """Add a pending asset; near-duplicate holding names come back as warnings."""
    try:
        item = PendingAssetService.create(db, body.name, body.asset_class, body.value_usd)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return PendingAssetWriteResponse(
        item=PendingAssetResponse.model_validate(item),
        warnings=_similar_name_warnings(db, item.name),
    )


@router.patch("/{item_id}", response_model=PendingAssetWriteResponse)
def update_pending(item_id: str, body: PendingAssetUpdate, db: Session = Depends(get_db)):
    try:
        item = PendingAssetService.update(
            db, item_id, asset_class=body.asset_class, value_usd=body.value_usd
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if item is None:
        raise HTTPException(status_code=404, detail="Pending asset not found")
    return PendingAssetWriteResponse(item=PendingAssetResponse.model_validate(item))


@router.delete("/{item_id}", status_code=204)
def delete_pending(item_id: str, db: Session = Depends(get_db)):
    if not PendingAssetService.delete(db, item_id):
        raise HTTPException(status_code=404, detail="Pending asset not found")

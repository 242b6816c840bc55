"""Portfolio snapshot API endpoints."""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.dependencies import require_session
from database import get_db
from schemas.snapshot import (
    AssetDeltaResponse,
    ComparisonCategory,
    SnapshotComparisonResponse,
    SnapshotCreate,
    SnapshotDetail,
    SnapshotSummary,
)
from services.asset_service import AssetService
from services.fx_rate_service import FXRateService
from services.snapshot_service import SnapshotService

router = APIRouter(
    prefix="/api/snapshots",
    tags=["snapshots"],
    dependencies=[Depends(require_session)],
)


@router.get("", response_model=list[SnapshotSummary])
def list_snapshots(db: Session = Depends(get_db)):
    """List saved snapshots, newest first."""
    return SnapshotService.list_snapshots(db)


@router.post("", response_model=SnapshotSummary, status_code=201)
def save_snapshot(body: SnapshotCreate, db: Session = Depends(get_db)):
    """Freeze the current holdings and FX table."""
    return SnapshotService.save_snapshot(
        db,
        AssetService().list_assets(db),
        FXRateService.load_table(db),
        suffix=body.suffix,
        description=body.description,
    )


@router.get("/compare", response_model=SnapshotComparisonResponse)
def compare_snapshots(
    snapshot_a: str = Query(..., description="Earlier snapshot id"),
    snapshot_b: str = Query(..., description="Later snapshot id"),
    category: ComparisonCategory = "liquid",
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """Per-name change between two snapshots, largest USD change first.

    Values are converted with the current FX table.
    """
    try:
        deltas = SnapshotService.compare_snapshots(
            db, snapshot_a, snapshot_b, FXRateService.load_table(db), category, limit=limit
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Snapshot not found")
    return SnapshotComparisonResponse(
        snapshot_a_id=snapshot_a,
        snapshot_b_id=snapshot_b,
        category=category,
        deltas=[AssetDeltaResponse(**asdict(d)) for d in deltas],
    )


@router.get("/{snapshot_id}", response_model=SnapshotDetail)
def get_snapshot(snapshot_id: str, db: Session = Depends(get_db)):
    snapshot = SnapshotService.get_snapshot(db, snapshot_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Snapshot not found")
    return snapshot

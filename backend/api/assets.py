"""Holdings API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies import require_session
from api.helpers import get_or_404, validation_http_error
from database import get_db
from models import Asset
from schemas.asset import (
    AssetCreate,
    AssetExistingCreate,
    AssetResponse,
    AssetUpdate,
    AssetValidateRequest,
    AssetWriteResponse,
    NameGroup,
    NameGroupsResponse,
    ValidationResponse,
)
from services.asset_service import (
    AssetNotFoundError,
    AssetService,
    AssetValidationError,
)

router = APIRouter(
    prefix="/api/assets",
    tags=["assets"],
    dependencies=[Depends(require_session)],
)


@router.get("", response_model=list[AssetResponse])
def list_assets(db: Session = Depends(get_db)):
    """List all holdings."""
    return AssetService().list_assets(db)


@router.post("", response_model=AssetWriteResponse, status_code=201)
def create_asset(body: AssetCreate, db: Session = Depends(get_db)):
    """Create a holding under a new name."""
    try:
        asset, warnings = AssetService().create_asset(db, body.model_dump())
    except AssetValidationError as e:
        raise validation_http_error(e.result)
    return AssetWriteResponse(asset=AssetResponse.model_validate(asset), warnings=warnings)


@router.post("/existing", response_model=AssetWriteResponse, status_code=201)
def add_existing_holding(body: AssetExistingCreate, db: Session = Depends(get_db)):
    """Add a holding to an existing name group, copying its shared fields."""
    try:
        asset = AssetService().add_existing_holding(db, body.model_dump())
    except AssetNotFoundError:
        raise HTTPException(status_code=404, detail=f"Asset '{body.name}' not found")
    except AssetValidationError as e:
        raise validation_http_error(e.result)
    return AssetWriteResponse(asset=AssetResponse.model_validate(asset))


@router.post("/validate", response_model=ValidationResponse)
def validate_asset(body: AssetValidateRequest, db: Session = Depends(get_db)):
    """Validate a holding without saving it."""
    try:
        result = AssetService().validate(
            db, body.asset.model_dump(exclude_unset=True), asset_id=body.asset_id
        )
    except AssetNotFoundError:
        raise HTTPException(status_code=404, detail="Asset not found")
    return ValidationResponse(
        errors=result.errors, warnings=result.warnings, is_valid=result.is_valid
    )


@router.get("/groups", response_model=NameGroupsResponse)
def get_name_groups(db: Session = Depends(get_db)):
    """Holdings grouped by shared name."""
    groups = AssetService().get_name_groups(db)
    return NameGroupsResponse(
        groups=[NameGroup(name=name, asset_ids=ids) for name, ids in groups.items()]
    )


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset(asset_id: str, db: Session = Depends(get_db)):
    return get_or_404(db, Asset, asset_id, "Asset not found")


@router.patch("/{asset_id}", response_model=AssetWriteResponse)
def update_asset(asset_id: str, body: AssetUpdate, db: Session = Depends(get_db)):
    """Edit a holding.

    Shared-field changes are applied to every holding with the same name,
    account-specific changes only to this one.
    """
    try:
        asset, kind, warnings, affected = AssetService().update_asset(
            db, asset_id, body.model_dump(exclude_unset=True)
        )
    except AssetNotFoundError:
        raise HTTPException(status_code=404, detail="Asset not found")
    except AssetValidationError as e:
        raise validation_http_error(e.result)
    return AssetWriteResponse(
        asset=AssetResponse.model_validate(asset),
        warnings=warnings,
        edit_kind=kind.value,
        affected_count=affected,
    )


@router.delete("/{asset_id}", status_code=204)
def delete_asset(asset_id: str, db: Session = Depends(get_db)):
    try:
        AssetService().delete_asset(db, asset_id)
    except AssetNotFoundError:
        raise HTTPException(status_code=404, detail="Asset not found")

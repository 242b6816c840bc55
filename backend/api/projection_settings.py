"""Saved projection settings API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import require_session
from database import get_db
from schemas.projection import ProjectionSettings
from services.projection_service import ProjectionSettingsService

router = APIRouter(
    prefix="/api/projection-settings",
    tags=["projection"],
    dependencies=[Depends(require_session)],
)


@router.get("", response_model=ProjectionSettings)
def get_projection_settings(db: Session = Depends(get_db)):
    """Last-saved assumptions, or defaults when nothing was saved yet."""
    stored = ProjectionSettingsService.get(db)
    if stored is None:
        return ProjectionSettings()
    return ProjectionSettings.model_validate(stored)


@router.put("", response_model=ProjectionSettings)
def save_projection_settings(body: ProjectionSettings, db: Session = Depends(get_db)):
    ProjectionSettingsService.save(db, body.model_dump(mode="json"))
    return body

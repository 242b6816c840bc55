"""Shared API helpers for route handlers."""

from typing import TypeVar

from fastapi import HTTPException
from sqlalchemy.orm import Session

from database import Base
from services.asset_service import ValidationResult

T = TypeVar("T", bound=Base)


def get_or_404(db: Session, model: type[T], entity_id: str, detail: str = "Not found") -> T:
    """Fetch a single entity by primary key or raise 404.

    Args:
        db: Database session.
        model: SQLAlchemy model class.
        entity_id: Primary key value.
        detail: Error message for the 404 response.

    Raises:
        HTTPException: 404 if the entity doesn't exist.
    """
    entity = db.query(model).filter(model.id == entity_id).first()
    if not entity:
        raise HTTPException(status_code=404, detail=detail)
    return entity


def validation_http_error(result: ValidationResult) -> HTTPException:
    """422 carrying both the blocking errors and the warnings."""
    return HTTPException(
        status_code=422,
        detail={"errors": result.errors, "warnings": result.warnings},
    )


def fx_warnings(missing_currencies: list[str]) -> list[str]:
    """User-facing notes for currencies valued at the fallback rate of 1."""
    return [
        f"No FX rate for {currency}; values in {currency} are shown unconverted"
        for currency in missing_currencies
    ]

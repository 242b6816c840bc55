"""Account update tracker API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.dependencies import require_session
from database import get_db
from schemas.account_update import (
    AccountUpdateMark,
    AccountUpdateMarkResponse,
    AccountUpdateStatusResponse,
)
from services.account_update_service import AccountUpdateService

router = APIRouter(
    prefix="/api/account-updates",
    tags=["account-updates"],
    dependencies=[Depends(require_session)],
)


@router.get("", response_model=list[AccountUpdateStatusResponse])
def list_statuses(db: Session = Depends(get_db)):
    """Every account with its last reconciliation time (null if never)."""
    return AccountUpdateService.list_statuses(db)


@router.post("", response_model=AccountUpdateMarkResponse)
def mark_updated(body: AccountUpdateMark, db: Session = Depends(get_db)):
    """Mark one account, or all of an entity's accounts, as reconciled now."""
    if body.account_bank:
        AccountUpdateService.mark_updated(db, body.account_entity, body.account_bank)
        return AccountUpdateMarkResponse(updated_count=1)
    return AccountUpdateMarkResponse(
        updated_count=AccountUpdateService.mark_entity_updated(db, body.account_entity)
    )


@router.delete("", status_code=204)
def clear_update(
    account_entity: str = Query(...),
    account_bank: str = Query(...),
    db: Session = Depends(get_db),
):
    if not AccountUpdateService.clear_update(db, account_entity, account_bank):
        raise HTTPException(status_code=404, detail="Account is not tracked")

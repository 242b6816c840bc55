"""Asset service - holding CRUD and name-group synchronization."""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from models import Asset
from services.asset_fields import EditKind, edit_kind, shared_fields, split_changes
from services.valuation_service import derive_pe_price, is_cash_equivalent
from utils.reference_data import (
    ACCOUNT_ENTITIES,
    ASSET_CLASSES,
    CASH,
    CURRENCIES,
    FACTORED_CLASSES,
    PRIVATE_EQUITY,
    cash_asset_name,
    get_bank_options,
    get_beneficiary,
    get_subclass_options,
)

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[.\-_]")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class ValidationResult:
    """Blocking errors and non-blocking warnings for a holding."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class AssetValidationError(ValueError):
    """Raised when a write fails validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(result.errors))


class AssetNotFoundError(ValueError):
    """Raised when a holding id or name does not exist."""


def normalize_name(name: str) -> str:
    """Lowercase, turn ``.-_`` into spaces and collapse whitespace."""
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub(" ", name.lower())).strip()


def build_name_index(assets: Iterable[Asset]) -> dict[str, list[str]]:
    """Map each non-empty name to the ids of the holdings carrying it."""
    index: dict[str, list[str]] = {}
    for asset in assets:
        if asset.name:
            index.setdefault(asset.name, []).append(asset.id)
    return index


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def validate_asset(
    data: Mapping[str, Any],
    existing_assets: Iterable[Asset],
    is_new: bool,
    asset_id: Optional[str] = None,
) -> ValidationResult:
    """Validate a holding against reference data and existing names.

    Args:
        data: Holding fields (``asset_class``, ``sub_class``, ...)
        existing_assets: Current holdings, used for duplicate-name checks
        is_new: True when creating a holding under a new name
        asset_id: Id of the holding being edited; its own name group is
            excluded from name checks, any other group name is an error

    Returns:
        ValidationResult. An exact name match on a new holding is an error;
        a case/punctuation-insensitive match is only a warning.
    """
    result = ValidationResult()
    errors = result.errors

    asset_class = data.get("asset_class")
    sub_class = data.get("sub_class")
    name = data.get("name")
    if asset_class == CASH and sub_class:
        name = cash_asset_name(sub_class)

    if not name or not str(name).strip():
        errors.append("Name is required")
    if not asset_class:
        errors.append("Asset class is required")
    elif asset_class not in ASSET_CLASSES:
        errors.append(f"Unknown asset class: {asset_class}")
    elif not sub_class:
        errors.append("Sub-class is required")
    elif sub_class not in get_subclass_options(asset_class):
        errors.append(f"Sub-class {sub_class} is not valid for {asset_class}")

    entity = data.get("account_entity")
    bank = data.get("account_bank")
    if not entity:
        errors.append("Account entity is required")
    elif entity not in ACCOUNT_ENTITIES:
        errors.append(f"Unknown account entity: {entity}")
    if not bank:
        errors.append("Account bank is required")
    elif entity and bank not in get_bank_options(entity):
        errors.append(f"Invalid bank for entity {entity}")

    currency = data.get("origin_currency")
    if not currency:
        errors.append("Currency is required")
    elif currency not in CURRENCIES:
        errors.append(f"Unsupported currency: {currency}")

    quantity = data.get("quantity")
    if not _is_number(quantity) or quantity < 0:
        errors.append("Quantity must be non-negative")

    price = data.get("price")
    price_derived = (
        asset_class == PRIVATE_EQUITY
        and data.get("pe_company_value") is not None
        and data.get("pe_holding_percentage") is not None
    )
    if asset_class != CASH and not price_derived:
        if not _is_number(price) or price < 0:
            errors.append("Price must be non-negative")

    factor = data.get("factor")
    if factor is not None and asset_class in FACTORED_CLASSES:
        if not _is_number(factor) or not 0 <= factor <= 1:
            errors.append("Factor must be between 0 and 1")

    ytw = data.get("ytw")
    if ytw is not None and (not _is_number(ytw) or ytw < 0):
        errors.append("YTW must be non-negative")

    percentage = data.get("pe_holding_percentage")
    if percentage is not None and (not _is_number(percentage) or not 0 <= percentage <= 100):
        errors.append("Holding percentage must be between 0 and 100")

    if name and str(name).strip():
        _check_name(str(name).strip(), existing_assets, is_new, asset_id, result)

    return result


def _check_name(
    name: str,
    existing_assets: Iterable[Asset],
    is_new: bool,
    asset_id: Optional[str],
    result: ValidationResult,
) -> None:
    existing = list(existing_assets)
    # An edited holding keeps its own group; every other name belongs to another group
    current = None if is_new else next((a.name for a in existing if a.id == asset_id), None)
    others = {a.name for a in existing if a.name and a.id != asset_id and a.name != current}
    if name in others:
        if is_new:
            result.errors.append(
                f'Asset "{name}" already exists. Add a holding to the existing asset instead.'
            )
        else:
            result.errors.append(
                f'Asset "{name}" already exists. Holdings cannot be renamed into another asset.'
            )
        return
    normalized = normalize_name(name)
    near = sorted(n for n in others if n != name and normalize_name(n) == normalized)
    if near:
        result.warnings.append(
            f'A similar asset "{near[0]}" already exists. Please use consistent naming.'
        )


def apply_derived_fields(asset: Asset) -> None:
    """Recompute every field that is a function of other fields."""
    asset.beneficiary = get_beneficiary(asset.account_entity) or ""
    if asset.asset_class == CASH:
        asset.name = cash_asset_name(asset.sub_class)
        asset.price = Decimal("1")
    derived = derive_pe_price(asset)
    if derived is not None:
        asset.price = derived
    asset.is_cash_equivalent = is_cash_equivalent(asset)


class AssetService:
    """Service for holdings and their name groups."""

    def list_assets(self, db: Session) -> list[Asset]:
        """All holdings ordered by name, then account."""
        return (
            db.query(Asset)
            .order_by(Asset.name, Asset.account_entity, Asset.account_bank)
            .all()
        )

    def get_asset(self, db: Session, asset_id: str) -> Optional[Asset]:
        return db.query(Asset).filter_by(id=asset_id).first()

    def get_by_name(self, db: Session, name: str) -> list[Asset]:
        return db.query(Asset).filter(Asset.name == name).all()

    def get_name_groups(self, db: Session) -> dict[str, list[str]]:
        """Name → holding ids, rebuilt from the current rows."""
        return build_name_index(self.list_assets(db))

    def validate(
        self, db: Session, data: Mapping[str, Any], asset_id: Optional[str] = None
    ) -> ValidationResult:
        """Validate without writing. ``asset_id`` marks the data as an edit."""
        existing = self.list_assets(db)
        if asset_id is None:
            return validate_asset(data, existing, is_new=True)
        asset = self.get_asset(db, asset_id)
        if asset is None:
            raise AssetNotFoundError(f"Asset {asset_id} not found")
        merged = {**_asset_to_dict(asset), **data}
        return validate_asset(merged, existing, is_new=False, asset_id=asset_id)

    def create_asset(self, db: Session, data: Mapping[str, Any]) -> tuple[Asset, list[str]]:
        """Create a holding under a new name.

        Returns:
            ``(asset, warnings)``

        Raises:
            AssetValidationError: If the holding is invalid or the name exists
        """
        result = validate_asset(data, self.list_assets(db), is_new=True)
        if not result.is_valid:
            raise AssetValidationError(result)

        asset = Asset(**{k: v for k, v in data.items() if k in _WRITABLE_FIELDS})
        if asset.quantity is None:
            asset.quantity = Decimal("0")
        if asset.name:
            asset.name = asset.name.strip()
        apply_derived_fields(asset)
        db.add(asset)
        db.commit()
        db.refresh(asset)
        logger.info(
            "Created asset %s for %s/%s (id=%s)",
            asset.name, asset.account_entity, asset.account_bank, asset.id,
        )
        return asset, result.warnings

    def add_existing_holding(self, db: Session, data: Mapping[str, Any]) -> Asset:
        """Add a holding to an existing name group.

        Shared fields are copied from a sibling; the caller supplies only
        account-specific ones.

        Raises:
            AssetNotFoundError: If no holding carries ``data["name"]``
            AssetValidationError: If the account is invalid or already holds it
        """
        name = data["name"]
        siblings = self.get_by_name(db, name)
        if not siblings:
            raise AssetNotFoundError(f"Asset {name} not found")
        template = siblings[0]

        result = ValidationResult()
        entity = data.get("account_entity")
        bank = data.get("account_bank")
        if entity not in ACCOUNT_ENTITIES:
            result.errors.append(f"Unknown account entity: {entity}")
        elif bank not in get_bank_options(entity):
            result.errors.append(f"Invalid bank for entity {entity}")
        if any(s.account_entity == entity and s.account_bank == bank for s in siblings):
            result.errors.append(f"{entity} already holds {name} at {bank}")
        quantity = data.get("quantity", Decimal("0"))
        if not _is_number(quantity) or quantity < 0:
            result.errors.append("Quantity must be non-negative")
        if not result.is_valid:
            raise AssetValidationError(result)

        asset = Asset(
            account_entity=entity,
            account_bank=bank,
            quantity=quantity,
        )
        for field_name in shared_fields(template.asset_class):
            setattr(asset, field_name, getattr(template, field_name))
        if template.asset_class in FACTORED_CLASSES:
            price = data.get("price")
            asset.price = template.price if price is None else price
            asset.pe_holding_percentage = data.get("pe_holding_percentage")

        apply_derived_fields(asset)
        db.add(asset)
        db.commit()
        db.refresh(asset)
        logger.info(
            "Added holding of %s for %s/%s (id=%s)", name, entity, bank, asset.id,
        )
        return asset

    def update_asset(
        self, db: Session, asset_id: str, data: Mapping[str, Any]
    ) -> tuple[Asset, EditKind, list[str], int]:
        """Apply an edit, fanning shared-field changes out to siblings.

        Shared changes are written to every holding with the record's
        original name; account-specific changes only to this record. Both
        happen in one transaction.

        Returns:
            ``(asset, edit_kind, warnings, affected_count)``

        Raises:
            AssetNotFoundError: If the holding does not exist
            AssetValidationError: If the merged record is invalid
        """
        asset = self.get_asset(db, asset_id)
        if asset is None:
            raise AssetNotFoundError(f"Asset {asset_id} not found")

        updated = dict(data)
        asset_class = updated.get("asset_class", asset.asset_class)
        if asset_class == CASH:
            updated["name"] = cash_asset_name(updated.get("sub_class", asset.sub_class))
        elif isinstance(updated.get("name"), str):
            updated["name"] = updated["name"].strip()

        merged = {**_asset_to_dict(asset), **updated}
        result = validate_asset(merged, self.list_assets(db), is_new=False, asset_id=asset_id)
        if not result.is_valid:
            raise AssetValidationError(result)

        shared, account = split_changes(asset, updated)
        kind = edit_kind(shared, account)
        if kind is EditKind.NONE:
            return asset, kind, result.warnings, 0

        original_name = asset.name
        affected = {asset.id: asset}
        try:
            if shared:
                for sibling in self.get_by_name(db, original_name):
                    for field_name, value in shared.items():
                        setattr(sibling, field_name, value)
                    affected[sibling.id] = sibling
            for field_name, value in account.items():
                setattr(asset, field_name, value)
            for record in affected.values():
                apply_derived_fields(record)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to update asset %s", asset_id)
            raise

        db.refresh(asset)
        logger.info(
            "Updated asset %s (id=%s, kind=%s, holdings=%d)",
            asset.name, asset_id, kind.value, len(affected),
        )
        return asset, kind, result.warnings, len(affected)

    def delete_asset(self, db: Session, asset_id: str) -> None:
        """Delete one holding.

        Raises:
            AssetNotFoundError: If the holding does not exist
        """
        asset = self.get_asset(db, asset_id)
        if asset is None:
            raise AssetNotFoundError(f"Asset {asset_id} not found")
        name = asset.name
        db.delete(asset)
        db.commit()
        logger.info("Deleted asset %s (id=%s)", name, asset_id)


_WRITABLE_FIELDS = frozenset({
    "name",
    "asset_class",
    "sub_class",
    "isin",
    "account_entity",
    "account_bank",
    "origin_currency",
    "quantity",
    "price",
    "factor",
    "maturity_date",
    "ytw",
    "pe_company_value",
    "pe_holding_percentage",
})


def _asset_to_dict(asset: Asset) -> dict[str, Any]:
    return {name: getattr(asset, name) for name in _WRITABLE_FIELDS}

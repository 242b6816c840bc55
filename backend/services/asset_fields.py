"""Shared vs account-specific field table for holdings.

Holdings with the same name form a group. Shared fields must agree across
every member of the group, account-specific fields belong to one holding.
Which side ``price`` falls on depends on the asset class: Private Equity
and Real Estate stakes are priced per account, everything else per name.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

from utils.reference_data import ASSET_CLASSES, FACTORED_CLASSES

_BASE_SHARED_FIELDS: tuple[str, ...] = (
    "name",
    "asset_class",
    "sub_class",
    "isin",
    "origin_currency",
    "factor",
    "maturity_date",
    "ytw",
    "pe_company_value",
)

_BASE_ACCOUNT_FIELDS: tuple[str, ...] = (
    "quantity",
    "account_entity",
    "account_bank",
)


def _build_field_table() -> dict[str, tuple[tuple[str, ...], tuple[str, ...]]]:
    table = {}
    for asset_class in ASSET_CLASSES:
        if asset_class in FACTORED_CLASSES:
            shared = _BASE_SHARED_FIELDS
            account = _BASE_ACCOUNT_FIELDS + ("price", "pe_holding_percentage")
        else:
            shared = _BASE_SHARED_FIELDS + ("price",)
            account = _BASE_ACCOUNT_FIELDS
        table[asset_class] = (shared, account)
    return table


# asset class -> (shared fields, account-specific fields)
FIELD_TABLE: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = _build_field_table()


class EditKind(str, Enum):
    NONE = "none"
    SHARED = "shared"
    ACCOUNT = "account"
    BOTH = "both"


def shared_fields(asset_class: str) -> tuple[str, ...]:
    """Fields that must be identical across holdings of the same name."""
    return FIELD_TABLE.get(asset_class, (_BASE_SHARED_FIELDS + ("price",), ()))[0]


def account_fields(asset_class: str) -> tuple[str, ...]:
    """Fields that may differ between holdings of the same name."""
    return FIELD_TABLE.get(asset_class, ((), _BASE_ACCOUNT_FIELDS))[1]


def _get(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def _normalize(value: Any) -> Any:
    """Normalize values so Decimal/float/str representations compare equal."""
    if value is None or isinstance(value, (bool, date)):
        return value
    if isinstance(value, (int, float, Decimal)):
        try:
            return Decimal(str(value)).normalize()
        except InvalidOperation:
            return value
    if isinstance(value, str):
        return value.strip() or None
    return value


def changed_fields(
    original: Any, updated: Mapping[str, Any], fields: tuple[str, ...]
) -> dict[str, Any]:
    """Return ``{field: new_value}`` for fields in ``updated`` that differ from ``original``."""
    changes = {}
    for field in fields:
        if field not in updated:
            continue
        if _normalize(_get(original, field)) != _normalize(updated[field]):
            changes[field] = updated[field]
    return changes


def split_changes(
    original: Any, updated: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split an edit into ``(shared_changes, account_changes)``.

    The class of the edited record decides the table, so a class change
    (itself a shared field) is judged by the new class's rules.
    """
    asset_class = updated.get("asset_class") or _get(original, "asset_class")
    shared = changed_fields(original, updated, shared_fields(asset_class))
    account = changed_fields(original, updated, account_fields(asset_class))
    return shared, account


def edit_kind(shared: Mapping[str, Any], account: Mapping[str, Any]) -> EditKind:
    if shared and account:
        return EditKind.BOTH
    if shared:
        return EditKind.SHARED
    if account:
        return EditKind.ACCOUNT
    return EditKind.NONE


def classify_edit(original: Any, updated: Mapping[str, Any]) -> EditKind:
    """Classify an edit as touching shared fields, account fields, both, or neither."""
    return edit_kind(*split_changes(original, updated))

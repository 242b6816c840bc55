"""Shared query parameter parsing utilities."""

from fastapi import HTTPException

from utils.reference_data import VIEW_CURRENCIES


def parse_csv(value: str | None) -> list[str] | None:
    """Parse a comma-separated query string into a list.

    Args:
        value: Comma-separated string, or None.

    Returns:
        List of stripped, non-empty items, or None if input is empty.
    """
    if not value:
        return None
    result = [item.strip() for item in value.split(",") if item.strip()]
    return result if result else None


def parse_view_currency(currency: str | None, default: str) -> str:
    """Validate a reporting currency query parameter.

    Raises:
        HTTPException: If the currency is not a supported view currency.
    """
    if not currency:
        return default
    normalized = currency.upper()
    if normalized not in VIEW_CURRENCIES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid view currency: {currency}",
        )
    return normalized

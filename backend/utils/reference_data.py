"""Static lookup tables shared by every portfolio component.

Asset classes, their permitted sub-classes, account entities and the
banks each entity holds accounts at, and the entity → beneficiary map.
"""

CURRENCIES: list[str] = ["ILS", "USD", "CHF", "EUR", "CAD", "HKD", "GBP"]

# Reporting currencies the dashboard can render in.
VIEW_CURRENCIES: list[str] = ["USD", "ILS"]

# All cross rates are derived through this currency.
PIVOT_CURRENCY = "ILS"

PUBLIC_EQUITY = "Public Equity"
PRIVATE_EQUITY = "Private Equity"
FIXED_INCOME = "Fixed Income"
CASH = "Cash"
COMMODITIES = "Commodities & more"
REAL_ESTATE = "Real Estate"

ASSET_CLASSES: list[str] = [
    PUBLIC_EQUITY,
    PRIVATE_EQUITY,
    FIXED_INCOME,
    CASH,
    COMMODITIES,
    REAL_ESTATE,
]

# Classes valued at quantity × price × factor.
FACTORED_CLASSES: frozenset[str] = frozenset({PRIVATE_EQUITY, REAL_ESTATE})

CLASS_SUBCLASS_MAP: dict[str, list[str]] = {
    PUBLIC_EQUITY: ["Big Tech", "China", "other"],
    PRIVATE_EQUITY: ["Initial", "Near Future", "Growth", "none"],
    FIXED_INCOME: [
        "Money Market",
        "Gov 1-2",
        "Gov long",
        "CPI linked",
        "Corporate",
        "REIT stock",
        "Private Credit",
        "Bank Deposit",
        "none",
    ],
    CASH: CURRENCIES,
    COMMODITIES: ["Cryptocurrency", "Commodities"],
    REAL_ESTATE: ["Living", "Tel-Aviv", "Abroad"],
}

# Fixed Income sub-classes that behave like cash.
CASH_LIKE_FIXED_INCOME: frozenset[str] = frozenset({"Money Market", "Bank Deposit"})

ACCOUNT_ENTITIES: list[str] = [
    "Roy", "Roni", "Guy", "Shimon", "Hagit", "SW2009", "Weintraub", "B Joel", "Tom",
]

BENEFICIARIES: list[str] = ["Shimon", "Hagit", "Kids", "Tom"]

ENTITY_BENEFICIARY_MAP: dict[str, str] = {
    "Shimon": "Shimon",
    "B Joel": "Shimon",
    "Hagit": "Hagit",
    "Guy": "Kids",
    "Roy": "Kids",
    "Roni": "Kids",
    "SW2009": "Kids",
    "Weintraub": "Kids",
    "Tom": "Tom",
}

ACCOUNT_BANK_MAP: dict[str, list[str]] = {
    "Hagit": ["U bank", "Leumi 1", "Leumi 2", "Julius Bär", "Poalim", "Poalim Phoenix"],
    "Guy": ["Poalim", "Julius Bär"],
    "Roni": ["Julius Bär"],
    "Roy": ["Poalim", "Julius Bär", "etoro"],
    "SW2009": ["Poalim", "Julius Bär"],
    "Weintraub": ["Poalim", "Julius Bär"],
    "Shimon": ["U bank", "Leumi", "Julius Bär", "Poalim", "Poalim Phoenix"],
    "B Joel": ["Poalim", "Julius Bär"],
    "Tom": ["Tom Trust"],
}

ACCOUNT_BANKS: list[str] = [
    "U bank", "Leumi 1", "Leumi 2", "Julius Bär", "Poalim", "Poalim Phoenix",
    "Leumi", "etoro", "Tom Trust",
]


def get_subclass_options(asset_class: str) -> list[str]:
    """Return the sub-classes permitted for an asset class (empty if unknown)."""
    return CLASS_SUBCLASS_MAP.get(asset_class, [])


def get_bank_options(account_entity: str) -> list[str]:
    """Return the banks an entity holds accounts at (empty if unknown)."""
    return ACCOUNT_BANK_MAP.get(account_entity, [])


def get_beneficiary(account_entity: str) -> str | None:
    """Map an account entity to its beneficiary."""
    return ENTITY_BENEFICIARY_MAP.get(account_entity)


def cash_asset_name(sub_class: str) -> str:
    """Derive the display name of a Cash holding from its currency."""
    return f"{sub_class} Cash"

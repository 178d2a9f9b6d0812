"""Bankin account types to normalized account types."""

from types import MappingProxyType

UNKNOWN_ACCOUNT_TYPE = "none"

ACCOUNT_TYPE_MAPPING = MappingProxyType(
    {
        "checking": "Checkings",
        "savings": "Savings",
        "card": "CreditCard",
        "loan": "Loan",
        "securities": "Market",
        "market": "Market",
        "pea": "Market",
        "share_savings_plan": "Market",
        "life_insurance": "LifeInsurance",
        "special": "Savings",
    },
)


def resolve_account_type(vendor_type: str | None) -> str:
    """Normalize a vendor account type, ``"none"`` when unknown."""
    if vendor_type is None:
        return UNKNOWN_ACCOUNT_TYPE
    return ACCOUNT_TYPE_MAPPING.get(vendor_type.lower(), UNKNOWN_ACCOUNT_TYPE)

"""Bankin category ids to normalized category codes.

Normalized codes are six digits: the first three name the family
(200 income, 400 expenses), the rest the subcategory. ``0`` means
uncategorized.
"""

from types import MappingProxyType
from typing import Any

from banksync.domain.banking.value_objects.bank_transaction import (
    UNCATEGORIZED_CATEGORY_ID,
)

OPERATION_CATEGORY_MAPPING = MappingProxyType(
    {
        # Income
        2: 200100,  # salaries
        3: 200110,  # extra income
        230: 200120,  # benefits
        233: 200130,  # pension
        271: 200140,  # rental income
        279: 200150,  # refunds
        283: 200160,  # interest / dividends
        # Daily life
        273: 400110,  # supermarket
        168: 400120,  # restaurants
        260: 400130,  # fast food
        272: 400140,  # clothing
        274: 400150,  # hairdresser / beauty
        245: 400160,  # pets
        # Housing
        161: 400210,  # rent
        220: 400220,  # electricity / gas
        180: 400230,  # water
        217: 400240,  # home insurance
        219: 400250,  # furnishing
        # Transport
        87: 400310,  # fuel
        197: 400320,  # public transport
        198: 400330,  # parking
        264: 400340,  # car maintenance
        309: 400350,  # train tickets
        # Telecom & subscriptions
        186: 400410,  # internet
        218: 400420,  # mobile phone
        263: 400430,  # streaming / subscriptions
        # Health
        243: 400510,  # doctor
        244: 400520,  # pharmacy
        246: 400530,  # health insurance
        # Leisure
        248: 400610,  # sport
        249: 400620,  # travel
        266: 400630,  # hotels
        # Education & family
        237: 400710,  # school fees
        238: 400720,  # childcare
        # Taxes & bank
        175: 400810,  # income tax
        176: 400820,  # property tax
        191: 400830,  # bank fees
        192: 400840,  # loan repayment
        # Transfers & cash
        326: 400910,  # internal transfer
        85: 400920,  # cash withdrawal
        276: 400930,  # checks
    },
)


def resolve_category_id(vendor_category_id: Any) -> int:
    """Normalize a vendor category id, ``0`` (uncategorized) when unknown."""
    if vendor_category_id is None:
        return UNCATEGORIZED_CATEGORY_ID
    try:
        key = int(vendor_category_id)
    except (TypeError, ValueError):
        return UNCATEGORIZED_CATEGORY_ID
    return OPERATION_CATEGORY_MAPPING.get(key, UNCATEGORIZED_CATEGORY_ID)

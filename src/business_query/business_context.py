"""
Static business facts for the bucket manufacturing/trading business.

The sheet layout mirrors the spreadsheet the assistant reads:

- ``Buckets!A5:D14``              inventory summary (Bucket Type, Pallavi, Tularam, Total)
- ``Buckets!A17:F``               stock/sell log (Date, Warehouse, Bucket Type, Stock/Sell, Qty, Buyer/Seller)
- ``Expense_Income_Journal!A:F``  ledger (Date, Amount, Account, Type, Name, Nicknames)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from config.settings import INVENTORY_RANGE, TRANSACTIONS_RANGE, EXPENSES_RANGE


class DataSet(str, Enum):
    """Business record collections available in the spreadsheet"""
    INVENTORY = "inventory"
    TRANSACTIONS = "transactions"
    EXPENSES = "expenses"


ALL_DATA_SETS: Tuple[DataSet, ...] = (
    DataSet.INVENTORY,
    DataSet.TRANSACTIONS,
    DataSet.EXPENSES,
)

# A1 ranges each data set is bound to
SHEET_RANGES: Dict[DataSet, str] = {
    DataSet.INVENTORY: INVENTORY_RANGE,
    DataSet.TRANSACTIONS: TRANSACTIONS_RANGE,
    DataSet.EXPENSES: EXPENSES_RANGE,
}

COMPANY = "Bucket Manufacturing/Trading Business"

# Longer names first so "TATA G" is listed before its "TATA" prefix
PRODUCT_CATALOGUE: Tuple[str, ...] = (
    "TATA G", "TATA W", "TATA 10 Ltr", "TATA",
    "AL 10 ltr", "AL",
    "BB", "ES", "MH", "IBC tank",
)

PRODUCT_GROUPS: Dict[str, Tuple[str, ...]] = {
    "tata": ("TATA G", "TATA W", "TATA 10 Ltr"),
    "al": ("AL", "AL 10 ltr"),
    "others": ("BB", "ES", "MH", "IBC tank"),
}

# Warehouse A is column B of the inventory summary, warehouse B is column C
WAREHOUSES: Tuple[str, ...] = ("Pallavi", "Tularam")

ACCOUNTS: Tuple[str, ...] = (
    "Prashant Gaydhane", "PMR", "KPG Saving", "KP Enterprices", "Cash",
)

CURRENCY = "INR"
CURRENCY_SYMBOL = "₹"


@dataclass(frozen=True)
class BusinessFacts:
    """Static facts attached to every context bundle"""
    company: str = COMPANY
    products: Tuple[str, ...] = tuple(
        p for group in PRODUCT_GROUPS.values() for p in group
    )
    warehouses: Tuple[str, ...] = WAREHOUSES
    accounts: Tuple[str, ...] = ACCOUNTS
    currency: str = CURRENCY
    currency_symbol: str = CURRENCY_SYMBOL

    def to_dict(self) -> Dict[str, object]:
        return {
            "company": self.company,
            "products": list(self.products),
            "warehouses": list(self.warehouses),
            "accounts": list(self.accounts),
            "currency": self.currency,
        }


DEFAULT_FACTS = BusinessFacts()

"""
Stage 5: Data Normalization

Converts raw spreadsheet tables (header row + data rows of strings) into
typed records.

Responsibilities:
- Discard the header row
- Map each row positionally onto a record's fields
- Parse numbers tolerantly ("1,200", "₹2,45,000", "12 pcs"; junk -> 0)
- Drop rows that cannot be mapped, logging a warning, without aborting
"""

import re
import logging
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .business_context import DataSet
from .errors import MalformedRowError

logger = logging.getLogger(__name__)

RawTable = List[List[str]]


@dataclass(frozen=True)
class InventoryRecord:
    """One product line of the warehouse stock summary"""
    product: str
    warehouse_a_qty: int
    warehouse_b_qty: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TransactionRecord:
    """One stock-in or sale entry of the bucket log"""
    date: str
    warehouse: str
    product: str
    operation: str
    quantity: int
    counterparty: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LedgerRecord:
    """One income or expense entry of the journal"""
    date: str
    amount: float
    account: str
    kind: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


NormalizedRecord = Union[InventoryRecord, TransactionRecord, LedgerRecord]

_CURRENCY_PREFIX = re.compile(r"^\s*(?:₹|rs\.?|inr)\s*", re.IGNORECASE)
_INT_PATTERN = re.compile(r"^-?\d+")
_FLOAT_PATTERN = re.compile(r"^-?\d+(?:\.\d+)?")


def _to_number(value: str, pattern: "re.Pattern", cast: Callable) -> Optional[Union[int, float]]:
    """Parse the leading number of a cell, or None when there is none"""
    cleaned = _CURRENCY_PREFIX.sub("", value).replace(",", "").strip()
    match = pattern.match(cleaned)
    if not match:
        return None
    return cast(match.group(0))


def parse_int(value: str) -> int:
    number = _to_number(value, _INT_PATTERN, int)
    return number if number is not None else 0


def parse_float(value: str) -> float:
    number = _to_number(value, _FLOAT_PATTERN, float)
    return number if number is not None else 0.0


class _Row:
    """Positional access to a data row; missing cells read as ''"""

    def __init__(self, cells: List[str]):
        self.cells = cells

    def text(self, column: int) -> str:
        return self.cells[column] if column < len(self.cells) else ""

    def integer(self, column: int) -> int:
        return parse_int(self.text(column))

    def number(self, column: int) -> float:
        return parse_float(self.text(column))


def _inventory_record(row: _Row) -> InventoryRecord:
    warehouse_a = row.integer(1)
    warehouse_b = row.integer(2)
    total = _to_number(row.text(3), _INT_PATTERN, int)
    return InventoryRecord(
        product=row.text(0),
        warehouse_a_qty=warehouse_a,
        warehouse_b_qty=warehouse_b,
        total=total if total is not None else warehouse_a + warehouse_b,
    )


def _transaction_record(row: _Row) -> TransactionRecord:
    return TransactionRecord(
        date=row.text(0),
        warehouse=row.text(1),
        product=row.text(2),
        operation=row.text(3),
        quantity=row.integer(4),
        counterparty=row.text(5),
    )


def _ledger_record(row: _Row) -> LedgerRecord:
    # Column F (Nicknames) is not used
    return LedgerRecord(
        date=row.text(0),
        amount=row.number(1),
        account=row.text(2),
        kind=row.text(3),
        description=row.text(4),
    )


@dataclass(frozen=True)
class RecordSchema:
    """How rows of one data set become records"""
    min_columns: int
    build: Callable[[_Row], NormalizedRecord]


class DataNormalizer:
    """
    Stage 5: Data Normalizer

    Never raises: len(normalize(table)) <= len(table) - 1, and tables with
    at most one row (header only) produce no records.
    """

    SCHEMAS: Dict[DataSet, RecordSchema] = {
        DataSet.INVENTORY: RecordSchema(min_columns=1, build=_inventory_record),
        DataSet.TRANSACTIONS: RecordSchema(min_columns=3, build=_transaction_record),
        DataSet.EXPENSES: RecordSchema(min_columns=2, build=_ledger_record),
    }

    def normalize(self, data_set: DataSet, table: Optional[Sequence[Any]]) -> List[NormalizedRecord]:
        """
        Normalize one raw table.

        Args:
            data_set: Which data set the table belongs to
            table: Header row followed by data rows

        Returns:
            Records in source row order
        """
        if not table or len(table) <= 1:
            return []

        schema = self.SCHEMAS[DataSet(data_set)]
        records: List[NormalizedRecord] = []
        dropped = 0

        for index, raw_row in enumerate(table[1:], start=1):
            try:
                row = self._prepare_row(raw_row, index, schema.min_columns)
                records.append(schema.build(row))
            except MalformedRowError as e:
                dropped += 1
                logger.warning(f"⚠️  Dropping {DataSet(data_set).value} row {e.row_index}: {e}")

        if dropped:
            logger.info(f"{DataSet(data_set).value}: {len(records)} rows normalized, {dropped} dropped")

        return records

    def normalize_inventory(self, table: Optional[Sequence[Any]]) -> List[InventoryRecord]:
        return self.normalize(DataSet.INVENTORY, table)

    def normalize_transactions(self, table: Optional[Sequence[Any]]) -> List[TransactionRecord]:
        return self.normalize(DataSet.TRANSACTIONS, table)

    def normalize_expenses(self, table: Optional[Sequence[Any]]) -> List[LedgerRecord]:
        return self.normalize(DataSet.EXPENSES, table)

    def _prepare_row(self, raw_row: Any, index: int, min_columns: int) -> _Row:
        """Validate row shape and return trimmed cells"""
        if not isinstance(raw_row, (list, tuple)):
            raise MalformedRowError(f"expected a list of cells, got {type(raw_row).__name__}", index)

        cells = ["" if cell is None else str(cell).strip() for cell in raw_row]

        # Sheets omits trailing empty cells; treat padded rows the same way
        while cells and not cells[-1]:
            cells.pop()

        if not cells:
            raise MalformedRowError("blank row", index)
        if len(cells) < min_columns:
            raise MalformedRowError(
                f"insufficient columns ({len(cells)} < {min_columns})", index
            )

        return _Row(cells)

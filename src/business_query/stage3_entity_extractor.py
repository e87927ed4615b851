"""
Stage 3: Entity Extraction

Vocabulary and pattern matching for business entities in query text.

Responsibilities:
- Products (case-insensitive) from the product catalogue
- Warehouses and accounts (case-sensitive, as written in the sheets)
- Timeframe labels: today, week, month, year
- Money amounts with optional currency glyph and thousands separators
"""

import re
import logging
from dataclasses import dataclass, field
from typing import List, Dict, Iterable, Sequence

from .business_context import PRODUCT_CATALOGUE, WAREHOUSES, ACCOUNTS

logger = logging.getLogger(__name__)


@dataclass
class ExtractedEntities:
    """Entities extracted from user query"""
    products: List[str] = field(default_factory=list)
    warehouses: List[str] = field(default_factory=list)
    accounts: List[str] = field(default_factory=list)
    amounts: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, list]:
        return {
            "products": list(self.products),
            "warehouses": list(self.warehouses),
            "accounts": list(self.accounts),
            "amounts": list(self.amounts),
        }


class EntityExtractor:
    """
    Stage 3: Entity Extractor

    Substring matching can hit inside longer tokens ("ES" in "SALES");
    that is an accepted limitation of the heuristic.
    """

    # Timeframe keyword sets, checked in this order
    TIMEFRAME_KEYWORDS = {
        "today": ["today", "आज"],
        "week": ["week", "सप्ताह", "हफ्ता", "हफ्ते", "आठवडा", "आठवड्या", "आठवड्यात"],
        "month": ["month", "महीना", "महीने", "महिना", "महिने", "महिन्या", "महिन्यात"],
        "year": ["year", "साल", "वर्ष", "वर्षात"],
    }

    # ₹2,45,000 / Rs. 1,200.50 / INR 500 / 245000
    AMOUNT_PATTERN = re.compile(
        r"(?:₹|\brs\.?|\binr)?\s*(\d+(?:,\d+)*(?:\.\d+)?)",
        re.IGNORECASE,
    )

    def __init__(
        self,
        products: Sequence[str] = PRODUCT_CATALOGUE,
        warehouses: Sequence[str] = WAREHOUSES,
        accounts: Sequence[str] = ACCOUNTS,
    ):
        self.products = list(dict.fromkeys(products))
        self.warehouses = list(dict.fromkeys(warehouses))
        self.accounts = list(dict.fromkeys(accounts))

    def extract(self, text: str) -> ExtractedEntities:
        """
        Extract entities from the raw query text.

        Args:
            text: Raw user query

        Returns:
            ExtractedEntities (empty lists when nothing matches)
        """
        upper = text.upper()
        entities = ExtractedEntities(
            products=[p for p in self.products if p.upper() in upper],
            warehouses=[w for w in self.warehouses if w in text],
            accounts=[a for a in self.accounts if a in text],
            amounts=self.extract_amounts(text),
        )

        if entities.products or entities.warehouses or entities.accounts:
            logger.debug(f"Entities: {entities.to_dict()}")

        return entities

    def extract_timeframe(self, text: str) -> List[str]:
        """Return the timeframe labels mentioned in the text"""
        lowered = text.lower()
        return [
            period
            for period, keywords in self.TIMEFRAME_KEYWORDS.items()
            if any(keyword in lowered for keyword in keywords)
        ]

    def extract_amounts(self, text: str) -> List[float]:
        """Parse every number in the text, dropping separators; duplicates removed"""
        return _unique(
            float(match.group(1).replace(",", ""))
            for match in self.AMOUNT_PATTERN.finditer(text)
        )


def _unique(values: Iterable[float]) -> List[float]:
    """Order-preserving de-duplication"""
    return list(dict.fromkeys(values))

"""
Stage 6: Context Assembly

Merges the query classification, the normalized records and the static
business facts into one ContextBundle for the generative model.

Responsibilities:
- Select the analysis variant chosen by the data router
- Copy records and facts so the bundle shares no mutable state
- Derive summary counts from the records carried
- Attach fixed response instructions (language, currency, actionability)

This stage never writes natural language; instructions are hints only.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Tuple, Union

from .business_context import DataSet, BusinessFacts, DEFAULT_FACTS, CURRENCY_SYMBOL
from .query_context import QueryContext
from .stage4_data_router import AnalysisType
from .stage5_data_normalizer import InventoryRecord, TransactionRecord, LedgerRecord

logger = logging.getLogger(__name__)

Records = Mapping[DataSet, Sequence[Any]]


# ============================================
# Analysis variants
# ============================================

@dataclass(frozen=True)
class SalesAnalysis:
    transactions: Tuple[TransactionRecord, ...] = ()
    expenses: Tuple[LedgerRecord, ...] = ()
    kind: ClassVar[AnalysisType] = AnalysisType.SALES


@dataclass(frozen=True)
class InventoryAnalysis:
    inventory: Tuple[InventoryRecord, ...] = ()
    transactions: Tuple[TransactionRecord, ...] = ()
    kind: ClassVar[AnalysisType] = AnalysisType.INVENTORY


@dataclass(frozen=True)
class CustomerAnalysis:
    transactions: Tuple[TransactionRecord, ...] = ()
    expenses: Tuple[LedgerRecord, ...] = ()
    kind: ClassVar[AnalysisType] = AnalysisType.CUSTOMER


@dataclass(frozen=True)
class FinancialAnalysis:
    expenses: Tuple[LedgerRecord, ...] = ()
    transactions: Tuple[TransactionRecord, ...] = ()
    kind: ClassVar[AnalysisType] = AnalysisType.FINANCIAL


@dataclass(frozen=True)
class ComprehensiveAnalysis:
    inventory: Tuple[InventoryRecord, ...] = ()
    transactions: Tuple[TransactionRecord, ...] = ()
    expenses: Tuple[LedgerRecord, ...] = ()
    kind: ClassVar[AnalysisType] = AnalysisType.COMPREHENSIVE


Analysis = Union[SalesAnalysis, InventoryAnalysis, CustomerAnalysis, FinancialAnalysis, ComprehensiveAnalysis]

ANALYSIS_VARIANTS = {
    AnalysisType.SALES: SalesAnalysis,
    AnalysisType.INVENTORY: InventoryAnalysis,
    AnalysisType.CUSTOMER: CustomerAnalysis,
    AnalysisType.FINANCIAL: FinancialAnalysis,
    AnalysisType.COMPREHENSIVE: ComprehensiveAnalysis,
}


def records_of(analysis: Analysis) -> Dict[DataSet, Tuple[Any, ...]]:
    """Records per data set; data sets the variant does not carry are empty"""
    return {
        data_set: getattr(analysis, data_set.value, ())
        for data_set in DataSet
    }


# ============================================
# Bundle
# ============================================

@dataclass(frozen=True)
class QuerySection:
    """What was asked and how it was classified"""
    original: str
    language: str
    intent: str
    analysis_type: str
    timeframe: Tuple[str, ...]
    entities: Dict[str, Tuple[Any, ...]]
    confidence: float


@dataclass(frozen=True)
class ResponseInstructions:
    """Hints for the generative model"""
    response_language: str
    include_specific_numbers: bool = True
    provide_insights: bool = True
    format_currency: str = CURRENCY_SYMBOL
    be_actionable: bool = True


@dataclass(frozen=True)
class ContextBundle:
    """Self-contained snapshot handed to the generative model"""
    query: QuerySection
    analysis: Analysis
    business_context: BusinessFacts
    instructions: ResponseInstructions
    fallback_mode: bool = False

    @property
    def records(self) -> Dict[DataSet, Tuple[Any, ...]]:
        return records_of(self.analysis)

    @property
    def summary(self) -> Dict[str, int]:
        records = self.records
        return {
            "inventory_items": len(records[DataSet.INVENTORY]),
            "transactions": len(records[DataSet.TRANSACTIONS]),
            "expenses": len(records[DataSet.EXPENSES]),
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form used in the model prompt"""
        records = self.records
        return {
            "query": {
                "original": self.query.original,
                "language": self.query.language,
                "intent": self.query.intent,
                "type": self.query.analysis_type,
                "timeframe": list(self.query.timeframe),
                "entities": {k: list(v) for k, v in self.query.entities.items()},
                "confidence": self.query.confidence,
            },
            "data": {
                "summary": self.summary,
                "inventory": [r.to_dict() for r in records[DataSet.INVENTORY]],
                "transactions": [r.to_dict() for r in records[DataSet.TRANSACTIONS]],
                "expenses": [r.to_dict() for r in records[DataSet.EXPENSES]],
            },
            "business_context": self.business_context.to_dict(),
            "instructions": {
                "response_language": self.instructions.response_language,
                "include_specific_numbers": self.instructions.include_specific_numbers,
                "provide_insights": self.instructions.provide_insights,
                "format_currency": self.instructions.format_currency,
                "be_actionable": self.instructions.be_actionable,
            },
            "fallback_mode": self.fallback_mode,
        }


class ContextAssembler:
    """
    Stage 6: Context Assembler

    Summary counts always equal the lengths of the record lists carried,
    because both are read from the same analysis variant.
    """

    def __init__(self, facts: Optional[BusinessFacts] = None):
        self.facts = facts or DEFAULT_FACTS

    def assemble(
        self,
        query_text: str,
        query_context: QueryContext,
        analysis_type: AnalysisType,
        records: Records,
        fallback_mode: bool = False,
    ) -> ContextBundle:
        """
        Build the context bundle.

        Args:
            query_text: Original user text
            query_context: Classification of the text
            analysis_type: Variant selected by the data router
            records: Normalized records per data set (missing sets are empty)
            fallback_mode: True when built by the degraded fallback path

        Returns:
            ContextBundle
        """
        analysis = self._build_analysis(analysis_type, records)

        bundle = ContextBundle(
            query=QuerySection(
                original=query_text,
                language=query_context.language.value,
                intent=query_context.intent.value,
                analysis_type=analysis.kind.value,
                timeframe=tuple(query_context.timeframe),
                entities={
                    name: tuple(values)
                    for name, values in query_context.entities.to_dict().items()
                },
                confidence=query_context.confidence,
            ),
            analysis=analysis,
            business_context=self.facts,
            instructions=ResponseInstructions(
                response_language=query_context.language.value,
                format_currency=self.facts.currency_symbol,
            ),
            fallback_mode=fallback_mode,
        )

        logger.info(f"Context assembled: {analysis.kind.value} {bundle.summary}"
                    f"{' (fallback)' if fallback_mode else ''}")
        return bundle

    def _build_analysis(self, analysis_type: AnalysisType, records: Records) -> Analysis:
        """Instantiate the variant with copies of the records it carries"""
        variant = ANALYSIS_VARIANTS[AnalysisType(analysis_type)]
        fields: Dict[str, Tuple[Any, ...]] = {}
        for data_set in DataSet:
            if data_set.value in variant.__dataclass_fields__:
                fields[data_set.value] = tuple(records.get(data_set, ()) or ())
        return variant(**fields)

"""
Stage 4: Data Routing

Maps an intent to the minimal set of spreadsheet data sets to read and to
the analysis variant the context assembler builds.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple, Union
from enum import Enum

from .business_context import DataSet, ALL_DATA_SETS
from .stage2_intent_classifier import IntentType

logger = logging.getLogger(__name__)


class AnalysisType(str, Enum):
    """Analysis variant tags"""
    SALES = "sales_analysis"
    INVENTORY = "inventory_analysis"
    CUSTOMER = "customer_analysis"
    FINANCIAL = "financial_analysis"
    COMPREHENSIVE = "comprehensive_analysis"


@dataclass(frozen=True)
class DataRoute:
    """Data sets to read for one intent"""
    data_sets: Tuple[DataSet, ...]
    analysis_type: AnalysisType
    description: str = ""

    @property
    def reads_everything(self) -> bool:
        return set(self.data_sets) == set(ALL_DATA_SETS)


COMPREHENSIVE_ROUTE = DataRoute(
    data_sets=ALL_DATA_SETS,
    analysis_type=AnalysisType.COMPREHENSIVE,
    description="All business data",
)


class DataRouter:
    """
    Stage 4: Intent-to-data routing

    Bounds per-request I/O to the data sets an intent actually needs.
    """

    ROUTES: Dict[IntentType, DataRoute] = {
        IntentType.SALES_INQUIRY: DataRoute(
            data_sets=(DataSet.TRANSACTIONS, DataSet.EXPENSES),
            analysis_type=AnalysisType.SALES,
            description="Sales log and income/expense journal",
        ),

        IntentType.FINANCIAL_ANALYSIS: DataRoute(
            data_sets=(DataSet.TRANSACTIONS, DataSet.EXPENSES),
            analysis_type=AnalysisType.FINANCIAL,
            description="Income/expense journal and sales log",
        ),

        IntentType.INVENTORY_CHECK: DataRoute(
            data_sets=(DataSet.INVENTORY, DataSet.TRANSACTIONS),
            analysis_type=AnalysisType.INVENTORY,
            description="Warehouse stock summary and stock/sell log",
        ),

        IntentType.CUSTOMER_ANALYSIS: DataRoute(
            data_sets=(DataSet.TRANSACTIONS, DataSet.EXPENSES),
            analysis_type=AnalysisType.CUSTOMER,
            description="Buyer activity from sales log and journal",
        ),

        IntentType.STATUS_CHECK: COMPREHENSIVE_ROUTE,
        IntentType.GENERAL_INQUIRY: COMPREHENSIVE_ROUTE,
    }

    def route(self, intent: Union[IntentType, str]) -> DataRoute:
        """
        Get the data route for an intent.

        Unknown intents (including unrecognised strings) read everything.
        """
        try:
            intent = IntentType(intent)
        except ValueError:
            logger.warning(f"Unknown intent '{intent}', routing to all data sets")
            return COMPREHENSIVE_ROUTE

        route = self.ROUTES.get(intent, COMPREHENSIVE_ROUTE)
        logger.info(f"Routing {intent.value} -> {[d.value for d in route.data_sets]}")
        return route

"""
Business Query Pipeline

Query understanding and data routing for a bucket manufacturing/trading
business assistant. Questions may mix Hindi, Marathi and English.

Stages:
    1. Language Detection - Devanagari script + Marathi function words
    2. Intent Classification - Weighted bilingual keyword scoring
    3. Entity Extraction - Products, warehouses, accounts, timeframes, amounts
    4. Data Routing - Minimal sheet reads per intent
    5. Data Normalization - Raw rows to typed records
    6. Context Assembly - ContextBundle for the generative model

Usage:
    from src.business_query import QueryPipeline
    from src.sheets import GoogleSheetsClient

    pipeline = QueryPipeline(data_store=GoogleSheetsClient())
    bundle = pipeline.process_query("इस महीने कितनी sales हुई?")
"""

from .business_context import DataSet, ALL_DATA_SETS, BusinessFacts
from .errors import (
    AssistantError, EmptyQueryError, DataSourceUnavailable, ModelUnavailable, MalformedRowError
)
from .query_context import RawQuery, QueryContext
from .stage1_language_detector import LanguageDetector, Language, detect_language
from .stage2_intent_classifier import IntentClassifier, IntentResult, IntentType
from .stage3_entity_extractor import EntityExtractor, ExtractedEntities
from .stage4_data_router import DataRouter, DataRoute, AnalysisType
from .stage5_data_normalizer import (
    DataNormalizer, InventoryRecord, TransactionRecord, LedgerRecord, RawTable
)
from .stage6_context_assembler import (
    ContextAssembler, ContextBundle,
    SalesAnalysis, InventoryAnalysis, CustomerAnalysis, FinancialAnalysis, ComprehensiveAnalysis,
)
from .pipeline import QueryPipeline, PipelineResult, PipelineState, PipelineMetrics

__all__ = [
    # Pipeline
    "QueryPipeline",
    "PipelineResult",
    "PipelineState",
    "PipelineMetrics",

    # Data model
    "DataSet",
    "ALL_DATA_SETS",
    "BusinessFacts",
    "RawQuery",
    "QueryContext",
    "RawTable",

    # Errors
    "AssistantError",
    "EmptyQueryError",
    "DataSourceUnavailable",
    "ModelUnavailable",
    "MalformedRowError",

    # Stage 1
    "LanguageDetector",
    "Language",
    "detect_language",

    # Stage 2
    "IntentClassifier",
    "IntentResult",
    "IntentType",

    # Stage 3
    "EntityExtractor",
    "ExtractedEntities",

    # Stage 4
    "DataRouter",
    "DataRoute",
    "AnalysisType",

    # Stage 5
    "DataNormalizer",
    "InventoryRecord",
    "TransactionRecord",
    "LedgerRecord",

    # Stage 6
    "ContextAssembler",
    "ContextBundle",
    "SalesAnalysis",
    "InventoryAnalysis",
    "CustomerAnalysis",
    "FinancialAnalysis",
    "ComprehensiveAnalysis",
]

__version__ = "1.0.0"

"""
Business Query Pipeline Orchestrator

Coordinates query understanding and data routing for the business assistant.

Pipeline Stages:
1. Language Detection - Hindi / Marathi / English
2. Intent Classification - Weighted bilingual keyword scoring
3. Entity Extraction - Products, warehouses, accounts, timeframes, amounts
4. Data Routing - Minimal set of sheets to read for the intent
5. Data Normalization - Raw sheet rows to typed records
6. Context Assembly - ContextBundle for the generative model

States: START -> CLASSIFIED -> ROUTED -> FETCHED -> NORMALIZED -> ASSEMBLED -> DONE.
A data-store failure (or an unexpected error while normalizing/assembling)
moves to FAILED, which runs one fallback: read every data set and assemble a
general_inquiry/english bundle tagged fallback_mode. If that read fails too,
DataSourceUnavailable reaches the caller.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from config.feature_flags import FeatureFlags, get_feature_flags

from .business_context import DataSet, ALL_DATA_SETS
from .errors import DataSourceUnavailable, EmptyQueryError
from .query_context import QueryContext, RawQuery
from .stage1_language_detector import LanguageDetector
from .stage2_intent_classifier import IntentClassifier
from .stage3_entity_extractor import EntityExtractor
from .stage4_data_router import DataRouter, DataRoute, COMPREHENSIVE_ROUTE
from .stage5_data_normalizer import DataNormalizer, RawTable
from .stage6_context_assembler import ContextAssembler, ContextBundle

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Orchestrator states"""
    START = "start"
    CLASSIFIED = "classified"
    ROUTED = "routed"
    FETCHED = "fetched"
    NORMALIZED = "normalized"
    ASSEMBLED = "assembled"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineMetrics:
    """Metrics for pipeline execution"""
    total_time_ms: float = 0.0
    classify_time_ms: float = 0.0
    fetch_time_ms: float = 0.0
    normalize_time_ms: float = 0.0
    assemble_time_ms: float = 0.0
    rows_fetched: int = 0
    records_normalized: int = 0


@dataclass
class PipelineResult:
    """Complete result of one pipeline run"""
    bundle: ContextBundle
    query_context: QueryContext
    route: DataRoute
    metrics: PipelineMetrics
    state: PipelineState = PipelineState.DONE
    fallback_mode: bool = False
    failed_at: Optional[PipelineState] = None
    error: Optional[str] = None


class QueryPipeline:
    """
    Business Query Pipeline Orchestrator

    The data store is any object with ``read(data_set) -> RawTable``; when it
    also offers ``batch_read(data_sets) -> {data_set: RawTable}`` that is used
    for reads covering every data set. The caller owns the store's lifecycle.
    """

    def __init__(
        self,
        data_store,
        flags: Optional[FeatureFlags] = None,
        assembler: Optional[ContextAssembler] = None,
    ):
        """
        Initialize pipeline.

        Args:
            data_store: Spreadsheet reader (e.g. GoogleSheetsClient)
            flags: Feature flags (defaults to the process-wide flags)
            assembler: Context assembler (defaults to the standard business facts)
        """
        self.data_store = data_store
        self.flags = flags or get_feature_flags()

        self.stage1_detector = LanguageDetector()
        self.stage2_classifier = IntentClassifier()
        self.stage3_extractor = EntityExtractor()
        self.stage4_router = DataRouter()
        self.stage5_normalizer = DataNormalizer()
        self.stage6_assembler = assembler or ContextAssembler()

        logger.info("Business query pipeline initialized")

    def analyze_query(self, text: str) -> QueryContext:
        """Run stages 1-3. Pure; cannot fail."""
        intent_result = self.stage2_classifier.classify(text)
        return QueryContext(
            language=self.stage1_detector.detect(text),
            intent=intent_result.intent,
            entities=self.stage3_extractor.extract(text),
            timeframe=self.stage3_extractor.extract_timeframe(text),
            confidence=intent_result.confidence,
        )

    def process_query(self, text: str) -> ContextBundle:
        """
        Turn a user question into a ContextBundle.

        Raises:
            EmptyQueryError: text is blank
            DataSourceUnavailable: the store failed and the fallback read failed too
        """
        return self.process(text).bundle

    def process(self, text: str) -> PipelineResult:
        """
        Process a user query through all stages.

        Args:
            text: User query (may mix Latin and Devanagari scripts)

        Returns:
            PipelineResult with the bundle and intermediate results
        """
        if not text or not text.strip():
            raise EmptyQueryError("Message is required")

        raw_query = RawQuery(text=text)
        metrics = PipelineMetrics()
        start_time = time.time()
        state = PipelineState.START

        logger.info(f"Processing query: {text[:50]}...")

        # ============================================
        # START -> CLASSIFIED
        # ============================================
        stage_start = time.time()
        query_context = self.analyze_query(raw_query.text)
        metrics.classify_time_ms = (time.time() - stage_start) * 1000
        state = PipelineState.CLASSIFIED

        logger.info(f"Classified: intent={query_context.intent.value} "
                    f"language={query_context.language.value} "
                    f"timeframe={query_context.timeframe}")

        # ============================================
        # CLASSIFIED -> ROUTED
        # ============================================
        route = self.stage4_router.route(query_context.intent)
        state = PipelineState.ROUTED

        try:
            # ============================================
            # ROUTED -> FETCHED
            # ============================================
            stage_start = time.time()
            tables = self._fetch(route.data_sets, batch=route.reads_everything)
            metrics.fetch_time_ms = (time.time() - stage_start) * 1000
            metrics.rows_fetched = sum(len(t) for t in tables.values())
            state = PipelineState.FETCHED

            # ============================================
            # FETCHED -> NORMALIZED
            # ============================================
            stage_start = time.time()
            records = self._normalize(tables)
            metrics.normalize_time_ms = (time.time() - stage_start) * 1000
            metrics.records_normalized = sum(len(r) for r in records.values())
            state = PipelineState.NORMALIZED

            # ============================================
            # NORMALIZED -> ASSEMBLED
            # ============================================
            stage_start = time.time()
            bundle = self.stage6_assembler.assemble(
                query_text=raw_query.text,
                query_context=query_context,
                analysis_type=route.analysis_type,
                records=records,
            )
            metrics.assemble_time_ms = (time.time() - stage_start) * 1000
            state = PipelineState.ASSEMBLED

        except Exception as e:
            logger.error(f"❌ Pipeline failed after {state.value}: {e}", exc_info=True)
            return self._fallback(raw_query, metrics, start_time, failed_at=state, cause=e)

        # ============================================
        # ASSEMBLED -> DONE
        # ============================================
        metrics.total_time_ms = (time.time() - start_time) * 1000
        self._log_metrics(metrics)

        return PipelineResult(
            bundle=bundle,
            query_context=query_context,
            route=route,
            metrics=metrics,
        )

    def _fallback(
        self,
        raw_query: RawQuery,
        metrics: PipelineMetrics,
        start_time: float,
        failed_at: PipelineState,
        cause: Exception,
    ) -> PipelineResult:
        """FAILED: one unconditional read of every data set, no retries"""
        logger.warning("⚠️  Using fallback: reading all business data")

        try:
            tables = self._fetch(ALL_DATA_SETS, batch=True)
        except Exception as e:
            logger.error(f"❌ Fallback read failed: {e}")
            raise DataSourceUnavailable(
                f"Business data unavailable: {e}", fallback_attempted=True
            ) from e

        metrics.rows_fetched = sum(len(t) for t in tables.values())
        records = self._normalize(tables)
        metrics.records_normalized = sum(len(r) for r in records.values())

        query_context = QueryContext.fallback()
        bundle = self.stage6_assembler.assemble(
            query_text=raw_query.text,
            query_context=query_context,
            analysis_type=COMPREHENSIVE_ROUTE.analysis_type,
            records=records,
            fallback_mode=True,
        )

        metrics.total_time_ms = (time.time() - start_time) * 1000
        self._log_metrics(metrics)

        return PipelineResult(
            bundle=bundle,
            query_context=query_context,
            route=COMPREHENSIVE_ROUTE,
            metrics=metrics,
            fallback_mode=True,
            failed_at=failed_at,
            error=str(cause),
        )

    def _fetch(self, data_sets: Iterable[DataSet], batch: bool = False) -> Dict[DataSet, RawTable]:
        """Read the given data sets from the store"""
        data_sets = list(data_sets)

        if batch and self.flags.prefer_batch_read and hasattr(self.data_store, "batch_read"):
            tables = self.data_store.batch_read(data_sets)
            return {data_set: tables.get(data_set) or [] for data_set in data_sets}

        return {data_set: self.data_store.read(data_set) or [] for data_set in data_sets}

    def _normalize(self, tables: Dict[DataSet, RawTable]) -> Dict[DataSet, List]:
        return {
            data_set: self.stage5_normalizer.normalize(data_set, table)
            for data_set, table in tables.items()
        }

    def _log_metrics(self, metrics: PipelineMetrics):
        if self.flags.log_stage_timings:
            logger.info(
                f"Pipeline complete in {metrics.total_time_ms:.0f}ms "
                f"(classify={metrics.classify_time_ms:.1f}ms, fetch={metrics.fetch_time_ms:.0f}ms, "
                f"normalize={metrics.normalize_time_ms:.1f}ms, assemble={metrics.assemble_time_ms:.1f}ms, "
                f"rows={metrics.rows_fetched}, records={metrics.records_normalized})"
            )

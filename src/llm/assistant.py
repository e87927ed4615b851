"""
Business Assistant

Runs the query pipeline, renders the business-data prompt and asks the
model for an answer.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from config.ai_settings import LOG_QUERIES
from src.business_query import QueryPipeline, PipelineResult
from src.llm.prompts import build_context_prompt
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class AssistantAnswer:
    """Model response plus the metadata reported to clients"""
    response: str
    processing_time_ms: float
    query_type: str
    language: str
    data_used: Dict[str, int] = field(default_factory=dict)
    fallback_mode: bool = False
    bundle: Optional[Dict[str, Any]] = None

    def metadata(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": round(self.processing_time_ms, 1),
            "query_type": self.query_type,
            "language": self.language,
            "data_used": dict(self.data_used),
            "fallback_mode": self.fallback_mode,
        }


class BusinessAssistant:
    """
    Answers business questions from spreadsheet data

    Args:
        pipeline: Query pipeline bound to a data store
        model: Object with ``chat(system, user) -> str`` (e.g. OllamaClient)
    """

    def __init__(self, pipeline: QueryPipeline, model):
        self.pipeline = pipeline
        self.model = model

    def answer(self, text: str) -> AssistantAnswer:
        """
        Answer one question.

        Raises:
            EmptyQueryError: text is blank
            DataSourceUnavailable: business data could not be read
            ModelUnavailable: the model call failed
        """
        start_time = time.time()

        if LOG_QUERIES:
            logger.info(f"🎤 Processing query: {text}")

        result: PipelineResult = self.pipeline.process(text)
        bundle = result.bundle

        logger.info(f"🤖 Sending to {getattr(self.model, 'model', 'model')} for analysis...")
        response = self.model.chat(build_context_prompt(bundle, text), text)

        processing_time_ms = (time.time() - start_time) * 1000
        logger.info(f"✅ Response generated in {processing_time_ms:.0f}ms")

        summary = bundle.summary
        return AssistantAnswer(
            response=response,
            processing_time_ms=processing_time_ms,
            query_type=bundle.query.analysis_type,
            language=bundle.query.language,
            data_used={
                "inventory": summary["inventory_items"],
                "transactions": summary["transactions"],
                "expenses": summary["expenses"],
            },
            fallback_mode=bundle.fallback_mode,
            bundle=bundle.to_dict() if self.pipeline.flags.include_bundle_in_response else None,
        )

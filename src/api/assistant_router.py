"""
Business Assistant API Router

FastAPI router for the business query assistant.
Provides /api/chat, /api/test and /api/health endpoints.
"""

import asyncio
import time
from typing import Dict, Optional
from datetime import datetime

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.business_query import (
    AssistantError, EmptyQueryError, Language, QueryPipeline, detect_language
)
from src.llm import BusinessAssistant, OllamaClient
from src.sheets import GoogleSheetsClient
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api", tags=["Business Assistant"])


# -----------------------------------------------------------------------------
# REQUEST/RESPONSE MODELS
# -----------------------------------------------------------------------------

class ChatRequest(BaseModel):
    """Chat request model"""
    message: str = Field("", description="User question (Hindi, Marathi or English)")


class DataUsed(BaseModel):
    """Record counts given to the model"""
    inventory: int
    transactions: int
    expenses: int


class ChatMetadata(BaseModel):
    """Answer metadata"""
    processing_time_ms: float = Field(..., description="Processing time in milliseconds")
    query_type: str = Field(..., description="Analysis type used")
    language: str = Field(..., description="Detected query language")
    data_used: DataUsed
    fallback_mode: bool = Field(False, description="True when the degraded fallback path ran")


class ChatResponse(BaseModel):
    """Chat response model"""
    response: str = Field(..., description="Generated response")
    metadata: ChatMetadata
    bundle: Optional[dict] = Field(None, description="Context bundle (when enabled)")


class SelfTestQuery(BaseModel):
    """Classification of the test query"""
    query: str
    intent: str
    language: str
    data_type: str
    data_counts: Dict[str, int]


class SystemHealth(BaseModel):
    sheets: bool
    query_processing: bool
    data_access: bool


class SelfTestResponse(BaseModel):
    """Pipeline self-test response"""
    status: str
    connection: bool
    test_query: SelfTestQuery
    system_health: SystemHealth
    timestamp: str


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    assistant_initialized: bool
    timestamp: str


# -----------------------------------------------------------------------------
# ERROR MESSAGES
# -----------------------------------------------------------------------------

ERROR_MESSAGES = {
    "data_store": {
        Language.HINDI: "📊 डेटा लेने में समस्या है। कृपया बाद में कोशिश करें।",
        Language.MARATHI: "📊 डेटा मिळवण्यात अडचण आहे. कृपया नंतर प्रयत्न करा.",
        Language.ENGLISH: "📊 Could not read the business data. Please try again later.",
    },
    "model": {
        Language.HINDI: "🤖 AI सेवा में समस्या है। कृपया बाद में कोशिश करें।",
        Language.MARATHI: "🤖 AI सेवेत अडचण आहे. कृपया नंतर प्रयत्न करा.",
        Language.ENGLISH: "🤖 The AI service is unavailable. Please try again later.",
    },
    None: {
        Language.HINDI: "😔 कुछ तकनीकी समस्या है। कृपया दोबारा कोशिश करें।",
        Language.MARATHI: "😔 काही तांत्रिक अडचण आहे. कृपया पुन्हा प्रयत्न करा.",
        Language.ENGLISH: "😔 Something went wrong. Please try again.",
    },
}


def error_message(error: Exception, text: str) -> str:
    """User-facing message for a failed request, in the language of the query"""
    boundary = getattr(error, "boundary", None)
    messages = ERROR_MESSAGES.get(boundary, ERROR_MESSAGES[None])
    return messages[detect_language(text or "")]


def _error_response(status_code: int, message: str, start_time: float) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "processing_time_ms": round((time.time() - start_time) * 1000, 1),
            "timestamp": datetime.now().isoformat(),
        },
    )


# -----------------------------------------------------------------------------
# ASSISTANT INITIALIZATION
# -----------------------------------------------------------------------------

# Lazy-loaded assistant
_assistant: Optional[BusinessAssistant] = None


def get_assistant() -> BusinessAssistant:
    """Get or create the assistant singleton"""
    global _assistant

    if _assistant is None:
        logger.info("Initializing business assistant...")
        pipeline = QueryPipeline(data_store=GoogleSheetsClient())
        _assistant = BusinessAssistant(pipeline=pipeline, model=OllamaClient())
        logger.info("✅ Business assistant initialized")

    return _assistant


def set_assistant(assistant: Optional[BusinessAssistant]):
    """Replace the assistant singleton (tests, custom wiring)"""
    global _assistant
    _assistant = assistant


def close_assistant():
    """Release the data store connection of the assistant, if one was created"""
    global _assistant

    if _assistant is None:
        return

    data_store = _assistant.pipeline.data_store
    if hasattr(data_store, "close"):
        data_store.close()
        logger.info("✅ Data store connection closed")
    _assistant = None


# -----------------------------------------------------------------------------
# ENDPOINTS
# -----------------------------------------------------------------------------

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        assistant_initialized=_assistant is not None,
        timestamp=datetime.now().isoformat(),
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """
    Answer a business question.

    Returns 400 for a blank message and 500 with a message in the
    language of the question when the data store or the model fails.
    """
    start_time = time.time()

    try:
        assistant = get_assistant()
        answer = await asyncio.to_thread(assistant.answer, request.message)
    except EmptyQueryError:
        return _error_response(400, "Message is required", start_time)
    except AssistantError as e:
        logger.error(f"❌ API Error ({e.boundary}): {e}")
        return _error_response(500, error_message(e, request.message), start_time)
    except Exception as e:
        logger.error(f"❌ API Error: {e}", exc_info=True)
        return _error_response(500, error_message(e, request.message), start_time)

    return ChatResponse(
        response=answer.response,
        metadata=ChatMetadata(**answer.metadata()),
        bundle=answer.bundle,
    )


@router.get("/test", response_model=SelfTestResponse)
async def test_pipeline(
    query: str = Query("current stock status", description="Query to run through the pipeline")
):
    """
    Run the pipeline without the model and check the spreadsheet connection.
    """
    logger.info(f"🧪 Testing with query: {query}")
    start_time = time.time()

    try:
        pipeline = get_assistant().pipeline
        result = await asyncio.to_thread(pipeline.process, query)
        connection = {"success": False}
        if hasattr(pipeline.data_store, "test_connection"):
            connection = await asyncio.to_thread(pipeline.data_store.test_connection)
    except EmptyQueryError:
        return _error_response(400, "Query is required", start_time)
    except Exception as e:
        logger.error(f"❌ Test failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "error": str(e),
                "processing_time_ms": round((time.time() - start_time) * 1000, 1),
                "timestamp": datetime.now().isoformat(),
            },
        )

    summary = result.bundle.summary
    return SelfTestResponse(
        status="success",
        connection=connection["success"],
        test_query=SelfTestQuery(
            query=query,
            intent=result.query_context.intent.value,
            language=result.query_context.language.value,
            data_type=result.bundle.query.analysis_type,
            data_counts=summary,
        ),
        system_health=SystemHealth(
            sheets=connection["success"],
            query_processing=True,
            data_access=summary["inventory_items"] > 0,
        ),
        timestamp=datetime.now().isoformat(),
    )

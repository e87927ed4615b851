"""
=============================================================================
FastAPI Application for the Business Query Assistant
=============================================================================
Answers questions about stock, sales, customers and money for a bucket
manufacturing/trading business. Questions may be asked in Hindi, Marathi
or English; answers are grounded in the business Google Sheets.

Endpoints Overview:
- GET  /              - Service info
- GET  /api/health    - Health check
- POST /api/chat      - Answer a business question
- GET  /api/test      - Run the pipeline on a test query (no model call)

API Documentation: /docs (Swagger UI) or /redoc
=============================================================================
"""

# -----------------------------------------------------------------------------
# IMPORTS
# -----------------------------------------------------------------------------
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.ai_settings import OLLAMA_MODEL
from src.api.assistant_router import close_assistant, router as assistant_router
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

# -----------------------------------------------------------------------------
# APPLICATION
# -----------------------------------------------------------------------------
app = FastAPI(
    title="Business Query Assistant API",
    description="Multilingual business intelligence over inventory, sales and expense sheets",
    version="1.0.0"
)

# -----------------------------------------------------------------------------
# CORS MIDDLEWARE CONFIGURATION
# -----------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assistant_router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Business Query Assistant API",
        "version": "1.0.0",
        "model": OLLAMA_MODEL,
        "docs": "/docs"
    }


@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Business Query Assistant API started")


@app.on_event("shutdown")
async def shutdown_event():
    """Close the spreadsheet connection"""
    close_assistant()
    logger.info("👋 Business Query Assistant API stopped")

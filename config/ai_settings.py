"""
=============================================================================
Model & API Configuration
=============================================================================
This module contains the settings for the generative model and the
HTTP API of the business assistant:
- LLM settings (Ollama)
- API server configuration

Configuration Priority:
1. Environment variables (highest priority)
2. .env file
3. Default values in this file (lowest priority)

Usage:
    from config.ai_settings import OLLAMA_MODEL, API_PORT
=============================================================================
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()

# Import base settings (BASE_DIR, LOG settings, sheet ranges, etc.)
from .settings import *

# =============================================================================
# LLM CONFIGURATION (Ollama)
# =============================================================================
# The model turns the assembled business context into the final answer

# Ollama API endpoint
# For local development: http://localhost:11434
# For Docker deployment: http://ollama:11434
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

# Model used for answering business questions (needs Hindi/Marathi support)
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "qwen2.5:7b-instruct")

# Low temperature keeps figures close to the provided data
OLLAMA_TEMPERATURE = float(os.getenv("OLLAMA_TEMPERATURE", "0.2"))

# Request timeout in seconds
OLLAMA_TIMEOUT = int(os.getenv("OLLAMA_TIMEOUT", "120"))

# Maximum tokens in the answer (num_predict parameter)
OLLAMA_MAX_TOKENS = int(os.getenv("OLLAMA_MAX_TOKENS", "2000"))

# =============================================================================
# API SERVER CONFIGURATION
# =============================================================================

# Bind address: 0.0.0.0 listens on all network interfaces
API_HOST = os.getenv("API_HOST", "0.0.0.0")

# Port for the API server (default: 8000)
API_PORT = int(os.getenv("API_PORT", "8000"))

# Auto-reload on code changes (disable in production)
API_RELOAD = os.getenv("API_RELOAD", "false").lower() == "true"

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

# Log user queries (for debugging and improving keyword sets)
LOG_QUERIES = os.getenv("LOG_QUERIES", "true").lower() == "true"

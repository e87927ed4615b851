"""
Ollama LLM Client
Interface with local Ollama instance
"""
import httpx
from typing import List, Optional
from config.ai_settings import (
    OLLAMA_BASE_URL,
    OLLAMA_MODEL,
    OLLAMA_TEMPERATURE,
    OLLAMA_TIMEOUT,
    OLLAMA_MAX_TOKENS
)
from src.business_query.errors import ModelUnavailable
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class OllamaClient:
    """Client for Ollama LLM API"""

    def __init__(
        self,
        base_url: str = OLLAMA_BASE_URL,
        model: str = OLLAMA_MODEL,
        temperature: float = OLLAMA_TEMPERATURE,
        timeout: int = OLLAMA_TIMEOUT,
        max_tokens: int = OLLAMA_MAX_TOKENS,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize Ollama client

        Args:
            base_url: Ollama API base URL
            model: Model name
            temperature: Sampling temperature
            timeout: Request timeout
            max_tokens: Maximum tokens to generate
            transport: Custom httpx transport (tests)
        """
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.max_tokens = max_tokens
        self._transport = transport

        logger.info(f"Ollama client initialized: {base_url}")
        logger.info(f"Model: {model}")

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            return client.request(method, f"{self.base_url}{path}", **kwargs)

    def list_models(self) -> List[str]:
        """Names of the models the Ollama server has pulled"""
        try:
            response = self._request("GET", "/api/tags")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"❌ Cannot connect to Ollama: {e}")
            logger.error(f"   Make sure Ollama is running at {self.base_url}")
            raise ModelUnavailable(f"Ollama unreachable: {e}") from e

        return [m.get("name") for m in response.json().get("models", [])]

    def is_available(self) -> bool:
        """True when the server answers and has the configured model"""
        try:
            model_names = self.list_models()
        except ModelUnavailable:
            return False

        if self.model not in model_names:
            logger.warning(f"⚠️  Model '{self.model}' not found. Available: {model_names}")
            return False
        return True

    def chat(
        self,
        system: str,
        user: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Single-turn chat completion

        Args:
            system: System context
            user: User message
            temperature: Override default temperature
            max_tokens: Override default token limit

        Returns:
            Generated response

        Raises:
            ModelUnavailable: the server could not be reached or returned no answer
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
            "options": {
                "temperature": self.temperature if temperature is None else temperature,
                "num_predict": max_tokens or self.max_tokens,
            }
        }

        try:
            response = self._request("POST", "/api/chat", json=payload)
            response.raise_for_status()
            content = response.json().get("message", {}).get("content", "")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"❌ Ollama chat error: {e}")
            raise ModelUnavailable(f"Ollama chat failed: {e}") from e

        if not content:
            logger.error("❌ Ollama returned an empty response")
            raise ModelUnavailable("Ollama returned an empty response")

        return content

"""
API Tests for the Business Assistant Router

Tests for /api/* endpoints, the assistant and the Ollama client.
"""

import json

import httpx
import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient

from config.feature_flags import FeatureFlags
from src.api.assistant_router import error_message, set_assistant
from src.api.main import app
from src.business_query import (
    DataSourceUnavailable, EmptyQueryError, ModelUnavailable, QueryPipeline
)
from src.llm import BusinessAssistant, OllamaClient, build_context_prompt
from tests.fixtures.sample_tables import FakeDataStore, unavailable


class ConnectedDataStore(FakeDataStore):
    def test_connection(self):
        return {"success": True, "info": {"title": "Business 2025"}}


class ClosableDataStore(FakeDataStore):
    closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def model():
    model = Mock()
    model.model = "test-model"
    model.chat.return_value = "इस महीने कुल sales: ₹30,000"
    return model


@pytest.fixture
def assistant(pipeline, model):
    return BusinessAssistant(pipeline=pipeline, model=model)


@pytest.fixture
def client(assistant):
    set_assistant(assistant)
    yield TestClient(app)
    set_assistant(None)


# ============================================
# Prompt and assistant
# ============================================

class TestBusinessAssistant:
    """Pipeline + prompt + model"""

    def test_prompt_contains_question_and_data(self, pipeline):
        bundle = pipeline.process_query("इस महीने कितनी sales हुई?")
        prompt = build_context_prompt(bundle, "इस महीने कितनी sales हुई?")

        assert 'USER\'S QUESTION: "इस महीने कितनी sales हुई?"' in prompt
        assert "respond in hindi" in prompt
        assert "Indian Rupees (₹)" in prompt
        assert "BHUSHAN DONDE" in prompt
        assert '"inventory_items": 0' in prompt

    def test_answer_metadata(self, assistant, model):
        answer = assistant.answer("इस महीने कितनी sales हुई?")

        assert answer.response == "इस महीने कुल sales: ₹30,000"
        assert answer.query_type == "sales_analysis"
        assert answer.language == "hindi"
        assert answer.data_used == {"inventory": 0, "transactions": 3, "expenses": 3}
        assert answer.fallback_mode is False
        assert answer.bundle is None

        system, user = model.chat.call_args[0]
        assert user == "इस महीने कितनी sales हुई?"
        assert "CURRENT BUSINESS DATA" in system

    def test_bundle_included_when_enabled(self, data_store, model):
        pipeline = QueryPipeline(data_store=data_store, flags=FeatureFlags(include_bundle_in_response=True))
        answer = BusinessAssistant(pipeline=pipeline, model=model).answer("current stock status")

        assert answer.bundle["query"]["intent"] == "inventory_check"

    def test_model_failure_propagates(self, assistant, model):
        model.chat.side_effect = ModelUnavailable("down")

        with pytest.raises(ModelUnavailable):
            assistant.answer("current stock status")

    def test_empty_message(self, assistant, model):
        with pytest.raises(EmptyQueryError):
            assistant.answer("  ")
        model.chat.assert_not_called()


# ============================================
# Error messages
# ============================================

class TestErrorMessages:
    """Language-appropriate error rendering"""

    def test_data_store_hindi(self):
        message = error_message(DataSourceUnavailable("x"), "स्टॉक बताओ")
        assert message.startswith("📊") and "डेटा" in message

    def test_model_marathi(self):
        message = error_message(ModelUnavailable("x"), "स्टॉक किती आहे?")
        assert message.startswith("🤖") and "प्रयत्न" in message

    def test_unknown_error_english(self):
        assert error_message(ValueError("x"), "stock").startswith("😔 Something went wrong")


# ============================================
# Endpoints
# ============================================

class TestChatEndpoint:
    """POST /api/chat"""

    def test_chat_success(self, client):
        response = client.post("/api/chat", json={"message": "इस महीने कितनी sales हुई?"})

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "इस महीने कुल sales: ₹30,000"
        assert data["metadata"]["query_type"] == "sales_analysis"
        assert data["metadata"]["language"] == "hindi"
        assert data["metadata"]["data_used"] == {"inventory": 0, "transactions": 3, "expenses": 3}
        assert data["metadata"]["fallback_mode"] is False

    @pytest.mark.parametrize("payload", [{"message": ""}, {"message": "   "}, {}])
    def test_empty_message_is_400(self, client, payload):
        response = client.post("/api/chat", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Message is required"

    def test_fallback_reported(self, client, data_store):
        data_store.read_error = unavailable()
        response = client.post("/api/chat", json={"message": "current stock status"})

        assert response.status_code == 200
        metadata = response.json()["metadata"]
        assert metadata["fallback_mode"] is True
        assert metadata["query_type"] == "comprehensive_analysis"
        assert metadata["language"] == "english"

    def test_data_store_failure_is_500(self, client, data_store):
        data_store.read_error = unavailable()
        data_store.batch_error = unavailable()
        response = client.post("/api/chat", json={"message": "स्टॉक किती आहे?"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("📊")
        assert "processing_time_ms" in response.json()

    def test_model_failure_is_500(self, client, model):
        model.chat.side_effect = ModelUnavailable("connection refused")
        response = client.post("/api/chat", json={"message": "इस महीने कितनी sales हुई?"})

        assert response.status_code == 500
        assert response.json()["error"] == "🤖 AI सेवा में समस्या है। कृपया बाद में कोशिश करें।"


class TestSelfTestEndpoint:
    """GET /api/test"""

    def test_default_query(self, client):
        response = client.get("/api/test")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["test_query"]["query"] == "current stock status"
        assert data["test_query"]["intent"] == "inventory_check"
        assert data["test_query"]["data_type"] == "inventory_analysis"
        assert data["test_query"]["data_counts"]["inventory_items"] == 5
        assert data["system_health"]["data_access"] is True
        assert data["connection"] is False

    def test_connection_check(self, model, flags):
        pipeline = QueryPipeline(data_store=ConnectedDataStore(), flags=flags)
        set_assistant(BusinessAssistant(pipeline=pipeline, model=model))
        try:
            response = TestClient(app).get("/api/test", params={"query": "PMR पैसा"})
        finally:
            set_assistant(None)

        data = response.json()
        assert data["connection"] is True
        assert data["system_health"]["sheets"] is True
        assert data["test_query"]["language"] == "hindi"
        model.chat.assert_not_called()

    def test_failure_is_500(self, client, data_store):
        data_store.read_error = unavailable()
        data_store.batch_error = unavailable()
        response = client.get("/api/test")

        assert response.status_code == 500
        assert response.json()["status"] == "error"

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_is_400(self, client, data_store, query):
        response = client.get("/api/test", params={"query": query})

        assert response.status_code == 400
        assert response.json()["error"] == "Query is required"
        assert data_store.read_calls == []


class TestHealthEndpoint:
    """GET /api/health and /"""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["assistant_initialized"] is True

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"

    def test_shutdown_closes_data_store(self, model, flags):
        store = ClosableDataStore()
        set_assistant(BusinessAssistant(pipeline=QueryPipeline(data_store=store, flags=flags), model=model))
        try:
            with TestClient(app) as client:
                assert client.get("/api/health").json()["assistant_initialized"] is True
        finally:
            set_assistant(None)

        assert store.closed is True

    def test_shutdown_without_assistant(self):
        set_assistant(None)
        with TestClient(app) as client:
            assert client.get("/api/health").json()["assistant_initialized"] is False


# ============================================
# Ollama client
# ============================================

class TestOllamaClient:
    """Ollama chat over a mock transport"""

    def make_client(self, handler):
        return OllamaClient(
            base_url="http://ollama.test",
            model="qwen2.5:7b-instruct",
            transport=httpx.MockTransport(handler),
        )

    def test_chat(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"message": {"role": "assistant", "content": "₹30,000"}})

        assert self.make_client(handler).chat("system text", "user text") == "₹30,000"
        assert seen[0]["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]
        assert seen[0]["stream"] is False
        assert seen[0]["model"] == "qwen2.5:7b-instruct"

    def test_http_error(self):
        client = self.make_client(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(ModelUnavailable) as exc_info:
            client.chat("s", "u")
        assert exc_info.value.boundary == "model"

    def test_empty_response(self):
        client = self.make_client(lambda request: httpx.Response(200, json={"message": {}}))

        with pytest.raises(ModelUnavailable):
            client.chat("s", "u")

    def test_is_available(self):
        client = self.make_client(
            lambda request: httpx.Response(200, json={"models": [{"name": "qwen2.5:7b-instruct"}]})
        )
        assert client.is_available() is True

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert self.make_client(handler).is_available() is False

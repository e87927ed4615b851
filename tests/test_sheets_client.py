"""
Tests for the Google Sheets client

Sheets traffic goes through httpx.MockTransport. Token requests go through
a fake google-auth transport.
"""

import json
from urllib.parse import parse_qs

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from google.auth import jwt as google_jwt
from google.auth import transport

from src.business_query.business_context import DataSet
from src.business_query.errors import DataSourceUnavailable
from src.sheets import GoogleSheetsClient

SHEET_ID = "sheet-123"
TOKEN_URL = "https://oauth2.example.test/token"
BASE_URL = "https://sheets.example.test/v4"


def make_client(handler, **kwargs) -> GoogleSheetsClient:
    options = {
        "spreadsheet_id": SHEET_ID,
        "service_account_key": "",
        "api_key": "test-key",
        "base_url": BASE_URL,
        "token_url": TOKEN_URL,
    }
    options.update(kwargs)
    return GoogleSheetsClient(
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        **options,
    )


@pytest.fixture(scope="module")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def service_account_key(rsa_key):
    pem = rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    return json.dumps({
        "client_email": "assistant@project.iam.gserviceaccount.com",
        "private_key": pem,
        "private_key_id": "key-1",
    })


class TestRangeReads:
    """Reads with API key authentication"""

    def test_read_range(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"values": [["h"], ["TATA G", "12", "8", "20"]]})

        rows = make_client(handler).read_range("Buckets!A5:D14")

        assert rows == [["h"], ["TATA G", "12", "8", "20"]]
        assert seen[0].url.path == f"/v4/spreadsheets/{SHEET_ID}/values/Buckets!A5:D14"
        assert seen[0].url.params["key"] == "test-key"
        assert "authorization" not in seen[0].headers

    def test_empty_range_has_no_values_key(self):
        client = make_client(lambda request: httpx.Response(200, json={"range": "Buckets!A17:F"}))
        assert client.read_range("Buckets!A17:F") == []

    def test_read_data_set_uses_bound_range(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"values": []})

        make_client(handler).read(DataSet.EXPENSES)

        assert paths[0].endswith("/values/Expense_Income_Journal!A:F")

    def test_custom_ranges(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"values": []})

        client = make_client(handler, ranges={DataSet.INVENTORY: "Stock!A1:D9"})
        client.read("inventory")

        assert paths[0].endswith("/values/Stock!A1:D9")

    def test_batch_read(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"valueRanges": [
                {"range": "Buckets!A5:D14", "values": [["h"], ["BB", "1", "2", "3"]]},
                {"range": "Buckets!A17:F"},
            ]})

        tables = make_client(handler).batch_read([DataSet.INVENTORY, DataSet.TRANSACTIONS])

        assert tables == {
            DataSet.INVENTORY: [["h"], ["BB", "1", "2", "3"]],
            DataSet.TRANSACTIONS: [],
        }
        assert seen[0].url.path.endswith(f"/spreadsheets/{SHEET_ID}/values:batchGet")
        assert seen[0].url.params.get_list("ranges") == ["Buckets!A5:D14", "Buckets!A17:F"]


class TestFailures:
    """Every failure surfaces as DataSourceUnavailable"""

    def test_missing_spreadsheet_id(self):
        with pytest.raises(DataSourceUnavailable):
            GoogleSheetsClient(spreadsheet_id="")

    def test_http_error(self):
        client = make_client(lambda request: httpx.Response(403, json={"error": "denied"}))

        with pytest.raises(DataSourceUnavailable) as exc_info:
            client.read(DataSet.INVENTORY)
        assert exc_info.value.boundary == "data_store"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DataSourceUnavailable):
            make_client(handler).batch_read([DataSet.INVENTORY])

    def test_no_credentials(self):
        client = make_client(lambda request: httpx.Response(200, json={}), api_key="")

        with pytest.raises(DataSourceUnavailable):
            client.read_range("Buckets!A5:D14")

    def test_invalid_service_account_key(self):
        client = make_client(
            lambda request: httpx.Response(200, json={}),
            api_key="",
            service_account_key="not json",
        )

        with pytest.raises(DataSourceUnavailable):
            client.read_range("Buckets!A5:D14")


class FakeTokenResponse(transport.Response):
    def __init__(self, status, payload):
        self._status = status
        self._data = json.dumps(payload).encode("utf-8")

    @property
    def status(self):
        return self._status

    @property
    def headers(self):
        return {"content-type": "application/json"}

    @property
    def data(self):
        return self._data


class FakeTokenEndpoint(transport.Request):
    """Records token requests made by google-auth"""

    def __init__(self, status=200, payload=None):
        self.status = status
        self.payload = payload or {"access_token": "ya29.token", "expires_in": 3600}
        self.calls = []

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "method": method, "body": body})
        return FakeTokenResponse(self.status, self.payload)


class TestServiceAccountAuth:
    """Service account sign-in through google-auth"""

    def test_token_exchange_and_reuse(self, rsa_key, service_account_key):
        data_requests = []

        def handler(request):
            data_requests.append(request)
            return httpx.Response(200, json={"values": [["h"]]})

        endpoint = FakeTokenEndpoint()
        client = make_client(
            handler, api_key="", service_account_key=service_account_key, auth_request=endpoint
        )
        client.read(DataSet.INVENTORY)
        client.read(DataSet.TRANSACTIONS)

        assert len(endpoint.calls) == 1
        assert [r.headers["authorization"] for r in data_requests] == ["Bearer ya29.token"] * 2

        call = endpoint.calls[0]
        assert call["url"] == TOKEN_URL
        assert call["method"] == "POST"
        form = parse_qs(call["body"].decode())
        assert form["grant_type"] == ["urn:ietf:params:oauth:grant-type:jwt-bearer"]

        public_pem = rsa_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        claims = google_jwt.decode(form["assertion"][0], certs=public_pem, audience=TOKEN_URL)
        assert claims["iss"] == "assistant@project.iam.gserviceaccount.com"
        assert "spreadsheets.readonly" in claims["scope"]

    def test_token_uri_from_key(self, service_account_key):
        info = json.loads(service_account_key)
        info["token_uri"] = "https://oauth2.example.test/other-token"
        endpoint = FakeTokenEndpoint()
        client = make_client(
            lambda request: httpx.Response(200, json={"values": []}),
            api_key="",
            service_account_key=json.dumps(info),
            auth_request=endpoint,
        )

        client.read(DataSet.INVENTORY)

        assert endpoint.calls[0]["url"] == "https://oauth2.example.test/other-token"

    def test_token_endpoint_failure(self, service_account_key):
        data_requests = []

        def handler(request):
            data_requests.append(request)
            return httpx.Response(200, json={"values": []})

        client = make_client(
            handler,
            api_key="",
            service_account_key=service_account_key,
            auth_request=FakeTokenEndpoint(status=400, payload={"error": "invalid_grant"}),
        )

        with pytest.raises(DataSourceUnavailable) as exc_info:
            client.read(DataSet.INVENTORY)
        assert exc_info.value.boundary == "data_store"
        assert data_requests == []

    def test_key_missing_fields(self):
        client = make_client(
            lambda request: httpx.Response(200, json={}),
            api_key="",
            service_account_key=json.dumps({"client_email": "assistant@project.iam.gserviceaccount.com"}),
            auth_request=FakeTokenEndpoint(),
        )

        with pytest.raises(DataSourceUnavailable):
            client.read_range("Buckets!A5:D14")


class TestDiagnostics:
    """Spreadsheet metadata and connection test"""

    METADATA = {
        "properties": {"title": "Business 2025"},
        "sheets": [
            {"properties": {"title": "Buckets", "sheetId": 0,
                            "gridProperties": {"rowCount": 1000, "columnCount": 26}}},
            {"properties": {"title": "Expense_Income_Journal", "sheetId": 7}},
        ],
    }

    def test_spreadsheet_info(self):
        client = make_client(lambda request: httpx.Response(200, json=self.METADATA))
        info = client.get_spreadsheet_info()

        assert info["title"] == "Business 2025"
        assert info["sheets"][0] == {
            "name": "Buckets", "id": 0, "row_count": 1000, "column_count": 26,
        }
        assert info["sheets"][1]["row_count"] is None

    def test_connection_success(self):
        client = make_client(lambda request: httpx.Response(200, json=self.METADATA))
        result = client.test_connection()

        assert result["success"] is True
        assert result["info"]["title"] == "Business 2025"

    def test_connection_failure(self):
        client = make_client(lambda request: httpx.Response(404, json={}))
        result = client.test_connection()

        assert result["success"] is False
        assert "error" in result

"""
Google Sheets Client
Read-only access to the business spreadsheet over the Sheets v4 REST API
"""
import json
import threading
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

import google.auth.exceptions
import google.auth.transport.requests
import httpx
from google.auth import transport
from google.oauth2 import service_account

from config.settings import (
    GOOGLE_SHEETS_ID,
    GOOGLE_SERVICE_ACCOUNT_KEY,
    GOOGLE_API_KEY,
    SHEETS_API_BASE_URL,
    SHEETS_TOKEN_URL,
    SHEETS_SCOPES,
    SHEETS_TIMEOUT,
)
from src.business_query.business_context import DataSet, SHEET_RANGES
from src.business_query.errors import DataSourceUnavailable
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

RawTable = List[List[str]]

_READ_LABELS = {
    DataSet.INVENTORY: "📦 Reading inventory data...",
    DataSet.TRANSACTIONS: "💰 Reading transaction data...",
    DataSet.EXPENSES: "📊 Reading expense/income data...",
}


class GoogleSheetsClient:
    """
    Client for the business spreadsheet

    The HTTP connection and access token are created on first use and reused
    across requests. Nothing read from the sheet is cached.
    """

    def __init__(
        self,
        spreadsheet_id: str = GOOGLE_SHEETS_ID,
        service_account_key: str = GOOGLE_SERVICE_ACCOUNT_KEY,
        api_key: str = GOOGLE_API_KEY,
        base_url: str = SHEETS_API_BASE_URL,
        token_url: str = SHEETS_TOKEN_URL,
        timeout: int = SHEETS_TIMEOUT,
        ranges: Optional[Dict[DataSet, str]] = None,
        http_client: Optional[httpx.Client] = None,
        auth_request: Optional[transport.Request] = None,
    ):
        """
        Initialize Sheets client

        Args:
            spreadsheet_id: Spreadsheet ID
            service_account_key: Service account key as a JSON string
            api_key: API key (used instead of the service account when set)
            base_url: Sheets API base URL
            token_url: OAuth token endpoint, used when the key does not name one
            timeout: Request timeout in seconds
            ranges: A1 range per data set
            http_client: Pre-built httpx client (tests, custom transports)
            auth_request: google-auth transport used to refresh service account tokens
        """
        if not spreadsheet_id:
            raise DataSourceUnavailable("GOOGLE_SHEETS_ID environment variable is required")

        self.spreadsheet_id = spreadsheet_id
        self.service_account_key = service_account_key
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.token_url = token_url
        self.timeout = timeout
        self.ranges = dict(ranges or SHEET_RANGES)

        self._http = http_client
        self._auth_request = auth_request
        self._credentials: Optional[service_account.Credentials] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def _client(self) -> httpx.Client:
        """Create the shared HTTP client on first use"""
        if self._http is None:
            with self._lock:
                if self._http is None:
                    self._http = httpx.Client(timeout=self.timeout)
                    logger.info("✅ Google Sheets HTTP client initialized")
        return self._http

    def _auth(self) -> Tuple[Dict[str, str], List[Tuple[str, str]]]:
        """Headers and query params authorizing a request"""
        if self.api_key:
            return {}, [("key", self.api_key)]
        if self.service_account_key:
            return {"Authorization": f"Bearer {self._get_access_token()}"}, []
        raise DataSourceUnavailable(
            "No Google credentials configured (GOOGLE_API_KEY or GOOGLE_SERVICE_ACCOUNT_KEY)"
        )

    def _get_access_token(self) -> str:
        """Service-account access token, refreshed by google-auth when expired"""
        with self._lock:
            if self._credentials is None:
                try:
                    info = json.loads(self.service_account_key)
                    info.setdefault("token_uri", self.token_url)
                    self._credentials = service_account.Credentials.from_service_account_info(
                        info, scopes=SHEETS_SCOPES
                    )
                except ValueError as e:
                    logger.error(f"❌ Invalid service account key: {e}")
                    raise DataSourceUnavailable(f"Invalid service account key: {e}") from e

            if not self._credentials.valid:
                if self._auth_request is None:
                    self._auth_request = google.auth.transport.requests.Request()
                try:
                    self._credentials.refresh(self._auth_request)
                except google.auth.exceptions.GoogleAuthError as e:
                    logger.error(f"❌ Failed to obtain Google access token: {e}")
                    raise DataSourceUnavailable(f"Failed to obtain access token: {e}") from e
                logger.info("✅ Google Sheets access token acquired")

            return self._credentials.token

    def _get(self, path: str, params: Optional[List[Tuple[str, str]]] = None) -> dict:
        """GET a Sheets API path and return the decoded JSON body"""
        client = self._client()
        headers, auth_params = self._auth()
        try:
            response = client.get(
                f"{self.base_url}{path}",
                params=list(params or []) + auth_params,
                headers=headers,
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DataSourceUnavailable(f"Sheets API request failed: {e}") from e

    def close(self):
        """Close the HTTP client"""
        if self._http is not None:
            self._http.close()
            self._http = None

    # ------------------------------------------------------------------
    # Range reads
    # ------------------------------------------------------------------

    def read_range(self, range_name: str) -> RawTable:
        """
        Read one A1 range

        Args:
            range_name: e.g. "Buckets!A5:D14"

        Returns:
            Rows of cell strings (trailing empty cells omitted by the API)
        """
        try:
            data = self._get(
                f"/spreadsheets/{self.spreadsheet_id}/values/{quote(range_name, safe='')}"
            )
        except DataSourceUnavailable as e:
            logger.error(f"❌ Error reading range {range_name}: {e}")
            raise DataSourceUnavailable(f"Failed to read range {range_name}: {e}") from e
        return data.get("values", [])

    def batch_read_ranges(self, ranges: List[str]) -> Dict[str, RawTable]:
        """Read several ranges in one batchGet call"""
        try:
            data = self._get(
                f"/spreadsheets/{self.spreadsheet_id}/values:batchGet",
                params=[("ranges", r) for r in ranges],
            )
        except DataSourceUnavailable as e:
            logger.error(f"❌ Error in batch read: {e}")
            raise DataSourceUnavailable(f"Failed to batch read ranges: {e}") from e

        value_ranges = data.get("valueRanges", [])
        result = {}
        for index, range_name in enumerate(ranges):
            value_range = value_ranges[index] if index < len(value_ranges) else {}
            result[range_name] = value_range.get("values", [])
        return result

    # ------------------------------------------------------------------
    # Data set reads
    # ------------------------------------------------------------------

    def read(self, data_set: DataSet) -> RawTable:
        """Read one business data set"""
        data_set = DataSet(data_set)
        logger.info(_READ_LABELS[data_set])
        rows = self.read_range(self.ranges[data_set])
        logger.info(f"✅ Read {len(rows)} {data_set.value} rows")
        return rows

    def batch_read(self, data_sets: Iterable[DataSet]) -> Dict[DataSet, RawTable]:
        """Read several business data sets in one call"""
        data_sets = [DataSet(d) for d in data_sets]
        logger.info(f"🔄 Reading {[d.value for d in data_sets]} in one batch...")
        by_range = self.batch_read_ranges([self.ranges[d] for d in data_sets])
        return {d: by_range.get(self.ranges[d], []) for d in data_sets}

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def get_spreadsheet_info(self) -> dict:
        """Spreadsheet title and sheet dimensions"""
        data = self._get(
            f"/spreadsheets/{self.spreadsheet_id}",
            params=[("fields", "properties,sheets.properties")],
        )
        return {
            "title": data.get("properties", {}).get("title", ""),
            "sheets": [
                _sheet_summary(sheet.get("properties", {}))
                for sheet in data.get("sheets", [])
            ],
        }

    def test_connection(self) -> dict:
        """Check the spreadsheet can be reached"""
        try:
            info = self.get_spreadsheet_info()
        except DataSourceUnavailable as e:
            logger.error(f"❌ Connection test failed: {e}")
            return {"success": False, "error": str(e)}

        logger.info(f"🎉 Connection test successful: {info['title']}")
        return {"success": True, "info": info}


def _sheet_summary(properties: dict) -> dict:
    grid = properties.get("gridProperties", {})
    return {
        "name": properties.get("title"),
        "id": properties.get("sheetId"),
        "row_count": grid.get("rowCount"),
        "column_count": grid.get("columnCount"),
    }

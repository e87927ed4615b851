"""
Configuration settings for the business query assistant
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Project root directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Google Sheets Settings
GOOGLE_SHEETS_ID = os.getenv("GOOGLE_SHEETS_ID", "")
GOOGLE_SERVICE_ACCOUNT_KEY = os.getenv("GOOGLE_SERVICE_ACCOUNT_KEY", "")  # JSON string
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
SHEETS_API_BASE_URL = os.getenv("SHEETS_API_BASE_URL", "https://sheets.googleapis.com/v4")
SHEETS_TOKEN_URL = os.getenv("SHEETS_TOKEN_URL", "https://oauth2.googleapis.com/token")
SHEETS_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]
SHEETS_TIMEOUT = int(os.getenv("SHEETS_TIMEOUT", "30"))

# Sheet ranges for each data set
INVENTORY_RANGE = os.getenv("INVENTORY_RANGE", "Buckets!A5:D14")
TRANSACTIONS_RANGE = os.getenv("TRANSACTIONS_RANGE", "Buckets!A17:F")
EXPENSES_RANGE = os.getenv("EXPENSES_RANGE", "Expense_Income_Journal!A:F")

# Logging Settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = BASE_DIR / os.getenv("LOG_FILE", "data/logs/assistant.log")
LOG_FILE.parent.mkdir(parents=True, exist_ok=True)


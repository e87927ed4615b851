"""
Business Query Assistant Test Suite
===================================

Test Categories:
- fixtures/: Sample sheet tables and a fake data store
- test_business_query.py: Pipeline stages and orchestrator
- test_sheets_client.py: Google Sheets client over a mock transport
- test_api_assistant.py: /api endpoints and the Ollama client

Usage:
    # Run all tests
    pytest tests/ -v

    # Run only unit tests
    pytest tests/ -m unit -v
"""

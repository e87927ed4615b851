"""Spreadsheet data store"""
from .sheets_client import GoogleSheetsClient

__all__ = ['GoogleSheetsClient']

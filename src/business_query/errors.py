"""
Error types raised across the business query pipeline.

Only collaborator failures (data store, model) and empty input cross the
pipeline boundary. Row-level problems are absorbed by the normalizer.
"""

from typing import Optional


class AssistantError(RuntimeError):
    """Base class for all assistant errors."""

    boundary: Optional[str] = None


class EmptyQueryError(AssistantError):
    """Raised when the user message is blank."""

    boundary = "input"


class DataSourceUnavailable(AssistantError):
    """Raised when the spreadsheet store cannot be read."""

    boundary = "data_store"

    def __init__(self, message: str, fallback_attempted: bool = False):
        super().__init__(message)
        self.fallback_attempted = fallback_attempted


class ModelUnavailable(AssistantError):
    """Raised when the generative model call fails. There is no fallback."""

    boundary = "model"


class MalformedRowError(AssistantError):
    """Raised by a row mapper for a row that cannot be mapped to a record."""

    def __init__(self, message: str, row_index: int):
        super().__init__(message)
        self.row_index = row_index

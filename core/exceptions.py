"""
Custom exceptions for the ingestion engine and the web layer.
"""
from typing import Any, Dict, Optional


class PartnershipAnalyzerError(Exception):
    """Base exception for all partnership ledger analyzer errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StreamOpenError(PartnershipAnalyzerError):
    """Raised when the transaction source cannot be opened or read."""
    pass


class EmptyHeaderError(PartnershipAnalyzerError):
    """Raised when the source has no header row."""

    def __init__(self, message: str = "CSV file is empty or invalid.",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class MissingColumnError(PartnershipAnalyzerError):
    """Raised when a required semantic field has no matching header column."""

    def __init__(self, field: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Required column '{field}' not found in CSV.", details)
        self.field = field


class UploadValidationError(PartnershipAnalyzerError):
    """Raised when an uploaded file fails extension or size checks."""
    pass


class ExportError(PartnershipAnalyzerError):
    """Raised when Excel export fails."""
    pass


class ConfigurationError(PartnershipAnalyzerError):
    """Raised when configuration is invalid."""
    pass

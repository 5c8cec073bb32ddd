"""
Custom exceptions for the EduRecords system.
"""

from typing import Optional, Any, Dict


class EduRecordsError(Exception):
    """Base exception for all EduRecords errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(EduRecordsError):
    """Raised when data validation fails."""
    pass


class PersistenceError(EduRecordsError):
    """Raised when saving or loading the data file fails."""
    pass


class RecordFormatError(PersistenceError):
    """Raised when a line of the data file cannot be encoded or decoded."""
    
    def __init__(self, message: str, line_number: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.line_number = line_number


class ConfigurationError(EduRecordsError):
    """Raised when configuration is invalid."""
    pass

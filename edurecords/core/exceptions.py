"""
Custom exceptions for the EduRecords platform.
"""

from typing import Optional, Any, Dict


class EduRecordsException(Exception):
    """Base exception for all EduRecords errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(EduRecordsException):
    """Raised when data validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_FAILED", details)


class RecordNotFoundError(EduRecordsException):
    """Raised when a read targets an identifier absent from its collection."""

    def __init__(self, entity_name: str, entity_id: str):
        super().__init__(f"No {entity_name} found", "NOT_FOUND", {"id": entity_id})


class UpdateFailedError(EduRecordsException):
    """Raised when an update targets an identifier absent from its collection."""

    def __init__(self, entity_name: str, entity_id: str):
        super().__init__("Update failed", "UPDATE_FAILED", {"entity": entity_name, "id": entity_id})


class DeleteFailedError(EduRecordsException):
    """Raised when a delete targets an identifier absent from its collection."""

    def __init__(self, entity_name: str, entity_id: str):
        super().__init__("Delete failed", "DELETE_FAILED", {"entity": entity_name, "id": entity_id})


class PersistenceError(EduRecordsException):
    """Raised when persistence operations fail."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PERSISTENCE_ERROR", details)


class ConfigurationError(EduRecordsException):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)

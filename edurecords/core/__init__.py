"""
Core module containing the entity model, capability interfaces and exceptions.
"""

from .entities import AbstractEntity, Student, Subject, Teacher, Class, Assignment, Submission
from .interfaces import Clock, IdFactory, OrderedStore
from .clock import SystemClock, uuid4_id
from .exceptions import (
    EduRecordsException, ValidationError, RecordNotFoundError, UpdateFailedError,
    DeleteFailedError, PersistenceError, ConfigurationError
)

__all__ = [
    # Entities
    "AbstractEntity",
    "Student",
    "Subject",
    "Teacher",
    "Class",
    "Assignment",
    "Submission",

    # Interfaces
    "Clock",
    "IdFactory",
    "OrderedStore",
    "SystemClock",
    "uuid4_id",

    # Exceptions
    "EduRecordsException",
    "ValidationError",
    "RecordNotFoundError",
    "UpdateFailedError",
    "DeleteFailedError",
    "PersistenceError",
    "ConfigurationError",
]

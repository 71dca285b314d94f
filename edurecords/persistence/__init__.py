"""
Persistence module: database access, ordered stores and entity repositories.
"""

from .database import DatabaseManager, SQLiteDatabase, DatabaseFactory
from .stores import MemoryStore, SQLiteStore, StoreFactory
from .repositories import (
    BaseRepository, StudentRepository, SubjectRepository, TeacherRepository,
    ClassRepository, AssignmentRepository, SubmissionRepository, RepositoryRegistry
)

__all__ = [
    "DatabaseManager",
    "SQLiteDatabase",
    "DatabaseFactory",
    "MemoryStore",
    "SQLiteStore",
    "StoreFactory",
    "BaseRepository",
    "StudentRepository",
    "SubjectRepository",
    "TeacherRepository",
    "ClassRepository",
    "AssignmentRepository",
    "SubmissionRepository",
    "RepositoryRegistry",
]

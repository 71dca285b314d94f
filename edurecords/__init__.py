"""
EduRecords: persistent record store for students, teachers, subjects,
classes, assignments and submissions.

Each entity type lives in its own ordered key-value collection keyed by a
generated identifier, with creation and update timestamps attached
automatically.
"""

__version__ = "1.0.0"
__author__ = "EduRecords Development Team"
__description__ = "Persistent CRUD record store for an educational domain"

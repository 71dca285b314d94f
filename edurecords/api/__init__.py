"""
API layer exposing the repositories over HTTP.
"""

from .rest_api import EduRecordsRestAPI

__all__ = ["EduRecordsRestAPI"]

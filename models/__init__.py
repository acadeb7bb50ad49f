"""
Database Models Package

Contains the SQLAlchemy models for the application.
"""

from models.opportunity import Opportunity
from models.base import format_utc_datetime

__all__ = [
    "Opportunity",
    "format_utc_datetime",
]

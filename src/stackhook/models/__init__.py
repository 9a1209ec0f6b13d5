"""
Pydantic data models package.

Contains the record handed over by the logging framework and the entry
sent to Cloud Logging.
"""

from .entry import Record, RemoteEntry

__all__ = [
    "Record",
    "RemoteEntry",
]

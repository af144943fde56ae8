"""
Test data factories.
"""
from .log_factory import LogEntryFactory, StatusSnapshotFactory

__all__ = [
    "LogEntryFactory",
    "StatusSnapshotFactory",
]

"""
Services module containing the registry and the report generators.
"""

from .data_manager import DataManager
from .report_manager import ReportManager, GradesReport, AttendanceReport

__all__ = [
    "DataManager",
    "ReportManager",
    "GradesReport",
    "AttendanceReport",
]

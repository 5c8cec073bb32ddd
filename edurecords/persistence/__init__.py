"""
Persistence module: the pipe-delimited data file codec.
"""

from .data_io import DataIO, PersistenceResult
from .records import StudentRecord, StaffRecord, CourseRecord, parse_line

__all__ = [
    "DataIO",
    "PersistenceResult",
    "StudentRecord",
    "StaffRecord",
    "CourseRecord",
    "parse_line",
]

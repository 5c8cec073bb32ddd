"""
Enumerations and constants for the EduRecords system.
"""

from enum import Enum


class PersonType(Enum):
    """Types of persons in the system."""
    STUDENT = "student"
    STAFF = "staff"


class RecordType(Enum):
    """Record tags that start every line of the data file."""
    STUDENT = "STUDENT"
    STAFF = "STAFF"
    COURSE = "COURSE"


# Field and value separators of the data file
FIELD_SEPARATOR = "|"
VALUE_SEPARATOR = ","

MIN_GRADE = 1
MAX_GRADE = 9

MIN_ATTENDANCE = 85.0
MAX_ATTENDANCE = 100.0

# Furthest a task deadline may lie ahead of today
MAX_TASK_DAYS = 90

DATE_FORMAT = "%d/%m/%Y"

"""
Core module containing the entity model, enums, exceptions and interfaces.
"""

from .entities import *
from .enrollment import *
from .interfaces import *
from .exceptions import *
from .enums import *

__all__ = [
    # Entities
    "Person",
    "Student",
    "Staff",
    "Course",
    "generate_attendance",
    "reassign_enrollment",
    
    # Interfaces
    "Reportable",
    
    # Enums
    "PersonType",
    "RecordType",
    
    # Exceptions
    "EduRecordsError",
    "ValidationError",
    "PersistenceError",
    "RecordFormatError",
    "ConfigurationError",
]

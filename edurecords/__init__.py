"""
EduRecords: a console records manager for an educational institution.

Tracks students, staff and courses in memory, produces grades and attendance
reports, and saves/restores the whole registry to a pipe-delimited text file.
"""

__version__ = "1.0.0"
__author__ = "EduRecords Development Team"
__description__ = "Console records manager for students, staff and courses"

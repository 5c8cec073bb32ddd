"""
Core interfaces and abstract base classes for the EduRecords system.
"""

from abc import ABC, abstractmethod


class Reportable(ABC):
    """Interface for components that can generate reports."""
    
    @abstractmethod
    def generate_report(self) -> str:
        """Generate the report as plain text."""
        pass

"""
Console user interface: validated input and menus.
"""

from .inputs import InputReader, InputResult, InputOutcome
from .menus import MenuContext, MainMenu

__all__ = [
    "InputReader",
    "InputResult",
    "InputOutcome",
    "MenuContext",
    "MainMenu",
]

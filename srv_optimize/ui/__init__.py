"""
UI module - Rich console menu.
"""

from .console import ConsoleUI, MENU_OPTIONS

__all__ = [
    "ConsoleUI",
    "MENU_OPTIONS",
]

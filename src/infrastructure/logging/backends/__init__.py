"""
Logging Backends

Each backend handles its own formatting and output logic.

Available backends:
- ConsoleBackend / ColorConsoleBackend: development console output
- FileBackend: buffered async file logging with rotation
"""

from .console import ConsoleBackend, ColorConsoleBackend
from .file import FileBackend

__all__ = [
    'ConsoleBackend',
    'ColorConsoleBackend',
    'FileBackend',
]

"""
Unified test infrastructure for SmartScript.

This package contains common utilities and helpers
used across all tests to avoid code duplication.

Modules:
- file_utils: Utilities for creating files and directories
- rendering_utils: Utilities for parsing and rendering scripts
"""

from .file_utils import write
from .rendering_utils import make_context, render_text, render_bytes, RecordingContext

__all__ = [
    "write",
    "make_context",
    "render_text",
    "render_bytes",
    "RecordingContext",
]

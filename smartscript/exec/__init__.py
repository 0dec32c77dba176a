"""
Бэкенд SmartScript: ячейки значений, стеки и движок исполнения.
"""

from __future__ import annotations

from .engine import SmartScriptEngine, render_document
from .multistack import ObjectMultistack, ObjectStack
from .value import ValueWrapper

__all__ = [
    "SmartScriptEngine",
    "render_document",
    "ObjectMultistack",
    "ObjectStack",
    "ValueWrapper",
]

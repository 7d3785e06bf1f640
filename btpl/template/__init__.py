"""
Движок блочных шаблонов.

Предобработка дерева блоков, подстановка переменных и обработчиков,
резолвинг блоков и финализация документа.
"""

from __future__ import annotations

from .context import (
    HandlerRegistry, RenderContext,
    get_default_context, reset_default_context, add_handler, assign_global,
)
from .document import Document
from .loader import open_document, read_source
from .sanitizer import sanitize, desanitize
from .tokens import ROOT_SENTINEL

__all__ = [
    "Document",
    "HandlerRegistry",
    "RenderContext",
    "get_default_context",
    "reset_default_context",
    "add_handler",
    "assign_global",
    "open_document",
    "read_source",
    "sanitize",
    "desanitize",
    "ROOT_SENTINEL",
]

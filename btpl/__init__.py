"""
btpl: блочный шаблонизатор.

Документ разбирается на именованные блоки <!-- block: NAME --> ...
<!-- /block: NAME -->; логика приложения присваивает переменные {name},
регистрирует обработчики <!-- handler: NAME --> и резолвит блоки
(повторно, если строки повторяются), после чего out() собирает
итоговый текст.
"""

from __future__ import annotations

from .errors import (
    BTPLUserError,
    TemplateStructureError,
    DuplicateBlockError,
    BlockResolutionError,
    TemplateNotFoundError,
    TemplateLoadError,
    ScriptLoadError,
    HandlerError,
)
from .template import (
    Document,
    HandlerRegistry,
    RenderContext,
    get_default_context,
    reset_default_context,
    add_handler,
    assign_global,
    open_document,
    sanitize,
    desanitize,
)

__all__ = [
    "Document",
    "HandlerRegistry",
    "RenderContext",
    "get_default_context",
    "reset_default_context",
    "add_handler",
    "assign_global",
    "open_document",
    "sanitize",
    "desanitize",
    "BTPLUserError",
    "TemplateStructureError",
    "DuplicateBlockError",
    "BlockResolutionError",
    "TemplateNotFoundError",
    "TemplateLoadError",
    "ScriptLoadError",
    "HandlerError",
]

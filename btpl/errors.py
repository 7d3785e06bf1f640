"""
Base exceptions for btpl.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from BTPLUserError.

Programming errors and bugs should NOT inherit from BTPLUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class BTPLUserError(Exception):
    """
    Base class for all user-facing errors in btpl.

    These errors indicate problems that the user can fix:
    malformed templates, missing files, invalid render scripts, etc.
    """
    pass


class TemplateStructureError(BTPLUserError):
    """
    Структурная ошибка шаблона, обнаруженная при предобработке.

    Документ с такой ошибкой не создаётся и не может использоваться.
    """

    def __init__(self, block_name: str, message: Optional[str] = None):
        super().__init__(message or f"Failed to find a match for block: {block_name}")
        self.block_name = block_name


class DuplicateBlockError(TemplateStructureError):
    """Два соседних блока с одинаковым именем на одном уровне вложенности."""

    def __init__(self, block_name: str, parent_path: str):
        super().__init__(
            block_name,
            f"Duplicate block '{block_name}' inside '{parent_path}'",
        )
        self.parent_path = parent_path


class BlockResolutionError(BTPLUserError):
    """Блок, его родитель или плейсхолдер не найдены (только в строгом режиме)."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot parse block '{path}': {reason}")
        self.path = path
        self.reason = reason


class TemplateNotFoundError(BTPLUserError, FileNotFoundError):
    """Файл шаблона не найден."""
    pass


class TemplateLoadError(BTPLUserError):
    """Исходный буфер шаблона не удалось прочитать или декодировать."""
    pass


class ScriptLoadError(BTPLUserError, ValueError):
    """Ошибка загрузки или валидации сценария рендеринга с указанием пути поля."""
    pass


class HandlerError(RuntimeError):
    """
    Сбой обработчика при подстановке маркера <!-- handler: NAME -->.

    Это ошибка кода обработчика, а не шаблона, поэтому она не наследует
    BTPLUserError. Исходная причина доступна через __cause__.
    """

    def __init__(self, name: str, message: str):
        super().__init__(f"Handler '{name}' failed: {message}")
        self.name = name


__all__ = [
    "BTPLUserError",
    "TemplateStructureError",
    "DuplicateBlockError",
    "BlockResolutionError",
    "TemplateNotFoundError",
    "TemplateLoadError",
    "ScriptLoadError",
    "HandlerError",
]

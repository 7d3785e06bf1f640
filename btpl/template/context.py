"""
Контекст рендеринга: глобальные присваивания и реестр обработчиков.

Разделяемое между документами состояние собрано в явный объект,
который передаётся документу при открытии. Для удобства существует
процессный контекст по умолчанию.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Mapping, Optional

from .sanitizer import sanitize
from .tokens import is_valid_name

logger = logging.getLogger(__name__)

# Обработчик: функция без аргументов, возвращающая текст
HandlerFn = Callable[[], Optional[str]]


class HandlerRegistry:
    """
    Реестр именованных обработчиков для маркеров <!-- handler: NAME -->.

    Заполняется при старте; движок только читает его.
    """

    def __init__(self):
        self._handlers: Dict[str, HandlerFn] = {}

    def register(self, name: str, fn: HandlerFn) -> None:
        """
        Регистрирует обработчик под именем.

        Args:
            name: Имя из маркера, [A-Za-z0-9_-]+
            fn: Функция без аргументов, возвращающая текст

        Raises:
            ValueError: Если имя недопустимо
            TypeError: Если fn не вызываемый объект
        """
        if not is_valid_name(name):
            raise ValueError(f"Invalid handler name '{name}'")
        if not callable(fn):
            raise TypeError(f"Handler '{name}' must be callable, got {type(fn).__name__}")
        if name in self._handlers:
            logger.warning(f"Handler '{name}' overwrites existing handler")
        self._handlers[name] = fn
        logger.debug(f"Registered handler: {name}")

    def handler(self, name: str) -> Callable[[HandlerFn], HandlerFn]:
        """Декораторная форма register()."""
        def decorator(fn: HandlerFn) -> HandlerFn:
            self.register(name, fn)
            return fn
        return decorator

    def get(self, name: str) -> Optional[HandlerFn]:
        return self._handlers.get(name)

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


class RenderContext:
    """
    Разделяемое состояние рендеринга.

    Хранит глобальные присваивания (не расходуются, подставляются во все
    вхождения при каждом проходе) и реестр обработчиков. Документы,
    которым нужна изоляция (например, в разных потоках), получают
    собственные контексты. Синхронизации нет.
    """

    def __init__(self, handlers: Optional[HandlerRegistry] = None):
        self.handlers = handlers if handlers is not None else HandlerRegistry()
        self._globals: Dict[str, str] = {}

    def assign_global(self, name: str, value: str) -> None:
        """Присваивает глобальную переменную; значение экранируется."""
        self._globals[name] = sanitize(value)

    def assign_globals(self, values: Mapping[str, str]) -> None:
        for name, value in values.items():
            self.assign_global(name, value)

    def add_handler(self, name: str, fn: HandlerFn) -> None:
        self.handlers.register(name, fn)

    @property
    def globals(self) -> Mapping[str, str]:
        """Экранированные глобальные значения (только чтение)."""
        return dict(self._globals)

    def iter_globals(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._globals.items()))


_default_context: Optional[RenderContext] = None


def get_default_context() -> RenderContext:
    """Возвращает процессный контекст по умолчанию, создавая его при первом обращении."""
    global _default_context
    if _default_context is None:
        _default_context = RenderContext()
        logger.debug("Default RenderContext created")
    return _default_context


def reset_default_context() -> RenderContext:
    """Заменяет процессный контекст новым пустым и возвращает его."""
    global _default_context
    _default_context = RenderContext()
    return _default_context


def add_handler(name: str, fn: HandlerFn) -> None:
    """Регистрирует обработчик в контексте по умолчанию."""
    get_default_context().add_handler(name, fn)


def assign_global(name: str, value: str) -> None:
    """Присваивает глобальную переменную в контексте по умолчанию."""
    get_default_context().assign_global(name, value)


__all__ = [
    "HandlerFn",
    "HandlerRegistry",
    "RenderContext",
    "get_default_context",
    "reset_default_context",
    "add_handler",
    "assign_global",
]

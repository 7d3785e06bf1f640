"""
Синтаксические константы шаблонов.

Определяет корневой маркер, регулярные выражения маркеров блоков
и обработчиков, а также шаблон плейсхолдеров дочерних блоков.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern

# Корневой сегмент всех квалифицированных путей блоков
ROOT_SENTINEL = "[_BTPL_ROOT_]"

# Разделитель сегментов пути
PATH_SEPARATOR = "."

# Допустимые символы имени блока или обработчика
NAME_CHARS = r"A-Za-z0-9_\-"

BLOCK_BEGIN_PATTERN: Pattern[str] = re.compile(rf"<!-- block: ([{NAME_CHARS}]+) -->")

HANDLER_PATTERN: Pattern[str] = re.compile(rf"<!-- handler: ([{NAME_CHARS}]+) -->")

# Любой неразрешённый плейсхолдер: корень, точка и продолжение пути
PLACEHOLDER_PATTERN: Pattern[str] = re.compile(re.escape(ROOT_SENTINEL + PATH_SEPARATOR) + rf"[{NAME_CHARS}.]+")

# Пустые строки и хвостовые переводы строк, вычищаемые при финализации
BLANK_LINES_PATTERN: Pattern[str] = re.compile(r"(?m)^\s*$[\r\n]*|[\r\n]+\s+\Z")

_NAME_RE = re.compile(rf"[{NAME_CHARS}]+")


def is_valid_name(name: str) -> bool:
    """Проверяет, что имя годится для блока или обработчика."""
    return bool(_NAME_RE.fullmatch(name))


def block_span_pattern(name: str) -> Pattern[str]:
    """
    Нежадный шаблон области блока от открывающего до закрывающего маркера.

    Группа 1 захватывает внутренний текст; точка совпадает с переводом строки.
    """
    quoted = re.escape(name)
    return re.compile(rf"<!-- block: {quoted} -->(.*?)<!-- /block: {quoted} -->", re.DOTALL)


def known_placeholders(paths: Iterable[str]) -> Optional[Pattern[str]]:
    """
    Шаблон, совпадающий с любым из известных путей блоков.

    Длинные пути проверяются первыми, поэтому "a.bc" не режется как "a.b".
    """
    ordered = sorted(paths, key=len, reverse=True)
    if not ordered:
        return None
    return re.compile("|".join(re.escape(p) for p in ordered))


def find_placeholder(content: str, path: str, sibling_paths: Iterable[str]) -> int:
    """
    Позиция плейсхолдера блока path в содержимом родителя или -1.

    Вхождение, с которого начинается более длинный путь соседа
    (item_extra для item), принадлежит соседу и пропускается. Из
    остальных берётся последнее: резолвленные копии блока вместе с
    их неразрешёнными вложенными плейсхолдерами всегда вставляются
    перед ним. Текст шаблона сразу после плейсхолдера на выбор не влияет.
    """
    longer = [p for p in sibling_paths if p != path and p.startswith(path)]
    found = -1
    at = content.find(path)
    while at >= 0:
        if not any(content.startswith(p, at) for p in longer):
            found = at
        at = content.find(path, at + len(path))
    return found


def variable_token(name: str) -> str:
    """Текст токена переменной {name}."""
    return "{" + name + "}"


__all__ = [
    "ROOT_SENTINEL",
    "PATH_SEPARATOR",
    "BLOCK_BEGIN_PATTERN",
    "HANDLER_PATTERN",
    "PLACEHOLDER_PATTERN",
    "BLANK_LINES_PATTERN",
    "is_valid_name",
    "block_span_pattern",
    "find_placeholder",
    "known_placeholders",
    "variable_token",
]

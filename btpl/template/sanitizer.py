"""
Экранирование синтаксиса шаблонов в присваиваемых значениях.

Значения экранируются при присваивании и разэкранируются один раз,
при финализации документа. Это защита только от внедрения синтаксиса
шаблона, а не санитизация HTML.
"""

from __future__ import annotations

from typing import List, Tuple

from .tokens import ROOT_SENTINEL

# (исходная последовательность, экранированная последовательность)
ESCAPES: List[Tuple[str, str]] = [
    (ROOT_SENTINEL, ROOT_SENTINEL[:1] + "\\" + ROOT_SENTINEL[1:]),
    ("<!-- block:", "<!--\\ block:"),
    ("<!-- handler:", "<!--\\ handler:"),
    ("{", "{\\"),
]


def sanitize(content: str) -> str:
    """Экранирует корневой маркер, открывающие маркеры блоков/обработчиков и '{'."""
    for raw, escaped in ESCAPES:
        content = content.replace(raw, escaped)
    return content


def desanitize(content: str) -> str:
    """Точная инверсия sanitize()."""
    for raw, escaped in ESCAPES:
        content = content.replace(escaped, raw)
    return content


__all__ = ["sanitize", "desanitize", "ESCAPES"]

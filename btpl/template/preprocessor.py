"""
Препроцессор дерева блоков.

Рекурсивно извлекает вложенные блоки из содержимого родителя в
хранилище и оставляет на их месте плейсхолдеры: квалифицированные
пути дочерних блоков.
"""

from __future__ import annotations

import logging

from ..errors import DuplicateBlockError, TemplateStructureError
from .store import BlockStore, child_path
from .tokens import BLOCK_BEGIN_PATTERN, ROOT_SENTINEL, block_span_pattern

logger = logging.getLogger(__name__)


def preprocess(store: BlockStore, path: str = ROOT_SENTINEL) -> None:
    """
    Строит поддерево блоков для содержимого по пути path.

    Алгоритм:
    1. Ищем первый открывающий маркер <!-- block: NAME --> в содержимом.
    2. Находим нежадную область до <!-- /block: NAME -->.
    3. Внутренний текст сохраняем как path.NAME, а область в родителе
       заменяем путём потомка.
    4. Рекурсивно обрабатываем потомка и повторяем поиск в родителе.

    Args:
        store: Хранилище блоков документа
        path: Квалифицированный путь обрабатываемого блока

    Raises:
        TemplateStructureError: Если для открывающего маркера нет закрывающего
        DuplicateBlockError: Если на одном уровне два блока с одинаковым именем
    """
    content = store.get(path)
    if content is None:
        raise KeyError(f"Block '{path}' does not exist")

    begin = BLOCK_BEGIN_PATTERN.search(content)
    while begin is not None:
        name = begin.group(1)

        span = block_span_pattern(name).search(content)
        if span is None:
            raise TemplateStructureError(name)

        active = child_path(path, name)
        if active in store:
            raise DuplicateBlockError(name, path)

        store.add(active, span.group(1))

        # Плейсхолдер на месте извлечённой области
        content = content[:span.start()] + active + content[span.end():]
        store.set(path, content)
        logger.debug(f"Extracted block '{active}' ({len(span.group(1))} chars)")

        preprocess(store, active)

        begin = BLOCK_BEGIN_PATTERN.search(content)


__all__ = ["preprocess"]

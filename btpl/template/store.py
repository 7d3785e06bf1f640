"""
Хранилище блоков документа.

Отображение квалифицированного пути блока на его текущее содержимое.
Единственная изменяемая структура, которую читают и пишут
препроцессор, резолвер и финализатор.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from .tokens import PATH_SEPARATOR, ROOT_SENTINEL


def qualify(relative_path: str) -> str:
    """
    Превращает относительный путь "a.b" в квалифицированный "[_BTPL_ROOT_].a.b".

    Пустой путь соответствует корню.
    """
    relative_path = relative_path.strip()
    if not relative_path:
        return ROOT_SENTINEL
    return ROOT_SENTINEL + PATH_SEPARATOR + relative_path


def parent_of(path: str) -> str:
    """Путь родителя: путь без последнего сегмента. Для корня возвращает сам корень."""
    cut = path.rfind(PATH_SEPARATOR, len(ROOT_SENTINEL))
    if cut < 0:
        return ROOT_SENTINEL
    return path[:cut]


def child_path(parent: str, name: str) -> str:
    return parent + PATH_SEPARATOR + name


def name_of(path: str) -> str:
    """Последний сегмент пути (имя блока)."""
    if path == ROOT_SENTINEL:
        return ROOT_SENTINEL
    return path[path.rfind(PATH_SEPARATOR) + 1:]


def relative_of(path: str) -> str:
    """Обратное к qualify(): путь без корневого сегмента."""
    if path == ROOT_SENTINEL:
        return ""
    return path[len(ROOT_SENTINEL) + len(PATH_SEPARATOR):]


def depth_of(path: str) -> int:
    """Глубина вложенности: 0 для корня, 1 для блоков верхнего уровня и т.д."""
    relative = relative_of(path)
    return relative.count(PATH_SEPARATOR) + 1 if relative else 0


class BlockStore:
    """
    Хранилище содержимого блоков по квалифицированному пути.

    Порядок обхода совпадает с порядком обнаружения блоков.
    Инвариант: родитель любого некорневого блока уже присутствует в хранилище.
    """

    def __init__(self, root_content: str = ""):
        self._blocks: Dict[str, str] = {ROOT_SENTINEL: root_content}

    @property
    def root(self) -> str:
        return self._blocks[ROOT_SENTINEL]

    @root.setter
    def root(self, content: str) -> None:
        self._blocks[ROOT_SENTINEL] = content

    def add(self, path: str, content: str) -> None:
        """
        Регистрирует новый блок.

        Raises:
            KeyError: Если родитель блока отсутствует
            ValueError: Если блок с таким путём уже существует
        """
        if path in self._blocks:
            raise ValueError(f"Block '{path}' already exists")
        parent = parent_of(path)
        if parent not in self._blocks:
            raise KeyError(f"Parent block '{parent}' does not exist")
        self._blocks[path] = content

    def get(self, path: str) -> Optional[str]:
        return self._blocks.get(path)

    def set(self, path: str, content: str) -> None:
        if path not in self._blocks:
            raise KeyError(f"Block '{path}' does not exist")
        self._blocks[path] = content

    def children_of(self, path: str) -> List[str]:
        """Прямые потомки блока в порядке обнаружения."""
        return [p for p in self._blocks if p != path and p != ROOT_SENTINEL and parent_of(p) == path]

    def paths(self) -> List[str]:
        return list(self._blocks)

    def __contains__(self, path: object) -> bool:
        return path in self._blocks

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)


__all__ = [
    "BlockStore",
    "qualify",
    "parent_of",
    "child_path",
    "name_of",
    "relative_of",
    "depth_of",
]

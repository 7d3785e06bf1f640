"""
Документ шаблона: присваивания, резолвинг блоков и финализация.

Блоки резолвятся от самых вложенных к внешним. Повторный parse одного
и того же пути добавляет ещё одну отрендеренную копию перед
плейсхолдером блока; так строятся повторяющиеся строки таблиц.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from ..errors import BlockResolutionError
from .context import RenderContext, get_default_context
from .preprocessor import preprocess
from .sanitizer import desanitize, sanitize
from .store import BlockStore, parent_of, qualify
from .substitution import SubstitutionEngine
from .tokens import (
    BLANK_LINES_PATTERN,
    PATH_SEPARATOR,
    PLACEHOLDER_PATTERN,
    ROOT_SENTINEL,
    find_placeholder,
    known_placeholders,
)


logger = logging.getLogger(__name__)


class Document:
    """
    Открытый экземпляр шаблона.

    Владеет хранилищем блоков и локальными присваиваниями; глобальные
    присваивания и обработчики берёт из контекста рендеринга.
    """

    def __init__(self, text: str, context: Optional[RenderContext] = None, strict: bool = False):
        """
        Создаёт документ и строит дерево блоков.

        Args:
            text: Исходный текст шаблона
            context: Контекст рендеринга; по умолчанию процессный
            strict: Если True, промахи parse() поднимают BlockResolutionError

        Raises:
            TemplateStructureError: При незакрытом или повторяющемся блоке
        """
        self.context = context if context is not None else get_default_context()
        self.strict = strict
        self._locals: Dict[str, str] = {}
        self.blocks = BlockStore(text)

        preprocess(self.blocks)
        self._pristine: Dict[str, str] = {p: self.blocks.get(p) or "" for p in self.blocks}
        logger.debug(f"Document preprocessed: {len(self.blocks) - 1} blocks")

    # Присваивания

    def assign(self, name: str, value: str) -> None:
        """Локальная переменная: заменит одно вхождение при следующем проходе подстановки."""
        self._locals[name] = sanitize(value)

    def assign_many(self, values: Mapping[str, str]) -> None:
        for name, value in values.items():
            self.assign(name, value)

    def assign_global(self, name: str, value: str) -> None:
        """Глобальная переменная в контексте рендеринга документа."""
        self.context.assign_global(name, value)

    @property
    def local_assignments(self) -> Mapping[str, str]:
        """Ещё не израсходованные локальные присваивания (только чтение)."""
        return MappingProxyType(self._locals)

    # Резолвинг

    def parse(self, block_name: str) -> None:
        """
        Резолвит блок и вклеивает результат в родителя.

        Результат подстановки вставляется непосредственно перед
        плейсхолдером блока в содержимом родителя; сам плейсхолдер
        остаётся на месте для последующих вызовов. Блоки нужно
        резолвить от самых вложенных к внешним.

        Args:
            block_name: Путь блока относительно корня, например "content_body.some_row"

        Raises:
            BlockResolutionError: Только в строгом режиме, если блок,
                родитель или плейсхолдер не найдены
        """
        path = qualify(block_name)
        parent = parent_of(path)

        content = self.blocks.get(path)
        if content is None or path == ROOT_SENTINEL:
            self._miss(path, "block does not exist")
            return

        parent_content = self.blocks.get(parent)
        if parent_content is None:
            self._miss(path, f"parent block '{parent}' does not exist")
            return

        at = find_placeholder(parent_content, path, self.blocks.children_of(parent))
        if at < 0:
            self._miss(path, f"placeholder not found in '{parent}'")
            return

        resolved = self._engine().run(content)

        self.blocks.set(parent, parent_content[:at] + resolved + parent_content[at:])
        logger.debug(f"Parsed '{path}' into '{parent}' ({len(resolved)} chars)")

    def reset(self, block_name: str) -> None:
        """
        Возвращает блок и всех его потомков к содержимому после предобработки.

        Блоки не очищаются после parse(), поэтому для вложенных повторов
        (строки из повторяющихся ячеек) внутренний блок сбрасывают перед
        каждой следующей строкой.
        """
        path = qualify(block_name)
        if path not in self.blocks:
            self._miss(path, "block does not exist")
            return
        prefix = path + PATH_SEPARATOR
        for p in self.blocks:
            if p == path or p.startswith(prefix):
                self.blocks.set(p, self._pristine[p])
        logger.debug(f"Reset '{path}'")

    def out(self) -> str:
        """
        Финализирует документ и возвращает итоговый текст.

        Выполняет подстановку в корне, удаляет неразрешённые плейсхолдеры,
        пустые строки и хвостовые пробелы, затем снимает экранирование.
        Рассчитан на однократный вызов.
        """
        content = self._engine().run(self.blocks.root)
        content = self._strip_placeholders(content)
        content = BLANK_LINES_PATTERN.sub("", content)
        self.blocks.root = content
        return desanitize(content)

    # Интроспекция

    def block_paths(self) -> List[str]:
        """Квалифицированные пути всех блоков, включая корень, в порядке обнаружения."""
        return self.blocks.paths()

    def get_block(self, block_name: str) -> Optional[str]:
        """Текущее содержимое блока по относительному пути; "" означает корень."""
        return self.blocks.get(qualify(block_name))

    # Внутренние методы

    def _engine(self) -> SubstitutionEngine:
        return SubstitutionEngine(self.context, self._locals)

    def _strip_placeholders(self, content: str) -> str:
        # Сначала точные пути блоков документа, затем любые оставшиеся токены корня
        known = known_placeholders(p for p in self.blocks if p != ROOT_SENTINEL)
        if known is not None:
            content = known.sub("", content)
        return PLACEHOLDER_PATTERN.sub("", content)

    def _miss(self, path: str, reason: str) -> None:
        if self.strict:
            raise BlockResolutionError(path, reason)
        logger.warning(f"Skipping parse of '{path}': {reason}")


__all__ = ["Document"]

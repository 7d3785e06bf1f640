"""
Движок подстановки.

Два независимых прохода по строке, всегда в этом порядке:
переменные ({name}), затем обработчики (<!-- handler: NAME -->).
"""

from __future__ import annotations

import logging
from typing import Dict

from ..errors import HandlerError
from .context import RenderContext
from .tokens import HANDLER_PATTERN, variable_token

logger = logging.getLogger(__name__)


class SubstitutionEngine:
    """
    Подстановка переменных и обработчиков в текст блока.

    Глобальные переменные берутся из контекста рендеринга и заменяют все
    вхождения. Локальные берутся из хранилища документа, заменяют ровно
    одно вхождение и удаляются из хранилища после прохода.
    """

    def __init__(self, context: RenderContext, local_assignments: Dict[str, str]):
        self.context = context
        self.local_assignments = local_assignments

    def run(self, content: str) -> str:
        content = self.substitute_variables(content)
        return self.substitute_handlers(content)

    def substitute_variables(self, content: str) -> str:
        for name, value in self.context.iter_globals():
            content = content.replace(variable_token(name), value)

        # Локальные присваивания расходуются независимо от того, нашлось ли вхождение
        for name in list(self.local_assignments):
            value = self.local_assignments.pop(name)
            content = content.replace(variable_token(name), value, 1)

        return content

    def substitute_handlers(self, content: str) -> str:
        """
        Заменяет маркеры обработчиков результатами их вызова.

        После каждой замены содержимое сканируется заново, поэтому вывод
        обработчика может содержать новые маркеры. Незарегистрированный
        обработчик заменяется пустым текстом.
        """
        match = HANDLER_PATTERN.search(content)
        while match is not None:
            marker, name = match.group(0), match.group(1)
            content = content.replace(marker, self._call_handler(name))
            match = HANDLER_PATTERN.search(content)
        return content

    def _call_handler(self, name: str) -> str:
        fn = self.context.handlers.get(name)
        if fn is None:
            logger.debug(f"Handler '{name}' is not registered, substituting empty text")
            return ""

        try:
            result = fn()
        except Exception as e:
            raise HandlerError(name, str(e) or type(e).__name__) from e

        if result is None:
            return ""
        if not isinstance(result, str):
            raise HandlerError(name, f"expected str, got {type(result).__name__}")

        logger.debug(f"Handler '{name}' produced {len(result)} chars")
        return result


__all__ = ["SubstitutionEngine"]

"""
Исполнение сценария рендеринга над документом.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

from ..template.context import HandlerFn, RenderContext
from ..template.document import Document
from ..template.loader import open_document
from .model import HandlerCfg, RenderScript, StepCfg

logger = logging.getLogger(__name__)


def make_handler(cfg: HandlerCfg, context: RenderContext, base_dir: Path) -> HandlerFn:
    """
    Строит функцию-обработчик из описания в сценарии.

    Обработчик на основе шаблона при каждом вызове открывает файл заново,
    резолвит перечисленные блоки и возвращает финализированный текст.
    """
    if cfg.text is not None:
        text = cfg.text
        return lambda: text

    template_path = base_dir / cfg.template
    blocks = list(cfg.parse)

    def render_template_handler() -> str:
        doc = open_document(template_path, context=context)
        for block in blocks:
            doc.parse(block)
        return doc.out()

    return render_template_handler


def register_handlers(script: RenderScript, context: RenderContext, base_dir: Path) -> None:
    for name, cfg in script.handlers.items():
        context.add_handler(name, make_handler(cfg, context, base_dir))


def apply_step(doc: Document, step: StepCfg) -> None:
    if step.reset:
        doc.reset(step.reset)
    for name, value in step.assign_global.items():
        doc.assign_global(name, value)
    doc.assign_many(step.assign)
    if step.parse:
        doc.parse(step.parse)


def apply_script(doc: Document, script: RenderScript, base_dir: Optional[Path] = None) -> None:
    """
    Применяет сценарий к открытому документу: глобальные значения,
    обработчики (в контексте документа), затем шаги по порядку.
    """
    doc.context.assign_globals(script.globals)
    register_handlers(script, doc.context, base_dir or Path.cwd())
    for i, step in enumerate(script.steps):
        logger.debug(f"Applying step {i}: {step.model_dump(exclude_defaults=True)}")
        apply_step(doc, step)


def render_file(
    template_path: Path,
    script: Optional[RenderScript] = None,
    *,
    script_dir: Optional[Path] = None,
    global_values: Optional[Mapping[str, str]] = None,
    assigns: Optional[Mapping[str, str]] = None,
    parse: Iterable[str] = (),
    context: Optional[RenderContext] = None,
    strict: bool = False,
) -> str:
    """
    Рендерит файл шаблона целиком.

    Порядок: глобальные значения сценария, глобальные значения из
    аргументов (перекрывают сценарий), шаги сценария, затем assigns
    и блоки из parse, затем out().

    Args:
        template_path: Путь к файлу шаблона
        script: Сценарий рендеринга (необязательно)
        script_dir: Каталог для относительных путей обработчиков сценария
        global_values: Дополнительные глобальные присваивания
        assigns: Локальные присваивания перед блоками из parse
        parse: Пути блоков для резолвинга по порядку
        context: Контекст рендеринга; по умолчанию новый изолированный
        strict: Строгий режим резолвинга

    Returns:
        Итоговый текст документа
    """
    ctx = context if context is not None else RenderContext()
    doc = open_document(template_path, context=ctx, strict=strict)

    if script is not None:
        ctx.assign_globals(script.globals)
        register_handlers(script, ctx, script_dir or template_path.parent)

    ctx.assign_globals(global_values or {})

    if script is not None:
        for step in script.steps:
            apply_step(doc, step)

    doc.assign_many(assigns or {})
    for block in parse:
        doc.parse(block)

    return doc.out()


__all__ = ["make_handler", "register_handlers", "apply_step", "apply_script", "render_file"]

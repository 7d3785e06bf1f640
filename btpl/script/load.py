"""
Загрузчик сценариев рендеринга.

Читает YAML (ruamel.yaml, безопасный режим) и валидирует его моделью
RenderScript. Ошибки валидации превращаются в ScriptLoadError
с указанием пути поля.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ScriptLoadError
from .model import RenderScript

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        raise ScriptLoadError(f"Render script not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ScriptLoadError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ScriptLoadError(f"YAML must be a mapping: {path}")
    return raw


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def parse_script(raw: Any, origin: str = "<script>") -> RenderScript:
    """
    Валидирует уже прочитанные данные сценария.

    Args:
        raw: Словарь, полученный из YAML
        origin: Источник для сообщений об ошибках

    Raises:
        ScriptLoadError: Если данные не соответствуют схеме
    """
    try:
        return RenderScript.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        raise ScriptLoadError(f"{origin}: {_format_loc(first['loc'])}: {first['msg']}") from e


def load_script(path: Path) -> RenderScript:
    """
    Загружает сценарий рендеринга из файла.

    Raises:
        ScriptLoadError: Если файл отсутствует, не является YAML-словарём или не проходит валидацию
    """
    raw = _read_yaml_map(path)
    script = parse_script(raw, str(path))
    logger.debug(
        f"Loaded render script {path}: {len(script.globals)} globals, "
        f"{len(script.handlers)} handlers, {len(script.steps)} steps"
    )
    return script


__all__ = ["load_script", "parse_script"]

"""
Сценарии рендеринга: YAML-описание присваиваний, обработчиков и шагов parse.
"""

from __future__ import annotations

from .load import load_script, parse_script
from .model import HandlerCfg, RenderScript, StepCfg
from .runner import apply_script, render_file

__all__ = [
    "HandlerCfg",
    "RenderScript",
    "StepCfg",
    "load_script",
    "parse_script",
    "apply_script",
    "render_file",
]

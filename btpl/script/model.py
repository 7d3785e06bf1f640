"""
Схема сценария рендеринга.

Сценарий описывает глобальные присваивания, обработчики и
последовательность шагов assign/parse для одного документа.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..template.tokens import is_valid_name


def _stringify_scalar(v: object) -> object:
    """YAML-скаляры (числа, bool) приводим к строкам; прочее оставляем валидатору."""
    return str(v) if isinstance(v, (int, float, bool)) else v


def _stringify_values(v: object) -> object:
    if isinstance(v, dict):
        return {k: _stringify_scalar(val) for k, val in v.items()}
    return v


class HandlerCfg(BaseModel):
    """
    Обработчик, объявленный в сценарии.

    Ровно одно из полей template / text:
    - template: путь к файлу шаблона (относительно файла сценария),
      который рендерится заново при каждом вызове после parse блоков из parse;
    - text: буквальный текст.
    """
    model_config = ConfigDict(extra="forbid")

    template: Optional[str] = None
    parse: List[str] = Field(default_factory=list)
    text: Optional[str] = None

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, v: object) -> object:
        return _stringify_scalar(v)

    @model_validator(mode="after")
    def check_source(self) -> "HandlerCfg":
        if (self.template is None) == (self.text is None):
            raise ValueError("exactly one of 'template' or 'text' must be set")
        if self.text is not None and self.parse:
            raise ValueError("'parse' is only allowed together with 'template'")
        return self


class StepCfg(BaseModel):
    """
    Один шаг сценария.

    Поля применяются в порядке reset, assign_global, assign, parse.
    """
    model_config = ConfigDict(extra="forbid")

    reset: Optional[str] = None
    assign_global: Dict[str, str] = Field(default_factory=dict)
    assign: Dict[str, str] = Field(default_factory=dict)
    parse: Optional[str] = None

    @field_validator("assign_global", "assign", mode="before")
    @classmethod
    def coerce_scalars(cls, v: object) -> object:
        return _stringify_values(v)

    @model_validator(mode="after")
    def check_not_empty(self) -> "StepCfg":
        if not (self.reset or self.assign_global or self.assign or self.parse):
            raise ValueError("step must set at least one of 'reset', 'assign_global', 'assign', 'parse'")
        return self


class RenderScript(BaseModel):
    """Сценарий рендеринга документа."""
    model_config = ConfigDict(extra="forbid")

    globals: Dict[str, str] = Field(default_factory=dict)
    handlers: Dict[str, HandlerCfg] = Field(default_factory=dict)
    steps: List[StepCfg] = Field(default_factory=list)

    @field_validator("globals", mode="before")
    @classmethod
    def coerce_scalars(cls, v: object) -> object:
        return _stringify_values(v)

    @field_validator("handlers")
    @classmethod
    def check_handler_names(cls, v: Dict[str, HandlerCfg]) -> Dict[str, HandlerCfg]:
        for name in v:
            if not is_valid_name(name):
                raise ValueError(f"invalid handler name '{name}'")
        return v


__all__ = ["HandlerCfg", "StepCfg", "RenderScript"]

"""
Модели JSON-отчётов CLI.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .template.document import Document
from .template.store import depth_of, name_of, parent_of, relative_of
from .template.tokens import ROOT_SENTINEL


class BlockInfo(BaseModel):
    path: str = Field(description="Путь относительно корня, пригодный для parse()")
    qualified: str = Field(description="Квалифицированный путь (плейсхолдер)")
    name: str
    depth: int
    parent: Optional[str] = Field(default=None, description="Относительный путь родителя; None для блоков верхнего уровня")
    children: List[str] = Field(default_factory=list)


class BlocksReport(BaseModel):
    template: str
    blocks: List[BlockInfo] = Field(default_factory=list)


def build_blocks_report(doc: Document, template: str) -> BlocksReport:
    """Описывает дерево блоков документа сразу после предобработки."""
    blocks: List[BlockInfo] = []
    for path in doc.block_paths():
        if path == ROOT_SENTINEL:
            continue
        parent = parent_of(path)
        blocks.append(BlockInfo(
            path=relative_of(path),
            qualified=path,
            name=name_of(path),
            depth=depth_of(path),
            parent=relative_of(parent) if parent != ROOT_SENTINEL else None,
            children=[relative_of(c) for c in doc.blocks.children_of(path)],
        ))
    return BlocksReport(template=template, blocks=blocks)


__all__ = ["BlockInfo", "BlocksReport", "build_blocks_report"]

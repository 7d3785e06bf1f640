"""
Helpers for opening template documents.

The engine itself works on text only; this module turns raw bytes,
text or a filesystem path into a preprocessed Document.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..errors import TemplateLoadError, TemplateNotFoundError
from .context import RenderContext
from .document import Document

logger = logging.getLogger(__name__)

Source = Union[str, bytes, bytearray, memoryview, os.PathLike]


def read_source(source: Source, encoding: str = "utf-8") -> str:
    """
    Reads template text from a supported source.

    Args:
        source: bytes-like buffer, os.PathLike path, or template text (str)
        encoding: Encoding for bytes and files

    Returns:
        Template text

    Raises:
        TypeError: If the source type is not supported
        TemplateNotFoundError: If the path does not point to a file
        TemplateLoadError: If the data cannot be decoded
    """
    if isinstance(source, str):
        return source

    if isinstance(source, (bytes, bytearray, memoryview)):
        return _decode(bytes(source), encoding, "<buffer>")

    if isinstance(source, os.PathLike):
        path = Path(source)
        if not path.is_file():
            raise TemplateNotFoundError(f"Template file not found: {path}")
        logger.debug(f"Reading template {path}")
        return _decode(path.read_bytes(), encoding, str(path))

    raise TypeError(f"invalid source type: {type(source).__name__}")


def open_document(
    source: Source,
    *,
    context: Optional[RenderContext] = None,
    strict: bool = False,
    encoding: str = "utf-8",
) -> Document:
    """
    Opens and preprocesses a template.

    A str is template text; use pathlib.Path to read from a file.

    Raises:
        TemplateStructureError: If the block structure is malformed
    """
    return Document(read_source(source, encoding), context=context, strict=strict)


def _decode(data: bytes, encoding: str, origin: str) -> str:
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise TemplateLoadError(f"Failed to decode template {origin}: {e}") from e


__all__ = ["open_document", "read_source", "Source"]

from __future__ import annotations

from importlib import metadata

DIST_NAME = "btpl"


def tool_version() -> str:
    """Версия установленного дистрибутива btpl; "0.0.0" при запуске из исходников."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["DIST_NAME", "tool_version"]

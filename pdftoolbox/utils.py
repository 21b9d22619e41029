"""Utilities shared by pdftoolbox modules."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]
Source = Union[bytes, bytearray, str, Path]

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str, level: Union[int, str, None] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    if level is not None:
        logger.setLevel(level)
    return logger


def configure_logging(level: Union[int, str]) -> logging.Logger:
    """Apply ``level`` to the ``pdftoolbox`` logger hierarchy."""

    return get_logger("pdftoolbox", level)


def coerce_path(path: PathLike) -> Path:
    """Return a :class:`~pathlib.Path` object for ``path``."""

    return Path(path).expanduser().resolve()


def read_source(source: Source) -> bytes:
    """Return the bytes of ``source``, reading it from disk when it is a path."""

    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    return coerce_path(source).read_bytes()


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500.0 B")
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


__all__ = [
    "PathLike",
    "Source",
    "get_logger",
    "configure_logging",
    "coerce_path",
    "read_source",
    "format_file_size",
]

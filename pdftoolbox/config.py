"""Environment driven settings for pdftoolbox."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ToolOptionError

ENV_PREFIX = "PDFTOOLBOX_"
COMPRESSION_LEVELS = ("low", "medium", "high")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings shared by the CLI and the HTTP service.

    Attributes:
        log_level: Level applied to every ``pdftoolbox.*`` logger
        split_workers: Thread pool size used by split runs
        render_dpi: Default resolution for PDF to image conversion
        compression_level: Default compression preset
        max_upload_mb: Largest upload accepted by the HTTP service
    """
    log_level: str = "INFO"
    split_workers: int = 1
    render_dpi: int = 150
    compression_level: str = "medium"
    max_upload_mb: int = 50

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ToolOptionError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ToolOptionError(f"{ENV_PREFIX}{name} must be >= 1, got {value}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``)."""

    environ = os.environ if environ is None else environ

    log_level = environ.get(ENV_PREFIX + "LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in _LOG_LEVELS:
        raise ToolOptionError(f"Unsupported log level: {log_level}")

    level = environ.get(ENV_PREFIX + "COMPRESSION_LEVEL", "medium").strip().lower() or "medium"
    if level not in COMPRESSION_LEVELS:
        raise ToolOptionError(f"Unsupported compression level: {level}")

    return Settings(
        log_level=log_level,
        split_workers=_positive_int(environ, "SPLIT_WORKERS", 1),
        render_dpi=_positive_int(environ, "RENDER_DPI", 150),
        compression_level=level,
        max_upload_mb=_positive_int(environ, "MAX_UPLOAD_MB", 50),
    )


__all__ = ["Settings", "load_settings", "COMPRESSION_LEVELS", "ENV_PREFIX"]

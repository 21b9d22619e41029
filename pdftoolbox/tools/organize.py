"""Rotate, delete and reorder pages."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..engines import PypdfEngine
from ..utils import Source, get_logger

LOGGER = get_logger("pdftoolbox.organize")


def rotate_pages(
    source: Source,
    rotations: Mapping[int, int],
    *,
    engine: Optional[PypdfEngine] = None,
) -> bytes:
    """Set the rotation of each 0-based page index in ``rotations``.

    Rotations are absolute degrees and must be multiples of 90.
    """

    engine = engine or PypdfEngine()
    document = engine.load(source)
    rotated = engine.rotate_pages(document, rotations)
    LOGGER.info("Rotated %d pages", len(rotations))
    return engine.serialize(rotated)


def delete_pages(
    source: Source,
    page_indices: Iterable[int],
    *,
    engine: Optional[PypdfEngine] = None,
) -> bytes:
    engine = engine or PypdfEngine()
    document = engine.load(source)
    indices = sorted(set(page_indices))
    remaining = engine.delete_pages(document, indices)
    LOGGER.info("Deleted pages %s, %d pages remain", indices, remaining.num_pages)
    return engine.serialize(remaining)


def reorder_pages(
    source: Source,
    order: Sequence[int],
    *,
    engine: Optional[PypdfEngine] = None,
) -> bytes:
    """Return a document whose pages follow the 0-based ``order``."""

    engine = engine or PypdfEngine()
    document = engine.load(source)
    reordered = engine.copy_pages_to_new_document(document, order)
    return engine.serialize(reordered)


__all__ = ["rotate_pages", "delete_pages", "reorder_pages"]

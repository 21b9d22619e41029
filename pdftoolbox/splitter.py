"""Split a loaded document into one output document per page group."""

from __future__ import annotations

import io
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple
from zipfile import ZIP_DEFLATED, ZipFile

from .engines import DocumentEngine, EngineDocument, PypdfEngine
from .exceptions import (
    DocumentEngineError,
    EmptyResultError,
    PDFToolboxError,
    SplitCancelledError,
    SplitGroupError,
)
from .ranges import PageRangeSplitter
from .types import PageGroup, ParseReport, SplitResult
from .utils import PathLike, Source, coerce_path, get_logger

LOGGER = get_logger("pdftoolbox.split")

ProgressCallback = Callable[[float], None]


class SplitDriver:
    """Drive a document engine to emit one PDF per :class:`PageGroup`.

    Args:
        engine: Document engine used to copy and serialize pages. Defaults to
            :class:`~pdftoolbox.engines.PypdfEngine`.
        max_workers: Number of groups processed at once. Results always come
            back in group order whatever the completion order.
    """

    def __init__(self, engine: Optional[DocumentEngine] = None, *, max_workers: int = 1) -> None:
        self.engine: DocumentEngine = engine or PypdfEngine()
        self.max_workers = max(1, max_workers)

    def _produce(self, document: EngineDocument, group: PageGroup) -> SplitResult:
        try:
            copy = self.engine.copy_pages_to_new_document(document, group.indices())
            data = self.engine.serialize(copy)
        except DocumentEngineError as exc:
            LOGGER.error("Failed to produce pages %s: %s", list(group.pages), exc)
            raise SplitGroupError(group, exc) from exc
        except PDFToolboxError:
            raise
        except Exception as exc:
            LOGGER.error("Failed to produce pages %s: %s", list(group.pages), exc)
            cause = DocumentEngineError(f"{type(exc).__name__}: {exc}")
            raise SplitGroupError(group, cause) from exc

        name = group.output_name()
        LOGGER.info("Produced %s (%s pages, %s bytes)", name, len(group), len(data))
        return SplitResult(name=name, data=data, group=group)

    def run(
        self,
        document: EngineDocument,
        groups: Sequence[PageGroup],
        on_progress: Optional[ProgressCallback] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[SplitResult]:
        """Produce one :class:`SplitResult` per group, in group order.

        Raises:
            EmptyResultError: If ``groups`` is empty.
            SplitGroupError: If the engine fails for any group. The run is
                aborted and no partial result list is returned.
            SplitCancelledError: If ``cancel_event`` is set before a group
                starts.
        """
        groups = list(groups)
        if not groups:
            raise EmptyResultError("No page groups to produce.")

        if self.max_workers == 1 or len(groups) == 1:
            return self._run_sequential(document, groups, on_progress, cancel_event)
        return self._run_concurrent(document, groups, on_progress, cancel_event)

    def _run_sequential(self, document, groups, on_progress, cancel_event) -> List[SplitResult]:
        results: List[SplitResult] = []
        for completed, group in enumerate(groups):
            if cancel_event is not None and cancel_event.is_set():
                raise SplitCancelledError(completed=completed)
            results.append(self._produce(document, group))
            if on_progress:
                on_progress((completed + 1) / len(groups) * 100)
        return results

    def _run_concurrent(self, document, groups, on_progress, cancel_event) -> List[SplitResult]:
        total = len(groups)
        results: List[Optional[SplitResult]] = [None] * total
        lock = threading.Lock()
        completed = 0
        aborted = False

        def work(position: int, group: PageGroup) -> None:
            nonlocal completed, aborted
            try:
                if cancel_event is not None and cancel_event.is_set():
                    raise SplitCancelledError(completed=completed)
                result = self._produce(document, group)
            except PDFToolboxError:
                with lock:
                    aborted = True
                raise
            with lock:
                results[position] = result
                completed += 1
                # No progress once any group has failed or been cancelled.
                if on_progress and not aborted:
                    on_progress(completed / total * 100)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(work, position, group) for position, group in enumerate(groups)]
            _, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in futures:
                if future.done() and not future.cancelled() and future.exception() is not None:
                    raise future.exception()

        return [result for result in results if result is not None]


def split_document(
    source: Source,
    range_str: str,
    *,
    engine: Optional[DocumentEngine] = None,
    password: Optional[str] = None,
    max_workers: int = 1,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Tuple[List[SplitResult], ParseReport]:
    """Load ``source``, parse ``range_str`` against it and split it.

    Returns:
        The split results and the parse report listing skipped segments.

    Raises:
        EmptyResultError: If no segment of ``range_str`` is usable.
    """

    engine = engine or PypdfEngine()
    document = engine.load(source, password=password)
    total_pages = engine.get_page_count(document)

    report = PageRangeSplitter().parse_with_report(range_str, total_pages)
    for skipped in report.skipped:
        LOGGER.warning("Ignoring %s page range segment %r", skipped.reason, skipped.text)
    if report.is_empty:
        raise EmptyResultError(
            f"Enter a valid page range. {range_str!r} selects no pages of a {total_pages}-page document."
        )

    driver = SplitDriver(engine, max_workers=max_workers)
    results = driver.run(document, report.groups, on_progress, cancel_event=cancel_event)
    return results, report


def write_results(results: Sequence[SplitResult], output_dir: PathLike) -> List[Path]:
    """Write ``results`` into ``output_dir`` and return the created paths.

    Overlapping groups can share a name; later files then get a numeric
    suffix instead of replacing earlier ones.
    """

    output_path = coerce_path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    created = [output_path / name for name in _unique_names(results)]
    for destination, result in zip(created, results):
        destination.write_bytes(result.data)
        LOGGER.info("Wrote %s", destination)
    return created


def zip_results(results: Sequence[SplitResult]) -> bytes:
    """Bundle ``results`` into an in-memory zip archive."""

    buffer = io.BytesIO()
    with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
        for name, result in zip(_unique_names(results), results):
            archive.writestr(name, result.data)
    return buffer.getvalue()


def _unique_names(results: Sequence[SplitResult]) -> List[str]:
    seen: dict[str, int] = {}
    names: List[str] = []
    for result in results:
        count = seen.get(result.name, 0)
        seen[result.name] = count + 1
        if count:
            stem, _, suffix = result.name.rpartition(".")
            names.append(f"{stem}_{count + 1}.{suffix}")
        else:
            names.append(result.name)
    return names


__all__ = ["SplitDriver", "split_document", "write_results", "zip_results", "ProgressCallback"]

"""Batch pipeline that turns a list of scripts into one consolidated result."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from .analyzers import (
    CrossReferenceGraph,
    PatternCounter,
    add_references,
    analyze_directories,
    build_census,
    identify_issues,
    most_complex,
    most_dependencies,
    summarize_architecture,
)
from .config import IssueThresholds
from .extractor import FactExtractor, GDScriptExtractor
from .logging import get_logger
from .models import (
    AnalysisOptions,
    BatchInsights,
    BatchResult,
    BatchSummary,
    StructuralRecord,
)

STATUS_OK = "ok"
STATUS_NO_SCRIPTS = "no_scripts"
STATUS_CANCELLED = "cancelled"

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class _Collection:
    """State accumulated during the collection pass."""

    summary: BatchSummary
    graph: CrossReferenceGraph = field(default_factory=CrossReferenceGraph)
    patterns: PatternCounter = field(default_factory=PatternCounter)
    records: List[StructuralRecord] = field(default_factory=list)

    def add(self, record: StructuralRecord) -> "_Collection":
        self.records.append(record)
        self.summary.processed += 1
        if not record.ok:
            self.summary.failed += 1
            return self
        self.summary.successful += 1
        self.summary.total_methods += len(record.methods)
        self.summary.total_properties += len(record.properties)
        self.summary.total_signals += len(record.signals)
        self.summary.total_constants += len(record.constants)
        self.summary.total_cross_file_calls += len(record.cross_file_calls)
        self.graph = add_references(self.graph, record.path, record)
        self.patterns = self.patterns.add(record)
        return self


class BatchOrchestrator:
    """Drives the fact extractor over every path and aggregates the results."""

    def __init__(
        self,
        extractor: FactExtractor | None = None,
        *,
        timeout: float | None = None,
        thresholds: IssueThresholds | None = None,
    ) -> None:
        self.extractor = extractor or GDScriptExtractor()
        self.timeout = timeout
        self.thresholds = thresholds or IssueThresholds()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        paths: Sequence[str],
        options: AnalysisOptions,
        *,
        directory_analysis: bool = False,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> BatchResult:
        """Analyse ``paths`` in order and return the consolidated result."""
        paths = list(paths)
        if not paths:
            self.logger.warning("No scripts found to analyse")
            return BatchResult(summary=BatchSummary(status=STATUS_NO_SCRIPTS))

        self.logger.info("Starting batch analysis of %d scripts", len(paths))
        collection = _Collection(summary=BatchSummary(total=len(paths)))
        collection = self._collect(paths, options, collection, progress, cancel_event)

        result = self._aggregate(collection, paths, directory_analysis)
        self.logger.info(
            "Batch finished: %d successful, %d failed%s",
            result.summary.successful,
            result.summary.failed,
            " (cancelled)" if result.summary.partial else "",
        )
        return result

    def _collect(
        self,
        paths: Sequence[str],
        options: AnalysisOptions,
        collection: _Collection,
        progress: ProgressCallback | None,
        cancel_event: threading.Event | None,
    ) -> _Collection:
        total = len(paths)
        for index, path in enumerate(paths):
            # Progress is reported between files; cancellation is honoured before every file.
            if index and progress is not None:
                progress(index, total, path)
            if cancel_event is not None and cancel_event.is_set():
                self.logger.info("Cancellation requested after %d of %d scripts", index, total)
                collection.summary.partial = True
                collection.summary.status = STATUS_CANCELLED
                return collection

            self.logger.debug("Analysing %s", path)
            record = self._extract(path, options)
            if not record.ok:
                self.logger.warning("Failed to analyse %s: %s", path, record.error)
            collection = collection.add(record)

        if progress is not None:
            progress(total, total, "")
        return collection

    def _aggregate(
        self, collection: _Collection, paths: Sequence[str], directory_analysis: bool
    ) -> BatchResult:
        records = collection.records
        processed = collection.summary.processed
        insights = BatchInsights(
            most_complex_script=most_complex(records),
            most_dependencies_script=most_dependencies(records),
            patterns=build_census(collection.patterns, processed),
            architecture=summarize_architecture(records),
            issues=identify_issues(records, processed, self.thresholds),
        )
        directory = analyze_directories(paths) if directory_analysis else None
        return BatchResult(
            summary=collection.summary,
            insights=insights,
            cross_references=collection.graph.entries,
            directory=directory,
            records=records,
        )

    def _extract(self, path: str, options: AnalysisOptions) -> StructuralRecord:
        if self.timeout is None:
            return self._safe_extract(path, options)

        outcome: List[StructuralRecord] = []
        # Abandoned workers must not block interpreter exit.
        worker = threading.Thread(
            target=lambda: outcome.append(self._safe_extract(path, options)),
            name="gdinsight-extract",
            daemon=True,
        )
        worker.start()
        worker.join(self.timeout)
        if worker.is_alive() or not outcome:
            self.logger.debug("Abandoning extraction of %s after %gs", path, self.timeout)
            return StructuralRecord.failed(path, f"extraction timed out after {self.timeout:g}s")
        return outcome[0]

    def _safe_extract(self, path: str, options: AnalysisOptions) -> StructuralRecord:
        try:
            record = self.extractor.extract(path, options)
        except Exception as exc:  # noqa: BLE001 - one bad extractor must not abort the batch
            self._log_exception(f"Extractor raised for {path}", exc)
            return StructuralRecord.failed(path, f"{exc.__class__.__name__}: {exc}")
        if record.path != path:
            record.path = path
        return record

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = [
    "BatchOrchestrator",
    "ProgressCallback",
    "STATUS_CANCELLED",
    "STATUS_NO_SCRIPTS",
    "STATUS_OK",
]

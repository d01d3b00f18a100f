"""Cross-reference graph between scripts that load or instantiate each other."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator

from ..extractor import INSTANCE_CREATION, PRELOAD_CALL
from ..models import CrossReferenceEntry, StructuralRecord

REFERENCE_CALL_TYPES = frozenset({PRELOAD_CALL, INSTANCE_CREATION})


@dataclass
class CrossReferenceGraph:
    """Directed graph keyed by path.

    ``references_to`` keeps every occurrence (a script loading the same target
    three times records it three times) while ``referenced_by`` holds each
    source once.
    """

    entries: Dict[str, CrossReferenceEntry] = field(default_factory=dict)

    def entry(self, path: str) -> CrossReferenceEntry:
        existing = self.entries.get(path)
        if existing is None:
            existing = CrossReferenceEntry()
            self.entries[path] = existing
        return existing

    def __contains__(self, path: object) -> bool:
        return path in self.entries

    def __getitem__(self, path: str) -> CrossReferenceEntry:
        return self.entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def add_references(
    graph: CrossReferenceGraph, source: str, record: StructuralRecord
) -> CrossReferenceGraph:
    """Fold the load/instantiate calls of ``record`` into ``graph`` and return it."""
    for call in record.cross_file_calls:
        if call.call_type not in REFERENCE_CALL_TYPES:
            continue
        graph.entry(source).references_to.append(call.target)
        target = graph.entry(call.target)
        if source not in target.referenced_by:
            target.referenced_by.append(source)
    return graph


__all__ = ["CrossReferenceGraph", "REFERENCE_CALL_TYPES", "add_references"]

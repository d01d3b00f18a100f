"""Weighted complexity scoring and stable ranking of scripts."""

from __future__ import annotations

from typing import Callable, Iterable

from ..models import StructuralRecord

METHOD_WEIGHT = 1.0
PROPERTY_WEIGHT = 0.5
CROSS_FILE_CALL_WEIGHT = 1.5
NODE_REFERENCE_WEIGHT = 0.8
CONNECTION_WEIGHT = 1.2


def complexity_score(record: StructuralRecord) -> float:
    """Return the relative complexity of one successfully extracted script."""
    return (
        len(record.methods) * METHOD_WEIGHT
        + len(record.properties) * PROPERTY_WEIGHT
        + len(record.cross_file_calls) * CROSS_FILE_CALL_WEIGHT
        + len(record.node_references) * NODE_REFERENCE_WEIGHT
        + len(record.connections) * CONNECTION_WEIGHT
    )


def dependency_count(record: StructuralRecord) -> int:
    return len(record.cross_file_calls)


def stable_max(
    records: Iterable[StructuralRecord], key: Callable[[StructuralRecord], float]
) -> str:
    """Return the path of the highest scoring successful record.

    The leader only changes on a strictly greater score, so ties keep the
    earliest record and a batch where every score is zero yields ``""``.
    """
    best_path = ""
    best_score: float = 0
    for record in records:
        if not record.ok:
            continue
        score = key(record)
        if score > best_score:
            best_score = score
            best_path = record.path
    return best_path


def most_complex(records: Iterable[StructuralRecord]) -> str:
    return stable_max(records, complexity_score)


def most_dependencies(records: Iterable[StructuralRecord]) -> str:
    return stable_max(records, dependency_count)


__all__ = [
    "complexity_score",
    "dependency_count",
    "most_complex",
    "most_dependencies",
    "stable_max",
]

"""Heuristic detection of architectural patterns in scripts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..extractor import INSTANCE_CREATION
from ..models import ArchitectureSummary, PatternCensusEntry, StructuralRecord

SINGLETON = "singleton"
OBSERVER = "observer"
STATE_MACHINE = "state_machine"
FACTORY = "factory"
COMPONENT = "component"

MODEL = "model"
VIEW = "view"
CONTROLLER = "controller"


def is_singleton(record: StructuralRecord) -> bool:
    for prop in record.properties:
        if "instance" in prop.name.lower() and prop.scope == "global":
            return True
    return any("get_instance" in method.name.lower() for method in record.methods)


def is_observer(record: StructuralRecord) -> bool:
    return len(record.signals) > 2


def is_state_machine(record: StructuralRecord) -> bool:
    has_state_enum = any(
        const.kind == "enum" and "state" in const.name.lower() for const in record.constants
    )
    has_state_property = any("state" in prop.name.lower() for prop in record.properties)
    return has_state_enum and has_state_property


def is_factory(record: StructuralRecord) -> bool:
    creations = sum(1 for call in record.cross_file_calls if call.call_type == INSTANCE_CREATION)
    return creations > 2


def is_component(record: StructuralRecord) -> bool:
    return sum(1 for prop in record.properties if prop.exported) > 2


PATTERN_RULES: Tuple[Tuple[str, Callable[[StructuralRecord], bool]], ...] = (
    (SINGLETON, is_singleton),
    (OBSERVER, is_observer),
    (STATE_MACHINE, is_state_machine),
    (FACTORY, is_factory),
    (COMPONENT, is_component),
)

# Evaluated top to bottom; the first matching rule assigns the role.
MVC_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("model", "data"), MODEL),
    (("view", "ui", "gui"), VIEW),
    (("controller", "manager"), CONTROLLER),
)


def detect_patterns(record: StructuralRecord) -> List[str]:
    """Return every pattern name the record matches, in rule order."""
    return [name for name, predicate in PATTERN_RULES if predicate(record)]


@dataclass
class PatternCounter:
    """Running per-pattern counts over successful records."""

    counts: Dict[str, int] = field(default_factory=dict)

    def add(self, record: StructuralRecord) -> "PatternCounter":
        if not record.ok:
            return self
        for name in detect_patterns(record):
            self.counts[name] = self.counts.get(name, 0) + 1
        return self


def build_census(counter: PatternCounter, total_records: int) -> List[PatternCensusEntry]:
    """Convert counts to percentages of ``total_records``.

    ``total_records`` is the number of processed inputs including failed ones,
    so percentages are relative to the whole batch rather than to successes.
    """
    denominator = max(total_records, 1)
    return [
        PatternCensusEntry(name=name, count=count, percentage=count * 100 / denominator)
        for name, count in counter.counts.items()
    ]


def classify_mvc_role(
    path: str, rules: Sequence[Tuple[Tuple[str, ...], str]] = MVC_RULES
) -> Optional[str]:
    name = PurePosixPath(path.replace("\\", "/")).name.lower()
    for needles, role in rules:
        if any(needle in name for needle in needles):
            return role
    return None


def summarize_architecture(records: Iterable[StructuralRecord]) -> ArchitectureSummary:
    summary = ArchitectureSummary()
    for record in records:
        if not record.ok:
            continue
        role = classify_mvc_role(record.path)
        if role == MODEL:
            summary.models += 1
        elif role == VIEW:
            summary.views += 1
        elif role == CONTROLLER:
            summary.controllers += 1

        if is_singleton(record):
            summary.singletons += 1
        if is_factory(record):
            summary.factories += 1
        if is_observer(record):
            summary.observers += 1
        if is_component(record):
            summary.components += 1
    return summary


__all__ = [
    "COMPONENT",
    "CONTROLLER",
    "FACTORY",
    "MODEL",
    "MVC_RULES",
    "OBSERVER",
    "PATTERN_RULES",
    "PatternCounter",
    "SINGLETON",
    "STATE_MACHINE",
    "VIEW",
    "build_census",
    "classify_mvc_role",
    "detect_patterns",
    "is_component",
    "is_factory",
    "is_observer",
    "is_singleton",
    "is_state_machine",
    "summarize_architecture",
]

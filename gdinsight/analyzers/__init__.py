"""Aggregation passes run over a batch of structural records."""

from __future__ import annotations

from .complexity import complexity_score, most_complex, most_dependencies, stable_max
from .issues import identify_issues
from .layout import analyze_directories, classify_naming, size_distribution
from .patterns import (
    PatternCounter,
    build_census,
    classify_mvc_role,
    detect_patterns,
    summarize_architecture,
)
from .xref import CrossReferenceGraph, add_references

__all__ = [
    "CrossReferenceGraph",
    "PatternCounter",
    "add_references",
    "analyze_directories",
    "build_census",
    "classify_mvc_role",
    "classify_naming",
    "complexity_score",
    "detect_patterns",
    "identify_issues",
    "most_complex",
    "most_dependencies",
    "size_distribution",
    "stable_max",
    "summarize_architecture",
]

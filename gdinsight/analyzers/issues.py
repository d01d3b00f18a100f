"""Threshold rules that flag project-wide problems."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..config import IssueThresholds
from ..models import Issue, StructuralRecord


def identify_issues(
    records: Sequence[StructuralRecord],
    total_records: int,
    thresholds: Optional[IssueThresholds] = None,
) -> List[Issue]:
    """Evaluate the naming, complexity and coupling rules over successful records.

    ``total_records`` counts every processed input, failures included; it is the
    denominator of the naming ratio.
    """
    limits = thresholds or IssueThresholds()
    successful = [record for record in records if record.ok]
    issues: List[Issue] = []

    unnamed = sum(1 for record in successful if not record.class_name)
    # Integer form of unnamed / total > percent / 100.
    if unnamed * 100 > limits.naming_percent * total_records:
        issues.append(
            Issue(
                type="naming",
                severity="medium",
                message=(
                    f"{unnamed} of {total_records} scripts have no class_name declaration "
                    f"(more than {limits.naming_percent}%)"
                ),
                count=unnamed,
            )
        )

    complex_scripts = sum(1 for record in successful if len(record.methods) > limits.max_methods)
    if complex_scripts:
        issues.append(
            Issue(
                type="complexity",
                severity="high",
                message=f"{complex_scripts} scripts define more than {limits.max_methods} methods",
                count=complex_scripts,
            )
        )

    coupled_scripts = sum(
        1 for record in successful if len(record.cross_file_calls) > limits.max_cross_file_calls
    )
    if coupled_scripts:
        issues.append(
            Issue(
                type="coupling",
                severity="medium",
                message=(
                    f"{coupled_scripts} scripts make more than "
                    f"{limits.max_cross_file_calls} cross-file calls"
                ),
                count=coupled_scripts,
            )
        )

    return issues


__all__ = ["identify_issues"]

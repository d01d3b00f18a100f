"""Render a batch result as markdown, JSON, YAML or plain text."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Dict, List

import yaml
from jinja2 import Environment, FileSystemLoader

from .errors import ReportError
from .models import BatchResult

FORMATS = ("markdown", "json", "yaml", "text")

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def _create_env() -> Environment:
    loader = FileSystemLoader(str(_TEMPLATES_DIR))
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_markdown(result: BatchResult) -> str:
    template = _create_env().get_template("report.md.j2")
    rendered = template.render(
        summary=result.summary,
        insights=result.insights,
        directory=result.directory,
        records=result.records,
    )
    return rendered.strip() + "\n"


def render_json(result: BatchResult) -> str:
    return json.dumps(result.to_dict(), indent=2) + "\n"


def render_yaml(result: BatchResult) -> str:
    return yaml.safe_dump(result.to_dict(), sort_keys=False, allow_unicode=True)


def render_text(result: BatchResult) -> str:
    summary = result.summary
    if result.no_scripts:
        return "status: no scripts found\n"

    lines: List[str] = [
        f"status: {summary.status}",
        f"scripts: {summary.total} total, {summary.successful} successful, {summary.failed} failed",
        f"methods: {summary.total_methods}",
        f"properties: {summary.total_properties}",
        f"signals: {summary.total_signals}",
        f"constants: {summary.total_constants}",
        f"cross-file calls: {summary.total_cross_file_calls}",
        f"most complex: {result.insights.most_complex_script or '-'}",
        f"most dependencies: {result.insights.most_dependencies_script or '-'}",
    ]
    for entry in result.insights.patterns:
        lines.append(f"pattern {entry.name}: {entry.count} ({entry.percentage:.1f}%)")
    for issue in result.insights.issues:
        lines.append(f"issue {issue.type} [{issue.severity}]: {issue.message}")
    if result.directory is not None:
        size = result.directory.size
        lines.append(f"max depth: {result.directory.max_depth}")
        lines.append(
            f"sizes: total={size.total} average={size.average} median={size.median} "
            f"min={size.minimum} max={size.maximum}"
        )
        for name, count in result.directory.directories.items():
            lines.append(f"directory {name or '.'}: {count}")
        for label, count in result.directory.naming.items():
            lines.append(f"naming {label}: {count}")
    for record in result.records:
        if record.error:
            lines.append(f"FAIL {record.path}: {record.error}")
        else:
            lines.append(f"OK {record.path}")
    return "\n".join(lines) + "\n"


_RENDERERS: Dict[str, Callable[[BatchResult], str]] = {
    "markdown": render_markdown,
    "json": render_json,
    "yaml": render_yaml,
    "text": render_text,
}


def render(result: BatchResult, fmt: str = "markdown") -> str:
    """Render ``result`` in one of :data:`FORMATS`."""
    renderer = _RENDERERS.get(fmt.lower())
    if renderer is None:
        raise ReportError(f"Unknown report format '{fmt}'. Choose one of: {', '.join(FORMATS)}")
    return renderer(result)


__all__ = ["FORMATS", "render", "render_json", "render_markdown", "render_text", "render_yaml"]

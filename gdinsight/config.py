"""Configuration loading for gdinsight (.gdinsight.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import AnalysisOptions

CONFIG_FILENAME = ".gdinsight.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ScanConfig:
    """Which files the directory scanner picks up."""

    include: str = "*.gd"
    recursive: bool = True
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class IssueThresholds:
    """Limits used by the issue identifier."""

    naming_percent: int = 30
    max_methods: int = 15
    max_cross_file_calls: int = 8


@dataclass
class ReportConfig:
    format: str = "markdown"


@dataclass
class GDInsightConfig:
    """Represents the high-level settings defined in .gdinsight.yml."""

    root: Path
    options: AnalysisOptions = field(default_factory=AnalysisOptions.all_enabled)
    scan: ScanConfig = field(default_factory=ScanConfig)
    directory_analysis: bool = False
    extractor_timeout: Optional[float] = None
    thresholds: IssueThresholds = field(default_factory=IssueThresholds)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(config_path: Path) -> GDInsightConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GDInsightConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    options_data = data.get("options")
    if isinstance(options_data, dict):
        options = AnalysisOptions.from_mapping(
            {key: _as_bool(value) for key, value in options_data.items()}
        )
    else:
        options = AnalysisOptions.all_enabled()

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        scan.include = _as_str(scan_data.get("include")) or scan.include
        recursive = _as_bool(scan_data.get("recursive"))
        if recursive is not None:
            scan.recursive = recursive
        scan.exclude_paths = _as_str_list(scan_data.get("exclude_paths"))

    thresholds = IssueThresholds()
    threshold_data = _as_dict(data.get("thresholds"))
    if threshold_data:
        for name in ("naming_percent", "max_methods", "max_cross_file_calls"):
            value = _as_int(threshold_data.get(name))
            if value is not None:
                setattr(thresholds, name, value)

    report = ReportConfig()
    report_data = _as_dict(data.get("report"))
    if report_data:
        report.format = _as_str(report_data.get("format")) or report.format

    return GDInsightConfig(
        root=root,
        options=options,
        scan=scan,
        directory_analysis=_as_bool(data.get("directory_analysis")) or False,
        extractor_timeout=_as_float(data.get("extractor_timeout")),
        thresholds=thresholds,
        report=report,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GDInsightConfig",
    "IssueThresholds",
    "ReportConfig",
    "ScanConfig",
    "load_config",
]

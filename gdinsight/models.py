"""Core data models shared across gdinsight components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class MethodInfo:
    """A ``func`` declaration found in a script."""

    name: str
    signature: str = ""
    line: int = 0
    visibility: str = "public"
    is_override: bool = False
    is_static: bool = False
    return_type: str = ""


@dataclass
class PropertyInfo:
    """A script-level ``var`` declaration."""

    name: str
    type_hint: str = ""
    default: str = ""
    exported: bool = False
    onready: bool = False
    scope: str = "global"
    line: int = 0


@dataclass
class ConstantInfo:
    """A ``const`` or named ``enum`` declaration."""

    name: str
    kind: str = "const"
    value: str = ""
    line: int = 0


@dataclass
class SignalInfo:
    name: str
    parameters: List[str] = field(default_factory=list)
    line: int = 0


@dataclass
class GroupInfo:
    name: str
    line: int = 0


@dataclass
class CallInfo:
    """A reference to another script (``preload``/``load`` or ``.new()``)."""

    target: str
    call_type: str
    line: int = 0


@dataclass
class NodeReference:
    path: str
    line: int = 0


@dataclass
class ConnectionInfo:
    signal: str
    target: str = ""
    line: int = 0


@dataclass
class ResourceReference:
    path: str
    kind: str = ""
    line: int = 0


@dataclass
class ObjectMethodCall:
    receiver: str
    method: str
    line: int = 0


@dataclass
class StructuralRecord:
    """Facts extracted from a single script.

    A non-empty ``error`` means extraction failed; every other field should then
    be treated as absent.
    """

    path: str
    class_name: str = ""
    extends: str = ""
    methods: List[MethodInfo] = field(default_factory=list)
    properties: List[PropertyInfo] = field(default_factory=list)
    constants: List[ConstantInfo] = field(default_factory=list)
    signals: List[SignalInfo] = field(default_factory=list)
    groups: List[GroupInfo] = field(default_factory=list)
    cross_file_calls: List[CallInfo] = field(default_factory=list)
    node_references: List[NodeReference] = field(default_factory=list)
    connections: List[ConnectionInfo] = field(default_factory=list)
    external_resources: List[ResourceReference] = field(default_factory=list)
    object_method_calls: List[ObjectMethodCall] = field(default_factory=list)
    builtin_overrides: List[str] = field(default_factory=list)
    usage_example: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error

    @classmethod
    def failed(cls, path: str, error: str) -> "StructuralRecord":
        return cls(path=path, error=error or "unknown error")


@dataclass
class AnalysisOptions:
    """Flags selecting which facts the extractor populates.

    Every flag defaults to disabled so a partially specified mapping is safe.
    """

    class_name_enabled: bool = False
    inheritance_enabled: bool = False
    methods_enabled: bool = False
    properties_enabled: bool = False
    constants_enabled: bool = False
    signals_enabled: bool = False
    groups_enabled: bool = False
    cross_file_calls_enabled: bool = False
    node_tree_enabled: bool = False
    connections_enabled: bool = False
    external_resources_enabled: bool = False
    object_method_calls_enabled: bool = False
    builtin_overrides_enabled: bool = False
    usage_example_enabled: bool = False

    @classmethod
    def all_enabled(cls) -> "AnalysisOptions":
        return cls(**{item.name: True for item in fields(cls)})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AnalysisOptions":
        """Build options from ``{"methods": True, ...}`` style mappings.

        Keys may be given with or without the ``_enabled`` suffix. Unknown keys
        are ignored and only literal ``True`` values enable a flag.
        """
        known = {item.name for item in fields(cls)}
        values: Dict[str, bool] = {}
        for key, value in data.items():
            name = str(key).strip().lower().replace("-", "_")
            if not name.endswith("_enabled"):
                name = f"{name}_enabled"
            if name in known:
                values[name] = value is True
        return cls(**values)


@dataclass
class CrossReferenceEntry:
    references_to: List[str] = field(default_factory=list)
    referenced_by: List[str] = field(default_factory=list)


@dataclass
class PatternCensusEntry:
    name: str
    count: int
    percentage: float


@dataclass
class ArchitectureSummary:
    """Batch-wide tally of MVC roles and coarse pattern counts."""

    models: int = 0
    views: int = 0
    controllers: int = 0
    singletons: int = 0
    factories: int = 0
    observers: int = 0
    components: int = 0


@dataclass
class Issue:
    type: str
    severity: str
    message: str
    count: int = 0


@dataclass
class SizeStats:
    total: int = 0
    average: int = 0
    median: int = 0
    minimum: int = 0
    maximum: int = 0


@dataclass
class DirectoryStats:
    directories: Dict[str, int] = field(default_factory=dict)
    max_depth: int = 0
    size: SizeStats = field(default_factory=SizeStats)
    naming: Dict[str, int] = field(default_factory=dict)


@dataclass
class BatchSummary:
    status: str = "ok"
    total: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    total_methods: int = 0
    total_properties: int = 0
    total_signals: int = 0
    total_constants: int = 0
    total_cross_file_calls: int = 0
    partial: bool = False


@dataclass
class BatchInsights:
    most_complex_script: str = ""
    most_dependencies_script: str = ""
    patterns: List[PatternCensusEntry] = field(default_factory=list)
    architecture: ArchitectureSummary = field(default_factory=ArchitectureSummary)
    issues: List[Issue] = field(default_factory=list)


@dataclass
class BatchResult:
    """Consolidated output of one batch run."""

    summary: BatchSummary
    insights: BatchInsights = field(default_factory=BatchInsights)
    cross_references: Dict[str, CrossReferenceEntry] = field(default_factory=dict)
    directory: Optional[DirectoryStats] = None
    records: List[StructuralRecord] = field(default_factory=list)

    @property
    def no_scripts(self) -> bool:
        return self.summary.status == "no_scripts"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "AnalysisOptions",
    "ArchitectureSummary",
    "BatchInsights",
    "BatchResult",
    "BatchSummary",
    "CallInfo",
    "ConnectionInfo",
    "ConstantInfo",
    "CrossReferenceEntry",
    "DirectoryStats",
    "GroupInfo",
    "Issue",
    "MethodInfo",
    "NodeReference",
    "ObjectMethodCall",
    "PatternCensusEntry",
    "PropertyInfo",
    "ResourceReference",
    "SignalInfo",
    "SizeStats",
    "StructuralRecord",
]

"""Line-oriented fact extractor for GDScript files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Protocol

from .logging import get_logger
from .models import (
    AnalysisOptions,
    CallInfo,
    ConnectionInfo,
    ConstantInfo,
    GroupInfo,
    MethodInfo,
    NodeReference,
    ObjectMethodCall,
    PropertyInfo,
    ResourceReference,
    SignalInfo,
    StructuralRecord,
)

PRELOAD_CALL = "preload/load"
INSTANCE_CREATION = "instance_creation"

_CLASS_NAME = re.compile(r"^class_name\s+(\w+)")
_EXTENDS = re.compile(r"(?:^|\s)extends\s+([\w\.]+|\"[^\"]+\"|'[^']+')")
_FUNC = re.compile(
    r"^(?P<static>static\s+)?func\s+(?P<name>\w+)\s*\((?P<args>[^)]*)\)\s*(?:->\s*(?P<ret>[\w\.\[\]]+))?"
)
_VAR = re.compile(
    r"^(?P<prefix>(?:(?:@?export\w*(?:\([^)]*\))?|@?onready|static)\s+)*)var\s+(?P<name>\w+)"
    r"\s*(?::\s*(?P<type>[\w\.\[\]]+))?\s*(?::?=\s*(?P<default>.+))?"
)
_CONST = re.compile(r"^const\s+(\w+)\s*(?::\s*[\w\.\[\]]+)?\s*:?=\s*(.+)")
_ENUM = re.compile(r"^enum\s+(\w+)?\s*\{(.*)")
_SIGNAL = re.compile(r"^signal\s+(\w+)\s*(?:\(([^)]*)\))?")
_GROUP = re.compile(r"add_to_group\(\s*[\"']([^\"']+)[\"']")
_LOAD_NEW = re.compile(r"\b(?:preload|load)\(\s*[\"']([^\"']+)[\"']\s*\)\.new\(")
_LOAD = re.compile(r"\b(?:preload|load)\(\s*[\"']([^\"']+)[\"']\s*\)(?!\.new\()")
_CLASS_NEW = re.compile(r"\b([A-Z]\w*)\.new\(")
_NODE_SHORTHAND = re.compile(r"\$(\"[^\"]+\"|[\w/]+)")
_GET_NODE = re.compile(r"\bget_node(?:_or_null)?\(\s*[\"']([^\"']+)[\"']")
_CONNECT_V3 = re.compile(r"\bconnect\(\s*[\"'](\w+)[\"']\s*(?:,\s*(\w+)(?:\s*,\s*[\"'](\w+)[\"'])?)?")
_CONNECT_V4 = re.compile(r"\b(\w+)\.connect\(\s*([\w\.]+)")
_RESOURCE = re.compile(r"[\"'](res://[^\"']+)[\"']")
_METHOD_CALL = re.compile(r"\b([a-z_]\w*)\.([a-z_]\w*)\(")

# Engine virtuals a script can override.
BUILTIN_VIRTUALS = frozenset(
    {
        "_init",
        "_ready",
        "_process",
        "_physics_process",
        "_input",
        "_unhandled_input",
        "_unhandled_key_input",
        "_shortcut_input",
        "_gui_input",
        "_enter_tree",
        "_exit_tree",
        "_notification",
        "_draw",
        "_integrate_forces",
        "_to_string",
        "_get",
        "_set",
        "_get_property_list",
        "_get_configuration_warnings",
        "_validate_property",
    }
)

_IGNORED_RECEIVERS = frozenset({"self", "super"})

logger = get_logger("extractor")


class FactExtractor(Protocol):
    """Contract for turning one script into a structural record.

    Implementations must never raise: failures go into ``record.error``.
    """

    def extract(self, path: str, options: AnalysisOptions) -> StructuralRecord:
        ...


class GDScriptExtractor:
    """Extracts structural facts from GDScript source with regular expressions."""

    def __init__(self, project_root: Optional[Path] = None) -> None:
        self.project_root = Path(project_root).resolve() if project_root else None

    def extract(self, path: str, options: AnalysisOptions) -> StructuralRecord:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Failed to read %s: %s", path, exc)
            return StructuralRecord.failed(path, f"{exc.__class__.__name__}: {exc}")
        return self.extract_text(path, text, options)

    def extract_text(self, path: str, text: str, options: AnalysisOptions) -> StructuralRecord:
        record = StructuralRecord(path=path)

        for number, raw in enumerate(text.splitlines(), start=1):
            stripped = raw.strip()
            if not stripped or stripped.startswith("#"):
                continue
            code = _strip_comment(raw)
            top_level = not raw[:1].isspace()

            if top_level:
                self._scan_declarations(record, code.strip(), number, options)
            self._scan_expressions(record, code, number, options)

        if options.builtin_overrides_enabled:
            record.builtin_overrides = [m.name for m in record.methods if m.is_override]
            if not options.methods_enabled:
                record.methods = []
        if options.usage_example_enabled:
            record.usage_example = self._usage_example(record)
        return record

    def _scan_declarations(
        self, record: StructuralRecord, line: str, number: int, options: AnalysisOptions
    ) -> None:
        # Godot 4 allows "class_name Foo extends Bar" on one line.
        declared = False
        if options.class_name_enabled:
            match = _CLASS_NAME.match(line)
            if match:
                record.class_name = match.group(1)
                declared = True
        if options.inheritance_enabled and line.startswith(("extends", "class_name")):
            match = _EXTENDS.search(line)
            if match:
                record.extends = match.group(1).strip("\"'")
                declared = True
        if declared:
            return

        # Overrides are derived from methods, so collect them for either flag.
        if options.methods_enabled or options.builtin_overrides_enabled:
            match = _FUNC.match(line)
            if match:
                name = match.group("name")
                args = " ".join(match.group("args").split())
                record.methods.append(
                    MethodInfo(
                        name=name,
                        signature=f"{name}({args})",
                        line=number,
                        visibility="private" if name.startswith("_") else "public",
                        is_override=name in BUILTIN_VIRTUALS,
                        is_static=bool(match.group("static")),
                        return_type=match.group("ret") or "",
                    )
                )
                return

        if options.properties_enabled:
            match = _VAR.match(line)
            if match:
                prefix = match.group("prefix") or ""
                record.properties.append(
                    PropertyInfo(
                        name=match.group("name"),
                        type_hint=match.group("type") or "",
                        default=(match.group("default") or "").strip(),
                        exported="export" in prefix,
                        onready="onready" in prefix,
                        scope="global",
                        line=number,
                    )
                )
                return

        if options.constants_enabled:
            match = _CONST.match(line)
            if match:
                record.constants.append(
                    ConstantInfo(name=match.group(1), kind="const", value=match.group(2).strip(), line=number)
                )
                return
            match = _ENUM.match(line)
            if match and match.group(1):
                record.constants.append(
                    ConstantInfo(
                        name=match.group(1),
                        kind="enum",
                        value=match.group(2).rstrip("}").strip(),
                        line=number,
                    )
                )
                return

        if options.signals_enabled:
            match = _SIGNAL.match(line)
            if match:
                params = [p.strip() for p in (match.group(2) or "").split(",") if p.strip()]
                record.signals.append(SignalInfo(name=match.group(1), parameters=params, line=number))

    def _scan_expressions(
        self, record: StructuralRecord, code: str, number: int, options: AnalysisOptions
    ) -> None:
        if options.groups_enabled:
            for match in _GROUP.finditer(code):
                record.groups.append(GroupInfo(name=match.group(1), line=number))

        if options.cross_file_calls_enabled:
            for match in _LOAD_NEW.finditer(code):
                record.cross_file_calls.append(
                    CallInfo(target=self._resolve(match.group(1)), call_type=INSTANCE_CREATION, line=number)
                )
            for match in _LOAD.finditer(code):
                record.cross_file_calls.append(
                    CallInfo(target=self._resolve(match.group(1)), call_type=PRELOAD_CALL, line=number)
                )
            for match in _CLASS_NEW.finditer(code):
                record.cross_file_calls.append(
                    CallInfo(target=match.group(1), call_type=INSTANCE_CREATION, line=number)
                )

        if options.node_tree_enabled:
            for match in _NODE_SHORTHAND.finditer(code):
                record.node_references.append(NodeReference(path=match.group(1).strip("\""), line=number))
            for match in _GET_NODE.finditer(code):
                record.node_references.append(NodeReference(path=match.group(1), line=number))

        if options.connections_enabled:
            for match in _CONNECT_V3.finditer(code):
                record.connections.append(
                    ConnectionInfo(signal=match.group(1), target=match.group(3) or match.group(2) or "", line=number)
                )
            for match in _CONNECT_V4.finditer(code):
                record.connections.append(
                    ConnectionInfo(signal=match.group(1), target=match.group(2), line=number)
                )

        if options.external_resources_enabled:
            for match in _RESOURCE.finditer(code):
                resource = match.group(1)
                record.external_resources.append(
                    ResourceReference(path=resource, kind=Path(resource).suffix.lstrip("."), line=number)
                )

        if options.object_method_calls_enabled:
            for match in _METHOD_CALL.finditer(code):
                receiver, method = match.groups()
                if receiver in _IGNORED_RECEIVERS or method == "new":
                    continue
                record.object_method_calls.append(ObjectMethodCall(receiver=receiver, method=method, line=number))

    def _resolve(self, target: str) -> str:
        if self.project_root is not None and target.startswith("res://"):
            return str(self.project_root / target[len("res://"):])
        return target

    @staticmethod
    def _usage_example(record: StructuralRecord) -> str:
        public = [m for m in record.methods if m.visibility == "public" and not m.is_static]
        if record.class_name:
            variable = _snake(record.class_name)
            lines = [f"var {variable} = {record.class_name}.new()"]
        else:
            variable = _snake(Path(record.path).stem) or "script"
            lines = [f'var {variable} = preload("{Path(record.path).name}").new()']
        if public:
            lines.append(f"{variable}.{public[0].name}()")
        return "\n".join(lines)


def _strip_comment(line: str) -> str:
    quote: Optional[str] = None
    for index, char in enumerate(line):
        if char in {'"', "'"}:
            if quote == char:
                quote = None
            elif quote is None:
                quote = char
        elif char == "#" and quote is None:
            return line[:index]
    return line


def _snake(name: str) -> str:
    chars: List[str] = []
    for index, char in enumerate(name):
        if char.isupper() and index and not name[index - 1].isupper():
            chars.append("_")
        chars.append(char.lower())
    return "".join(chars).replace("-", "_").replace(" ", "_")


__all__ = [
    "BUILTIN_VIRTUALS",
    "FactExtractor",
    "GDScriptExtractor",
    "INSTANCE_CREATION",
    "PRELOAD_CALL",
]

"""Tests for the GDScript fact extractor."""

from __future__ import annotations

from pathlib import Path

from gdinsight.extractor import INSTANCE_CREATION, PRELOAD_CALL, GDScriptExtractor
from gdinsight.models import AnalysisOptions
from tests._fixtures.project_builder import ProjectBuilder

PLAYER = """
    class_name Player extends CharacterBody2D
    ## Controllable hero.

    signal died
    signal health_changed(old_value, new_value)

    enum State { IDLE, RUN, JUMP }
    const MAX_SPEED := 300.0

    @export var speed: float = 200.0
    @export_range(0, 10) var lives := 3
    @onready var sprite = $Sprite2D
    var state = State.IDLE
    static var instance

    func _ready() -> void:
        add_to_group("players")
        var bullet = preload("res://weapons/bullet.gd").new()
        var hud = load("res://ui/hud.tscn")  # heads-up display
        var enemy = Enemy.new()
        health_changed.connect(_on_health_changed)
        get_node("Camera2D").make_current()

    func take_damage(amount: int) -> int:
        return amount

    static func get_instance():
        return instance

    func _on_health_changed(old_value, new_value):
        pass
"""


def test_extracts_declarations(project_builder: ProjectBuilder, all_options: AnalysisOptions) -> None:
    project_builder.write({"player.gd": PLAYER})
    path = str(project_builder.path("player.gd"))

    record = GDScriptExtractor().extract(path, all_options)

    assert record.ok
    assert record.class_name == "Player"
    assert record.extends == "CharacterBody2D"
    assert [signal.name for signal in record.signals] == ["died", "health_changed"]
    assert record.signals[1].parameters == ["old_value", "new_value"]
    assert [(c.name, c.kind) for c in record.constants] == [("State", "enum"), ("MAX_SPEED", "const")]

    props = {prop.name: prop for prop in record.properties}
    assert list(props) == ["speed", "lives", "sprite", "state", "instance"]
    assert props["speed"].exported and props["speed"].type_hint == "float"
    assert props["lives"].exported and props["lives"].default == "3"
    assert props["sprite"].onready and not props["sprite"].exported
    assert props["instance"].scope == "global"

    methods = {method.name: method for method in record.methods}
    assert list(methods) == ["_ready", "take_damage", "get_instance", "_on_health_changed"]
    assert methods["_ready"].is_override and methods["_ready"].visibility == "private"
    assert methods["take_damage"].return_type == "int"
    assert methods["take_damage"].signature == "take_damage(amount: int)"
    assert methods["get_instance"].is_static
    assert record.builtin_overrides == ["_ready"]


def test_extracts_references(project_builder: ProjectBuilder, all_options: AnalysisOptions) -> None:
    project_builder.write({"player.gd": PLAYER})
    path = str(project_builder.path("player.gd"))

    record = GDScriptExtractor().extract(path, all_options)

    calls = [(call.target, call.call_type) for call in record.cross_file_calls]
    assert calls == [
        ("res://weapons/bullet.gd", INSTANCE_CREATION),
        ("res://ui/hud.tscn", PRELOAD_CALL),
        ("Enemy", INSTANCE_CREATION),
    ]
    assert [group.name for group in record.groups] == ["players"]
    assert [ref.path for ref in record.node_references] == ["Sprite2D", "Camera2D"]
    assert [(c.signal, c.target) for c in record.connections] == [("health_changed", "_on_health_changed")]
    assert [res.kind for res in record.external_resources] == ["gd", "tscn"]
    assert [(call.receiver, call.method) for call in record.object_method_calls] == [
        ("health_changed", "connect")
    ]
    assert "var player = Player.new()" in record.usage_example
    assert "player.take_damage()" in record.usage_example


def test_godot3_syntax() -> None:
    source = "\n".join(
        [
            "extends Node",
            "export(int) var health = 10",
            "onready var timer = get_node(\"Timer\")",
            "func _ready():",
            "    $Button.connect(\"pressed\", self, \"_on_pressed\")",
            "    connect(\"died\", hud)",
        ]
    )

    record = GDScriptExtractor().extract_text("old.gd", source, AnalysisOptions.all_enabled())

    assert record.extends == "Node"
    assert record.properties[0].exported
    assert record.properties[1].onready
    assert [(c.signal, c.target) for c in record.connections] == [("pressed", "_on_pressed"), ("died", "hud")]


def test_disabled_options_leave_fields_empty(project_builder: ProjectBuilder) -> None:
    project_builder.write({"player.gd": PLAYER})
    path = str(project_builder.path("player.gd"))

    record = GDScriptExtractor().extract(path, AnalysisOptions(signals_enabled=True))

    assert record.class_name == ""
    assert record.methods == []
    assert record.properties == []
    assert record.cross_file_calls == []
    assert len(record.signals) == 2


def test_builtin_overrides_without_methods(project_builder: ProjectBuilder) -> None:
    project_builder.write({"player.gd": PLAYER})
    path = str(project_builder.path("player.gd"))

    record = GDScriptExtractor().extract(path, AnalysisOptions(builtin_overrides_enabled=True))

    assert record.builtin_overrides == ["_ready"]
    assert record.methods == []


def test_res_paths_resolve_against_project_root(project_builder: ProjectBuilder) -> None:
    project_builder.write({"main.gd": 'var level = preload("res://levels/level.gd")\n'})
    root = project_builder.path()

    record = GDScriptExtractor(project_root=root).extract(
        str(root / "main.gd"), AnalysisOptions(cross_file_calls_enabled=True)
    )

    assert record.cross_file_calls[0].target == str(root.resolve() / "levels" / "level.gd")


def test_unreadable_file_becomes_error_record(tmp_path: Path, all_options: AnalysisOptions) -> None:
    binary = tmp_path / "binary.gd"
    binary.write_bytes(b"\xff\xfe\x00broken")

    missing = GDScriptExtractor().extract(str(tmp_path / "missing.gd"), all_options)
    undecodable = GDScriptExtractor().extract(str(binary), all_options)

    assert not missing.ok and "FileNotFoundError" in missing.error
    assert not undecodable.ok and "UnicodeDecodeError" in undecodable.error
    assert undecodable.methods == []

"""Tests for the pattern detector."""

from __future__ import annotations

import pytest

from gdinsight.analyzers.patterns import (
    PatternCounter,
    build_census,
    classify_mvc_role,
    detect_patterns,
    is_singleton,
    is_state_machine,
    summarize_architecture,
)
from gdinsight.models import ConstantInfo, MethodInfo, PropertyInfo, StructuralRecord
from tests._fixtures.records import failed_record, make_record


def test_singleton_matches_global_instance_property_or_get_instance_method() -> None:
    by_property = StructuralRecord(path="a.gd", properties=[PropertyInfo(name="Instance", scope="global")])
    local_property = StructuralRecord(path="b.gd", properties=[PropertyInfo(name="instance", scope="member")])
    by_method = StructuralRecord(path="c.gd", methods=[MethodInfo(name="Get_Instance")])

    assert is_singleton(by_property)
    assert not is_singleton(local_property)
    assert is_singleton(by_method)


def test_state_machine_requires_state_enum_and_state_property() -> None:
    enum_only = StructuralRecord(path="a.gd", constants=[ConstantInfo(name="State", kind="enum")])
    const_not_enum = StructuralRecord(
        path="b.gd",
        constants=[ConstantInfo(name="STATE_IDLE", kind="const")],
        properties=[PropertyInfo(name="current_state")],
    )
    both = StructuralRecord(
        path="c.gd",
        constants=[ConstantInfo(name="PlayerState", kind="enum")],
        properties=[PropertyInfo(name="state")],
    )

    assert not is_state_machine(enum_only)
    assert not is_state_machine(const_not_enum)
    assert is_state_machine(both)


def test_detect_patterns_reports_every_match() -> None:
    record = make_record(
        "hub.gd",
        signals=3,
        exported=3,
        creations=["a.gd", "b.gd", "c.gd"],
    )

    assert detect_patterns(record) == ["observer", "factory", "component"]


def test_thresholds_are_strictly_greater_than_two() -> None:
    record = make_record("edge.gd", signals=2, exported=2, creations=["a.gd", "b.gd"])

    assert detect_patterns(record) == []


def test_census_percentage_uses_total_record_count() -> None:
    records = [make_record(f"s{i}.gd", signals=3 if i < 3 else 0) for i in range(10)]
    counter = PatternCounter()
    for record in records:
        counter = counter.add(record)

    census = build_census(counter, len(records))

    assert len(census) == 1
    assert census[0].name == "observer"
    assert census[0].count == 3
    assert census[0].percentage == pytest.approx(30.0)


def test_census_denominator_includes_failed_records() -> None:
    records = [make_record("a.gd", signals=3), failed_record("b.gd"), failed_record("c.gd"), make_record("d.gd")]
    counter = PatternCounter()
    for record in records:
        counter = counter.add(record)

    census = build_census(counter, len(records))

    assert census[0].count == 1
    assert census[0].percentage == pytest.approx(25.0)


@pytest.mark.parametrize(
    ("path", "role"),
    [
        ("res://player_data.gd", "model"),
        ("res://ui/data_view.gd", "model"),
        ("res://inventory_view.gd", "view"),
        ("res://gui_manager.gd", "view"),
        ("res://game_manager.gd", "controller"),
        ("res://PlayerController.gd", "controller"),
        ("res://player.gd", None),
    ],
)
def test_mvc_role_first_matching_rule_wins(path: str, role: str | None) -> None:
    assert classify_mvc_role(path) == role


def test_summarize_architecture_counts_successful_records_only() -> None:
    records = [
        make_record("player_data.gd", signals=3),
        make_record("hud_view.gd", exported=3),
        make_record("enemy_manager.gd", creations=["a.gd", "b.gd", "c.gd"]),
        failed_record("save_data.gd"),
    ]
    records[0].methods.append(MethodInfo(name="get_instance"))

    summary = summarize_architecture(records)

    assert (summary.models, summary.views, summary.controllers) == (1, 1, 1)
    assert summary.singletons == 1
    assert summary.observers == 1
    assert summary.components == 1
    assert summary.factories == 1

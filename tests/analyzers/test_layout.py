"""Tests for directory and naming statistics."""

from __future__ import annotations

from pathlib import Path

import pytest

from gdinsight.analyzers.layout import (
    analyze_directories,
    classify_naming,
    directory_of,
    path_depth,
    size_distribution,
)


@pytest.mark.parametrize(
    ("path", "label"),
    [
        ("scripts/player_controller.gd", "snake_case"),
        ("scripts/playerController.gd", "camelCase"),
        ("scripts/PlayerController.gd", "PascalCase"),
        ("scripts/player.gd", "mixed"),
        ("scripts/Player.gd", "mixed"),
        ("scripts/Player_Controller.gd", "mixed"),
        ("HUD.gd", "mixed"),
    ],
)
def test_classify_naming_chain(path: str, label: str) -> None:
    assert classify_naming(path) == label


def test_directory_and_depth() -> None:
    assert directory_of("main.gd") == ""
    assert directory_of("a/b/c.gd") == "a/b"
    assert directory_of("a\\b\\c.gd") == "a/b"
    assert path_depth("main.gd") == 0
    assert path_depth("a/b/c.gd") == 1


def test_size_distribution_median_uses_upper_middle_element() -> None:
    stats = size_distribution([40, 10, 30, 20])

    assert stats.total == 100
    assert stats.average == 25
    assert stats.median == 30
    assert stats.minimum == 10
    assert stats.maximum == 40


def test_size_distribution_average_is_integer_division() -> None:
    stats = size_distribution([1, 2, 2])

    assert stats.average == 1
    assert stats.median == 2


def test_size_distribution_empty() -> None:
    stats = size_distribution([])

    assert (stats.total, stats.average, stats.median, stats.minimum, stats.maximum) == (0, 0, 0, 0, 0)


def test_analyze_directories_groups_and_measures(tmp_path: Path) -> None:
    files = {
        "main.gd": "x" * 10,
        "scripts/player_controller.gd": "x" * 30,
        "scripts/enemies/BossEnemy.gd": "x" * 20,
    }
    paths = []
    for relative, content in files.items():
        target = tmp_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        paths.append(target.as_posix())
    paths.append((tmp_path / "missing.gd").as_posix())

    stats = analyze_directories(paths)

    root = tmp_path.as_posix()
    assert stats.directories == {root: 2, f"{root}/scripts": 1, f"{root}/scripts/enemies": 1}
    assert stats.max_depth == root.count("/") + 2
    assert stats.size.total == 60
    assert stats.size.median == 20
    assert stats.naming == {"snake_case": 1, "camelCase": 0, "PascalCase": 1, "mixed": 2}

from __future__ import annotations

from pathlib import Path

import pytest


def test_discover_fixtures_keeps_json_files_sorted(fixtures_dir: Path, write_fixture) -> None:
    from db.fixtures import discover_fixtures

    write_fixture("transactions.json", [])
    write_fixture("courses.json", [])
    (fixtures_dir / "README.md").write_text("not a fixture", encoding="utf-8")
    (fixtures_dir / "nested.json").mkdir()

    fixtures = discover_fixtures(fixtures_dir)
    assert [f.name for f in fixtures] == ["courses", "transactions"]
    assert fixtures[0].path == fixtures_dir / "courses.json"


def test_discover_fixtures_empty_directory(fixtures_dir: Path) -> None:
    from db.fixtures import discover_fixtures

    assert discover_fixtures(fixtures_dir) == []


def test_discover_fixtures_missing_directory_raises(tmp_path: Path) -> None:
    from db.fixtures import discover_fixtures

    with pytest.raises(FileNotFoundError):
        discover_fixtures(tmp_path / "nope")


def test_load_returns_records(write_fixture) -> None:
    from db.fixtures import Fixture

    path = write_fixture("courses.json", [{"courseId": "c1"}, {"courseId": "c2"}])
    assert Fixture(name="courses", path=path).load() == [{"courseId": "c1"}, {"courseId": "c2"}]


def test_load_rejects_non_array(write_fixture) -> None:
    from db.errors import FixtureFormatError
    from db.fixtures import Fixture

    path = write_fixture("courses.json", {"courseId": "c1"})
    with pytest.raises(FixtureFormatError, match="expected a JSON array"):
        Fixture(name="courses", path=path).load()


def test_load_malformed_json_raises(fixtures_dir: Path) -> None:
    import json

    from db.fixtures import Fixture

    path = fixtures_dir / "courses.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        Fixture(name="courses", path=path).load()


def test_bundled_fixtures_map_to_declared_tables() -> None:
    from db.fixtures import discover_fixtures
    from db.models import table_for_fixture
    from db.settings import DEFAULT_FIXTURES_DIR

    names = {table_for_fixture(f.name).name for f in discover_fixtures(DEFAULT_FIXTURES_DIR)}
    assert names == {"Transaction", "Course", "UserCourseProgress"}

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from db.seed import DelayPolicy, Seeder
from db.settings import SeedSettings
from tests.dynamodb_stub import FakeDynamoDBClient


@pytest.fixture()
def fixtures_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture()
def settings(fixtures_dir: Path) -> SeedSettings:
    return SeedSettings(_env_file=None, fixtures_dir=fixtures_dir)


@pytest.fixture()
def fake_client() -> FakeDynamoDBClient:
    return FakeDynamoDBClient()


@pytest.fixture()
def seeder(settings: SeedSettings, fake_client: FakeDynamoDBClient) -> Seeder:
    # Sleeps are recorded alongside client calls so ordering can be asserted.
    return Seeder(
        settings,
        fake_client,
        delays=DelayPolicy.from_settings(settings),
        sleep=lambda s: fake_client.calls.append(("sleep", s)),
        now_ms=lambda: 1_700_000_000_000,
    )


@pytest.fixture()
def write_fixture(fixtures_dir: Path) -> Callable[[str, Any], Path]:
    def _write(name: str, records: Any) -> Path:  # noqa: ANN401
        path = fixtures_dir / name
        path.write_text(json.dumps(records), encoding="utf-8")
        return path

    return _write

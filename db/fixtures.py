from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from db.errors import FixtureFormatError


FIXTURE_SUFFIX = ".json"


@dataclass(frozen=True)
class Fixture:
    # Base name without extension, e.g. "courses".
    name: str
    path: Path

    def load(self) -> list[Any]:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise FixtureFormatError(f"{self.path}: expected a JSON array of records, got {type(data).__name__}")
        return data


def discover_fixtures(fixtures_dir: Path) -> list[Fixture]:
    """List `*.json` files in `fixtures_dir`, sorted by file name. A missing directory raises."""
    paths = sorted(p for p in fixtures_dir.iterdir() if p.is_file() and p.suffix == FIXTURE_SUFFIX)
    return [Fixture(name=p.stem, path=p) for p in paths]

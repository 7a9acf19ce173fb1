from __future__ import annotations


class SeedError(RuntimeError):
    pass


class UnknownFixtureTableError(SeedError):
    def __init__(self, fixture_name: str):
        super().__init__(f"no table is declared for fixture {fixture_name!r}")
        self.fixture_name = fixture_name


class FixtureFormatError(SeedError):
    pass

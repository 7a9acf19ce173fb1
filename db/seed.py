from __future__ import annotations

import argparse
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal, DecimalException
from pathlib import Path
from typing import Any

from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from db.client import create_client
from db.errors import UnknownFixtureTableError
from db.fixtures import Fixture, discover_fixtures
from db.logging import configure_logging, logger
from db.models import TABLES, TableDescriptor, table_for_fixture
from db.settings import SeedSettings


def _now_ms() -> int:
    return int(time.time() * 1000)


def _error_code(exc: Exception) -> str | None:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code")
    return None


def _to_dynamo_value(value: Any) -> Any:  # noqa: ANN401 - arbitrary JSON
    # DynamoDB numbers must be Decimal; str() keeps the JSON literal's precision.
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamo_value(v) for v in value]
    return value


_SERIALIZER = TypeSerializer()


def to_item(record: dict[str, Any]) -> dict[str, Any]:
    return {k: _SERIALIZER.serialize(_to_dynamo_value(v)) for k, v in record.items()}


@dataclass(frozen=True)
class DelayPolicy:
    """Static pauses between schema operations. Not a retry policy: no jitter, no backoff."""

    after_delete: float = 0.8
    after_delete_phase: float = 1.0
    before_create: float = 2.0

    @classmethod
    def from_settings(cls, settings: SeedSettings) -> DelayPolicy:
        return cls(
            after_delete=settings.delete_delay_s,
            after_delete_phase=settings.post_delete_delay_s,
            before_create=settings.create_delay_s,
        )


@dataclass
class SeedResult:
    fixture: str
    table: str
    inserted: int = 0
    failed: int = 0


class Seeder:
    """
    Reset a DynamoDB instance and load fixtures into it.

    Every step is best-effort: delete, create and insert failures are logged and the run goes on.
    Only listing tables and reading fixtures can raise out of `run()`.
    """

    def __init__(
        self,
        settings: SeedSettings,
        client: Any,  # noqa: ANN401 - boto3 DynamoDB client
        *,
        tables: Sequence[TableDescriptor] = TABLES,
        delays: DelayPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        now_ms: Callable[[], int] = _now_ms,
    ):
        self._settings = settings
        self._client = client
        self._tables = tuple(tables)
        self._delays = delays or DelayPolicy.from_settings(settings)
        self._sleep = sleep
        self._now_ms = now_ms

    def run(self) -> None:
        self.delete_all_tables()
        self._sleep(self._delays.after_delete_phase)
        created = self.create_tables()

        results = [self.seed_fixture(f) for f in discover_fixtures(self._settings.fixtures_dir)]
        logger.info(
            "seed_completed",
            tables=created,
            fixtures={r.fixture: {"table": r.table, "inserted": r.inserted, "failed": r.failed} for r in results},
        )

    # Step A

    def list_table_names(self) -> list[str]:
        names: list[str] = []
        kwargs: dict[str, Any] = {}
        while True:
            resp = self._client.list_tables(**kwargs)
            names.extend(resp.get("TableNames", []))
            last = resp.get("LastEvaluatedTableName")
            if not last:
                return names
            kwargs["ExclusiveStartTableName"] = last

    def delete_table(self, table_name: str) -> bool:
        try:
            self._client.delete_table(TableName=table_name)
        except ClientError as e:
            if _error_code(e) == "ResourceNotFoundException":
                logger.info("table_not_found", table=table_name)
            else:
                logger.error("table_delete_failed", table=table_name, error_code=_error_code(e), error=str(e))
            return False
        except BotoCoreError as e:
            logger.error("table_delete_failed", table=table_name, error=str(e))
            return False
        logger.info("table_deleted", table=table_name)
        return True

    def delete_all_tables(self) -> list[str]:
        deleted: list[str] = []
        for name in self.list_table_names():
            if self.delete_table(name):
                deleted.append(name)
            self._sleep(self._delays.after_delete)
        return deleted

    # Step B

    def ensure_table(self, table: TableDescriptor) -> None:
        """Create the table if absent, update its throughput if present, then wait until ACTIVE."""
        read, write = self._settings.read_capacity, self._settings.write_capacity
        waiter_config = {"Delay": self._settings.waiter_delay_s, "MaxAttempts": self._settings.waiter_max_attempts}
        try:
            current = self._client.describe_table(TableName=table.name)["Table"]
        except ClientError as e:
            if _error_code(e) != "ResourceNotFoundException":
                raise
            current = None

        if current is not None and current.get("TableStatus") == "DELETING":
            # A delete from the reset phase is still in flight on the service side.
            self._client.get_waiter("table_not_exists").wait(TableName=table.name, WaiterConfig=waiter_config)
            current = None

        if current is None:
            self._client.create_table(**table.create_table_request(read, write))
        else:
            throughput = current.get("ProvisionedThroughput", {})
            if (throughput.get("ReadCapacityUnits"), throughput.get("WriteCapacityUnits")) != (read, write):
                self._client.update_table(
                    TableName=table.name,
                    ProvisionedThroughput={"ReadCapacityUnits": read, "WriteCapacityUnits": write},
                )

        self._client.get_waiter("table_exists").wait(TableName=table.name, WaiterConfig=waiter_config)

    def create_tables(self) -> list[str]:
        created: list[str] = []
        for table in self._tables:
            self._sleep(self._delays.before_create)
            try:
                self.ensure_table(table)
            except (ClientError, BotoCoreError) as e:
                logger.exception("table_create_failed", table=table.name, error=str(e))
                continue
            logger.info("table_ready", table=table.name)
            created.append(table.name)
        return created

    # Step D

    def build_item(self, table: TableDescriptor, record: Any) -> dict[str, Any]:  # noqa: ANN401 - raw fixture entry
        attrs = table.record_model.model_validate(record).model_dump(by_alias=True, exclude_none=True)
        if table.timestamps:
            ts = self._now_ms()
            attrs["createdAt"] = ts
            attrs["updatedAt"] = ts
        return to_item(attrs)

    def insert_record(self, table: TableDescriptor, record: Any) -> None:  # noqa: ANN401 - raw fixture entry
        self._client.put_item(
            TableName=table.name,
            Item=self.build_item(table, record),
            ConditionExpression="attribute_not_exists(#pk)",
            ExpressionAttributeNames={"#pk": table.hash_key},
        )

    def seed_fixture(self, fixture: Fixture) -> SeedResult:
        records = fixture.load()
        try:
            table = table_for_fixture(fixture.name)
        except UnknownFixtureTableError as e:
            logger.error("fixture_table_unknown", fixture=fixture.name, records=len(records), error=str(e))
            result = SeedResult(fixture=fixture.name, table=fixture.name, failed=len(records))
            logger.info("fixture_seeded", fixture=fixture.name, table=fixture.name, inserted=0, failed=result.failed)
            return result

        logger.info("fixture_seeding_started", table=table.name, fixture=fixture.name, records=len(records))
        result = SeedResult(fixture=fixture.name, table=table.name)
        for i, record in enumerate(records):
            try:
                self.insert_record(table, record)
            except ValidationError as e:
                result.failed += 1
                logger.error(
                    "record_insert_failed",
                    table=table.name,
                    index=i,
                    errors=e.errors(include_url=False, include_context=False),
                )
            except (ClientError, BotoCoreError) as e:
                result.failed += 1
                logger.error(
                    "record_insert_failed",
                    table=table.name,
                    index=i,
                    error_code=_error_code(e),
                    error=str(e),
                )
            except (TypeError, DecimalException) as e:
                # Values the model accepted but DynamoDB cannot represent.
                result.failed += 1
                logger.error("record_insert_failed", table=table.name, index=i, error=str(e))
            else:
                result.inserted += 1

        logger.info(
            "fixture_seeded", fixture=fixture.name, table=table.name, inserted=result.inserted, failed=result.failed
        )
        return result


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Drop all DynamoDB tables, recreate them and load JSON fixtures.")
    parser.add_argument("--fixtures-dir", type=Path, default=None, help="Directory of <table>.json fixture files.")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--no-delays", action="store_true", help="Skip the pauses between schema operations.")
    args = parser.parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.fixtures_dir is not None:
        overrides["fixtures_dir"] = args.fixtures_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    try:
        settings = SeedSettings(**overrides)
    except ValidationError:
        configure_logging(args.log_level or "info")
        logger.exception("seed_failed", stage="settings")
        return 1
    configure_logging(settings.log_level)

    delays = DelayPolicy(0, 0, 0) if args.no_delays else None
    try:
        Seeder(settings, create_client(settings), delays=delays).run()
    except Exception:  # noqa: BLE001 - top-level entry point reports every failure
        logger.exception("seed_failed")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

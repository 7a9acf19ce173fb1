from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from db.errors import UnknownFixtureTableError


class RecordModel(BaseModel):
    # Stored attributes are camelCase; unknown attributes are dropped like the API's object mapper does.
    # DynamoDB numbers cannot hold inf or NaN.
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class Transaction(RecordModel):
    user_id: str
    transaction_id: str
    date_time: str
    course_id: str
    payment_provider: Literal["stripe"]
    amount: float | None = None


class Comment(RecordModel):
    comment_id: str
    user_id: str
    text: str
    timestamp: str


class Chapter(RecordModel):
    chapter_id: str
    type: Literal["Text", "Quiz", "Video"]
    title: str
    content: str
    comments: list[Comment] = []
    video: str | None = None


class Section(RecordModel):
    section_id: str
    section_title: str
    section_description: str | None = None
    chapters: list[Chapter] = []


class Enrollment(RecordModel):
    user_id: str


class Course(RecordModel):
    course_id: str
    teacher_id: str
    teacher_name: str
    title: str
    description: str | None = None
    category: str
    image: str | None = None
    price: float | None = None
    level: Literal["Beginner", "Intermediate", "Advanced"]
    status: Literal["Draft", "Published"]
    sections: list[Section] = []
    enrollments: list[Enrollment] = []


class ChapterProgress(RecordModel):
    chapter_id: str
    completed: bool


class SectionProgress(RecordModel):
    section_id: str
    chapters: list[ChapterProgress]


class UserCourseProgress(RecordModel):
    user_id: str
    course_id: str
    enrollment_date: str
    overall_progress: float
    sections: list[SectionProgress]
    last_accessed_timestamp: str


@dataclass(frozen=True)
class IndexDescriptor:
    name: str
    hash_key: str
    range_key: str | None = None


@dataclass(frozen=True)
class TableDescriptor:
    name: str
    record_model: type[RecordModel]
    hash_key: str
    range_key: str | None = None
    indexes: tuple[IndexDescriptor, ...] = ()
    timestamps: bool = False
    # Lower-cased fixture base names that load into this table.
    fixture_names: frozenset[str] = field(default_factory=frozenset)

    def key_schema(self) -> list[dict[str, str]]:
        return _key_schema(self.hash_key, self.range_key)

    def attribute_definitions(self) -> list[dict[str, str]]:
        names: list[str] = []
        for attr in (self.hash_key, self.range_key, *(k for ix in self.indexes for k in (ix.hash_key, ix.range_key))):
            if attr and attr not in names:
                names.append(attr)
        # Every key attribute in these schemas is a string.
        return [{"AttributeName": n, "AttributeType": "S"} for n in names]

    def create_table_request(self, read_capacity: int, write_capacity: int) -> dict[str, Any]:
        throughput = {"ReadCapacityUnits": read_capacity, "WriteCapacityUnits": write_capacity}
        req: dict[str, Any] = {
            "TableName": self.name,
            "KeySchema": self.key_schema(),
            "AttributeDefinitions": self.attribute_definitions(),
            "ProvisionedThroughput": throughput,
        }
        if self.indexes:
            req["GlobalSecondaryIndexes"] = [
                {
                    "IndexName": ix.name,
                    "KeySchema": _key_schema(ix.hash_key, ix.range_key),
                    "Projection": {"ProjectionType": "ALL"},
                    "ProvisionedThroughput": dict(throughput),
                }
                for ix in self.indexes
            ]
        return req


def _key_schema(hash_key: str, range_key: str | None) -> list[dict[str, str]]:
    schema = [{"AttributeName": hash_key, "KeyType": "HASH"}]
    if range_key:
        schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
    return schema


TRANSACTION_TABLE = TableDescriptor(
    name="Transaction",
    record_model=Transaction,
    hash_key="userId",
    range_key="transactionId",
    indexes=(IndexDescriptor(name="CourseTransactionsIndex", hash_key="courseId"),),
    fixture_names=frozenset({"transaction", "transactions"}),
)

COURSE_TABLE = TableDescriptor(
    name="Course",
    record_model=Course,
    hash_key="courseId",
    timestamps=True,
    fixture_names=frozenset({"course", "courses"}),
)

USER_COURSE_PROGRESS_TABLE = TableDescriptor(
    name="UserCourseProgress",
    record_model=UserCourseProgress,
    hash_key="userId",
    range_key="courseId",
    timestamps=True,
    fixture_names=frozenset(
        {"usercourseprogress", "usercourseprogresses", "user_course_progress", "user_course_progresses"}
    ),
)

# Creation order.
TABLES: tuple[TableDescriptor, ...] = (TRANSACTION_TABLE, USER_COURSE_PROGRESS_TABLE, COURSE_TABLE)


def table_for_fixture(fixture_name: str) -> TableDescriptor:
    """
    Resolve a fixture base name (e.g. "courses", "Course", "userCourseProgresses") to its table.

    Raises UnknownFixtureTableError when no declared table lists the name.
    """
    key = fixture_name.strip().lower()
    for table in TABLES:
        if key in table.fixture_names:
            return table
    raise UnknownFixtureTableError(fixture_name)

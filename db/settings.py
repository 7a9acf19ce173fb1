from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FIXTURES_DIR = Path(__file__).resolve().parent / "data"


class SeedSettings(BaseSettings):
    # .env files are shared with the API server, so unknown keys are ignored here.
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # NODE_ENV is what the API server reads; anything other than "production" targets DynamoDB Local.
    environment: str = Field(default="development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"))

    aws_region: str = "us-east-2"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    # Overrides both the local and the remote endpoint when set.
    dynamodb_endpoint: str | None = None
    local_endpoint: str = "http://localhost:8000"
    local_region: str = "us-east-2"
    local_access_key_id: str = "dummyKey123"
    local_secret_access_key: str = "dummyKey123"

    read_capacity: int = 5
    write_capacity: int = 5

    # Static throttling between schema operations, in seconds.
    delete_delay_s: float = 0.8
    post_delete_delay_s: float = 1.0
    create_delay_s: float = 2.0

    waiter_delay_s: int = 1
    waiter_max_attempts: int = 60

    fixtures_dir: Path = DEFAULT_FIXTURES_DIR
    log_level: str = "info"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

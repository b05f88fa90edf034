from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    # AWS
    aws_region: str = Field(default="us-east-1", validation_alias="AWS_REGION")
    # Point at DynamoDB Local / localstack during development.
    ddb_endpoint_url: str | None = Field(default=None, validation_alias="DDB_ENDPOINT_URL")

    # Table / key schema
    ddb_table_name: str | None = Field(default=None, validation_alias="DDB_TABLE_NAME")
    ddb_partition_key: str = Field(default="id", validation_alias="DDB_PARTITION_KEY")
    ddb_sort_key: str | None = Field(default=None, validation_alias="DDB_SORT_KEY")

    # Transport (botocore + app-layer retry)
    ddb_connect_timeout_s: float = Field(default=2, validation_alias="DDB_CONNECT_TIMEOUT_S")
    ddb_read_timeout_s: float = Field(default=10, validation_alias="DDB_READ_TIMEOUT_S")
    ddb_botocore_max_attempts: int = Field(
        default=10, validation_alias="DDB_BOTOCORE_MAX_ATTEMPTS"
    )
    ddb_retry_max_attempts: int = Field(default=6, validation_alias="DDB_RETRY_MAX_ATTEMPTS")

    # Query behavior
    # False keeps the permissive behavior: filter fields/comparators the store
    # was not configured for are ignored.
    ddb_reject_unknown_filters: bool = Field(
        default=False, validation_alias="DDB_REJECT_UNKNOWN_FILTERS"
    )
    # Adds a schema digest to cursors. Changes the token format, so every
    # reader of the same table must agree on it.
    ddb_cursor_fingerprint: bool = Field(default=False, validation_alias="DDB_CURSOR_FINGERPRINT")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


settings = StoreSettings()

from __future__ import annotations

from functools import lru_cache

import boto3
from botocore.config import Config

from ...settings import StoreSettings, settings


@lru_cache(maxsize=8)
def _botocore_config(max_attempts: int, connect_timeout: float, read_timeout: float) -> Config:
    # Keep botocore retries enabled (adaptive is best-effort); we still do an app-layer
    # retry for a narrow set of known-safe transient failures.
    return Config(
        retries={"max_attempts": max_attempts, "mode": "adaptive"},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )


def botocore_config(store_settings: StoreSettings | None = None) -> Config:
    s = store_settings or settings
    return _botocore_config(s.ddb_botocore_max_attempts, s.ddb_connect_timeout_s, s.ddb_read_timeout_s)


# Keyed by the connection-relevant values, so every distinct settings object
# gets its own resource and equal ones share it.
@lru_cache(maxsize=8)
def _dynamodb_resource(
    region_name: str,
    endpoint_url: str | None,
    max_attempts: int,
    connect_timeout: float,
    read_timeout: float,
):
    return boto3.resource(
        "dynamodb",
        region_name=region_name,
        endpoint_url=endpoint_url,
        config=_botocore_config(max_attempts, connect_timeout, read_timeout),
    )


def dynamodb_resource(store_settings: StoreSettings | None = None):
    s = store_settings or settings
    return _dynamodb_resource(
        s.aws_region,
        s.ddb_endpoint_url,
        s.ddb_botocore_max_attempts,
        s.ddb_connect_timeout_s,
        s.ddb_read_timeout_s,
    )


def table_resource(table_name: str, store_settings: StoreSettings | None = None):
    return dynamodb_resource(store_settings).Table(table_name)

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from ...errors import (
    DdbError,
    DdbInternal,
    DdbRequestRejected,
    DdbThrottled,
    DdbUnavailable,
)
from ...observability.logging import get_logger

T = TypeVar("T")

log = get_logger("ddb_retry")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 6
    base_delay_s: float = 0.05
    max_delay_s: float = 1.5


_RETRYABLE_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
    "ServiceUnavailable",
}

_REJECTED_CODES = {
    "ValidationException",
    "ParamValidationError",
    "ResourceNotFoundException",
}

_DENIED_CODES = {
    "AccessDeniedException",
    "UnrecognizedClientException",
}


def _sleep_backoff(policy: RetryPolicy, attempt: int) -> None:
    # Full jitter exponential backoff.
    cap = policy.max_delay_s
    base = policy.base_delay_s
    exp = min(cap, base * (2 ** max(0, attempt - 1)))
    time.sleep(random.random() * exp)


def _aws_request_id_from_client_error(e: ClientError) -> str | None:
    return (e.response or {}).get("ResponseMetadata", {}).get("RequestId")


def _err_code_from_client_error(e: ClientError) -> str | None:
    return (e.response or {}).get("Error", {}).get("Code")


def map_botocore_error(
    *,
    operation: str,
    table_name: str | None,
    key: dict[str, Any] | None,
    exc: Exception,
) -> DdbError:
    if isinstance(exc, DdbError):
        return exc

    context: dict[str, Any] = {"operation": operation, "table_name": table_name, "key": key, "cause": exc}

    if isinstance(exc, ClientError):
        code = _err_code_from_client_error(exc) or ""
        context["aws_request_id"] = _aws_request_id_from_client_error(exc)

        if code in _REJECTED_CODES:
            return DdbRequestRejected(
                message=f"DynamoDB rejected the request ({code})",
                retryable=False,
                **context,
            )

        if code in _DENIED_CODES:
            return DdbUnavailable(message="DynamoDB access denied", retryable=False, **context)

        if code in _RETRYABLE_CODES:
            return DdbThrottled(
                message="DynamoDB request throttled or unavailable",
                retryable=True,
                **context,
            )

        return DdbInternal(
            message=f"DynamoDB request failed ({code or 'ClientError'})",
            retryable=False,
            **context,
        )

    if isinstance(exc, BotoCoreError):
        return DdbUnavailable(message="DynamoDB client error", retryable=True, **context)

    return DdbInternal(message="Unexpected DynamoDB error", retryable=False, **context)


def ddb_call(
    operation: str,
    fn: Callable[[], T],
    *,
    table_name: str | None = None,
    key: dict[str, Any] | None = None,
    retry_policy: RetryPolicy | None = None,
) -> T:
    policy = retry_policy or RetryPolicy()
    max_attempts = max(1, int(policy.max_attempts))

    attempt = 1
    while True:
        try:
            return fn()
        except Exception as e:  # noqa: BLE001
            mapped = map_botocore_error(
                operation=operation,
                table_name=table_name,
                key=key,
                exc=e,
            )

            # Never retry validation / permission errors.
            if not mapped.retryable or attempt >= max_attempts:
                if mapped is e:
                    raise
                raise mapped from e

            log.warning(
                "ddb_retry",
                operation=operation,
                table=table_name,
                attempt=attempt,
                error=mapped.message,
            )
            _sleep_backoff(policy, attempt)
            attempt += 1

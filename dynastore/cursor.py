from __future__ import annotations

import base64
import binascii
import hashlib
import json
from decimal import Decimal
from typing import Any, NoReturn

from .errors import InvalidCursor
from .keys import Key, KeySchema
from .observability.logging import get_logger

log = get_logger("cursor")

_FINGERPRINT_FIELD = "~schema"


def schema_fingerprint(table_name: str, schema: KeySchema) -> str:
    raw = ":".join([table_name, *schema.fields])
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:12]


def _json_default(value: Any) -> Any:
    raise TypeError(f"Key value of type {type(value).__name__} cannot be encoded in a cursor")


def _dump_value(value: Any) -> str:
    # boto3 hands numbers back as Decimal. Written digit for digit: DynamoDB
    # numbers carry up to 38 significant digits, more than a float holds.
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise TypeError(f"Key value {value} cannot be encoded in a cursor")
        if value == value.to_integral_value():
            return str(int(value))
        return str(value)
    return json.dumps(value, ensure_ascii=False, default=_json_default)


def _dump_payload(payload: dict[str, Any]) -> str:
    members = (f"{json.dumps(name, ensure_ascii=False)}:{_dump_value(value)}" for name, value in payload.items())
    return "{" + ",".join(members) + "}"


def _is_key_scalar(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int, Decimal))


class CursorCodec:
    """Opaque, resumable pagination tokens for one key schema.

    The token is base64 over compact JSON of the key attributes in schema
    order, e.g. ``{"teamId":"t1","id":"u1"}``. With ``fingerprint`` set
    the payload also carries a schema digest and tokens minted for another
    schema are refused.
    """

    def __init__(self, schema: KeySchema, *, fingerprint: str | None = None):
        self.schema = schema
        self.fingerprint = fingerprint

    def encode(self, key: Key) -> str:
        payload: dict[str, Any] = dict(self.schema.lookup_params(key))
        if self.fingerprint:
            payload[_FINGERPRINT_FIELD] = self.fingerprint

        raw = _dump_payload(payload)
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    def decode(self, cursor: str) -> Key:
        payload = self._load(cursor)

        if self.fingerprint:
            if payload.pop(_FINGERPRINT_FIELD, None) != self.fingerprint:
                self._reject(cursor, "schema mismatch")

        if set(payload) != set(self.schema.fields):
            self._reject(cursor, "unexpected fields")

        if not all(_is_key_scalar(v) for v in payload.values()):
            self._reject(cursor, "unsupported key value")

        return self.schema.from_params(payload)

    def _load(self, cursor: str) -> dict[str, Any]:
        if not isinstance(cursor, str) or not cursor:
            self._reject(cursor, "empty")

        try:
            raw = base64.b64decode(cursor.encode("ascii"), validate=True).decode("utf-8")
            payload = json.loads(raw, parse_float=Decimal)
        except (binascii.Error, UnicodeError, ValueError) as e:
            self._reject(cursor, "undecodable", cause=e)

        if not isinstance(payload, dict):
            self._reject(cursor, "not an object")
        return payload

    def _reject(self, cursor: Any, reason: str, *, cause: Exception | None = None) -> NoReturn:
        log.warning("invalid_cursor", reason=reason)
        raise InvalidCursor(
            message=f"Invalid cursor: {cursor}",
            operation="Scan",
            cursor=cursor if isinstance(cursor, str) else None,
            cause=cause,
        ) from cause

"""JSON values kept in Redis, behind the cache repository interface."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

import redis

from .repositories import CacheMissError, CacheRepository

DEFAULT_REDIS_ADDRESS = "localhost:6379"
_DEFAULT_PORT = 6379


def _encode_default(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if hasattr(value, "value"):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"cannot store {type(value).__name__} in the cache")


def _milliseconds(expiration: timedelta | float) -> int:
    if isinstance(expiration, timedelta):
        return int(expiration / timedelta(milliseconds=1))
    return int(expiration * 1000)


class RedisCache(CacheRepository):
    """A cache that stores values as JSON in a Redis client.

    An expiration of zero or less keeps the value until it is deleted.
    """

    def __init__(self, client: Any):
        self._client = client

    def get(self, key: str) -> Any:
        raw = self._client.get(key)
        if raw is None:
            raise CacheMissError(key)
        return json.loads(raw)

    def set(self, key: str, value: Any, expiration: timedelta | float) -> None:
        data = json.dumps(value, ensure_ascii=False, default=_encode_default)
        milliseconds = _milliseconds(expiration)
        if milliseconds > 0:
            self._client.set(key, data, px=milliseconds)
        else:
            self._client.set(key, data)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def exists(self, key: str) -> bool:
        return self._client.exists(key) > 0

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RedisCache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, _DEFAULT_PORT
    if not port.isdigit():
        raise ValueError(f"invalid Redis address: {address!r}")
    return host or "localhost", int(port)


def redis_cache_from_env(environ: Mapping[str, str] | None = None) -> RedisCache:
    """Build a cache for the host:port in REDIS_URL, or localhost:6379."""
    env = os.environ if environ is None else environ
    address = env.get("REDIS_URL") or DEFAULT_REDIS_ADDRESS
    host, port = _split_address(address)
    return RedisCache(redis.Redis(host=host, port=port, db=0))
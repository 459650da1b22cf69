from __future__ import annotations

from typing import Any, Iterator, List, Optional

import redis

from ..core.errors import ResourceError
from ..core.source import EntrySource
from ..core.types import Entry


class RedisKeyValueSource(EntrySource):
    """String keys of a Redis database, e.g. ``app:database:port``.

    Only keys starting with ``prefix`` are read and the prefix is removed
    before the key becomes a path. Keys are applied in sorted order.
    """

    def __init__(
        self,
        uri: str,
        prefix: str = "",
        separator: str = ":",
        name: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.uri = uri
        self.client = client if client is not None else redis.Redis.from_url(
            uri, decode_responses=True
        )
        self.prefix = prefix
        self.separator = separator
        self.deserializer: Optional[str] = "json"
        self.name = name or f"redis:{uri}"

    def _unprefixed(self, key: str) -> str:
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def entries(self) -> Iterator[Entry]:
        try:
            keys: List[str] = sorted(self.client.scan_iter(match=f"{self.prefix}*"))
            values = self.client.mget(keys) if keys else []
        except redis.RedisError as e:
            raise ResourceError(f"Unable to read keys from {self.uri}: {e}") from e
        for key, value in zip(keys, values):
            # the key may have expired between SCAN and MGET
            if value is None:
                continue
            yield Entry(key=self._unprefixed(key), value=value)

"""
Key-value cache exercisers (Redis, Memcache)

Both write a numbered key and delete it straight away, so nothing is left
behind and there is no schema to tear down.
"""
import struct
from typing import Callable

import redis
from pymemcache.client.base import Client as MemcacheClient

from monitoring_demo.core.addresses import memcache_address, with_scheme
from monitoring_demo.exercisers.base import RESOURCE_NAME, Exerciser
from monitoring_demo.services.budget import KeepGoing


def cache_key(i: int) -> str:
    return f"{RESOURCE_NAME}-{i}"


class RedisExerciser(Exerciser):
    """SET then DEL one key per iteration"""

    name = "redis"
    label = "Redis"
    style = "btn-danger"

    def __init__(
        self,
        url: str,
        teardown: bool = True,
        client_factory: Callable[[str], redis.Redis] = redis.Redis.from_url,
    ):
        super().__init__(with_scheme(url, "redis"), teardown)
        self.client_factory = client_factory

    def exercise(self, keep_going: KeepGoing) -> int:
        client = self.client_factory(self.url)
        i = 0

        try:
            while keep_going():
                key = cache_key(i)
                client.set(key, i)
                client.delete(key)
                i += 1
        finally:
            client.close()

        return i


def _memcache_client(address) -> MemcacheClient:
    return MemcacheClient(address, connect_timeout=5, timeout=5)


class MemcacheExerciser(Exerciser):
    """set then delete one key per iteration, value is the counter as 8 LE bytes"""

    name = "memcache"
    label = "Memcache"
    style = "btn-info"

    def __init__(
        self,
        url: str,
        teardown: bool = True,
        client_factory: Callable[..., MemcacheClient] = _memcache_client,
    ):
        super().__init__(url, teardown)
        self.address = memcache_address(url)
        self.client_factory = client_factory

    def exercise(self, keep_going: KeepGoing) -> int:
        client = self.client_factory(self.address)
        i = 0

        try:
            while keep_going():
                key = cache_key(i)
                # wait for the server reply on every command
                client.set(key, struct.pack("<Q", i), noreply=False)
                client.delete(key, noreply=False)
                i += 1
        finally:
            client.close()

        return i

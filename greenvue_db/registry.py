from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import Callable, Iterator

from greenvue_db.client import SupabaseClient
from greenvue_db.config import ConfigurationError
from greenvue_db.models import Tier


class DefaultClientUnavailableError(ConfigurationError):
    pass


class _Once:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._done = False

    def do(self, func: Callable[[], None]) -> None:
        if self._done:
            return
        with self._lock:
            if self._done:
                return
            try:
                func()
            finally:
                self._done = True


class _ReadWriteLock:
    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._condition:
            while self._writing:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._condition:
            while self._writing or self._readers:
                self._condition.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()


_default_client: SupabaseClient | None = None
_default_once = _Once()
_default_lock = _ReadWriteLock()


def _construct_default(tier: Tier) -> None:
    global _default_client
    _default_client = SupabaseClient.from_env(tier)


def get_or_init_default() -> SupabaseClient | None:
    with _default_lock.read():
        if _default_client is not None:
            return _default_client

    with _default_lock.write():
        _default_once.do(lambda: _construct_default(Tier.ANONYMOUS))
        return _default_client


def init_default(tier: Tier = Tier.ANONYMOUS) -> SupabaseClient:
    with _default_lock.read():
        client = _default_client

    if client is None:
        with _default_lock.write():
            _default_once.do(lambda: _construct_default(tier))
            client = _default_client

    if client is None:
        raise DefaultClientUnavailableError("failed to initialize default Supabase client")
    return client


def reset_default() -> None:
    global _default_client, _default_once
    with _default_lock.write():
        client = _default_client
        _default_client = None
        _default_once = _Once()
    if client is not None:
        client.close()

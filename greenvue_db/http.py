from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Any, Mapping

import requests
from requests.structures import CaseInsensitiveDict

from greenvue_db.config import SupabaseSettings

logger = logging.getLogger(__name__)


class SupabaseError(RuntimeError):
    pass


class TransportError(SupabaseError):
    pass


class MalformedResponseError(SupabaseError):
    pass


class ApiHttpError(SupabaseError):
    def __init__(self, status_code: int, body: str, message: str | None = None):
        super().__init__(message or f"supabase error: status {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class HttpClient:
    def __init__(self, settings: SupabaseSettings, session: requests.Session | None = None):
        self._settings = settings
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "apikey": settings.api_key,
                "Authorization": f"Bearer {settings.api_key}",
                "Prefer": "return=representation",
            }
        )

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    @property
    def headers(self) -> Mapping[str, str]:
        return MappingProxyType(CaseInsensitiveDict(self._session.headers))

    def url(self, path: str) -> str:
        return f"{self._settings.base_url}{path}"

    def send(
        self,
        method: str,
        url: str,
        payload: Any = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        kwargs: dict[str, Any] = {"timeout": self._settings.timeout_seconds}
        if payload is not None:
            kwargs["json"] = payload
        if data is not None:
            kwargs["data"] = data
        if headers:
            kwargs["headers"] = headers

        logger.debug("%s %s", method, url)
        try:
            return self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

    def close(self) -> None:
        self._session.close()


def is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def decode_json(body: bytes, what: str) -> Any:
    try:
        return json.loads(body or b"null")
    except ValueError as exc:
        raise MalformedResponseError(f"failed to parse {what}: {exc}") from exc

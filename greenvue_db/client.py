from __future__ import annotations

import logging
from typing import Any, Mapping
import uuid

import requests

from greenvue_db.auth import AuthApi
from greenvue_db.config import ConfigurationError, SupabaseSettings
from greenvue_db.http import HttpClient
from greenvue_db.models import AuthResponse, Tier, User
from greenvue_db.rest import RestApi
from greenvue_db.storage import StorageApi

logger = logging.getLogger(__name__)


class SupabaseClient:
    def __init__(self, settings: SupabaseSettings, session: requests.Session | None = None):
        settings.validate()
        self._settings = settings
        self._http_client = HttpClient(settings, session=session)
        self._rest_api = RestApi(self._http_client)
        self._storage_api = StorageApi(self._http_client)
        self._auth_api = AuthApi(self._http_client)

    @classmethod
    def from_env(
        cls,
        tier: Tier = Tier.ANONYMOUS,
        session: requests.Session | None = None,
    ) -> "SupabaseClient | None":
        try:
            settings = SupabaseSettings.from_env(tier)
        except ConfigurationError as exc:
            logger.error(
                "Supabase environment variables not set. SUPABASE_URL and "
                "SUPABASE_ANON or SUPABASE_SERVICE_KEY are required: %s",
                exc,
            )
            return None
        return cls(settings, session=session)

    @property
    def url(self) -> str:
        return self._settings.base_url

    @property
    def api_key(self) -> str:
        return self._settings.api_key

    @property
    def tier(self) -> Tier:
        return self._settings.tier

    @property
    def settings(self) -> SupabaseSettings:
        return self._settings

    @property
    def headers(self) -> Mapping[str, str]:
        return self._http_client.headers

    def get(self, table: str, query: str = "") -> bytes:
        return self._rest_api.get(table, query)

    def post(self, table: str, data: Any) -> bytes:
        return self._rest_api.post(table, data)

    def patch(self, table: str, record_id: uuid.UUID, data: Any) -> bytes:
        return self._rest_api.patch(table, record_id, data)

    def delete(self, table: str, conditions: str) -> bytes:
        return self._rest_api.delete(table, conditions)

    def upload_image(self, filename: str, bucket: str, image: bytes) -> bytes:
        return self._storage_api.upload_image(filename, bucket, image)

    def sign_up(self, email: str, password: str) -> User:
        return self._auth_api.sign_up(email, password)

    def login(self, email: str, password: str) -> AuthResponse:
        return self._auth_api.login(email, password)

    def update_user(self, user_id: uuid.UUID, data: Mapping[str, Any]) -> User:
        return self._auth_api.update_user(user_id, data)

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "SupabaseClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SupabaseClient(url={self.url!r}, tier={self.tier.value!r})"


def build_client(tier: Tier = Tier.ANONYMOUS) -> SupabaseClient:
    client = SupabaseClient.from_env(tier)
    if client is None:
        raise ConfigurationError("Supabase client could not be configured from the environment")
    return client

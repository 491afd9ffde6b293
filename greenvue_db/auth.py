from __future__ import annotations

from enum import Enum
import logging
from typing import Any, Mapping
import uuid

from greenvue_db.http import HttpClient, MalformedResponseError, SupabaseError, decode_json
from greenvue_db.models import AuthResponse, User

logger = logging.getLogger(__name__)


class AuthReason(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    USER_NOT_FOUND = "user_not_found"
    LOGIN_FAILED = "login_failed"
    SIGNUP_FAILED = "signup_failed"
    UPDATE_FAILED = "update_failed"


_KNOWN_LOGIN_ERRORS = {
    AuthReason.INVALID_CREDENTIALS.value: AuthReason.INVALID_CREDENTIALS,
    AuthReason.EMAIL_NOT_CONFIRMED.value: AuthReason.EMAIL_NOT_CONFIRMED,
    AuthReason.USER_NOT_FOUND.value: AuthReason.USER_NOT_FOUND,
}


class AuthenticationError(SupabaseError):
    def __init__(
        self,
        reason: AuthReason,
        message: str = "",
        status_code: int | None = None,
        body: str = "",
    ):
        super().__init__(f"{reason.value}: {message}" if message else reason.value)
        self.reason = reason
        self.message = message
        self.status_code = status_code
        self.body = body


class AuthApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def sign_up(self, email: str, password: str) -> User:
        response = self._http_client.send(
            "POST",
            self._http_client.url("/auth/v1/signup"),
            payload={"email": email, "password": password},
        )

        if response.status_code not in (200, 201):
            raise AuthenticationError(
                AuthReason.SIGNUP_FAILED,
                f"failed to sign up user: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        user = self._parse_user(response.content)
        if user.id == uuid.UUID(int=0):
            raise MalformedResponseError("user ID missing in response")
        return user

    def login(self, email: str, password: str) -> AuthResponse:
        response = self._http_client.send(
            "POST",
            self._http_client.url("/auth/v1/token?grant_type=password"),
            payload={"email": email, "password": password},
        )

        # The token endpoint can return an error payload under a 2xx status,
        # so the body marker is checked before the status code.
        if b"error_code" in response.content:
            raise self._login_error(response.content, response.status_code, response.text)

        if response.status_code != 200:
            raise AuthenticationError(
                AuthReason.LOGIN_FAILED,
                response.text,
                status_code=response.status_code,
                body=response.text,
            )

        data = decode_json(response.content, "response")
        if not isinstance(data, dict):
            raise MalformedResponseError("failed to parse response: expected a JSON object")
        try:
            return AuthResponse.from_dict(data)
        except (ValueError, TypeError) as exc:
            raise MalformedResponseError(f"failed to parse response: {exc}") from exc

    def update_user(self, user_id: uuid.UUID, data: Mapping[str, Any]) -> User:
        response = self._http_client.send(
            "PUT",
            self._http_client.url(f"/auth/v1/admin/users/{user_id}"),
            payload=dict(data),
        )

        if response.status_code != 200:
            raise AuthenticationError(
                AuthReason.UPDATE_FAILED,
                f"update user failed: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        return self._parse_user(response.content)

    @staticmethod
    def _login_error(content: bytes, status_code: int, text: str) -> AuthenticationError:
        payload = decode_json(content, "error response")
        if not isinstance(payload, dict):
            raise MalformedResponseError("failed to parse error response: expected a JSON object")

        error_code = str(payload.get("error_code") or "")
        logger.debug("login rejected with error_code=%s status=%d", error_code, status_code)

        reason = _KNOWN_LOGIN_ERRORS.get(error_code)
        if reason is not None:
            return AuthenticationError(reason, status_code=status_code, body=text)
        return AuthenticationError(
            AuthReason.LOGIN_FAILED,
            str(payload.get("msg") or ""),
            status_code=status_code,
            body=text,
        )

    @staticmethod
    def _parse_user(content: bytes) -> User:
        data = decode_json(content, "response")
        if not isinstance(data, dict):
            raise MalformedResponseError("failed to parse response: expected a JSON object")
        try:
            return User.from_dict(data)
        except (ValueError, TypeError) as exc:
            raise MalformedResponseError(f"failed to parse response: {exc}") from exc

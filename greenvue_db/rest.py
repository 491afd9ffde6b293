from __future__ import annotations

from typing import Any
import uuid

from greenvue_db.http import ApiHttpError, HttpClient, TransportError, is_success


class RestApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def table_url(self, table: str, query: str = "") -> str:
        return self._http_client.url(f"/rest/v1/{table}?{query}")

    def get(self, table: str, query: str = "") -> bytes:
        response = self._http_client.send("GET", self.table_url(table, query))

        if not is_success(response):
            raise ApiHttpError(response.status_code, response.text)
        return response.content

    def post(self, table: str, data: Any) -> bytes:
        response = self._http_client.send("POST", self.table_url(table, "select=*"), payload=data)

        if response.status_code != 201:
            raise ApiHttpError(response.status_code, response.text)
        if not response.content:
            return b"{}"
        return response.content

    def patch(self, table: str, record_id: uuid.UUID, data: Any) -> bytes:
        response = self._http_client.send(
            "PATCH",
            self.table_url(table, f"id=eq.{record_id}"),
            payload=data,
        )

        if not is_success(response):
            raise ApiHttpError(
                response.status_code,
                response.text,
                message=f"supabase PATCH error ({response.status_code}): {response.text}",
            )
        return response.content

    def delete(self, table: str, conditions: str) -> bytes:
        try:
            response = self._http_client.send("DELETE", self.table_url(table, conditions))
        except TransportError as exc:
            raise TransportError(f"failed to execute DELETE request: {exc}") from exc

        if not is_success(response):
            raise ApiHttpError(
                response.status_code,
                response.text,
                message=f"DELETE operation failed (status {response.status_code}): {response.text}",
            )
        return response.content

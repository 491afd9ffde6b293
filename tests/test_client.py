import logging
import uuid

import pytest
import requests

from greenvue_db.client import SupabaseClient, build_client
from greenvue_db.config import ConfigurationError
from greenvue_db.http import ApiHttpError, TransportError
from greenvue_db.models import Tier

from .conftest import ANON_KEY, BASE_URL, SERVICE_KEY

RECORD_ID = uuid.UUID("3f1c2b5e-8a4d-4f7e-9c1b-2a6d5e8f0b13")


# =============================================================================
# Construction
# =============================================================================


def test_from_env_builds_client_with_matching_values(supabase_env):
    client = SupabaseClient.from_env()

    assert client is not None
    assert client.url == BASE_URL
    assert client.api_key == ANON_KEY
    assert client.tier is Tier.ANONYMOUS


def test_from_env_privileged_client(supabase_env):
    client = SupabaseClient.from_env(Tier.PRIVILEGED)

    assert client.api_key == SERVICE_KEY
    assert client.headers["Authorization"] == f"Bearer {SERVICE_KEY}"


@pytest.mark.parametrize("missing", ["SUPABASE_URL", "SUPABASE_ANON"])
def test_from_env_returns_none_and_logs_when_value_missing(supabase_env, monkeypatch, caplog, missing):
    monkeypatch.delenv(missing)

    with caplog.at_level(logging.ERROR, logger="greenvue_db"):
        client = SupabaseClient.from_env()

    assert client is None
    assert missing in caplog.text


def test_build_client_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        build_client()


def test_default_headers(client):
    headers = client.headers

    assert headers["Content-Type"] == "application/json"
    assert headers["Accept"] == "application/json"
    assert headers["apikey"] == ANON_KEY
    assert headers["Authorization"] == f"Bearer {ANON_KEY}"
    assert headers["Prefer"] == "return=representation"


def test_headers_cannot_be_changed_after_construction(client, session, respond):
    respond(200, b"[]")

    with pytest.raises(TypeError):
        client.headers["apikey"] = "tampered"

    client.get("listings", "")

    assert session.headers["apikey"] == ANON_KEY
    assert session.headers["Authorization"] == f"Bearer {ANON_KEY}"
    assert client.headers["apikey"] == client.api_key == ANON_KEY


def test_client_is_read_only(client):
    with pytest.raises(AttributeError):
        client.url = "https://other.supabase.co"


def test_close_closes_session(client, session, monkeypatch):
    closed = []
    monkeypatch.setattr(session, "close", lambda: closed.append(True))

    with client:
        pass

    assert closed == [True]


# =============================================================================
# GET
# =============================================================================


def test_get_builds_url_and_returns_raw_body(client, respond):
    request = respond(200, b'[{"id":1}]')

    body = client.get("listings", "select=*&sold=eq.false")

    assert body == b'[{"id":1}]'
    method, url = request.call_args.args
    assert method == "GET"
    assert url == f"{BASE_URL}/rest/v1/listings?select=*&sold=eq.false"
    assert request.call_args.kwargs["timeout"] == 10


def test_get_accepts_any_2xx(client, respond):
    respond(206, b"[]")

    assert client.get("listings", "") == b"[]"


def test_get_non_2xx_carries_status_and_body(client, respond):
    respond(404, '{"message":"relation does not exist"}')

    with pytest.raises(ApiHttpError) as exc_info:
        client.get("missing", "select=*")

    assert exc_info.value.status_code == 404
    assert exc_info.value.body == '{"message":"relation does not exist"}'


def test_get_transport_error(client, session):
    session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(TransportError) as exc_info:
        client.get("listings", "")

    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


# =============================================================================
# POST
# =============================================================================


def test_post_requests_representation(client, respond):
    request = respond(201, b'[{"id":"abc"}]')

    body = client.post("listings", {"title": "Chair"})

    assert body == b'[{"id":"abc"}]'
    method, url = request.call_args.args
    assert method == "POST"
    assert url == f"{BASE_URL}/rest/v1/listings?select=*"
    assert request.call_args.kwargs["json"] == {"title": "Chair"}


def test_post_2xx_other_than_201_is_an_error(client, respond):
    respond(200, '{"ok":true}')

    with pytest.raises(ApiHttpError) as exc_info:
        client.post("listings", {"title": "Chair"})

    assert exc_info.value.status_code == 200
    assert exc_info.value.body == '{"ok":true}'


def test_post_empty_created_body_is_empty_object(client, respond):
    respond(201, b"")

    assert client.post("listings", {"title": "Chair"}) == b"{}"


def test_post_error_body_surfaced(client, respond):
    respond(409, '{"code":"23505","message":"duplicate key"}')

    with pytest.raises(ApiHttpError) as exc_info:
        client.post("listings", {"title": "Chair"})

    assert exc_info.value.status_code == 409
    assert "duplicate key" in str(exc_info.value)


# =============================================================================
# PATCH
# =============================================================================


def test_patch_addresses_single_id(client, respond):
    request = respond(200, b'[{"id":"x","title":"Desk"}]')

    body = client.patch("listings", RECORD_ID, {"title": "Desk"})

    assert body == b'[{"id":"x","title":"Desk"}]'
    method, url = request.call_args.args
    assert method == "PATCH"
    assert url == f"{BASE_URL}/rest/v1/listings?id=eq.{RECORD_ID}"
    assert request.call_args.kwargs["json"] == {"title": "Desk"}


def test_patch_non_2xx(client, respond):
    respond(400, "bad payload")

    with pytest.raises(ApiHttpError) as exc_info:
        client.patch("listings", RECORD_ID, {"title": None})

    assert exc_info.value.status_code == 400
    assert str(exc_info.value) == "supabase PATCH error (400): bad payload"


# =============================================================================
# DELETE
# =============================================================================


def test_delete_appends_condition_verbatim(client, respond):
    request = respond(204, b"")

    assert client.delete("listings", f"id=in.({RECORD_ID})") == b""
    method, url = request.call_args.args
    assert method == "DELETE"
    assert url == f"{BASE_URL}/rest/v1/listings?id=in.({RECORD_ID})"


def test_delete_missing_record_surfaces_remote_response(client, respond):
    respond(404, '{"message":"not found"}')

    with pytest.raises(ApiHttpError) as exc_info:
        client.delete("listings", f"id=eq.{RECORD_ID}")

    assert exc_info.value.status_code == 404
    assert exc_info.value.body == '{"message":"not found"}'


def test_delete_transport_error_has_context(client, session):
    session.request.side_effect = requests.Timeout("read timed out")

    with pytest.raises(TransportError, match="failed to execute DELETE request"):
        client.delete("listings", f"id=eq.{RECORD_ID}")

import json
from unittest.mock import Mock

import pytest
import requests

from greenvue_db import config as config_module
from greenvue_db.client import SupabaseClient
from greenvue_db.config import SupabaseSettings

BASE_URL = "https://project.supabase.co"
ANON_KEY = "anon-key"
SERVICE_KEY = "service-key"

ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_ANON",
    "SUPABASE_SERVICE_KEY",
    "SUPABASE_TIMEOUT_SECONDS",
    "SUPABASE_ENV_FILE",
)


def make_response(status_code, body=b""):
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.encoding = "utf-8"
    return response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_load_dotenv_if_present", lambda *args, **kwargs: None)


@pytest.fixture
def supabase_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", BASE_URL)
    monkeypatch.setenv("SUPABASE_ANON", ANON_KEY)
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", SERVICE_KEY)


@pytest.fixture
def session():
    session = requests.Session()
    session.request = Mock(return_value=make_response(200, b"[]"))
    return session


@pytest.fixture
def settings():
    return SupabaseSettings(base_url=BASE_URL, api_key=ANON_KEY)


@pytest.fixture
def client(settings, session):
    return SupabaseClient(settings, session=session)


@pytest.fixture
def respond(session):
    def _respond(status_code, body=b""):
        session.request.return_value = make_response(status_code, body)
        return session.request

    return _respond

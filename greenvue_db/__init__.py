from .auth import AuthenticationError, AuthReason
from .client import SupabaseClient, build_client
from .config import ConfigurationError, SupabaseSettings
from .http import ApiHttpError, MalformedResponseError, SupabaseError, TransportError
from .models import AuthResponse, Tier, User
from .registry import DefaultClientUnavailableError, get_or_init_default, init_default, reset_default

__version__ = "0.1.0"

__all__ = [
    "ApiHttpError",
    "AuthReason",
    "AuthResponse",
    "AuthenticationError",
    "ConfigurationError",
    "DefaultClientUnavailableError",
    "MalformedResponseError",
    "SupabaseClient",
    "SupabaseError",
    "SupabaseSettings",
    "Tier",
    "TransportError",
    "User",
    "build_client",
    "get_or_init_default",
    "init_default",
    "reset_default",
]

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from greenvue_db.models import Tier


DEFAULT_TIMEOUT_SECONDS = 10

_TIER_KEY_VARS = {
    Tier.ANONYMOUS: "SUPABASE_ANON",
    Tier.PRIVILEGED: "SUPABASE_SERVICE_KEY",
}


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class SupabaseSettings:
    base_url: str
    api_key: str
    tier: Tier = Tier.ANONYMOUS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    @staticmethod
    def from_env(tier: Tier = Tier.ANONYMOUS) -> "SupabaseSettings":
        _load_dotenv_if_present()

        base_url = os.getenv("SUPABASE_URL", "").strip().rstrip("/")
        api_key = os.getenv(key_var_for(tier), "").strip()

        raw_timeout = os.getenv("SUPABASE_TIMEOUT_SECONDS", "").strip()
        try:
            timeout_seconds = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
        except ValueError as exc:
            raise ConfigurationError("SUPABASE_TIMEOUT_SECONDS must be an integer") from exc

        settings = SupabaseSettings(
            base_url=base_url,
            api_key=api_key,
            tier=tier,
            timeout_seconds=timeout_seconds,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        missing = []
        if not self.base_url:
            missing.append("SUPABASE_URL")
        if not self.api_key:
            missing.append(key_var_for(self.tier))

        if missing:
            raise ConfigurationError(
                "Missing required settings: " + ", ".join(missing)
            )

        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError("SUPABASE_URL must start with http:// or https://")

        if self.timeout_seconds <= 0:
            raise ConfigurationError("SUPABASE_TIMEOUT_SECONDS must be greater than 0")


def key_var_for(tier: Tier) -> str:
    return _TIER_KEY_VARS[tier]


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    for candidate in _candidate_env_files(file_name):
        _load_env_file(candidate)


def _candidate_env_files(file_name: str) -> list[Path]:
    candidates: list[Path] = []

    explicit = os.getenv("SUPABASE_ENV_FILE", "").strip()
    if explicit:
        candidates.append(Path(explicit).expanduser())

    candidates.append(Path.cwd() / file_name)

    candidates.append(Path(__file__).resolve().parent.parent / file_name)

    unique_candidates: list[Path] = []
    seen: set[str] = set()
    for path in candidates:
        normalized = str(path.resolve()) if path.exists() else str(path)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique_candidates.append(path)
    return unique_candidates


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                if key.startswith("export "):
                    key = key[len("export "):].strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return

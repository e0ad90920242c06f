"""Runtime configuration helpers for the SSO audit service."""

from __future__ import annotations
from functools import lru_cache
from dynaconf import Dynaconf


_DEFAULTS: dict[str, object] = {
    "SERVICE_NAME": "sso-audit",
    "HOST": "0.0.0.0",
    "PORT": 8000,
    "CORS_ALLOW_ORIGIN": "*",
}


def _build_loader() -> Dynaconf:
    """Create a Dynaconf loader wired to environment variables only."""
    return Dynaconf(
        envvar_prefix="SSO_AUDIT",
        settings_files=[],  # No config files, env vars only
        load_dotenv=True,
        environments=False,
    )


def _normalize_settings(source: Dynaconf) -> Dynaconf:
    """Validate and fill defaults on the raw Dynaconf settings."""
    normalized = Dynaconf(
        envvar_prefix="SSO_AUDIT",
        settings_files=[],
        load_dotenv=False,
        environments=False,
    )

    service_name = str(source.get("SERVICE_NAME") or "").strip()
    if not service_name:
        service_name = str(_DEFAULTS["SERVICE_NAME"])
    normalized.set("SERVICE_NAME", service_name)

    host = source.get("HOST") or _DEFAULTS["HOST"]
    normalized.set("HOST", str(host))

    port_raw = source.get("PORT", _DEFAULTS["PORT"])
    try:
        port = int(port_raw)
    except (TypeError, ValueError) as exc:
        raise ValueError("SSO_AUDIT_PORT must be an integer.") from exc
    if not 0 < port < 65536:
        raise ValueError("SSO_AUDIT_PORT must be between 1 and 65535.")
    normalized.set("PORT", port)

    origin = source.get("CORS_ALLOW_ORIGIN") or _DEFAULTS["CORS_ALLOW_ORIGIN"]
    normalized.set("CORS_ALLOW_ORIGIN", str(origin))

    return normalized


@lru_cache(maxsize=1)
def _load_settings() -> Dynaconf:
    """Load settings once and cache the normalized Dynaconf instance."""
    return _normalize_settings(_build_loader())


def get_settings(*, refresh: bool = False) -> Dynaconf:
    """Return the cached Dynaconf settings, reloading them if requested."""
    if refresh:
        _load_settings.cache_clear()
    return _load_settings()


__all__ = ["get_settings"]

"""Run the backend with ``python -m sso_audit_backend.app``."""

from __future__ import annotations
import uvicorn
from sso_audit.config import get_settings


def main() -> None:
    """Serve the application on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "sso_audit_backend.app:app",
        host=str(settings.host),
        port=int(settings.port),
    )


if __name__ == "__main__":
    main()

"""Command-line launcher: serve the planner API with uvicorn."""

from __future__ import annotations

import uvicorn

from .config import get_settings


def main() -> None:
    """Serve the app on the host and port from ``Settings``."""

    settings = get_settings()
    uvicorn.run(
        "planner.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()

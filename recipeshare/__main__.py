"""Serve the API with Uvicorn.

Usage::

    python -m recipeshare

Host and port come from the ``HOST`` and ``PORT`` environment
variables (defaults ``127.0.0.1`` and ``8000``).
"""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "recipeshare.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

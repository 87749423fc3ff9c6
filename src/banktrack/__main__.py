"""Run the banktrack API server.

Usage:
    python -m banktrack

Configuration is read from BANKTRACK_* environment variables.
"""

from __future__ import annotations

import logging

import uvicorn

from banktrack.api.app import create_app
from banktrack.config import Settings


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        f"Serving on {settings.host}:{settings.port}, "
        f"Elasticsearch at {', '.join(settings.es_hosts)}"
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

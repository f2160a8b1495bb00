"""Process entrypoint that serves the relay with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from protection_relay.api.api_config import get_api_config
from protection_relay.common.logging import configure_logging

LOGGER = logging.getLogger("protection")


def main() -> None:
    configure_logging()
    config = get_api_config()
    LOGGER.info("Protection server running on port %s", config.port)
    # One worker: variant locks are per-process.
    uvicorn.run("protection_relay.api.app:app", host=config.host, port=config.port, workers=1)


if __name__ == "__main__":
    main()

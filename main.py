#!/usr/bin/env python3
"""Stripe Storefront - balance and subscription playground."""

import logging

import uvicorn

from core.config import settings


def configure_logging() -> None:
    """Configure the root logger from settings."""
    logging.basicConfig(
        level=settings.log_level.value,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # Stripe logs every request at INFO
    logging.getLogger("stripe").setLevel(logging.WARNING)


def main() -> None:
    """Run the storefront server."""
    configure_logging()
    uvicorn.run(
        "api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Server entry point for the TimeScope API.

Analysis is CPU-bound and runs in the request thread pool, so throughput
scales with ``WORKERS`` processes rather than threads. Reload mode
(``DEBUG``) always runs a single process.
"""
import uvicorn

from backend.app.config import logger, settings


def main():
    """Run the server."""
    workers = 1 if settings.DEBUG else settings.WORKERS
    logger.info(
        "Starting TimeScope on %s:%d (%d worker%s)",
        settings.HOST,
        settings.PORT,
        workers,
        "" if workers == 1 else "s",
    )

    uvicorn.run(
        "backend.app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=workers,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

"""
Run the service with uvicorn: ``python -m shortener``.

Logging is configured here, from LOG_LEVEL; the application modules only
create loggers.
"""

import logging

import uvicorn

from shortener.core.setting import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("shortener.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()

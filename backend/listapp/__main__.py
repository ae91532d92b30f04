"""Process entry point: python -m listapp

Loads settings, configures logging and serves the app with uvicorn on
the address from PORT. Any StartupError exits with status 1 before the
socket is opened.
"""

import logging
import sys

import uvicorn

from listapp.config import load_settings
from listapp.core.errors import StartupError
from listapp.infrastructure.observability import setup_logging
from listapp.main import create_app

logger = logging.getLogger("listapp")


def main() -> int:
    try:
        settings = load_settings()
    except StartupError as e:
        setup_logging()
        logger.critical(e.message, extra={"error_code": e.code})
        return 1

    setup_logging(settings.log_level, settings.log_format)
    host, port = settings.listen_address
    app = create_app(settings)
    logger.info(f"Listening on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())

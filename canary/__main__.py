import logging
import sys

import uvicorn

from .config import ConfigurationError, load_settings
from .main import create_app

log = logging.getLogger("canary")


def run() -> None:
    logging.basicConfig(level=logging.INFO)
    try:
        settings = load_settings()
    except ConfigurationError as e:
        log.error("%s (is OPERATOR_TOKEN set?)", e)
        sys.exit(1)
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

    app = create_app(settings)
    log.info("Listening at http://%s:%d ...", settings.IP, settings.PORT)
    uvicorn.run(app, host=settings.IP, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()

import logging

import uvicorn

from pgdiagnose.config import Settings, configure_logging
from pgdiagnose.web import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("Starting pgdiagnose on %s:%d (%s)", settings.host, settings.port, settings.environment)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

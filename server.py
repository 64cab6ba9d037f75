import uvicorn
from loguru import logger

from clinic.api.app import create_app
from clinic.config import AppConfig
from clinic.log import configure_logging


def main() -> None:
    """Run the clinic records API with settings from the environment / ``.env``."""
    config = AppConfig()
    configure_logging(config.log_level)
    logger.info("Starting clinic records API on {}:{}", config.host, config.port)

    # log_config=None keeps uvicorn from replacing the loguru intercept.
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()

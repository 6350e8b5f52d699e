# logger.py
# Role: Logging setup for the finance tracker API.
#       Console output always, plus an optional log file.

import logging

from config import Settings

LOGGER_NAMES = ("app", "main", "db")


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure application logging.

    Handlers are attached to the project's top-level loggers so that
    module loggers created with logging.getLogger(__name__) inherit them.
    Calling this more than once replaces the previous handlers.
    """
    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(detailed_formatter)
    handlers.append(console_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(detailed_formatter)
        handlers.append(file_handler)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(settings.log_level)
        logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    return logging.getLogger("app")

# core/logging_config.py
import logging
import sys

LOGGER_NAMES = ("core", "services", "routes", "financeops")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stdout handler to the application loggers (idempotent)."""
    logger = logging.getLogger("financeops")
    if logger.handlers:
        return logger  # already configured

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    )
    for name in LOGGER_NAMES:
        app_logger = logging.getLogger(name)
        app_logger.setLevel(numeric_level)
        app_logger.addHandler(handler)

    # reduce gateway noise unless debugging
    logging.getLogger("stripe").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logger

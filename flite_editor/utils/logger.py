import logging
import sys
from flite_editor.config import settings

LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

# Unknown names from FLITE_LOG_LEVEL fall back to INFO
log_level = LEVELS.get(str(settings.LOGGING_LEVEL).upper(), logging.INFO)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))


def get_logger(name):
    """
    Returns the named logger, writing to stdout at the configured level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    if console_handler not in logger.handlers:
        logger.addHandler(console_handler)
    logger.propagate = False
    return logger


def set_level(level_name):
    """Change the level of every logger handed out by get_logger (used by the CLI flags)."""
    global log_level
    log_level = LEVELS.get(str(level_name).upper(), logging.INFO)
    for logger in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger, logging.Logger) and console_handler in logger.handlers:
            logger.setLevel(log_level)

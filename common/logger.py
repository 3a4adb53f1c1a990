import logging

BASE_LOGGER = "batam"


def config_logger(logging_level, logger_name=BASE_LOGGER):
    """Set the level of the connector loggers from a LOGGING_LEVEL value.

    Accepts either a level name ("DEBUG", "info", ...) or a numeric level.
    Unknown names raise ValueError.
    """
    if isinstance(logging_level, str):
        level = logging.getLevelName(logging_level.strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {logging_level}")
    else:
        level = int(logging_level)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    return logger
